"""nsdebug enable - persist an enable pattern.

The pattern is written to --config, else the nearest .nsdebug.json, else
~/.nsdebug/config.json. Without --config that is the file the default
registry (nsdebug.debug, get_registry) loads at startup.
"""

import argparse

from nsdebug.adapters import FilePersistence, MemorySink
from nsdebug.output import print_error, print_ok, print_warn
from nsdebug.patterns import compile_pattern
from nsdebug.registry import Registry


def register(subparsers, parents):
    """Register the 'enable' subcommand."""
    p = subparsers.add_parser(
        "enable",
        parents=parents,
        help="Persist an enable pattern",
        description=(
            "Save PATTERN as the enable pattern. Tokens are separated by\n"
            "commas or spaces; prefix a token with '-' to exclude it.\n"
            "\n"
            "  nsdebug enable 'worker:*,-worker:db'"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("pattern", nargs="+", metavar="PATTERN",
                   help="Pattern tokens (joined with commas)")
    p.set_defaults(func=run)


def run(args):
    pattern = ",".join(args.pattern)
    if not compile_pattern(pattern):
        print_warn(f"Pattern {pattern!r} has no tokens; everything stays disabled.")

    persistence = FilePersistence(args.config)
    registry = Registry(persistence=persistence, sink=MemorySink(), load=False)
    registry.set_pattern(pattern)
    if registry.last_persist_error is not None:
        print_error(f"Could not save pattern to {persistence.path}: "
                    f"{registry.last_persist_error}")
        return 1

    print_ok(f"Enabled {pattern!r} in {persistence.path}")
    return 0
