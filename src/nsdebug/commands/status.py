"""nsdebug status - show the effective pattern and test namespaces.

Without --config the pattern comes from ConfigPersistence, the same
lookup the default registry loads at startup: project .nsdebug.json,
then ~/.nsdebug/config.json, then the DEBUG environment variable.
"""

from nsdebug.adapters import ConfigPersistence, FilePersistence
from nsdebug.formatter import select_color
from nsdebug.output import colorize
from nsdebug.patterns import compile_pattern


def register(subparsers, parents):
    """Register the 'status' subcommand."""
    p = subparsers.add_parser(
        "status",
        parents=parents,
        help="Show the active pattern and check namespaces against it",
    )
    p.add_argument("namespaces", nargs="*", metavar="NAMESPACE",
                   help="Namespaces to check")
    p.set_defaults(func=run)


def run(args):
    if args.config:
        pattern = FilePersistence(args.config).load()
    else:
        pattern = ConfigPersistence().load()
    matcher = compile_pattern(pattern)

    print(f"pattern: {pattern if pattern else '(none)'}")
    if matcher:
        print(f"  include: {', '.join(e.glob for e in matcher.includes) or '-'}")
        print(f"  exclude: {', '.join(e.glob for e in matcher.excludes) or '-'}")

    if args.namespaces:
        width = max(len(ns) for ns in args.namespaces)
        for ns in args.namespaces:
            state = "enabled" if matcher.matches(ns) else "disabled"
            label = colorize(f"{ns:<{width}}", select_color(ns))
            print(f"  {label}  {state}")
    return 0
