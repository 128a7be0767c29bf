"""Main CLI entry point for nsdebug.

Manages the persisted enable pattern and offers a few inspection helpers.
Two-pass argument parsing:
  1. First pass: extract global flags (--config, --no-color)
  2. Second pass: dispatch to the subcommand

Global flags can appear before OR after the subcommand:
  nsdebug --config ./dbg.json enable 'worker:*'
  nsdebug enable 'worker:*' --config ./dbg.json

Subcommands self-register via the register(subparsers, parents) convention.
"""

import argparse
import sys

from nsdebug._version import __version__
from nsdebug.output import set_color


# ---------------------------------------------------------------------------
# Global flags (can precede the subcommand)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--config": {"metavar": "PATH", "default": None,
                 "help": ("Pattern file (default: nearest .nsdebug.json, "
                          "else ~/.nsdebug/config.json)")},
    "--no-color": {"action": "store_true", "default": False,
                   "help": "Disable colored output"},
}


def _extract_global_flags(argv):
    """Two-pass parse: pull global flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    global_parser = argparse.ArgumentParser(add_help=False)
    for flag, kwargs in GLOBAL_FLAGS.items():
        global_parser.add_argument(flag, **kwargs)

    global_args, remaining = global_parser.parse_known_args(argv)
    return global_args, remaining


# ---------------------------------------------------------------------------
# Subcommand discovery and registration
# ---------------------------------------------------------------------------
def _discover_commands():
    """Import and return all command modules.

    Each module in nsdebug.commands must export:
      register(subparsers, parents) - add itself to the subparser
      run(args) - execute the command, return an exit code
    """
    from nsdebug.commands import disable, enable, humanize, status
    return [enable, disable, status, humanize]


def _build_parser(commands):
    """Build the main argparse parser with subcommand dispatch."""
    parser = argparse.ArgumentParser(
        prog="nsdebug",
        description="nsdebug - namespace-scoped debug output",
        epilog=(
            "Run 'nsdebug <command> --help' for details on a specific command.\n"
            "\n"
            "Global flags (--config, --no-color) can appear\n"
            "before or after the subcommand."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"nsdebug {__version__}",
    )

    # Add global flags to main parser too (for --help display)
    for flag, kwargs in GLOBAL_FLAGS.items():
        parser.add_argument(flag, **kwargs)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_module in commands:
        cmd_module.register(subparsers, parents=[])

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for the nsdebug CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success).
    """
    if argv is None:
        argv = sys.argv[1:]

    global_args, remaining = _extract_global_flags(argv)
    set_color(not global_args.no_color)

    parser = _build_parser(_discover_commands())

    if not remaining:
        parser.print_help()
        return 0

    args = parser.parse_args(remaining)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    # Global flags were stripped before pass 2, so pass 1 values are authoritative
    for key, value in vars(global_args).items():
        setattr(args, key, value)

    try:
        return args.func(args) or 0
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
