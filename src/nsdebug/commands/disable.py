"""nsdebug disable - clear the persisted enable pattern."""

from nsdebug.adapters import FilePersistence
from nsdebug.output import print_error, print_ok


def register(subparsers, parents):
    """Register the 'disable' subcommand."""
    p = subparsers.add_parser(
        "disable",
        parents=parents,
        help="Clear the persisted enable pattern",
    )
    p.set_defaults(func=run)


def run(args):
    persistence = FilePersistence(args.config)
    previous = persistence.load()
    persistence.save(None)
    if persistence.last_error is not None:
        print_error(f"Could not update {persistence.path}: {persistence.last_error}")
        return 1
    if previous is None:
        print_ok(f"No pattern stored in {persistence.path}")
    else:
        print_ok(f"Cleared {previous!r} from {persistence.path}")
    return 0
