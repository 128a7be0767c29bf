"""nsdebug humanize - convert between milliseconds and short durations.

  nsdebug humanize 1500 2h    ->  1500 = 1.5s
                                  2h = 7200000ms
"""

import re

from nsdebug.humanize import InvalidFormatError, humanize, parse_duration
from nsdebug.output import print_error

_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")


def register(subparsers, parents):
    """Register the 'humanize' subcommand."""
    p = subparsers.add_parser(
        "humanize",
        parents=parents,
        help="Convert milliseconds to short durations and back",
    )
    p.add_argument("values", nargs="+", metavar="VALUE",
                   help="Millisecond count or duration like 2h, 1.5s, 3 days")
    p.set_defaults(func=run)


def convert(value):
    """Return the display line for one value.

    Raises:
        InvalidFormatError: value is neither a number nor a duration
    """
    if _NUMBER_RE.match(value):
        number = float(value) if "." in value else int(value)
        return f"{value} = {humanize(number)}"
    return f"{value} = {parse_duration(value)}ms"


def run(args):
    rc = 0
    for value in args.values:
        try:
            print(convert(value))
        except InvalidFormatError as e:
            print_error(str(e))
            rc = 1
    return rc
