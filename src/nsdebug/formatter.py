"""
Argument formatting for emitted lines.

Formatting happens in two stages, mirroring how a browser console treats
``console.log(fmt, *args)``:

1. substitute() replaces printf-style directives (``%s``, ``%d``, ``%j``...)
   with rendered values. The colour marker ``%c`` is left in place along
   with its argument, and so is ``%%``.
2. format_args() decorates the result with the namespace label and the
   ``+<elapsed>`` suffix, either as plain text or wrapped in ``%c``
   colour markers with ``color: ...`` arguments spliced in.

The result is a console-style argument list. Sinks turn it into text with
render(), which resolves the remaining ``%c`` and ``%%`` directives.

Directive handlers are plain functions ``handler(logger, value) -> str``.
"""

import json
import pprint
import re
import sys
import traceback
from typing import Any, Callable, Dict, List, Optional, Sequence

from .humanize import humanize

COLOR_MARKER = 'c'
INHERIT_CSS = 'color: inherit'

COLORS = (
    'lightseagreen',
    'forestgreen',
    'goldenrod',
    'dodgerblue',
    'darkorchid',
    'crimson',
)

# Terminal equivalents of the palette (ANSI foreground 3x codes)
ANSI_CODES = {
    'lightseagreen': 6,
    'forestgreen': 2,
    'goldenrod': 3,
    'dodgerblue': 4,
    'darkorchid': 5,
    'crimson': 1,
}
ANSI_RESET = '\x1b[0m'

JSON_ERROR_MARKER = '[UnexpectedJSONParseError]'

_DIRECTIVE_RE = re.compile(r'%([a-zA-Z%])')

Directive = Callable[[Any, Any], str]


def select_color(namespace: str, colors: Sequence[str] = COLORS) -> str:
    """Pick a palette colour from a stable hash of the namespace.

    Uses the 32-bit ``h * 31 + c`` string hash rather than hash(), which
    is salted per process.
    """
    h = 0
    for ch in namespace:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return colors[abs(h) % len(colors)]


# =============================================================================
# Directive handlers
# =============================================================================

def _inspect_depth(logger) -> Optional[int]:
    opts = getattr(getattr(logger, 'registry', None), 'inspect_opts', None)
    return getattr(opts, 'depth', None)


def format_string(logger, value) -> str:
    return str(value)


def format_int(logger, value) -> str:
    try:
        return str(int(value))
    except (TypeError, ValueError, OverflowError):
        return 'NaN'


def format_float(logger, value) -> str:
    try:
        return str(float(value))
    except (TypeError, ValueError):
        return 'NaN'


def format_inspect(logger, value) -> str:
    """Single-line object rendering (%o)."""
    return pprint.pformat(value, depth=_inspect_depth(logger),
                          width=sys.maxsize, compact=True)


def format_pretty(logger, value) -> str:
    """Multi-line object rendering (%O)."""
    return pprint.pformat(value, depth=_inspect_depth(logger))


def format_json(logger, value) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError, RecursionError) as err:
        return f"{JSON_ERROR_MARKER}: {err}"


DEFAULT_DIRECTIVES: Dict[str, Directive] = {
    's': format_string,
    'd': format_int,
    'i': format_int,
    'f': format_float,
    'o': format_inspect,
    'O': format_pretty,
    'j': format_json,
}

RESERVED_DIRECTIVES = {COLOR_MARKER, '%'}


# =============================================================================
# Formatting pipeline
# =============================================================================

def _escape(text: str) -> str:
    return text.replace('%', '%%')


def _describe_exception(exc: BaseException) -> str:
    if exc.__traceback__ is None:
        return f"{type(exc).__name__}: {exc}"
    return ''.join(traceback.format_exception(
        type(exc), exc, exc.__traceback__)).rstrip()


def coerce_args(args: Sequence[Any]) -> List[Any]:
    """Normalize the argument list so args[0] is a format string.

    An exception as first argument is replaced by its traceback text.
    Any other non-string first argument gets ``%O`` put in front of it.
    """
    args = list(args)
    if not args:
        return ['']
    if isinstance(args[0], BaseException):
        args[0] = _describe_exception(args[0])
    if not isinstance(args[0], str):
        args.insert(0, '%O')
    return args


def substitute(logger, args: Sequence[Any],
               directives: Optional[Dict[str, Directive]] = None) -> List[Any]:
    """Replace recognised directives in args[0] with rendered arguments.

    Arguments are consumed positionally. ``%c`` keeps its argument in
    place for the sink; other unknown directives, and directives with no
    argument left, stay verbatim. Unconsumed arguments are returned after
    the format string, unchanged.
    """
    if directives is None:
        directives = DEFAULT_DIRECTIVES
    fmt = args[0]
    rest = list(args[1:])
    index = 0

    def replace(match):
        nonlocal index
        letter = match.group(1)
        if letter == '%':
            return match.group(0)
        handler = directives.get(letter)
        if handler is None:
            if letter == COLOR_MARKER:
                index += 1
            return match.group(0)
        if index >= len(rest):
            return match.group(0)
        return _escape(handler(logger, rest.pop(index)))

    return [_DIRECTIVE_RE.sub(replace, fmt)] + rest


def _last_color_marker(fmt: str) -> int:
    """Return the 1-based argument slot of the last ``%c`` in fmt (0 if none).

    ``%c`` is the only directive still consuming an argument at this
    point, so its running count is also its argument slot.
    """
    index = 0
    last = 0
    for match in _DIRECTIVE_RE.finditer(fmt):
        if match.group(1) == COLOR_MARKER:
            index += 1
            last = index
    return last


def format_args(logger, args: Sequence[Any], diff: int,
                use_colors: bool) -> List[Any]:
    """Add the namespace label and elapsed-time suffix to substituted args."""
    args = list(args)
    namespace = _escape(logger.namespace)
    suffix = '+' + humanize(diff)

    if not use_colors:
        args[0] = f"{namespace} {args[0]} {suffix}"
        return args

    args[0] = f"%c{namespace} %c{args[0]}%c {suffix}"
    css = f"color: {logger.color}"
    args[1:1] = [css, INHERIT_CSS]

    # A user-supplied %c may sit before the final one; the colour for the
    # suffix belongs at whichever marker comes last.
    args.insert(_last_color_marker(args[0]), css)
    return args


# =============================================================================
# Rendering (used by sinks)
# =============================================================================

def ansi_style(css: Optional[str]) -> str:
    """Translate a ``color: <name>`` declaration into an ANSI escape."""
    name = ''
    if isinstance(css, str):
        prop, _, value = css.partition(':')
        if prop.strip() == 'color':
            name = value.strip().rstrip(';').strip()
    code = ANSI_CODES.get(name)
    if code is None:
        return ANSI_RESET
    return f"\x1b[3{code};1m"


def _plain(value) -> str:
    return value if isinstance(value, str) else repr(value)


def render(args: Sequence[Any],
           style: Optional[Callable[[Optional[str]], str]] = None) -> str:
    """Render a console-style argument list into a single string.

    ``%c`` consumes one argument and becomes style(argument), or nothing
    when no style is given. ``%%`` becomes ``%``. Leftover arguments are
    appended, separated by spaces.
    """
    if not args:
        return ''
    fmt = args[0]
    if not isinstance(fmt, str):
        return ' '.join(_plain(a) for a in args)
    rest = list(args[1:])

    def replace(match):
        letter = match.group(1)
        if letter == '%':
            return '%'
        if letter != COLOR_MARKER:
            return match.group(0)
        css = rest.pop(0) if rest else None
        return style(css) if style is not None and css is not None else ''

    line = _DIRECTIVE_RE.sub(replace, fmt)
    if rest:
        line = line + ' ' + ' '.join(_plain(a) for a in rest)
    return line
