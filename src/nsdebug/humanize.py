"""
Millisecond durations to short human strings, and back.

Used for the ``+<elapsed>`` suffix on every emitted line.

Rounding rule: values are truncated, never rounded up.

    ms      whole milliseconds           5        -> "5ms"
    s       at most one decimal          1500     -> "1.5s"
    m/h/d/y whole units                  90000    -> "1m"

Years are 365.25 days.
"""

import math
import re
from typing import Union

SECOND = 1000
MINUTE = SECOND * 60
HOUR = MINUTE * 60
DAY = HOUR * 24
WEEK = DAY * 7
YEAR = DAY * 365.25

# Largest first; seconds are the only unit rendered with a decimal
_UNITS = (
    ('y', YEAR),
    ('d', DAY),
    ('h', HOUR),
    ('m', MINUTE),
)

_PARSE_UNITS = {
    'ms': 1, 'msec': 1, 'msecs': 1, 'millisecond': 1, 'milliseconds': 1,
    's': SECOND, 'sec': SECOND, 'secs': SECOND,
    'second': SECOND, 'seconds': SECOND,
    'm': MINUTE, 'min': MINUTE, 'mins': MINUTE,
    'minute': MINUTE, 'minutes': MINUTE,
    'h': HOUR, 'hr': HOUR, 'hrs': HOUR, 'hour': HOUR, 'hours': HOUR,
    'd': DAY, 'day': DAY, 'days': DAY,
    'w': WEEK, 'week': WEEK, 'weeks': WEEK,
    'y': YEAR, 'yr': YEAR, 'yrs': YEAR, 'year': YEAR, 'years': YEAR,
}

_DURATION_RE = re.compile(
    r'^(?P<value>-?(?:\d+)?\.?\d+)\s*(?P<unit>[a-z]+)?$', re.IGNORECASE)

MAX_PARSE_LENGTH = 100


class InvalidFormatError(ValueError):
    """Raised for negative durations or unparseable shorthand strings."""


def humanize(ms: Union[int, float]) -> str:
    """Render a non-negative millisecond count as a short string.

    Args:
        ms: Duration in milliseconds

    Returns:
        String like "5ms", "1.5s", "3m", "2h", "3d"

    Raises:
        InvalidFormatError: negative, non-finite, or non-numeric input
    """
    if isinstance(ms, bool) or not isinstance(ms, (int, float)):
        raise InvalidFormatError(f"duration must be a number, got {ms!r}")
    if not math.isfinite(ms) or ms < 0:
        raise InvalidFormatError(f"duration must be finite and >= 0, got {ms!r}")

    for suffix, size in _UNITS:
        if ms >= size:
            return f"{int(ms // size)}{suffix}"
    if ms >= SECOND:
        tenths = int(ms // 100)
        whole, frac = divmod(tenths, 10)
        return f"{whole}s" if frac == 0 else f"{whole}.{frac}s"
    return f"{int(ms)}ms"


def parse_duration(text: str) -> int:
    """Parse shorthand like "2h", "500ms", "1.5 seconds" into milliseconds.

    A bare number is taken as milliseconds.

    Raises:
        InvalidFormatError: empty, overlong, or unrecognised input
    """
    if not isinstance(text, str):
        raise InvalidFormatError(f"duration text must be a string, got {text!r}")
    text = text.strip()
    if not text or len(text) > MAX_PARSE_LENGTH:
        raise InvalidFormatError(f"cannot parse duration {text!r}")

    match = _DURATION_RE.match(text)
    if match is None:
        raise InvalidFormatError(f"cannot parse duration {text!r}")

    unit = (match.group('unit') or 'ms').lower()
    if unit not in _PARSE_UNITS:
        raise InvalidFormatError(f"unknown duration unit {unit!r} in {text!r}")
    return round(float(match.group('value')) * _PARSE_UNITS[unit])
