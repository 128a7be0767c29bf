"""Output helpers for the nsdebug command line.

Consistent message formatting across commands. Colour is applied with
the same ANSI palette loggers use and can be turned off with --no-color.
"""

import sys

from nsdebug.formatter import ANSI_RESET, ansi_style

_use_color = True


def set_color(enabled):
    """Turn coloured CLI output on or off."""
    global _use_color
    _use_color = bool(enabled)


def colorize(text, color):
    """Wrap text in the ANSI escape for a palette colour name."""
    if not _use_color or not sys.stdout.isatty():
        return text
    return f"{ansi_style(f'color: {color}')}{text}{ANSI_RESET}"


def print_ok(msg):
    """Print a success message."""
    print(f"  [OK] {msg}")


def print_warn(msg):
    """Print a warning message."""
    print(f"  [WARN] {msg}")


def print_error(msg):
    """Print an error message to stderr."""
    print(f"  ERROR: {msg}", file=sys.stderr)
