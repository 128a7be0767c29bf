"""Configuration for nsdebug.

Environment variables:
  DEBUG          default enable pattern (e.g. "worker:*,-worker:db")
  DEBUG_COLORS   force colours on/off (yes/no, on/off, true/false, 1/0)
  DEBUG_DEPTH    depth limit for %o / %O object rendering (default 2)
  NO_COLOR       disable colours when DEBUG_COLORS is not set

Config files hold the persisted pattern under the "debug" key.
Two-layer lookup (highest priority wins):
  1. Project config - .nsdebug.json in the working directory or a parent
  2. Global config  - ~/.nsdebug/config.json
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PATTERN = "DEBUG"
ENV_COLORS = "DEBUG_COLORS"
ENV_DEPTH = "DEBUG_DEPTH"
ENV_NO_COLOR = "NO_COLOR"

PATTERN_KEY = "debug"
PROJECT_CONFIG_NAME = ".nsdebug.json"
DEFAULT_DEPTH = 2

_TRUTHY = {"1", "yes", "on", "true", "enabled"}
_FALSY = {"0", "no", "off", "false", "disabled"}


@dataclass
class InspectOpts:
    """Options for object rendering directives.

    Attributes:
        depth: Nesting depth for %o / %O (None = unlimited)
    """
    depth: Optional[int] = DEFAULT_DEPTH


def env_flag(value: Optional[str]) -> Optional[bool]:
    """Parse a yes/no style flag. Returns None for unset or unrecognised."""
    if value is None:
        return None
    value = value.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return None


def load_inspect_opts(environ: Optional[Mapping[str, str]] = None) -> InspectOpts:
    """Build InspectOpts from DEBUG_DEPTH."""
    if environ is None:
        environ = os.environ
    depth: Optional[int] = DEFAULT_DEPTH
    raw_depth = environ.get(ENV_DEPTH)
    if raw_depth is not None:
        raw_depth = raw_depth.strip().lower()
        if raw_depth in ("null", "none", "inf", "infinity"):
            depth = None
        else:
            try:
                depth = max(int(raw_depth), 1)
            except ValueError:
                depth = DEFAULT_DEPTH
    return InspectOpts(depth=depth)


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def get_global_config_dir():
    """Return the global config directory (~/.nsdebug/)."""
    return Path.home() / ".nsdebug"


def get_global_config_path():
    """Return path to the global config file."""
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .nsdebug.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def default_config_path(start_dir=None):
    """Project config if one exists, otherwise the global config path."""
    return find_project_config(start_dir) or get_global_config_path()


# ---------------------------------------------------------------------------
# Config loading / writing
# ---------------------------------------------------------------------------
def read_json(path):
    """Read a JSON object from path.

    A missing or blank file reads as an empty dict.

    Raises:
        OSError: the file exists but cannot be read
        ValueError: the file is not UTF-8 JSON holding an object
    """
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        return {}
    if not text.strip():
        return {}
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


def load_json(path):
    """Load a JSON object from path, returning empty dict on error."""
    try:
        return read_json(path)
    except (OSError, ValueError):
        return {}


def save_json(path, data):
    """Write data as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return path


def resolve_pattern(cli_value=None, environ=None, start_dir=None):
    """Resolve the effective enable pattern.

    Precedence: CLI value > project config > global config > DEBUG env.
    Returns None when nothing is configured anywhere.
    """
    if cli_value is not None:
        return cli_value

    project_path = find_project_config(start_dir)
    if project_path is not None:
        value = load_json(project_path).get(PATTERN_KEY)
        if isinstance(value, str):
            return value

    value = load_json(get_global_config_path()).get(PATTERN_KEY)
    if isinstance(value, str):
        return value

    if environ is None:
        environ = os.environ
    return environ.get(ENV_PATTERN)
