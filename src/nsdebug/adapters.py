"""
Persistence and sink adapters.

The registry talks to the outside world through two small interfaces:

    PersistenceAdapter  remembers the enable pattern across restarts
    SinkAdapter         writes formatted lines, reports colour support

Neither may raise. Persistence implementations swallow their own I/O
errors and behave as "nothing stored"; sink failures are absorbed by
Logger.emit(). Sinks are told which namespace a line belongs to.
"""

import logging
import os
import sys
from typing import Any, List, Mapping, MutableMapping, Optional, Protocol, TextIO

from . import config
from .formatter import ansi_style, render


class PersistenceAdapter(Protocol):
    def load(self) -> Optional[str]:
        ...

    def save(self, spec: Optional[str]) -> None:
        ...


class SinkAdapter(Protocol):
    def supports_color(self) -> bool:
        ...

    def write(self, args: List[Any], namespace: Optional[str] = None) -> None:
        ...


# =============================================================================
# Persistence
# =============================================================================

class EnvPersistence:
    """Keep the pattern in an environment variable (DEBUG by default).

    Child processes started afterwards inherit it.
    """

    def __init__(self, var: str = config.ENV_PATTERN,
                 environ: Optional[MutableMapping[str, str]] = None):
        self.var = var
        self.environ = os.environ if environ is None else environ

    def load(self) -> Optional[str]:
        return self.environ.get(self.var)

    def save(self, spec: Optional[str]) -> None:
        if spec is None:
            self.environ.pop(self.var, None)
        else:
            self.environ[self.var] = spec

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(var={self.var!r})"


class MappingPersistence:
    """Keep the pattern under a key of any mutable mapping.

    With the default in-memory dict this behaves like browser local
    storage scoped to the process.
    """

    def __init__(self, store: Optional[MutableMapping[str, Any]] = None,
                 key: str = config.PATTERN_KEY):
        self.store = {} if store is None else store
        self.key = key

    def load(self) -> Optional[str]:
        value = self.store.get(self.key)
        return value if isinstance(value, str) else None

    def save(self, spec: Optional[str]) -> None:
        if spec is None:
            self.store.pop(self.key, None)
        else:
            self.store[self.key] = spec

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r})"


class FilePersistence:
    """Keep the pattern in a JSON config file.

    The path defaults to the nearest project .nsdebug.json, falling back
    to ~/.nsdebug/config.json. Other keys in the file are left alone; a
    file that exists but cannot be parsed is never overwritten.

    Attributes:
        last_error: Why the last save() wrote nothing, None if it succeeded
    """

    def __init__(self, path=None, key: str = config.PATTERN_KEY):
        self._path = path
        self.key = key
        self.last_error: Optional[Exception] = None

    @property
    def path(self):
        return self._path or config.default_config_path()

    def load(self) -> Optional[str]:
        value = config.load_json(self.path).get(self.key)
        return value if isinstance(value, str) else None

    def save(self, spec: Optional[str]) -> None:
        path = self.path
        try:
            data = config.read_json(path)
        except (OSError, ValueError) as exc:
            self.last_error = exc
            return
        if spec is None:
            if self.key not in data:
                self.last_error = None
                return
            data.pop(self.key)
        else:
            data[self.key] = spec
        try:
            config.save_json(path, data)
        except OSError as exc:
            self.last_error = exc
            return
        self.last_error = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self.path)!r})"


class ConfigPersistence(FilePersistence):
    """The lookup the default registry and ``nsdebug status`` share.

    load() checks the project .nsdebug.json, then ~/.nsdebug/config.json,
    then the DEBUG environment variable. save() writes the same file
    FilePersistence would, which then takes precedence over DEBUG.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 start_dir=None):
        super().__init__()
        self.environ = os.environ if environ is None else environ
        self.start_dir = start_dir

    @property
    def path(self):
        return config.default_config_path(self.start_dir)

    def load(self) -> Optional[str]:
        return config.resolve_pattern(environ=self.environ, start_dir=self.start_dir)


# =============================================================================
# Sinks
# =============================================================================

class StreamSink:
    """Write rendered lines to a text stream (stderr by default).

    Colour support, first match wins:
      1. use_colors passed explicitly
      2. DEBUG_COLORS environment flag
      3. NO_COLOR set -> off
      4. stream.isatty()
    """

    def __init__(self, stream: Optional[TextIO] = None,
                 use_colors: Optional[bool] = None, environ=None):
        self._stream = stream
        self.use_colors = use_colors
        self.environ = os.environ if environ is None else environ

    @property
    def stream(self) -> Optional[TextIO]:
        # Resolved late so pytest's capsys and redirections are honoured
        return self._stream if self._stream is not None else sys.stderr

    def supports_color(self) -> bool:
        if self.use_colors is not None:
            return self.use_colors
        forced = config.env_flag(self.environ.get(config.ENV_COLORS))
        if forced is not None:
            return forced
        if self.environ.get(config.ENV_NO_COLOR):
            return False
        isatty = getattr(self.stream, 'isatty', None)
        try:
            return bool(isatty and isatty())
        except (OSError, ValueError):
            return False

    def write(self, args: List[Any], namespace: Optional[str] = None) -> None:
        style = ansi_style if self.supports_color() else None
        print(render(args, style), file=self.stream)


class MemorySink:
    """Collect argument lists in memory.

    Attributes:
        records: Every argument list passed to write(), in order
        namespaces: The namespace passed with each record
    """

    def __init__(self, use_colors: bool = False):
        self.use_colors = use_colors
        self.records: List[List[Any]] = []
        self.namespaces: List[Optional[str]] = []

    def supports_color(self) -> bool:
        return self.use_colors

    def write(self, args: List[Any], namespace: Optional[str] = None) -> None:
        self.records.append(list(args))
        self.namespaces.append(namespace)

    @property
    def lines(self) -> List[str]:
        """Records rendered as plain text (colour markers dropped)."""
        return [render(args) for args in self.records]

    def clear(self) -> None:
        self.records.clear()
        self.namespaces.clear()


class LoggingSink:
    """Forward lines to the standard library logging module.

    Each namespace maps to a child logger of logger_name with ``:``
    turned into ``.``, so ``worker:db`` logs to ``nsdebug.worker.db``.
    """

    def __init__(self, logger_name: str = "nsdebug", level: int = logging.DEBUG):
        self.logger_name = logger_name
        self.level = level

    def supports_color(self) -> bool:
        return False

    def logger_for(self, namespace: Optional[str]) -> logging.Logger:
        suffix = (namespace or "").replace(':', '.').strip('.')
        name = f"{self.logger_name}.{suffix}" if suffix else self.logger_name
        return logging.getLogger(name)

    def write(self, args: List[Any], namespace: Optional[str] = None) -> None:
        self.logger_for(namespace).log(self.level, render(args))
