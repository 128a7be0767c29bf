"""
Registry: the namespace state shared by a set of loggers.

Holds the active compiled pattern, the raw pattern string it came from,
and every Logger created so far. Applying a new pattern re-evaluates the
enabled flag of each existing logger in place, so logger identity and
timing survive configuration changes.

Registries are explicit context objects; tests and embedders create
their own. A process-wide default is available through init_debug() and
get_registry(), mirroring how most callers just want ``DEBUG=...`` to
work.

Startup:
    1. persistence adapter configured -> load the pattern from it
    2. no adapter, or its load() raised -> DEBUG environment variable
    3. nothing found -> everything disabled
"""

import os
import re
import time
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Sequence

from . import config
from .adapters import ConfigPersistence, StreamSink
from .formatter import (
    COLORS, DEFAULT_DIRECTIVES, RESERVED_DIRECTIVES, Directive, select_color,
)
from .logger import Logger
from .patterns import CompiledMatcher, compile_pattern

# Reserved namespace for the registry's own diagnostics
PERSIST_NAMESPACE = 'nsdebug:persist'

_DIRECTIVE_LETTER_RE = re.compile(r'^[a-zA-Z]$')


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class Registry:
    """Pattern state, logger mapping, and output wiring for loggers.

    Usage::

        reg = Registry(persistence=MappingPersistence(), sink=MemorySink())
        reg.set_pattern('worker:*,-worker:db')
        log = reg.get_logger('worker:a')
        log('tick %d', 42)

    Args:
        persistence: PersistenceAdapter, or None for no persistence
        sink: SinkAdapter, default StreamSink on stderr
        environ: Environment mapping for DEBUG / DEBUG_* (default os.environ)
        colors: Palette for namespace colours
        clock: Zero-argument callable returning milliseconds
        directives: Extra or replacement formatting directives
        load: Load the initial pattern at construction (default True)
    """

    def __init__(
        self,
        persistence=None,
        sink=None,
        environ: Optional[Mapping[str, str]] = None,
        colors: Sequence[str] = COLORS,
        clock: Optional[Callable[[], float]] = None,
        directives: Optional[Dict[str, Directive]] = None,
        load: bool = True,
    ):
        self.environ = os.environ if environ is None else environ
        self.persistence = persistence
        self.sink = sink if sink is not None else StreamSink(environ=self.environ)
        self.colors = tuple(colors)
        self._clock = clock or _monotonic_ms
        self.directives: Dict[str, Directive] = dict(DEFAULT_DIRECTIVES)
        for letter, handler in (directives or {}).items():
            self.register_directive(letter, handler)
        self.inspect_opts = config.load_inspect_opts(self.environ)

        self.matcher = CompiledMatcher()
        self._pattern = ''
        self._loggers: Dict[str, Logger] = {}
        self.last_persist_error: Optional[Exception] = None

        if load:
            self.load()

    # -- loggers ---------------------------------------------------------

    def get_logger(self, namespace: str) -> Logger:
        """Return the Logger for namespace, creating it on first use."""
        if not isinstance(namespace, str) or not namespace:
            raise ValueError(f"namespace must be a non-empty string, got {namespace!r}")
        logger = self._loggers.get(namespace)
        if logger is None:
            logger = Logger(self, namespace, select_color(namespace, self.colors))
            logger.refresh(self.matcher)
            self._loggers[namespace] = logger
        return logger

    __call__ = get_logger

    def remove(self, logger: Logger) -> bool:
        """Drop logger from the mapping. Returns whether it was registered."""
        if self._loggers.get(logger.namespace) is logger:
            del self._loggers[logger.namespace]
            return True
        return False

    @property
    def loggers(self) -> Mapping[str, Logger]:
        """Read-only view of namespace -> Logger."""
        return MappingProxyType(self._loggers)

    # -- pattern ---------------------------------------------------------

    def set_pattern(self, spec: Optional[str]) -> None:
        """Apply a new enable pattern and persist it.

        Every existing logger is re-evaluated before this returns.
        Persistence is best-effort; see last_persist_error.
        """
        self._apply(spec)
        self._persist(spec if isinstance(spec, str) else None)

    enable = set_pattern

    def disable(self) -> str:
        """Disable every namespace. Returns the pattern that was active."""
        previous = self._pattern
        self.set_pattern('')
        return previous

    def current_pattern(self) -> str:
        """The raw pattern last applied, '' if none."""
        return self._pattern

    def enabled(self, namespace: str) -> bool:
        """Evaluate namespace against the active pattern without a Logger."""
        return self.matcher.matches(namespace)

    def load(self) -> Optional[str]:
        """Apply the stored pattern (persistence, else DEBUG). Does not re-save."""
        spec = None
        available = False
        if self.persistence is not None:
            try:
                spec = self.persistence.load()
                available = True
            except Exception as exc:
                self.last_persist_error = exc
        if not available:
            spec = self.environ.get(config.ENV_PATTERN)
        self._apply(spec)
        return spec

    def _apply(self, spec: Optional[str]) -> None:
        self._pattern = spec if isinstance(spec, str) else ''
        self.matcher = compile_pattern(self._pattern)
        for logger in self._loggers.values():
            logger.refresh(self.matcher)

    def _persist(self, spec: Optional[str]) -> bool:
        """Save spec through the persistence adapter.

        Returns True when saved (or nothing to save to). A failure is kept
        in last_persist_error and reported on the nsdebug:persist
        namespace instead of raising.
        """
        if self.persistence is None:
            return True
        try:
            self.persistence.save(spec)
        except Exception as exc:
            error = exc
        else:
            # File-backed adapters report failures instead of raising
            error = getattr(self.persistence, 'last_error', None)
        if error is not None:
            self.last_persist_error = error
            self.get_logger(PERSIST_NAMESPACE)(
                'could not save pattern %j: %s', spec, error)
            return False
        self.last_persist_error = None
        return True

    # -- formatting ------------------------------------------------------

    def register_directive(self, letter: str, handler: Directive) -> None:
        """Add or replace a ``%<letter>`` directive for this registry's loggers.

        Raises:
            ValueError: letter is not a single ASCII letter, or is reserved
        """
        if not isinstance(letter, str) or not _DIRECTIVE_LETTER_RE.match(letter):
            raise ValueError(f"directive must be a single letter, got {letter!r}")
        if letter in RESERVED_DIRECTIVES:
            raise ValueError(f"directive %{letter} is reserved")
        if not callable(handler):
            raise ValueError(f"handler for %{letter} is not callable")
        self.directives[letter] = handler

    def now(self) -> int:
        """Current clock value in milliseconds."""
        return int(self._clock())

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(pattern={self._pattern!r}, "
                f"loggers={len(self._loggers)})")


# =============================================================================
# Module-level default
# =============================================================================

_registry: Optional[Registry] = None


def init_debug(**kwargs) -> Registry:
    """Create and install the process-wide default Registry.

    Keyword arguments go to Registry(). Persistence defaults to
    ConfigPersistence: the project or global config file written by
    ``nsdebug enable``, then the DEBUG environment variable.

    Returns:
        The new default Registry
    """
    global _registry
    kwargs.setdefault('persistence', ConfigPersistence(environ=kwargs.get('environ')))
    _registry = Registry(**kwargs)
    return _registry


def get_registry() -> Registry:
    """Get the default Registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = init_debug()
    return _registry
