"""
Logger: one debug output function bound to a namespace.

Loggers are created by Registry.get_logger(), never directly, so that a
namespace always maps to the same instance (same colour, same timing).
"""

from typing import Any, Optional

from .formatter import coerce_args, format_args, substitute


class Logger:
    """Namespace-bound emitter.

    Usage::

        log = registry.get_logger('worker:a')
        log('tick %d', 42)        # -> "worker:a tick 42 +0ms"
        db = log.extend('db')     # -> logger for 'worker:a:db'

    Attributes:
        registry: Owning Registry (pattern, sink, clock, directives)
        last_emit: Clock value in ms of the last emitted line, None before
        sink: Per-logger sink override, None to use the registry sink
        use_colors: Per-logger colour override, None to ask the sink
    """

    def __init__(self, registry, namespace: str, color: str):
        self.registry = registry
        self._namespace = namespace
        self._color = color
        self._enabled = False
        self.last_emit: Optional[int] = None
        self.sink = None
        self.use_colors: Optional[bool] = None

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def color(self) -> str:
        return self._color

    @property
    def enabled(self) -> bool:
        """Whether the registry's active pattern selects this namespace."""
        return self._enabled

    def refresh(self, matcher) -> None:
        """Re-evaluate enabled against a compiled matcher."""
        self._enabled = matcher.matches(self._namespace)

    def emit(self, *args: Any) -> None:
        """Format args and write them to the sink, if enabled.

        A disabled logger returns before any formatting work is done.
        Never raises.
        """
        if not self._enabled:
            return

        registry = self.registry
        sink = self.sink if self.sink is not None else registry.sink
        try:
            now = registry.now()
            prev = self.last_emit if self.last_emit is not None else now
            self.last_emit = now
            diff = max(now - prev, 0)

            use_colors = self.use_colors
            if use_colors is None:
                use_colors = sink.supports_color()
            parts = substitute(self, coerce_args(args), registry.directives)
            sink.write(format_args(self, parts, diff, use_colors),
                       namespace=self._namespace)
        except Exception:
            # Failures here drop the line
            return

    __call__ = emit

    def extend(self, suffix: str, delimiter: str = ':') -> 'Logger':
        """Return the logger for a sub-namespace of this one."""
        child = self.registry.get_logger(f"{self._namespace}{delimiter}{suffix}")
        if child.sink is None:
            child.sink = self.sink
        return child

    def destroy(self) -> bool:
        """Unregister from the registry. Returns False if already removed."""
        return self.registry.remove(self)

    def __repr__(self) -> str:
        state = 'enabled' if self._enabled else 'disabled'
        return f"<{self.__class__.__name__} {self._namespace!r} {state}>"
