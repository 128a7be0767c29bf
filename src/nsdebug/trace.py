"""
Function tracing decorator.

Routes call/return/raise lines through a namespace logger, so tracing is
switched on and off by the same enable pattern as everything else.
"""

import functools
from pathlib import Path

from .registry import get_registry


def _short_repr(value):
    if isinstance(value, Path):
        return f"Path('{value}')"
    if isinstance(value, str) and len(value) > 50:
        return f"'{value[:47]}...'"
    if isinstance(value, (list, tuple)) and len(value) > 3:
        return f"[...{len(value)} items...]"
    return repr(value)


def trace(target):
    """Decorator factory tracing calls through a logger.

    Args:
        target: A Logger, or a namespace looked up in the default registry

    Usage::

        @trace('app:cache')
        def lookup(key): ...

    With ``DEBUG=app:*`` this emits::

        app:cache >> lookup('k') +0ms
        app:cache << lookup returned: 42 +1ms
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log = _resolve(target)
            if not log.enabled:
                return func(*args, **kwargs)

            name = func.__qualname__
            args_repr = [_short_repr(a) for a in args]
            args_repr.extend(f"{k}={_short_repr(v)}" for k, v in kwargs.items())
            log(">> %s(%s)", name, ', '.join(args_repr))

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log("!! %s raised: %s: %s", name, type(e).__name__, e)
                raise

            if result is not None:
                log("<< %s returned: %s", name, _short_repr(result))
            return result

        return wrapper

    return decorator


def _resolve(target):
    if isinstance(target, str):
        # Looked up per call so init_debug() replacements are honoured
        return get_registry().get_logger(target)
    return target
