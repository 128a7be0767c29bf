"""
nsdebug - namespace-scoped debug output.

Loggers are named by ``:``-segmented namespaces and switched on and off
by a glob pattern, typically from the DEBUG environment variable::

    $ DEBUG=worker:*,-worker:db python app.py

    from nsdebug import debug
    log = debug('worker:a')
    log('tick %d', 42)          # worker:a tick 42 +0ms

Public API:
    debug            - logger for a namespace from the default registry
    enable / disable - change the default registry's pattern
    enabled          - test a namespace against the default pattern
    Registry         - explicit, isolated registry
    init_debug       - replace the default registry
    get_registry     - access the default registry
    Logger           - namespace-bound emitter
    humanize         - ms -> "1.5s"
    parse_duration   - "1.5s" -> ms
    trace            - function tracing decorator
    adapters         - EnvPersistence, MappingPersistence, FilePersistence,
                       ConfigPersistence, StreamSink, MemorySink, LoggingSink
"""

from nsdebug._version import __version__, __app_name__
from nsdebug.adapters import (
    ConfigPersistence, EnvPersistence, FilePersistence, LoggingSink,
    MappingPersistence, MemorySink, PersistenceAdapter, SinkAdapter, StreamSink,
)
from nsdebug.formatter import COLORS, select_color
from nsdebug.humanize import InvalidFormatError, humanize, parse_duration
from nsdebug.logger import Logger
from nsdebug.patterns import CompiledMatcher, MatcherEntry, compile_pattern
from nsdebug.registry import Registry, get_registry, init_debug
from nsdebug.trace import trace


def debug(namespace):
    """Return the default registry's logger for namespace."""
    return get_registry().get_logger(namespace)


def enable(spec):
    """Apply spec to the default registry (and persist it)."""
    get_registry().set_pattern(spec)


def disable():
    """Disable all namespaces on the default registry; return the old pattern."""
    return get_registry().disable()


def enabled(namespace):
    """Whether namespace is enabled on the default registry."""
    return get_registry().enabled(namespace)


__all__ = [
    "__version__", "__app_name__",
    "debug", "enable", "disable", "enabled",
    "Registry", "init_debug", "get_registry", "Logger",
    "CompiledMatcher", "MatcherEntry", "compile_pattern",
    "COLORS", "select_color",
    "InvalidFormatError", "humanize", "parse_duration",
    "PersistenceAdapter", "SinkAdapter",
    "EnvPersistence", "MappingPersistence", "FilePersistence", "ConfigPersistence",
    "StreamSink", "MemorySink", "LoggingSink",
    "trace",
]
