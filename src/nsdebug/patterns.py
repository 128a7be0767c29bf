"""
Enable/disable pattern compiling and namespace matching.

A pattern spec is a comma and/or whitespace separated list of glob
tokens. A leading ``-`` marks an exclusion.

    worker:*            # everything under worker:
    worker:*,-worker:db # ...except worker:db
    *                   # everything

Glob tokens are prefix globs, not full globs: the text before the first
``*`` must match the start of the namespace and anything after that ``*``
is ignored. A token without ``*`` matches only itself.

Entries are evaluated in order and the last matching entry decides.
Namespaces nothing matches are disabled.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

EXCLUDE_MARKER = '-'
WILDCARD = '*'

_SPLIT_RE = re.compile(r'[\s,]+')


@dataclass(frozen=True)
class MatcherEntry:
    """One compiled token of a pattern spec.

    Attributes:
        glob: Token text with the exclusion marker stripped
        exclude: True when the token disables what it matches
    """
    glob: str
    exclude: bool = False

    @property
    def prefix(self) -> Optional[str]:
        """Literal text before the first wildcard, or None if there is none."""
        if WILDCARD not in self.glob:
            return None
        return self.glob.split(WILDCARD, 1)[0]

    def matches(self, namespace: str) -> bool:
        prefix = self.prefix
        if prefix is None:
            return namespace == self.glob
        return namespace.startswith(prefix)

    def __str__(self) -> str:
        return f"{EXCLUDE_MARKER}{self.glob}" if self.exclude else self.glob


@dataclass(frozen=True)
class CompiledMatcher:
    """Ordered matcher list produced by compile_pattern()."""
    entries: Tuple[MatcherEntry, ...] = ()

    @property
    def includes(self) -> Tuple[MatcherEntry, ...]:
        return tuple(e for e in self.entries if not e.exclude)

    @property
    def excludes(self) -> Tuple[MatcherEntry, ...]:
        return tuple(e for e in self.entries if e.exclude)

    def matches(self, namespace: str) -> bool:
        """Return True if the last entry matching namespace is an inclusion."""
        verdict = False
        for entry in self.entries:
            if entry.matches(namespace):
                verdict = not entry.exclude
        return verdict

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __str__(self) -> str:
        return ','.join(str(e) for e in self.entries)


def split_pattern(spec: Optional[str]) -> list:
    """Split a pattern spec into its non-empty tokens."""
    if not spec or not isinstance(spec, str):
        return []
    return [tok for tok in _SPLIT_RE.split(spec) if tok]


def compile_pattern(spec: Optional[str]) -> CompiledMatcher:
    """Compile a pattern spec into a CompiledMatcher.

    Never raises: tokens that cannot match anything (a lone ``-``, say)
    are kept as literals and simply never match.

    Args:
        spec: Pattern spec, or None/empty to disable everything

    Returns:
        CompiledMatcher with one entry per token, in spec order
    """
    entries = []
    for token in split_pattern(spec):
        if token.startswith(EXCLUDE_MARKER):
            entries.append(MatcherEntry(glob=token[1:], exclude=True))
        else:
            entries.append(MatcherEntry(glob=token))
    return CompiledMatcher(entries=tuple(entries))
