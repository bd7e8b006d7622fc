"""Filter recorded environment variables by key pattern.

Include patterns match case-sensitively. Exclude patterns match without
regard to case, so ``*password*`` also withholds ``DB_PASSWORD``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from fnmatch import fnmatchcase


def split_patterns(patterns: str) -> list[str]:
    """Split a ``;``-separated pattern string, dropping empty entries."""
    return [p for p in patterns.split(";") if p]


def _matches_any(key: str, patterns: Sequence[str], *, ignore_case: bool = False) -> bool:
    if ignore_case:
        key = key.lower()
        return any(fnmatchcase(key, pattern.lower()) for pattern in patterns)
    return any(fnmatchcase(key, pattern) for pattern in patterns)


def include_env(patterns: Sequence[str], env: Mapping[str, str]) -> dict[str, str]:
    """Keep only the keys matching at least one pattern."""
    return {k: v for k, v in env.items() if _matches_any(k, patterns)}


def exclude_env(patterns: Sequence[str], env: Mapping[str, str]) -> dict[str, str]:
    """Drop every key matching at least one pattern, ignoring case."""
    return {k: v for k, v in env.items() if not _matches_any(k, patterns, ignore_case=True)}


def filter_env(
    env: Mapping[str, str],
    include: Sequence[str],
    exclude: Sequence[str],
) -> dict[str, str]:
    """Apply the include filter, then the exclude filter."""
    return exclude_env(exclude, include_env(include, env))
