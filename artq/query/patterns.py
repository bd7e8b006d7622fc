"""Normalize user-supplied search patterns before compilation.

A search pattern has the shape ``repository/segment/.../name``. The
repository is always the text before the first ``/``; ``*`` matches any
run of characters and parentheses are decoration only.
"""

from __future__ import annotations

WILDCARD = "*"


def strip_parentheses(pattern: str) -> str:
    """Remove the decorative parentheses from a pattern."""
    return pattern.replace("(", "").replace(")", "")


def prepare_search_pattern(pattern: str) -> str:
    """Canonicalize a file search pattern.

    A bare repository name (no ``/``) searches the whole repository, so
    ``repo`` becomes ``repo/*``. This is a silent default, not an error.
    A trailing ``/`` means "everything in this folder" and gets ``*``
    appended.
    """
    if "/" not in pattern:
        pattern += "/"
    if pattern.endswith("/"):
        pattern += WILDCARD
    return strip_parentheses(pattern)


def split_repo(pattern: str) -> tuple[str, str]:
    """Split a pattern into ``(repository, remainder)`` at the first ``/``."""
    repo, _, rest = pattern.partition("/")
    return repo, rest


def is_wildcard_pattern(pattern: str) -> bool:
    """Return whether the pattern needs wildcard decomposition.

    Trailing-slash and bare-repository patterns count as wildcards because
    :func:`prepare_search_pattern` expands them to ``*`` defaults.
    """
    return WILDCARD in pattern or pattern.endswith("/") or "/" not in pattern
