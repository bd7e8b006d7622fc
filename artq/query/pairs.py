"""Decompose glob patterns into (path, name) alternatives.

The server indexes every item by directory ("path") and filename ("name")
as separate fields, and its matcher cannot apply a wildcard across the
boundary between them. A glob like ``a/*b*`` may match ``a/xb`` as well as
``a/x/y/b``, so each way a ``*`` could stand for a directory separator is
enumerated as its own pair and the pairs are OR-ed together.
"""

from __future__ import annotations

import posixpath
from typing import NamedTuple

from artq.query.patterns import WILDCARD, split_repo, strip_parentheses


class PathNamePair(NamedTuple):
    """One disjunct: ``path`` matches the item directory, ``name`` its filename."""

    path: str
    name: str


def generate_file_pairs(pattern: str, recursive: bool) -> list[PathNamePair]:
    """Decompose a file pattern (repository prefix removed) into pairs.

    Args:
        pattern: Normalized pattern without the repository, e.g. ``a/*.zip``.
        recursive: Whether matches may live in subdirectories of the
            pattern's directory part.

    Returns:
        Ordered list of pairs; the first is always the direct split.
    """
    if pattern == WILDCARD:
        return [PathNamePair(WILDCARD if recursive else ".", WILDCARD)]

    path, slash, name = pattern.rpartition("/")
    if slash:
        pairs = [PathNamePair(path, name)]
    else:
        pairs = [PathNamePair(".", pattern)]

    # Without recursion a wildcard never crosses a directory boundary.
    if not recursive:
        return pairs

    if name == WILDCARD:
        pairs.append(PathNamePair(f"{path}/{WILDCARD}", WILDCARD))
        return pairs

    prefix = f"{path}/" if path else ""
    sections = name.split(WILDCARD)
    last = len(sections) - 1
    for i in range(last):
        # A trailing wildcard stays in the name.
        if i == last - 1 and not sections[last]:
            continue
        candidate_path = WILDCARD.join(sections[: i + 1]) + WILDCARD
        candidate_name = WILDCARD + WILDCARD.join(sections[i + 1 :])
        pairs.append(PathNamePair(prefix + candidate_path, candidate_name))
    return pairs


def _join(path: str, segment: str) -> str:
    return posixpath.normpath(posixpath.join(path, segment))


def generate_folder_pairs(pattern: str) -> list[PathNamePair]:
    """Decompose a folder pattern into pairs matching the folders themselves.

    The pattern may carry the repository prefix and a trailing ``/``; both
    are removed. Every ``*`` in the last segment is tried as the point
    where the folder name begins, with everything up to and including it
    moved into the path.
    """
    if pattern.endswith("/"):
        pattern = pattern[:-1]
    pattern = strip_parentheses(pattern)
    if "/" in pattern:
        _, pattern = split_repo(pattern)

    path, slash, last_segment = pattern.rpartition("/")
    if not slash:
        path = "."

    pairs = [PathNamePair(path, last_segment)]
    for k, char in enumerate(last_segment):
        if char == WILDCARD:
            pairs.append(PathNamePair(_join(path, last_segment[: k + 1]), last_segment[k:]))
    return pairs


def excludes_root(pair: PathNamePair) -> bool:
    """Return whether a folder pair must not match the repository root.

    Only the exact ``("*", "*")`` shape gets the exclusion; ``(".", "*")``
    deliberately does not.
    """
    return pair.path == WILDCARD and pair.name == WILDCARD
