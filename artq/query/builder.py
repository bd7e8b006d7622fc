"""Assemble item queries from pattern decompositions or raw bodies.

Both kinds of query converge on :func:`render_query`, which produces
``items.find(<filter>).include(<fields>)``. Values are embedded verbatim;
callers must pass glob text that is already safe to quote.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from artq.config import DEFAULT_RETURN_FIELDS
from artq.query.pairs import (
    PathNamePair,
    excludes_root,
    generate_file_pairs,
    generate_folder_pairs,
)
from artq.query.patterns import WILDCARD, prepare_search_pattern, split_repo, strip_parentheses
from artq.query.props import parse_props, render_props

logger = logging.getLogger(__name__)

FOLDER_TYPE = "folder"


@dataclass(frozen=True)
class RawQuery:
    """A pre-authored ``items.find`` body passed through unchanged."""

    body: str
    return_fields: tuple[str, ...] = DEFAULT_RETURN_FIELDS


@dataclass(frozen=True)
class GeneratedQuery:
    """A query generated from a decomposed search pattern."""

    repo: str
    pairs: tuple[PathNamePair, ...]
    props: tuple[tuple[str, str], ...] = ()
    item_type: str = ""
    return_fields: tuple[str, ...] = DEFAULT_RETURN_FIELDS


Query = RawQuery | GeneratedQuery


def build_inner_query(pair: PathNamePair, item_type: str = "") -> str:
    """Render the ``$and`` clause for a single pair."""
    ne_path = ""
    if item_type == FOLDER_TYPE and excludes_root(pair):
        ne_path = '"path": {"$ne": "."},'
    type_query = ""
    if item_type:
        type_query = f',"type": {{"$eq": "{item_type}"}}'
    return (
        f'"$and": [{{"path": {{"$match": "{pair.path}"}},{ne_path}'
        f'"name": {{"$match": "{pair.name}"}}{type_query}}}]'
    )


def build_return_fields(return_fields: Sequence[str]) -> str:
    """Join projected fields with commas (empty for no fields)."""
    return ",".join(return_fields)


def assemble(
    repo: str,
    props_query: str,
    pairs: Sequence[PathNamePair],
    item_type: str = "",
    return_fields: Sequence[str] = DEFAULT_RETURN_FIELDS,
) -> str:
    """Render a complete query from its parts.

    Args:
        repo: Repository the items must belong to.
        props_query: Property fragment from :func:`~artq.query.props.build_props_query`.
        pairs: Path/name alternatives, OR-ed together.
        item_type: Optional item type constraint added to every alternative.
        return_fields: Fields for the ``include`` projection.
    """
    alternatives = ",".join("{" + build_inner_query(pair, item_type) + "}" for pair in pairs)
    body = f'{{"repo": "{repo}",{props_query}"$or": [{alternatives}]}}'
    return f"items.find({body}).include({build_return_fields(return_fields)})"


def render_query(query: Query) -> str:
    """Render either kind of query to its final string."""
    if isinstance(query, RawQuery):
        return f"items.find({query.body}).include({build_return_fields(query.return_fields)})"
    return assemble(
        query.repo,
        render_props(list(query.props)),
        query.pairs,
        query.item_type,
        query.return_fields,
    )


def build_file_search_query(
    pattern: str,
    recursive: bool,
    props: str = "",
    return_fields: Sequence[str] = DEFAULT_RETURN_FIELDS,
) -> GeneratedQuery:
    """Build the query for files matching a glob pattern.

    Raises:
        PropertyFilterError: If ``props`` holds an entry without ``=``.
    """
    parsed_props = parse_props(props)
    repo, rest = split_repo(prepare_search_pattern(pattern))
    pairs = generate_file_pairs(rest, recursive)
    logger.debug("Pattern %r decomposed into %d pair(s): %s", pattern, len(pairs), pairs)
    return GeneratedQuery(
        repo=repo,
        pairs=tuple(pairs),
        props=tuple(parsed_props),
        return_fields=tuple(return_fields),
    )


def build_folder_search_query(
    pattern: str,
    return_fields: Sequence[str] = DEFAULT_RETURN_FIELDS,
) -> GeneratedQuery:
    """Build the query for folders matching a glob pattern."""
    repo, rest = split_repo(strip_parentheses(pattern).rstrip("/"))
    # A bare repository searches all of its folders.
    rest = rest or WILDCARD
    pairs = generate_folder_pairs(f"{repo}/{rest}")
    logger.debug("Folder pattern %r decomposed into %d pair(s): %s", pattern, len(pairs), pairs)
    return GeneratedQuery(
        repo=repo,
        pairs=tuple(pairs),
        item_type=FOLDER_TYPE,
        return_fields=tuple(return_fields),
    )
