"""Specification entries: loading, classification and compilation.

A spec file lists independent units of work::

    {
      "files": [
        {"pattern": "libs-release/org/*.jar", "props": "status=ok", "recursive": "true"},
        {"aql": {"items.find": {"repo": "libs-release", "name": {"$match": "*.pom"}}}}
      ]
    }
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from artq.config import DEFAULT_RETURN_FIELDS
from artq.exceptions import ArtqError, MalformedSpecFileError, SpecEntryError
from artq.query.builder import (
    Query,
    RawQuery,
    build_file_search_query,
    build_folder_search_query,
    render_query,
)
from artq.query.patterns import is_wildcard_pattern

logger = logging.getLogger(__name__)

_AQL_KEY = "items.find"


class SpecType(enum.Enum):
    """How a spec entry resolves to a query."""

    WILDCARD = "wildcard"
    SIMPLE = "simple"
    AQL = "aql"


@dataclass(frozen=True)
class SpecEntry:
    """One unit of work from a spec file or the command line."""

    pattern: str = ""
    target: str = ""
    props: str = ""
    recursive: bool = True
    flat: bool = False
    regexp: bool = False
    aql: str = ""


def classify(entry: SpecEntry) -> SpecType | None:
    """Classify an entry; a pattern always wins over a raw body.

    Returns None for an entry with neither.
    """
    if entry.pattern and is_wildcard_pattern(entry.pattern):
        return SpecType.WILDCARD
    if entry.pattern:
        return SpecType.SIMPLE
    if entry.aql:
        return SpecType.AQL
    return None


def _parse_bool(value: Any, default: bool, key: str, index: int) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"entry #{index + 1}: '{key}' must be a boolean, got {value!r}")


def _parse_aql(value: Any, index: int) -> str:
    if not value:
        return ""
    if not isinstance(value, dict) or _AQL_KEY not in value:
        raise ValueError(f"entry #{index + 1}: 'aql' must be an object with '{_AQL_KEY}'")
    return json.dumps(value[_AQL_KEY], separators=(",", ":"))


def _parse_entry(raw: Any, index: int) -> SpecEntry:
    if not isinstance(raw, dict):
        raise ValueError(f"entry #{index + 1} must be an object")
    # Field names are matched case-insensitively.
    fields = {str(k).lower(): v for k, v in raw.items()}
    for key in ("pattern", "target", "props"):
        if not isinstance(fields.get(key) or "", str):
            raise ValueError(f"entry #{index + 1}: '{key}' must be a string")
    return SpecEntry(
        pattern=fields.get("pattern") or "",
        target=fields.get("target") or "",
        props=fields.get("props") or "",
        recursive=_parse_bool(fields.get("recursive"), True, "recursive", index),
        flat=_parse_bool(fields.get("flat"), False, "flat", index),
        regexp=_parse_bool(fields.get("regexp"), False, "regexp", index),
        aql=_parse_aql(fields.get("aql"), index),
    )


def parse_spec(content: str | bytes, source: Path | str = "<spec>") -> list[SpecEntry]:
    """Deserialize spec file content into an ordered list of entries.

    Raises:
        MalformedSpecFileError: On invalid JSON, a missing or invalid
            ``files`` list, an invalid entry, or zero entries.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedSpecFileError(source, str(e)) from e

    if not isinstance(data, dict):
        raise MalformedSpecFileError(source, "top level must be an object")
    files = {str(k).lower(): v for k, v in data.items()}.get("files")
    if not isinstance(files, list):
        raise MalformedSpecFileError(source, "missing 'files' list")
    if not files:
        raise MalformedSpecFileError(source, "'files' list is empty")

    try:
        return [_parse_entry(raw, index) for index, raw in enumerate(files)]
    except ValueError as e:
        raise MalformedSpecFileError(source, str(e)) from e


def load_spec_file(path: Path) -> list[SpecEntry]:
    """Read and parse a spec file from disk."""
    try:
        content = path.read_bytes()
    except OSError as e:
        raise MalformedSpecFileError(path, e.strerror or str(e)) from e
    entries = parse_spec(content, path)
    logger.debug("Loaded %d spec entries from %s", len(entries), path)
    return entries


def create_spec(
    pattern: str,
    target: str = "",
    props: str = "",
    recursive: bool = True,
    flat: bool = False,
    regexp: bool = False,
) -> list[SpecEntry]:
    """Build a single-entry spec from command-line arguments."""
    return [
        SpecEntry(
            pattern=pattern,
            target=target,
            props=props,
            recursive=recursive,
            flat=flat,
            regexp=regexp,
        )
    ]


def build_entry_query(
    entry: SpecEntry,
    return_fields: Sequence[str] = DEFAULT_RETURN_FIELDS,
    folders: bool = False,
) -> Query:
    """Resolve an entry to the query that describes it.

    Raises:
        PropertyFilterError: If the entry's props are malformed.
        ValueError: If the entry has neither a pattern nor a raw body.
    """
    spec_type = classify(entry)
    if spec_type is SpecType.AQL:
        return RawQuery(body=entry.aql, return_fields=tuple(return_fields))
    if spec_type is None:
        raise ValueError("entry has neither a pattern nor an aql body")
    if folders:
        return build_folder_search_query(entry.pattern, return_fields)
    # A literal pattern names one item, so it never recurses.
    recursive = entry.recursive and spec_type is SpecType.WILDCARD
    return build_file_search_query(entry.pattern, recursive, entry.props, return_fields)


def compile_entry(
    entry: SpecEntry,
    return_fields: Sequence[str] = DEFAULT_RETURN_FIELDS,
    folders: bool = False,
) -> str:
    """Compile one entry into its final query string."""
    return render_query(build_entry_query(entry, return_fields, folders))


def compile_spec(
    entries: Sequence[SpecEntry],
    return_fields: Sequence[str] = DEFAULT_RETURN_FIELDS,
    folders: bool = False,
) -> list[str]:
    """Compile every entry in order.

    Raises:
        SpecEntryError: Naming the first entry that failed and its fragment.
    """
    queries: list[str] = []
    for index, entry in enumerate(entries):
        try:
            queries.append(compile_entry(entry, return_fields, folders))
        except (ArtqError, ValueError) as e:
            fragment = getattr(e, "fragment", None) or entry.pattern or entry.aql
            raise SpecEntryError(index, fragment, str(e)) from e
    return queries
