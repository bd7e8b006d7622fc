"""Property (metadata) filters: ``key=value;key2=value2``."""

from __future__ import annotations

from artq.exceptions import PropertyFilterError

PROPS_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "="


def split_prop(prop: str) -> tuple[str, str]:
    """Split one ``key=value`` entry at its first ``=``.

    Raises:
        PropertyFilterError: If the delimiter is missing or the key is empty.
    """
    key, sep, value = prop.partition(KEY_VALUE_SEPARATOR)
    if not sep or not key:
        raise PropertyFilterError(prop)
    return key, value


def parse_props(props: str) -> list[tuple[str, str]]:
    """Parse a ``;``-separated property list, keeping order and duplicates."""
    if not props:
        return []
    return [split_prop(prop) for prop in props.split(PROPS_SEPARATOR)]


def render_props(props: list[tuple[str, str]]) -> str:
    """Render parsed properties as AND-ed ``@key`` match clauses.

    Each clause carries its own trailing comma so the fragment can be
    placed directly ahead of the ``$or`` array.
    """
    return "".join(f'"@{key}": {{"$match": "{value}"}},' for key, value in props)


def build_props_query(props: str) -> str:
    """Turn a raw property list into a query fragment (empty for no props)."""
    return render_props(parse_props(props))
