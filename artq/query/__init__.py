"""Compile glob patterns and spec entries into item queries."""

from artq.query.builder import (
    GeneratedQuery,
    RawQuery,
    assemble,
    build_file_search_query,
    build_folder_search_query,
    render_query,
)
from artq.query.pairs import PathNamePair, generate_file_pairs, generate_folder_pairs
from artq.query.props import build_props_query, split_prop
from artq.query.spec import (
    SpecEntry,
    SpecType,
    classify,
    compile_entry,
    compile_spec,
    create_spec,
    load_spec_file,
)

__all__ = [
    "GeneratedQuery",
    "PathNamePair",
    "RawQuery",
    "SpecEntry",
    "SpecType",
    "assemble",
    "build_file_search_query",
    "build_folder_search_query",
    "build_props_query",
    "classify",
    "compile_entry",
    "compile_spec",
    "create_spec",
    "generate_file_pairs",
    "generate_folder_pairs",
    "load_spec_file",
    "render_query",
    "split_prop",
]
