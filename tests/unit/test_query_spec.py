"""Unit tests for spec entries: loading, classification, compilation."""

from __future__ import annotations

from pathlib import Path

import pytest

from artq.exceptions import MalformedSpecFileError, SpecEntryError
from artq.query.builder import GeneratedQuery, RawQuery
from artq.query.spec import (
    SpecEntry,
    SpecType,
    build_entry_query,
    classify,
    compile_entry,
    compile_spec,
    create_spec,
    load_spec_file,
    parse_spec,
)

FIELDS = ('"name"',)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassify:
    def test_wildcard(self) -> None:
        assert classify(SpecEntry(pattern="libs/*.jar")) is SpecType.WILDCARD

    def test_simple(self) -> None:
        assert classify(SpecEntry(pattern="libs/org/a.jar")) is SpecType.SIMPLE

    def test_aql(self) -> None:
        assert classify(SpecEntry(aql='{"repo":"libs"}')) is SpecType.AQL

    def test_pattern_wins_over_raw_body(self) -> None:
        entry = SpecEntry(pattern="libs/*.jar", aql='{"repo":"libs"}')
        assert classify(entry) is SpecType.WILDCARD

    def test_simple_pattern_wins_over_raw_body(self) -> None:
        entry = SpecEntry(pattern="libs/a.jar", aql='{"repo":"libs"}')
        assert classify(entry) is SpecType.SIMPLE

    def test_empty_entry(self) -> None:
        assert classify(SpecEntry()) is None


# ---------------------------------------------------------------------------
# Spec file parsing
# ---------------------------------------------------------------------------


class TestParseSpec:
    def test_loads_entries_in_order(self, sample_spec: Path) -> None:
        entries = load_spec_file(sample_spec)
        assert len(entries) == 2
        assert entries[0].pattern == "libs-release/org/*.jar"
        assert entries[0].props == "status=released"
        assert entries[0].recursive is False
        assert entries[1].pattern == ""
        assert entries[1].aql == '{"repo":"libs-release","name":{"$match":"*.pom"}}'

    def test_defaults(self) -> None:
        (entry,) = parse_spec('{"files": [{"pattern": "libs/*"}]}')
        assert entry.recursive is True
        assert entry.flat is False
        assert entry.regexp is False
        assert entry.target == ""

    def test_field_names_case_insensitive(self) -> None:
        (entry,) = parse_spec('{"Files": [{"Pattern": "libs/*", "Recursive": false}]}')
        assert entry.pattern == "libs/*"
        assert entry.recursive is False

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            "[]",
            '{"other": []}',
            '{"files": []}',
            '{"files": ["libs/*"]}',
            '{"files": [{"pattern": "libs/*", "recursive": "maybe"}]}',
            '{"files": [{"aql": {"find": {}}}]}',
            '{"files": [{"pattern": 3}]}',
        ],
    )
    def test_malformed(self, content: str) -> None:
        with pytest.raises(MalformedSpecFileError):
            parse_spec(content)

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(MalformedSpecFileError) as exc_info:
            load_spec_file(temp_dir / "missing.json")
        assert exc_info.value.path == temp_dir / "missing.json"


def test_create_spec() -> None:
    (entry,) = create_spec("libs/*.jar", target="out/", props="a=1", recursive=False)
    assert entry == SpecEntry(
        pattern="libs/*.jar", target="out/", props="a=1", recursive=False
    )


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


class TestBuildEntryQuery:
    def test_wildcard_uses_recursion_flag(self) -> None:
        query = build_entry_query(SpecEntry(pattern="libs/*.jar", recursive=True))
        assert isinstance(query, GeneratedQuery)
        assert query.pairs == ((".", "*.jar"), ("*", "*.jar"))

    def test_wildcard_without_recursion(self) -> None:
        query = build_entry_query(SpecEntry(pattern="libs/*.jar", recursive=False))
        assert isinstance(query, GeneratedQuery)
        assert query.pairs == ((".", "*.jar"),)

    def test_simple_never_recurses(self) -> None:
        query = build_entry_query(SpecEntry(pattern="libs/org/a.jar", recursive=True))
        assert isinstance(query, GeneratedQuery)
        assert query.pairs == (("org", "a.jar"),)

    def test_raw_body(self) -> None:
        query = build_entry_query(SpecEntry(aql='{"repo":"libs"}'), FIELDS)
        assert query == RawQuery(body='{"repo":"libs"}', return_fields=FIELDS)

    def test_folders(self) -> None:
        query = build_entry_query(SpecEntry(pattern="libs/a*/"), folders=True)
        assert isinstance(query, GeneratedQuery)
        assert query.item_type == "folder"

    def test_empty_entry(self) -> None:
        with pytest.raises(ValueError):
            build_entry_query(SpecEntry())


class TestCompile:
    def test_compile_entry(self) -> None:
        query = compile_entry(SpecEntry(pattern="libs/a.jar"), FIELDS)
        assert query == (
            'items.find({"repo": "libs","$or": ['
            '{"$and": [{"path": {"$match": "."},"name": {"$match": "a.jar"}}]}'
            ']}).include("name")'
        )

    def test_compile_spec_keeps_order(self, sample_spec: Path) -> None:
        queries = compile_spec(load_spec_file(sample_spec), FIELDS)
        assert len(queries) == 2
        assert '"@status": {"$match": "released"}' in queries[0]
        assert queries[1] == (
            'items.find({"repo":"libs-release","name":{"$match":"*.pom"}}).include("name")'
        )

    def test_failure_names_entry_and_fragment(self) -> None:
        entries = [
            SpecEntry(pattern="libs/*"),
            SpecEntry(pattern="libs/*", props="good=1;bad"),
        ]
        with pytest.raises(SpecEntryError) as exc_info:
            compile_spec(entries)
        assert exc_info.value.index == 1
        assert exc_info.value.fragment == "bad"
        assert "#2" in str(exc_info.value)

    def test_empty_entry_reported(self) -> None:
        with pytest.raises(SpecEntryError) as exc_info:
            compile_spec([SpecEntry()])
        assert exc_info.value.index == 0
