"""Unit tests for query assembly."""

from __future__ import annotations

import pytest

from artq.exceptions import PropertyFilterError
from artq.query.builder import (
    GeneratedQuery,
    RawQuery,
    assemble,
    build_file_search_query,
    build_folder_search_query,
    build_inner_query,
    render_query,
)
from artq.query.pairs import PathNamePair

FIELDS = ('"name"', '"path"')


class TestBuildInnerQuery:
    def test_path_and_name(self) -> None:
        clause = build_inner_query(PathNamePair("a", "*.zip"))
        assert clause == '"$and": [{"path": {"$match": "a"},"name": {"$match": "*.zip"}}]'

    def test_type_constraint(self) -> None:
        clause = build_inner_query(PathNamePair("a", "b"), "file")
        assert clause.endswith(',"type": {"$eq": "file"}}]')

    def test_root_exclusion_for_star_star_folder(self) -> None:
        clause = build_inner_query(PathNamePair("*", "*"), "folder")
        assert '"path": {"$ne": "."},' in clause

    def test_no_root_exclusion_for_dot_star_folder(self) -> None:
        clause = build_inner_query(PathNamePair(".", "*"), "folder")
        assert "$ne" not in clause

    def test_no_root_exclusion_without_folder_type(self) -> None:
        clause = build_inner_query(PathNamePair("*", "*"))
        assert "$ne" not in clause


class TestAssemble:
    def test_full_shape(self) -> None:
        query = assemble("libs", "", [PathNamePair("a", "*.zip")], return_fields=FIELDS)
        assert query == (
            'items.find({"repo": "libs","$or": ['
            '{"$and": [{"path": {"$match": "a"},"name": {"$match": "*.zip"}}]}'
            ']}).include("name","path")'
        )

    @pytest.mark.parametrize("count", [1, 2, 5])
    def test_one_and_clause_per_pair(self, count: int) -> None:
        pairs = [PathNamePair(f"p{i}", f"n{i}") for i in range(count)]
        query = assemble("libs", "", pairs)
        assert query.count('"$or"') == 1
        assert query.count('"$and"') == count
        assert query.count('"path": {"$match"') == count
        assert query.count('"name": {"$match"') == count
        assert '"type"' not in query

    def test_type_matcher_in_every_clause(self) -> None:
        pairs = [PathNamePair("a", "b"), PathNamePair("c", "d")]
        query = assemble("libs", "", pairs, item_type="file")
        assert query.count('"type": {"$eq": "file"}') == 2

    def test_props_precede_or(self) -> None:
        query = assemble(
            "libs",
            '"@a": {"$match": "1"},"@b": {"$match": "2"},',
            [PathNamePair(".", "*")],
        )
        assert query.index('"@a"') < query.index('"@b"') < query.index('"$or"')

    def test_empty_return_fields(self) -> None:
        query = assemble("libs", "", [PathNamePair(".", "*")], return_fields=[])
        assert query.endswith(".include()")

    def test_return_fields_joined_with_commas(self) -> None:
        query = assemble("libs", "", [PathNamePair(".", "*")], return_fields=["f1", "f2"])
        assert query.endswith(".include(f1,f2)")


class TestRenderQuery:
    def test_raw_query_passthrough(self) -> None:
        raw = RawQuery(body='{"repo":"libs"}', return_fields=FIELDS)
        assert render_query(raw) == 'items.find({"repo":"libs"}).include("name","path")'

    def test_generated_query_renders_props(self) -> None:
        generated = GeneratedQuery(
            repo="libs",
            pairs=(PathNamePair(".", "*"),),
            props=(("status", "ok"),),
            return_fields=FIELDS,
        )
        query = render_query(generated)
        assert '"@status": {"$match": "ok"},"$or"' in query


class TestBuildFileSearchQuery:
    def test_recursive_pattern(self) -> None:
        query = build_file_search_query("libs/a/*b*c*", recursive=True, return_fields=FIELDS)
        assert query.repo == "libs"
        assert len(query.pairs) == 3
        assert query.item_type == ""

    def test_bare_repository(self) -> None:
        query = build_file_search_query("libs", recursive=False)
        assert query.repo == "libs"
        assert query.pairs == ((".", "*"),)

    def test_parentheses_are_decoration(self) -> None:
        query = build_file_search_query("libs/(org)/(*.jar)", recursive=False)
        assert query.pairs == (("org", "*.jar"),)

    def test_props_parsed(self) -> None:
        query = build_file_search_query("libs/*", recursive=False, props="a=1;b=2")
        assert query.props == (("a", "1"), ("b", "2"))

    def test_malformed_props_abort(self) -> None:
        with pytest.raises(PropertyFilterError):
            build_file_search_query("libs/*", recursive=True, props="nokey")


class TestBuildFolderSearchQuery:
    def test_folder_type_and_pairs(self) -> None:
        query = build_folder_search_query("libs/a/*b/")
        assert query.repo == "libs"
        assert query.item_type == "folder"
        assert query.pairs == (("a", "*b"), ("a/*", "*b"))

    def test_repo_root_search_excludes_root_once(self) -> None:
        rendered = render_query(build_folder_search_query("libs/*/"))
        assert rendered.count('"$ne"') == 1
        assert rendered.count('"type": {"$eq": "folder"}') == 2

    def test_bare_repository(self) -> None:
        query = build_folder_search_query("libs/")
        assert query.pairs == ((".", "*"), ("*", "*"))
