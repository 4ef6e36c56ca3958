"""Tests for switchyard.routing.params — recursive parameter merging."""

import pytest

from switchyard.routing.params import merge_params


class TestMergeParams:
    def test_disjoint_keys(self) -> None:
        assert merge_params({"a": "1"}, {"b": "2"}) == {"a": "1", "b": "2"}

    def test_colliding_leaf_takes_newer_value(self) -> None:
        assert merge_params({"a": "1"}, {"a": "2"}) == {"a": "2"}

    def test_nested_mappings_merge(self) -> None:
        merged = merge_params({"q": {"x": "1"}}, {"q": {"y": "2"}})
        assert merged == {"q": {"x": "1", "y": "2"}}

    def test_deeply_nested(self) -> None:
        merged = merge_params({"a": {"b": {"c": "1"}}}, {"a": {"b": {"d": "2"}}})
        assert merged == {"a": {"b": {"c": "1", "d": "2"}}}

    def test_mapping_replaced_by_leaf(self) -> None:
        assert merge_params({"a": {"x": "1"}}, {"a": "flat"}) == {"a": "flat"}

    def test_leaf_replaced_by_mapping(self) -> None:
        assert merge_params({"a": "flat"}, {"a": {"x": "1"}}) == {"a": {"x": "1"}}

    def test_empty_sides(self) -> None:
        assert merge_params({}, {"a": "1"}) == {"a": "1"}
        assert merge_params({"a": "1"}, {}) == {"a": "1"}

    def test_inputs_not_modified(self) -> None:
        base = {"q": {"x": "1"}}
        extra = {"q": {"y": "2"}}
        merge_params(base, extra)
        assert base == {"q": {"x": "1"}}
        assert extra == {"q": {"y": "2"}}

    def test_merging_twice_merges_values(self) -> None:
        once = merge_params({"user": {"id": "1"}}, {"user": {"name": "bob"}})
        twice = merge_params(once, {"user": {"role": "admin"}})
        assert twice == {"user": {"id": "1", "name": "bob", "role": "admin"}}


class TestAssociativity:
    @pytest.mark.parametrize(
        ("a", "b", "c"),
        [
            ({"x": "1"}, {"x": "2"}, {"x": "3"}),
            ({"m": {"a": "1"}}, {"m": {"b": "2"}}, {"m": {"a": "3", "c": "4"}}),
            ({"m": {"a": "1"}}, {"n": "flat"}, {"m": {"b": "2"}, "n": "new"}),
            ({"k": "v"}, {"m": {"n": {"o": "1"}}}, {"m": {"n": {"p": "2"}}}),
            ({}, {"a": {"b": "1"}}, {}),
        ],
    )
    def test_grouping_does_not_matter(self, a: dict, b: dict, c: dict) -> None:
        assert merge_params(merge_params(a, b), c) == merge_params(a, merge_params(b, c))
