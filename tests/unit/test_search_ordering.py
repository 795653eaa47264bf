"""Unit tests for result ordering and pagination."""

import pytest

from zeto_search.config import SortOptions
from zeto_search.search.ordering import compare_results, paginate, sort_results


@pytest.mark.unit
class TestCompareResults:
    def test_numbers_compare_numerically(self):
        sort = SortOptions(by="year", order="asc")
        assert compare_results({"year": 2}, {"year": 10}, sort) < 0
        assert compare_results({"year": 10}, {"year": 2}, SortOptions(by="year", order="desc")) < 0

    def test_strings_compare_case_insensitively(self):
        sort = SortOptions(by="author", order="asc")
        assert compare_results({"author": "ada"}, {"author": "Bob"}, sort) < 0
        assert compare_results({"author": "ADA"}, {"author": "ada"}, sort) == 0

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_nulls_sort_last_in_both_directions(self, order):
        sort = SortOptions(by="year", order=order)
        assert compare_results({"year": None}, {"year": 1}, sort) > 0
        assert compare_results({"year": 1}, {}, sort) < 0
        assert compare_results({}, {"year": None}, sort) == 0

    def test_mixed_types_compare_equal(self):
        assert compare_results({"v": "1"}, {"v": 2}, SortOptions(by="v")) == 0


@pytest.mark.unit
class TestSortResults:
    def test_default_sort_is_score_descending(self):
        results = [{"id": 1, "score": 0.5}, {"id": 2, "score": 2.0}, {"id": 3, "score": 1.0}]
        assert [r["id"] for r in sort_results(results, SortOptions())] == [2, 3, 1]

    def test_sort_is_stable_for_ties(self):
        results = [{"id": 1, "score": 1.0}, {"id": 2, "score": 1.0}, {"id": 3, "score": 1.0}]
        assert [r["id"] for r in sort_results(results, SortOptions())] == [1, 2, 3]

    def test_nulls_last_when_sorting_descending(self):
        results = [{"id": 1, "year": None}, {"id": 2, "year": 2020}, {"id": 3, "year": 2024}]
        ordered = sort_results(results, SortOptions(by="year", order="desc"))
        assert [r["id"] for r in ordered] == [3, 2, 1]


@pytest.mark.unit
class TestPaginate:
    def test_slices_by_offset_and_limit(self):
        assert paginate([1, 2, 3, 4], offset=1, limit=2) == [2, 3]

    def test_clamps_bounds(self):
        assert paginate([1, 2, 3], offset=-5, limit=0) == [1]

    def test_offset_past_end(self):
        assert paginate([1, 2, 3], offset=10, limit=5) == []
