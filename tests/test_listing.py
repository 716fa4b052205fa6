"""Tests for in-memory filter, sort and paginate."""

import pytest

from backoffice.core.listing import (
    ASC, DESC, SortState, filter_rows, paginate, sort_rows,
)
from backoffice.modules.entities.registry import OPERATOR, SERVICE_PROVIDER, STORE, with_derived_fields


def _operators():
    return [
        {"id": "1", "first_name": "Alexandra", "last_name": "Cohen", "phone_number": "050-1", "working_area": "North"},
        {"id": "2", "first_name": "Dana", "last_name": "Levi", "phone_number": "050-2", "working_area": "South"},
        {"id": "3", "first_name": "Moshe", "last_name": "Alexander", "phone_number": "050-3", "working_area": None},
        {"id": "4", "first_name": "Ruth", "last_name": "Katz", "phone_number": "050-4", "working_area": "Alexandria"},
    ]


class TestFilterRows:
    """Search term matching."""

    def test_alex_matches_name_and_working_area(self) -> None:
        rows = filter_rows(_operators(), "alex", OPERATOR.search_values)
        assert [r["id"] for r in rows] == ["1", "3", "4"]

    def test_match_is_case_insensitive(self) -> None:
        rows = filter_rows(_operators(), "ALEX", OPERATOR.search_values)
        assert len(rows) == 3

    def test_phone_number_is_searched(self) -> None:
        rows = filter_rows(_operators(), "050-2", OPERATOR.search_values)
        assert [r["id"] for r in rows] == ["2"]

    def test_empty_term_returns_everything(self) -> None:
        assert len(filter_rows(_operators(), "", OPERATOR.search_values)) == 4
        assert len(filter_rows(_operators(), None, OPERATOR.search_values)) == 4

    def test_no_match(self) -> None:
        assert filter_rows(_operators(), "zzz", OPERATOR.search_values) == []

    def test_store_search_reaches_category_and_city(self) -> None:
        rows = [
            with_derived_fields({
                "id": "s1", "name": "Deli", "owner_first_name": "Ann", "owner_last_name": "Lee",
                "category": {"id": "c1", "name": "Grocery"}, "addresses": {"city": "Haifa"},
            }),
            with_derived_fields({
                "id": "s2", "name": "Tools", "owner_first_name": "Bob", "owner_last_name": "Ray",
                "category": None, "addresses": None,
            }),
        ]
        assert [r["id"] for r in filter_rows(rows, "grocery", STORE.search_values)] == ["s1"]
        assert [r["id"] for r in filter_rows(rows, "haifa", STORE.search_values)] == ["s1"]
        assert [r["id"] for r in filter_rows(rows, "bob ray", STORE.search_values)] == ["s2"]

    def test_service_provider_search_fans_out_over_join_rows(self) -> None:
        row = with_derived_fields({
            "id": "p1", "first_name": "Eli", "last_name": "Bar", "is_company": True, "status": "active",
            "service_provider_types": [
                {"service_type": {"name": "Leak fix", "subcategory": {"name": "Plumbing", "category": {"name": "Home"}}}},
            ],
            "service_provider_working_areas": [{"working_area": {"name": "Center"}}],
        })
        for term in ("leak", "plumbing", "home", "center", "company", "eli bar"):
            assert filter_rows([row], term, SERVICE_PROVIDER.search_values) == [row]


class TestSortRows:
    """Sorting and the sort toggle."""

    def test_sort_toggle_same_field_reverses(self) -> None:
        rows = _operators()
        state = SortState("first_name", ASC)
        first = sort_rows(rows, state.field, state.direction)
        state = state.toggle("first_name")
        second = sort_rows(rows, state.field, state.direction)
        assert state.direction == DESC
        assert second == list(reversed(first))

    def test_sort_toggle_new_field_resets_to_ascending(self) -> None:
        state = SortState("first_name", DESC).toggle("last_name")
        assert state == SortState("last_name", ASC)

    def test_strings_sort_case_insensitively(self) -> None:
        rows = [{"n": "beta"}, {"n": "Alpha"}, {"n": "gamma"}]
        assert [r["n"] for r in sort_rows(rows, "n", ASC)] == ["Alpha", "beta", "gamma"]

    def test_missing_values_sort_last_ascending(self) -> None:
        rows = sort_rows(_operators(), "working_area", ASC)
        assert rows[-1]["working_area"] is None

    def test_descending_is_exact_reverse_with_ties(self) -> None:
        rows = [{"id": 1, "k": "a"}, {"id": 2, "k": "a"}, {"id": 3, "k": "b"}]
        ascending = sort_rows(rows, "k", ASC)
        descending = sort_rows(rows, "k", DESC)
        assert [r["id"] for r in ascending] == [1, 2, 3]
        assert [r["id"] for r in descending] == [3, 2, 1]

    def test_invalid_direction(self) -> None:
        with pytest.raises(ValueError):
            sort_rows(_operators(), "first_name", "sideways")


class TestPaginate:
    """Page slicing and clamping."""

    def test_page_beyond_last_clamps_to_last(self) -> None:
        rows = [{"i": i} for i in range(25)]
        last = paginate(rows, 3, 10)
        beyond = paginate(rows, 7, 10)
        assert beyond == last
        assert beyond.page == 3
        assert [r["i"] for r in beyond.items] == [20, 21, 22, 23, 24]

    def test_page_below_one_clamps_to_first(self) -> None:
        rows = [{"i": i} for i in range(5)]
        assert paginate(rows, 0, 10).page == 1
        assert paginate(rows, -4, 10).items == rows

    def test_totals(self) -> None:
        result = paginate([{"i": i} for i in range(21)], 1, 10)
        assert result.total_items == 21
        assert result.total_pages == 3
        assert len(result.items) == 10

    def test_empty_collection(self) -> None:
        result = paginate([], 5, 10)
        assert result.page == 1
        assert result.items == []
        assert result.total_pages == 0

    def test_page_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            paginate([], 1, 0)
