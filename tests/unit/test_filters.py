"""
Unit tests for the event filter.
Tests defaults, tag parsing and the date-range invariant.
"""
import pytest
from datetime import date
from pydantic import ValidationError

from eventspotter.schemas import EventFilter, SortField, SortOrder
from eventspotter.core.errors import InvalidArgumentError


@pytest.mark.unit
class TestEventFilter:
    """Test EventFilter construction and normalization."""

    def test_defaults(self):
        filters = EventFilter()

        assert filters.page == 1
        assert filters.limit == 10
        assert filters.sort_by == SortField.created_at
        assert filters.sort_order == SortOrder.desc
        assert filters.tags is None
        assert filters.offset == 0

    def test_offset_from_page_and_limit(self):
        filters = EventFilter(page=3, limit=25)

        assert filters.offset == 50

    def test_tags_parsed_from_comma_separated_string(self):
        filters = EventFilter(tags=" python, rust ,,python,  ")

        assert filters.tags == ["python", "rust"]

    def test_blank_tags_become_none(self):
        assert EventFilter(tags=" , ,").tags is None

    def test_tags_accept_a_list(self):
        assert EventFilter(tags=["a", " b "]).tags == ["a", "b"]

    def test_blank_search_is_ignored(self):
        assert EventFilter(search="   ").search is None

    def test_end_before_start_raises_invalid_argument(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            EventFilter.build(start_date=date(2030, 5, 2), end_date=date(2030, 5, 1))

        assert "end_date" in str(exc_info.value.details)

    def test_end_before_start_rejected_by_constructor(self):
        with pytest.raises(ValidationError):
            EventFilter(start_date=date(2030, 5, 2), end_date=date(2030, 5, 1))

    def test_same_start_and_end_is_valid(self):
        filters = EventFilter.build(start_date=date(2030, 5, 1), end_date=date(2030, 5, 1))

        assert filters.start_date == filters.end_date

    def test_bounds_are_independently_optional(self):
        assert EventFilter.build(end_date=date(2030, 1, 1)).start_date is None
        assert EventFilter.build(start_date=date(2030, 1, 1)).end_date is None

    def test_build_ignores_none_values(self):
        filters = EventFilter.build(page=None, limit=None, category=None)

        assert filters.page == 1
        assert filters.limit == 10

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
    def test_out_of_range_pagination_rejected(self, params):
        with pytest.raises(InvalidArgumentError):
            EventFilter.build(**params)

    def test_filter_is_immutable(self):
        filters = EventFilter()

        with pytest.raises(ValidationError):
            filters.page = 2
