"""Unit tests for list view state."""

import pytest

from motebase_admin.domain.entities.collection import Collection
from motebase_admin.domain.services.record_list import (
    CollectionBrowser,
    RecordListState,
    visible_fields,
)


@pytest.fixture
def state():
    state = RecordListState(per_page=2)
    state.apply_page([{"id": "a"}, {"id": "b"}], total_pages=3, total_items=6)
    return state


class TestSorting:

    def test_three_state_toggle(self, state):
        state.page = 3
        state.toggle_sort("title")
        assert (state.sort_field, state.sort_direction, state.page) == ("title", "asc", 1)

        state.page = 2
        state.toggle_sort("title")
        assert (state.sort_field, state.sort_direction, state.page) == ("title", "desc", 1)

        state.page = 2
        state.toggle_sort("title")
        assert (state.sort_field, state.sort_direction, state.page) == ("", "", 1)

    def test_other_field_starts_ascending(self, state):
        state.toggle_sort("title")
        state.toggle_sort("title")
        state.toggle_sort("views")
        assert (state.sort_field, state.sort_direction) == ("views", "asc")

    def test_sort_param(self, state):
        assert state.sort_param is None
        state.toggle_sort("title")
        assert state.sort_param == "title"
        state.toggle_sort("title")
        assert state.sort_param == "-title"

    def test_sort_indicator(self, state):
        state.toggle_sort("title")
        assert state.sort_indicator("title") == "▲"
        assert state.sort_indicator("views") == ""


class TestQueryParams:

    def test_defaults(self, state):
        assert state.query_params() == {"page": 1, "perPage": 2}

    def test_filter_and_sort_pass_through(self, state):
        state.set_filter("views > 3 && title ~ 'a'")
        state.toggle_sort("views")
        state.toggle_sort("views")
        assert state.query_params() == {
            "page": 1,
            "perPage": 2,
            "filter": "views > 3 && title ~ 'a'",
            "sort": "-views",
        }

    def test_set_filter_resets_page(self, state):
        state.page = 3
        state.set_filter("x")
        assert state.page == 1


class TestPagination:

    def test_next_and_previous(self, state):
        assert state.previous_page() is False
        assert state.next_page() is True
        assert state.next_page() is True
        assert state.next_page() is False
        assert state.page == 3
        assert state.previous_page() is True
        assert state.page == 2


class TestSelection:

    def test_selection_bounded_to_page(self, state):
        assert state.toggle_selection("zzz") is False
        assert state.selected_ids == []

    def test_toggle_selection(self, state):
        assert state.toggle_selection("b") is True
        assert state.toggle_selection("a") is True
        assert state.selected_ids == ["b", "a"]
        assert state.some_selected is False
        assert state.all_selected is True
        assert state.toggle_selection("b") is False
        assert state.some_selected is True

    def test_select_all_toggles(self, state):
        state.toggle_select_all()
        assert state.selected_ids == ["a", "b"]
        state.toggle_select_all()
        assert state.selected_ids == []

    def test_new_page_clears_selection(self, state):
        state.toggle_select_all()
        state.apply_page([{"id": "c"}], total_pages=3, total_items=6)
        assert state.selected_ids == []


def test_visible_fields_limit(posts_collection):
    assert [f.name for f in visible_fields(posts_collection)] == [
        "title",
        "views",
        "published",
        "meta",
        "cover",
    ]
    assert visible_fields(None) == []


class TestCollectionBrowser:

    @pytest.fixture
    def collections(self):
        return [Collection(id=i, name=f"c{i:02d}") for i in range(14)] + [
            Collection(id=99, name="members", type="auth")
        ]

    def test_pages(self, collections):
        browser = CollectionBrowser(per_page=12)
        assert browser.total_pages(collections) == 2
        assert len(browser.page_items(collections)) == 12
        browser.page = 2
        assert len(browser.page_items(collections)) == 3

    def test_search_matches_name_or_type(self, collections):
        browser = CollectionBrowser(per_page=12)
        browser.page = 2
        browser.search("AUTH")
        assert browser.page == 1
        assert [c.name for c in browser.page_items(collections)] == ["members"]
