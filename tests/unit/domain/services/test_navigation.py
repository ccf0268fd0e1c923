"""Unit tests for route parsing and the unsaved-changes guard."""

import pytest

from motebase_admin.domain.entities.route import RouteName
from motebase_admin.domain.services.navigation import (
    UNSAVED_CHANGES_PROMPT,
    NavigationGuard,
    normalize_token,
    parse_route,
)

NAMES = ["posts", "users"]


class TestParseRoute:

    @pytest.mark.parametrize(
        "token,name",
        [
            ("/", RouteName.DASHBOARD),
            ("", RouteName.DASHBOARD),
            ("/settings", RouteName.SETTINGS),
            ("/logs", RouteName.LOGS),
            ("/jobs", RouteName.JOBS),
            ("/crons", RouteName.CRONS),
            ("/login", RouteName.LOGIN),
            ("/nowhere/at/all", RouteName.DASHBOARD),
            ("/collections", RouteName.DASHBOARD),
        ],
    )
    def test_simple_routes(self, token, name):
        assert parse_route(token, NAMES).name == name

    def test_collection_route(self):
        route = parse_route("#/collections/posts", NAMES)
        assert route.name == RouteName.COLLECTION
        assert route.collection_name == "posts"
        assert route.error is None

    def test_record_route(self):
        route = parse_route("/records/posts/abc", NAMES)
        assert route.name == RouteName.RECORD
        assert route.record_id == "abc"
        assert route.is_record_editor is True
        assert route.is_new_record is False

    def test_new_record_route(self):
        assert parse_route("/records/posts/new", NAMES).is_new_record is True

    def test_unknown_collection_redirects_to_dashboard(self):
        route = parse_route("/collections/ghosts", NAMES)
        assert route.name == RouteName.DASHBOARD
        assert route.token == "/"
        assert route.error == 'Collection "ghosts" not found'

    def test_unknown_collection_in_record_route(self):
        route = parse_route("/records/ghosts/1", NAMES)
        assert route.name == RouteName.DASHBOARD
        assert route.error is not None

    def test_normalize_token(self):
        assert normalize_token("#//collections//posts/") == "/collections/posts"
        assert normalize_token(None) == "/"


class TestNavigationGuard:

    @pytest.fixture
    def dirty(self):
        return {"value": False}

    @pytest.fixture
    def guard(self, dirty, confirmation, notifier):
        return NavigationGuard(
            is_dirty=lambda: dirty["value"],
            confirm=confirmation,
            notifier=notifier,
            collection_names=lambda: NAMES,
        )

    def test_clean_editor_navigates_without_prompt(self, guard, confirmation):
        guard.force("/records/posts/1")

        outcome = guard.request("/collections/posts")

        assert outcome.accepted is True
        assert guard.current.name == RouteName.COLLECTION
        assert confirmation.messages == []

    def test_dirty_editor_prompts(self, guard, dirty, confirmation):
        guard.force("/records/posts/1")
        dirty["value"] = True

        outcome = guard.request("/")

        assert outcome.accepted is True
        assert confirmation.messages == [UNSAVED_CHANGES_PROMPT]

    def test_declined_prompt_keeps_route(self, guard, dirty, confirmation):
        guard.force("/records/posts/1")
        before = guard.current
        dirty["value"] = True
        confirmation.answer = False

        outcome = guard.request("/settings")

        assert outcome.accepted is False
        assert guard.current is before

    def test_dirty_outside_editor_does_not_prompt(self, guard, dirty, confirmation):
        guard.force("/collections/posts")
        dirty["value"] = True

        guard.request("/")

        assert confirmation.messages == []

    def test_should_block_unload(self, guard, dirty):
        guard.force("/records/posts/1")
        assert guard.should_block_unload() is False
        dirty["value"] = True
        assert guard.should_block_unload() is True

    def test_unknown_collection_notifies(self, guard, notifier):
        outcome = guard.request("/collections/ghosts")

        assert outcome.redirected is True
        assert guard.current.name == RouteName.DASHBOARD
        assert notifier.errors == ['Collection "ghosts" not found']
