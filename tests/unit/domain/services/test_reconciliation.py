"""Unit tests for collection import reconciliation."""

import json
from datetime import date

import pytest

from motebase_admin.core.exceptions import ImportConflictError, ImportFormatError
from motebase_admin.domain.entities.collection import Collection
from motebase_admin.domain.entities.import_change import (
    Conflict,
    Create,
    DeleteCandidate,
    Rename,
    Update,
)
from motebase_admin.domain.services.reconciliation import (
    NAME_CONFLICT_REASON,
    ImportSession,
    compute_import_changes,
    export_filename,
    has_conflicts,
    parse_import_document,
    summarize,
)


def collections(*docs):
    return [Collection.from_dict(doc) for doc in docs]


POSTS = {"id": 1, "name": "posts", "schema": {"title": {"type": "text"}}, "listRule": ""}


class TestComputeImportChanges:

    def test_schema_change_is_update(self):
        live = collections(POSTS)
        candidates = collections(
            {"id": 1, "name": "posts", "schema": {"title": {"type": "text"}, "body": {"type": "json"}}}
        )

        assert compute_import_changes(live, candidates) == [
            Update(name="posts", id=1, schema_changed=True, rules_changed=False)
        ]

    def test_name_collision_is_conflict_and_live_is_delete_candidate(self):
        live = collections({"id": 1, "name": "posts"})
        candidates = collections({"id": 2, "name": "posts"})

        assert compute_import_changes(live, candidates) == [
            Conflict(name="posts", reason=NAME_CONFLICT_REASON),
            DeleteCandidate(name="posts", id=1),
        ]

    def test_unchanged_collection_produces_nothing(self):
        # null and "" rules are equivalent
        candidate = dict(POSTS, listRule=None)
        assert compute_import_changes(collections(POSTS), collections(candidate)) == []

    def test_rename_only(self):
        changes = compute_import_changes(collections(POSTS), collections(dict(POSTS, name="articles")))
        assert changes == [Rename(name="articles", old_name="posts", id=1)]

    def test_rename_excludes_update(self):
        candidate = dict(POSTS, name="articles", schema={}, viewRule="@request.auth.id != ''")
        changes = compute_import_changes(collections(POSTS), collections(candidate))

        assert changes == [Rename(name="articles", old_name="posts", id=1)]
        assert not any(isinstance(c, Update) for c in changes)

    def test_rules_change(self):
        candidate = dict(POSTS, deleteRule="id = @request.auth.id")
        assert compute_import_changes(collections(POSTS), collections(candidate)) == [
            Update(name="posts", id=1, schema_changed=False, rules_changed=True)
        ]

    def test_create(self):
        candidate = {"id": 3, "name": "tags", "schema": {"label": {}, "color": {}}}
        assert compute_import_changes([], collections(candidate)) == [
            Create(name="tags", id=3, field_count=2)
        ]

    def test_order_is_candidates_then_deletions(self):
        live = collections(POSTS, {"id": 5, "name": "old"}, {"id": 6, "name": "older"})
        candidates = collections({"id": 3, "name": "tags"}, dict(POSTS, name="articles"))

        kinds = [c.kind for c in compute_import_changes(live, candidates)]

        assert kinds == ["create", "rename", "delete", "delete"]

    def test_conflicting_id_never_classified_otherwise(self):
        live = collections({"id": 1, "name": "posts"}, {"id": 9, "name": "users"})
        candidates = collections({"id": 2, "name": "users"})

        changes = compute_import_changes(live, candidates)

        for change in changes:
            if isinstance(change, (Create, Update, Rename)):
                assert change.id != 2
        assert has_conflicts(changes) is True

    def test_idempotent(self):
        live = collections(POSTS, {"id": 5, "name": "old"})
        candidates = collections(dict(POSTS, name="articles"), {"id": 3, "name": "tags"})
        assert compute_import_changes(live, candidates) == compute_import_changes(live, candidates)


class TestSummarize:

    def test_deletions_counted_only_when_opted_in(self):
        changes = [
            Create(name="a", id=1, field_count=0),
            DeleteCandidate(name="b", id=2),
            DeleteCandidate(name="c", id=3),
        ]
        assert summarize(changes, delete_missing=False).deletes == 0
        summary = summarize(changes, delete_missing=True)
        assert summary.deletes == 2
        assert summary.creates == 1


class TestParseImportDocument:

    def test_valid_array(self):
        assert parse_import_document(json.dumps([POSTS])) == [POSTS]

    def test_malformed_json(self):
        with pytest.raises(ImportFormatError) as exc_info:
            parse_import_document("{not json")
        assert exc_info.value.message.startswith("Invalid JSON")

    @pytest.mark.parametrize("text", ['{"name": "posts"}', '["posts"]', "3"])
    def test_not_an_array_of_collections(self, text):
        with pytest.raises(ImportFormatError) as exc_info:
            parse_import_document(text)
        assert exc_info.value.message == "Invalid format: expected an array of collections"

    def test_invalid_schema(self):
        with pytest.raises(ImportFormatError):
            parse_import_document('[{"id": 1, "name": "posts", "schema": "oops"}]')


def test_export_filename():
    assert export_filename(date(2024, 3, 9)) == "motebase_collections_2024-03-09.json"


class TestImportSession:

    def test_load_and_summary(self):
        session = ImportSession()
        session.load_text(json.dumps([dict(POSTS, name="articles")]), collections(POSTS))

        assert session.changes == [Rename(name="articles", old_name="posts", id=1)]
        assert session.summary.renames == 1
        session.ensure_applicable()
        assert session.request_body() == {
            "collections": [dict(POSTS, name="articles")],
            "deleteMissing": False,
        }

    def test_format_error_clears_previous_load(self):
        session = ImportSession()
        session.load_text(json.dumps([POSTS]), [])

        with pytest.raises(ImportFormatError):
            session.load_text("nope", [])

        assert session.documents is None
        assert session.changes == []
        assert session.error.startswith("Invalid JSON")

    def test_conflicts_block_apply(self):
        session = ImportSession()
        session.load_text(json.dumps([{"id": 2, "name": "posts"}]), collections(POSTS))
        session.delete_missing = True

        with pytest.raises(ImportConflictError) as exc_info:
            session.ensure_applicable()
        assert "posts" in str(exc_info.value)

    def test_nothing_loaded_blocks_apply(self):
        with pytest.raises(ImportConflictError):
            ImportSession().ensure_applicable()

    def test_recompute_after_live_change(self):
        session = ImportSession()
        session.load_text(json.dumps([POSTS]), [])
        assert [c.kind for c in session.changes] == ["create"]

        session.recompute(collections(POSTS))
        assert session.changes == []
