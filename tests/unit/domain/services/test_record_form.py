"""Unit tests for record form state and write payloads."""

import pytest

from motebase_admin.core.exceptions import FieldValueError, LocalValidationError
from motebase_admin.domain.entities.record import StagedFile
from motebase_admin.domain.services.record_form import PASSWORD_KEY, RecordForm


@pytest.fixture
def form(posts_collection):
    form = RecordForm(posts_collection.fields)
    form.load_existing(
        {
            "id": 7,
            "created_at": 100,
            "updated_at": 200,
            "title": "x",
            "views": 1,
            "cover": {"filename": "a.png", "mime_type": "image/png"},
        }
    )
    return form


@pytest.fixture
def png():
    return StagedFile(filename="b.png", content=b"\x89PNG", mime_type="image/png")


class TestLoading:

    def test_load_existing_strips_system_fields(self, posts_collection):
        form = RecordForm(posts_collection.fields)
        form.load_existing({"id": 7, "created_at": 100, "updated_at": 200, "title": "x"})

        assert form.values == {"title": "x"}
        assert form.baseline == {"title": "x"}
        assert form.baseline is not form.values

    def test_load_new_has_no_baseline(self, form):
        form.load_new()
        assert form.values == {}
        assert form.baseline == {}
        assert form.is_dirty() is False

    def test_loading_resets_transient_state(self, form, png):
        form.stage_file("cover", png)
        form.password = "secret"
        form.clear_existing_file("cover")

        form.load_existing({"id": 8, "title": "y"})

        assert form.uploads == {}
        assert form.files_to_remove == []
        assert form.password == ""


class TestDirtyState:

    def test_freshly_loaded_is_clean(self, form):
        assert form.is_dirty() is False

    def test_changed_value_is_dirty(self, form):
        form.set_value("title", "changed")
        assert form.is_dirty() is True

    def test_staged_file_is_dirty(self, form, png):
        form.stage_file("cover", png)
        assert form.is_dirty() is True

    def test_password_text_is_dirty(self, form):
        form.password_confirm = "x"
        assert form.is_dirty() is True

    def test_mark_saved_clears_dirty(self, form, png):
        form.set_value("title", "changed")
        form.stage_file("cover", png)
        form.password = "secret"

        form.mark_saved()

        assert form.is_dirty() is False
        assert form.uploads == {}
        assert form.password == ""


class TestInput:

    def test_set_input_parses_by_type(self, form):
        assert form.set_input("views", "12") == 12
        assert form.values["views"] == 12

    def test_set_input_unknown_field(self, form):
        with pytest.raises(FieldValueError):
            form.set_input("nope", "x")

    def test_validate_values(self, form):
        form.set_value("status", "archived")
        with pytest.raises(LocalValidationError) as exc_info:
            form.validate_values()
        assert exc_info.value.errors[0].code == "invalid_choice"


class TestFiles:

    def test_stage_file_leaves_value_untouched(self, form, png):
        form.stage_file("cover", png)
        assert form.values["cover"]["filename"] == "a.png"

    def test_clear_existing_file(self, form):
        form.clear_existing_file("cover")

        assert "cover" not in form.values
        assert form.files_to_remove == ["cover"]
        assert form.values["title"] == "x"

    def test_staging_after_clear_unmarks_removal(self, form, png):
        form.clear_existing_file("cover")
        form.stage_file("cover", png)
        assert form.files_to_remove == []


class TestPasswords:

    def test_mismatch_rejected_for_auth(self, form):
        form.password = "a"
        form.password_confirm = "b"
        with pytest.raises(LocalValidationError):
            form.validate_passwords(is_auth=True)

    def test_mismatch_ignored_for_base(self, form):
        form.password = "a"
        form.password_confirm = "b"
        form.validate_passwords(is_auth=False)

    def test_password_sent_only_when_set(self, form):
        assert PASSWORD_KEY not in form.outgoing_values(is_auth=True)
        form.password = form.password_confirm = "secret"
        assert form.outgoing_values(is_auth=True)[PASSWORD_KEY] == "secret"
        assert PASSWORD_KEY not in form.outgoing_values(is_auth=False)


class TestSerializeForSave:

    def test_json_without_uploads(self, form):
        form.clear_existing_file("cover")

        payload = form.serialize_for_save()

        assert payload.is_multipart is False
        assert payload.json == {"title": "x", "views": 1, "cover": None}

    def test_multipart_with_upload(self, form, png):
        form.set_value("meta", {"a": 1})
        form.set_value("published", True)
        form.set_value("author", None)
        form.stage_file("cover", png)
        form.password = form.password_confirm = "secret"

        payload = form.serialize_for_save(is_auth=True)

        assert payload.is_multipart is True
        assert payload.json is None
        assert payload.files == {"cover": ("b.png", b"\x89PNG", "image/png")}
        assert payload.data == {
            "title": "x",
            "views": "1",
            "meta": '{"a": 1}',
            "published": "true",
            PASSWORD_KEY: "secret",
        }
