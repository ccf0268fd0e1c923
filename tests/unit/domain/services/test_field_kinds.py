"""Unit tests for per-type field behaviour."""

import pytest

from motebase_admin.core.exceptions import FieldValueError, UnknownFieldTypeError
from motebase_admin.domain.entities.collection import FieldDefinition, FieldType
from motebase_admin.domain.services.field_kinds import (
    EMPTY_DISPLAY,
    FIELD_KINDS,
    Widget,
    display_value,
    kind_for,
)


def make_field(field_type: FieldType, **options) -> FieldDefinition:
    return FieldDefinition(name="f", type=field_type, options=options)


class TestKindTable:

    def test_every_type_has_a_kind(self):
        assert set(FIELD_KINDS) == set(FieldType)

    def test_kind_for_unknown_string_raises(self):
        with pytest.raises(UnknownFieldTypeError):
            kind_for("geopoint")

    def test_kind_for_accepts_alias(self):
        assert kind_for("bool") is FIELD_KINDS[FieldType.BOOLEAN]


class TestWidgets:

    def test_single_line_text_types(self):
        for field_type in (FieldType.TEXT, FieldType.EMAIL, FieldType.URL):
            assert kind_for(field_type).widget_for(make_field(field_type)) == Widget.INPUT

    def test_multiline_text_and_json(self):
        editor = FieldDefinition(name="body", type=FieldType.TEXT, multiline=True)
        assert kind_for(FieldType.TEXT).widget_for(editor) == Widget.TEXTAREA
        assert kind_for(FieldType.JSON).widget_for(make_field(FieldType.JSON)) == Widget.TEXTAREA


class TestDisplay:

    def test_boolean_yes_no(self):
        field = make_field(FieldType.BOOLEAN)
        assert display_value(True, field) == "Yes"
        assert display_value(False, field) == "No"

    def test_null_renders_placeholder(self):
        assert display_value(None, make_field(FieldType.TEXT)) == EMPTY_DISPLAY

    def test_long_text_is_truncated(self):
        assert display_value("x" * 80, make_field(FieldType.TEXT)) == "x" * 50 + "..."

    def test_json_is_compact(self):
        assert display_value({"a": [1, 2]}, make_field(FieldType.JSON)) == '{"a":[1,2]}'

    def test_file_shows_filename(self):
        value = {"filename": "a.png", "mime_type": "image/png"}
        assert display_value(value, make_field(FieldType.FILE)) == "a.png"


class TestParseInput:

    def test_number(self):
        kind = kind_for(FieldType.NUMBER)
        field = make_field(FieldType.NUMBER)
        assert kind.parse_input("42", field) == 42
        assert kind.parse_input("1.5", field) == 1.5
        assert kind.parse_input("", field) is None
        with pytest.raises(FieldValueError):
            kind.parse_input("abc", field)

    def test_boolean(self):
        kind = kind_for(FieldType.BOOLEAN)
        field = make_field(FieldType.BOOLEAN)
        assert kind.parse_input("yes", field) is True
        assert kind.parse_input("off", field) is False
        with pytest.raises(FieldValueError):
            kind.parse_input("maybe", field)

    def test_json(self):
        kind = kind_for(FieldType.JSON)
        field = make_field(FieldType.JSON)
        assert kind.parse_input('{"a": 1}', field) == {"a": 1}
        with pytest.raises(FieldValueError) as exc_info:
            kind.parse_input("{bad", field)
        assert "Invalid JSON" in exc_info.value.message

    def test_file_rejects_text(self):
        with pytest.raises(FieldValueError):
            kind_for(FieldType.FILE).parse_input("a.png", make_field(FieldType.FILE))


class TestValidate:

    def test_email(self):
        kind = kind_for(FieldType.EMAIL)
        field = make_field(FieldType.EMAIL)
        assert kind.validate("a@example.com", field) is None
        assert kind.validate("nope", field).code == "invalid_email_format"

    def test_url(self):
        kind = kind_for(FieldType.URL)
        field = make_field(FieldType.URL)
        assert kind.validate("https://example.com", field) is None
        assert kind.validate("example.com", field).code == "invalid_url_format"

    def test_number_rejects_bool(self):
        error = kind_for(FieldType.NUMBER).validate(True, make_field(FieldType.NUMBER))
        assert error.code == "invalid_type"

    def test_date(self):
        kind = kind_for(FieldType.DATE)
        field = make_field(FieldType.DATE)
        assert kind.validate("2024-01-01T12:00:00Z", field) is None
        assert kind.validate("yesterday", field).code == "invalid_date_format"

    def test_select_restricts_to_declared_values(self):
        kind = kind_for(FieldType.SELECT)
        field = make_field(FieldType.SELECT, values=["draft", "live"])
        assert kind.validate("draft", field) is None
        assert kind.validate("archived", field).code == "invalid_choice"

    def test_select_without_values_accepts_anything(self):
        assert kind_for(FieldType.SELECT).validate("x", make_field(FieldType.SELECT)) is None

    def test_relation(self):
        kind = kind_for(FieldType.RELATION)
        field = make_field(FieldType.RELATION)
        assert kind.validate("abc", field) is None
        assert kind.validate(5, field) is None
        assert kind.validate(True, field).code == "invalid_type"

    def test_blank_relation_and_select_are_empty(self):
        assert kind_for(FieldType.RELATION).is_empty("  ") is True
        assert kind_for(FieldType.SELECT).is_empty("") is True
        assert kind_for(FieldType.TEXT).is_empty("") is False
        assert kind_for(FieldType.NUMBER).is_empty(None) is True
