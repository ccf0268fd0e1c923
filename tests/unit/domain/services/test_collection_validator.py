from motebase_admin.domain.entities.collection import FieldDefinition, FieldType
from motebase_admin.domain.services.collection_validator import (
    RESERVED_FIELD_NAMES,
    CollectionValidator,
)


class TestCollectionValidator:

    # --- Name Validation ---

    def test_validate_name_valid(self):
        assert CollectionValidator.validate_name("posts") == []

    def test_validate_name_empty(self):
        errors = CollectionValidator.validate_name("")
        assert len(errors) == 1
        assert errors[0].code == "name_required"
        assert errors[0].message == "Collection name is required"

    def test_validate_name_whitespace(self):
        errors = CollectionValidator.validate_name("   ")
        assert errors[0].code == "name_required"

    # --- Field Name Validation ---

    def test_validate_field_name_valid(self):
        assert CollectionValidator.validate_field_name("title", 0) == []

    def test_validate_field_name_empty(self):
        errors = CollectionValidator.validate_field_name("", 0)
        assert len(errors) == 1
        assert errors[0].code == "field_name_required"
        assert errors[0].message == "All fields must have a name"

    def test_validate_field_name_reserved(self):
        for name in RESERVED_FIELD_NAMES:
            errors = CollectionValidator.validate_field_name(name, 0)
            assert len(errors) == 1
            assert errors[0].code == "field_name_reserved"

    # --- Field Type Validation ---

    def test_validate_field_type_valid(self):
        for type_enum in FieldType:
            assert CollectionValidator.validate_field_type(type_enum.value, 0) == []

    def test_validate_field_type_invalid(self):
        errors = CollectionValidator.validate_field_type("unknown_type", 0)
        assert len(errors) == 1
        assert errors[0].code == "field_type_invalid"

    # --- Whole Definition ---

    def test_validate_duplicate_field_names(self):
        fields = [FieldDefinition(name="title"), FieldDefinition(name="title")]
        errors = CollectionValidator.validate_fields(fields)
        assert [e.code for e in errors] == ["field_name_duplicate"]

    def test_validate_reports_name_first(self):
        errors = CollectionValidator.validate("", [FieldDefinition(name="")])
        assert errors[0].code == "name_required"
        assert errors[1].code == "field_name_required"
