from motebase_admin.domain.services.record_validator import RecordValidator


class TestRecordValidator:

    def test_valid_values(self, posts_collection):
        values = {"title": "Hello", "views": 3, "published": True, "status": "draft"}
        assert RecordValidator.validate(values, posts_collection.fields) == []

    def test_null_values_are_not_checked(self, posts_collection):
        values = {"title": None, "views": None, "cover": None}
        assert RecordValidator.validate(values, posts_collection.fields) == []

    def test_absent_fields_are_skipped(self, posts_collection):
        assert RecordValidator.validate({}, posts_collection.fields) == []

    def test_collects_errors_in_schema_order(self, posts_collection):
        values = {"status": "archived", "views": "many"}
        errors = RecordValidator.validate(values, posts_collection.fields)

        assert [e.field for e in errors] == ["views", "status"]
        assert [e.code for e in errors] == ["invalid_type", "invalid_choice"]

    def test_validate_field_value(self, posts_collection):
        field = posts_collection.get_field("published")
        assert RecordValidator.validate_field_value(True, field) is None
        assert RecordValidator.validate_field_value("yes", field).code == "invalid_type"

    def test_blank_relation_and_select_are_not_checked(self, posts_collection):
        values = {"title": "Hello", "author": "", "status": ""}
        assert RecordValidator.validate(values, posts_collection.fields) == []
