"""Record validation before save.

Checks edited form values against the collection schema so obviously bad
values are rejected without a round trip. Required-ness and unknown keys are
left to the store, which owns the authoritative rules.
"""

from typing import Any

from motebase_admin.domain.entities.collection import FieldDefinition
from motebase_admin.domain.services.field_kinds import RecordValidationError, kind_for


class RecordValidator:
    """Validator for record form values against collection schemas."""

    @classmethod
    def validate_field_value(
        cls, value: Any, field: FieldDefinition
    ) -> RecordValidationError | None:
        """Validate a single field value against its type.

        Args:
            value: The value to validate.
            field: The field definition from the schema.

        Returns:
            RecordValidationError if invalid, None if valid or empty.
        """
        kind = kind_for(field.type)
        if kind.is_empty(value):
            return None
        return kind.validate(value, field)

    @classmethod
    def validate(
        cls, values: dict[str, Any], fields: list[FieldDefinition]
    ) -> list[RecordValidationError]:
        """Validate every schema field present in the form values.

        Args:
            values: Current form values keyed by field name.
            fields: Ordered schema fields.

        Returns:
            List of validation errors (empty if valid).
        """
        errors: list[RecordValidationError] = []
        for field in fields:
            if field.name not in values:
                continue
            error = cls.validate_field_value(values[field.name], field)
            if error:
                errors.append(error)
        return errors
