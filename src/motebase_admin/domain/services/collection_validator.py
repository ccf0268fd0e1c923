"""Collection validation for the collection editor.

Provides the local checks run before a collection definition is sent to the
store: a name is present, every field has a unique non-reserved name, and
every field type belongs to the supported set.
"""

from dataclasses import dataclass

from motebase_admin.core.exceptions import UnknownFieldTypeError
from motebase_admin.domain.entities.collection import FieldDefinition, FieldType
from motebase_admin.domain.entities.record import SYSTEM_FIELDS

# Field names maintained by the store on every record
RESERVED_FIELD_NAMES = frozenset(SYSTEM_FIELDS)


@dataclass
class CollectionValidationError:
    """A single collection validation error."""

    field: str
    message: str
    code: str


class CollectionValidator:
    """Validator for collection definitions built in the editor."""

    @classmethod
    def validate_name(cls, name: str) -> list[CollectionValidationError]:
        """Validate a collection name.

        Args:
            name: The collection name to validate.

        Returns:
            List of validation errors (empty if valid).
        """
        if not name or not name.strip():
            return [
                CollectionValidationError(
                    field="name",
                    message="Collection name is required",
                    code="name_required",
                )
            ]
        return []

    @classmethod
    def validate_field_name(cls, name: str, field_index: int) -> list[CollectionValidationError]:
        """Validate a field name.

        Args:
            name: The field name to validate.
            field_index: Index of the field in the schema (for error messages).

        Returns:
            List of validation errors (empty if valid).
        """
        field_path = f"fields[{field_index}].name"

        if not name or not name.strip():
            return [
                CollectionValidationError(
                    field=field_path,
                    message="All fields must have a name",
                    code="field_name_required",
                )
            ]

        if name.strip().lower() in RESERVED_FIELD_NAMES:
            return [
                CollectionValidationError(
                    field=field_path,
                    message=f"Field name '{name}' is reserved and cannot be used",
                    code="field_name_reserved",
                )
            ]

        return []

    @classmethod
    def validate_field_type(cls, field_type: str, field_index: int) -> list[CollectionValidationError]:
        """Validate a field type string.

        Args:
            field_type: The field type to validate.
            field_index: Index of the field in the schema (for error messages).

        Returns:
            List of validation errors (empty if valid).
        """
        try:
            FieldType.resolve(field_type)
        except UnknownFieldTypeError:
            valid_types = [t.value for t in FieldType]
            return [
                CollectionValidationError(
                    field=f"fields[{field_index}].type",
                    message=f"Invalid field type '{field_type}'. Valid types: {', '.join(valid_types)}",
                    code="field_type_invalid",
                )
            ]
        return []

    @classmethod
    def validate_fields(cls, fields: list[FieldDefinition]) -> list[CollectionValidationError]:
        """Validate the editor's field list.

        Args:
            fields: Field definitions in editor order.

        Returns:
            List of validation errors (empty if valid).
        """
        errors: list[CollectionValidationError] = []
        seen_names: set[str] = set()

        for i, field in enumerate(fields):
            errors.extend(cls.validate_field_name(field.name, i))

            name = (field.name or "").strip()
            if name and name in seen_names:
                errors.append(
                    CollectionValidationError(
                        field=f"fields[{i}].name",
                        message=f"Duplicate field name '{name}'",
                        code="field_name_duplicate",
                    )
                )
            seen_names.add(name)

        return errors

    @classmethod
    def validate(cls, name: str, fields: list[FieldDefinition]) -> list[CollectionValidationError]:
        """Validate a complete collection definition.

        Args:
            name: The collection name.
            fields: The collection fields.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []
        errors.extend(cls.validate_name(name))
        errors.extend(cls.validate_fields(fields))
        return errors
