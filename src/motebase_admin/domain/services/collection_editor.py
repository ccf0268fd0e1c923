"""Collection editor form.

Holds the editable definition of a new or existing collection and builds
the request body for the store, rejecting incomplete definitions locally.
"""

from dataclasses import dataclass, field
from typing import Any

from motebase_admin.core.exceptions import LocalValidationError
from motebase_admin.domain.entities.collection import (
    BASE_COLLECTION,
    RULE_KEYS,
    Collection,
    FieldDefinition,
    FieldType,
)
from motebase_admin.domain.services.collection_validator import CollectionValidator


@dataclass
class CollectionEditor:
    """Editable collection definition.

    Attributes:
        editing: The live collection being edited, or None when creating.
        name: Collection name as typed.
        type: "base" or "auth".
        fields: Field definitions in display order.
        rules: Rule expressions keyed by wire name ("" when unset).
        error: Inline message shown inside the editor.
    """

    editing: Collection | None = None
    name: str = ""
    type: str = BASE_COLLECTION
    fields: list[FieldDefinition] = field(default_factory=list)
    rules: dict[str, str] = field(default_factory=lambda: {key: "" for key in RULE_KEYS})
    error: str = ""
    is_open: bool = False

    @classmethod
    def open(cls, collection: Collection | None = None) -> "CollectionEditor":
        """Start editing a collection, or a blank one when None."""
        if collection is None:
            return cls(is_open=True)
        return cls(
            editing=collection,
            name=collection.name,
            type=collection.type or BASE_COLLECTION,
            fields=[
                FieldDefinition(
                    name=f.name,
                    type=f.type,
                    required=f.required,
                    options=dict(f.options),
                    multiline=f.multiline,
                )
                for f in collection.fields
            ],
            rules={key: value or "" for key, value in collection.rules.items()},
            is_open=True,
        )

    @property
    def is_new(self) -> bool:
        return self.editing is None

    def add_field(self, field_type: FieldType | str) -> FieldDefinition:
        """Append a field named after its position.

        Raises:
            LocalValidationError: If a type string is not a supported field type.
        """
        if not isinstance(field_type, FieldType):
            errors = CollectionValidator.validate_field_type(field_type, len(self.fields))
            if errors:
                raise LocalValidationError(errors[0].message, errors)
            field_type = FieldType.resolve(field_type)
        definition = FieldDefinition(name=f"field_{len(self.fields) + 1}", type=field_type)
        self.fields.append(definition)
        return definition

    def remove_field(self, index: int) -> None:
        del self.fields[index]

    def build_request_body(self) -> dict[str, Any]:
        """Request body for creating or updating the collection.

        Raises:
            LocalValidationError: If the name or any field name is missing,
                or field names repeat.
        """
        name = self.name.strip()
        errors = CollectionValidator.validate(name, self.fields)
        if errors:
            raise LocalValidationError(errors[0].message, errors)

        schema: dict[str, Any] = {}
        for definition in self.fields:
            schema[definition.name.strip()] = definition.to_definition()

        body: dict[str, Any] = {"name": name, "type": self.type, "schema": schema}
        for key, value in self.rules.items():
            if value != "":
                body[key] = value
        return body
