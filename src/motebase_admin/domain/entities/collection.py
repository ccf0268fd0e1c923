"""Collection entity and the schema model shared by the console.

Collections describe user-created record tables. The schema maps each field
name to its definition; the console reads it both as the canonical mapping
(for comparisons) and as an ordered field list (for forms and list columns).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from motebase_admin.core.exceptions import UnknownFieldTypeError


class FieldType(str, Enum):
    """Supported field types for collection schemas."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    EMAIL = "email"
    URL = "url"
    DATE = "date"
    JSON = "json"
    FILE = "file"
    RELATION = "relation"
    SELECT = "select"

    @classmethod
    def resolve(cls, raw: str | None) -> "FieldType":
        """Map a stored type string to a member, honouring legacy aliases.

        Raises:
            UnknownFieldTypeError: If the string is not a known type or alias.
        """
        if not raw:
            return cls.TEXT
        value = str(raw).lower()
        if value in TYPE_ALIASES:
            return TYPE_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            raise UnknownFieldTypeError(raw) from None


# Type names written by older schema versions
TYPE_ALIASES: dict[str, FieldType] = {
    "string": FieldType.TEXT,
    "bool": FieldType.BOOLEAN,
    "editor": FieldType.TEXT,
}

# Aliases that render as a multi-line editor instead of a single-line input
MULTILINE_ALIASES = frozenset({"editor"})

AUTH_COLLECTION = "auth"
BASE_COLLECTION = "base"

# Wire key -> attribute name for the five access rules
RULE_KEYS: dict[str, str] = {
    "listRule": "list_rule",
    "viewRule": "view_rule",
    "createRule": "create_rule",
    "updateRule": "update_rule",
    "deleteRule": "delete_rule",
}


@dataclass
class FieldDefinition:
    """A single field of a collection schema.

    Attributes:
        name: Field name, unique within its schema.
        type: Resolved field type.
        required: Whether the store requires a value.
        options: Type-specific parameters (relation target, select values...).
        multiline: Whether text input should use a multi-line editor.
    """

    name: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    options: dict[str, Any] = field(default_factory=dict)
    multiline: bool = False

    @classmethod
    def from_definition(cls, name: str, definition: Mapping[str, Any] | None) -> "FieldDefinition":
        """Build a field from a stored definition (mapping or list entry form)."""
        definition = dict(definition or {})
        raw_type = definition.get("type")
        options = dict(definition.get("options") or {})
        for key, value in definition.items():
            if key not in ("name", "type", "required", "options"):
                options[key] = value
        return cls(
            name=name,
            type=FieldType.resolve(raw_type),
            required=bool(definition.get("required", False)),
            options=options,
            multiline=str(raw_type or "").lower() in MULTILINE_ALIASES,
        )

    def to_definition(self) -> dict[str, Any]:
        """Serialize back into the mapping-form definition the store expects."""
        type_name = "editor" if self.multiline and self.type == FieldType.TEXT else self.type.value
        definition: dict[str, Any] = {"type": type_name, "required": self.required}
        definition.update(self.options)
        return definition

    @property
    def allowed_values(self) -> list[Any]:
        """Declared values of a select field (empty for other types)."""
        values = self.options.get("values") or []
        return list(values)


def derive_field_list(schema: Mapping[str, Any] | list[Any] | None) -> list[FieldDefinition]:
    """Return the schema as an ordered list of field definitions.

    Accepts the canonical mapping form or an already-ordered list (schemas
    stored by older versions). Mapping entries keep their insertion order.

    Args:
        schema: Schema mapping, list of field definitions, or None.

    Returns:
        Ordered list of FieldDefinition objects.
    """
    if not schema:
        return []

    if isinstance(schema, Mapping):
        return [
            FieldDefinition.from_definition(name, definition)
            for name, definition in schema.items()
        ]

    fields: list[FieldDefinition] = []
    for entry in schema:
        if isinstance(entry, FieldDefinition):
            fields.append(entry)
        else:
            fields.append(FieldDefinition.from_definition(entry.get("name", ""), entry))
    return fields


@dataclass
class Collection:
    """Collection entity representing a schema-typed group of records.

    Attributes:
        id: Opaque identifier assigned by the store (immutable).
        name: Human-chosen unique name, used in routes and API paths.
        type: "base" or "auth".
        schema: Canonical schema exactly as served by the store.
        list_rule..delete_rule: Access rule expressions (None when unset).
    """

    id: Any
    name: str
    type: str = BASE_COLLECTION
    schema: dict[str, Any] | list[Any] = field(default_factory=dict)
    list_rule: str | None = None
    view_rule: str | None = None
    create_rule: str | None = None
    update_rule: str | None = None
    delete_rule: str | None = None

    def __post_init__(self) -> None:
        """Validate collection data after initialization."""
        if self.schema is None:
            self.schema = {}
        if not isinstance(self.schema, (dict, list)):
            raise ValueError("Schema must be a mapping or a list of fields")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Collection":
        """Build a collection from its wire representation."""
        rules = {attr: data.get(key) for key, attr in RULE_KEYS.items()}
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            type=data.get("type") or BASE_COLLECTION,
            schema=data.get("schema") or {},
            **rules,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire representation."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "schema": self.schema,
        }
        data.update(self.rules)
        return data

    @property
    def rules(self) -> dict[str, str | None]:
        """The five access rules keyed by their wire names."""
        return {key: getattr(self, attr) for key, attr in RULE_KEYS.items()}

    @property
    def fields(self) -> list[FieldDefinition]:
        """Schema as an ordered list of field definitions."""
        return derive_field_list(self.schema)

    @property
    def is_auth(self) -> bool:
        """Whether records of this collection accept a write-only password."""
        return self.type == AUTH_COLLECTION

    def get_field(self, name: str) -> FieldDefinition | None:
        """Look up a field definition by name."""
        for definition in self.fields:
            if definition.name == name:
                return definition
        return None
