"""Per-type behaviour of record form fields.

Every FieldType has exactly one FieldKind describing how the editor renders
it, how values are displayed in list views, how operator text is parsed,
how values are written into multipart payloads, and how values are checked
before save. The table is closed: a type without a kind is an import-time
error and an unknown type string raises instead of falling back to text.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from motebase_admin.core.exceptions import FieldValueError
from motebase_admin.domain.entities.collection import FieldDefinition, FieldType
from motebase_admin.domain.entities.record import FileValue

# Email validation pattern (simplified but effective)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# URL validation pattern (simplified)
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

# List cells longer than this are truncated
DISPLAY_MAX_LENGTH = 50
EMPTY_DISPLAY = "—"

TRUE_TOKENS = frozenset({"true", "yes", "1", "on"})
FALSE_TOKENS = frozenset({"false", "no", "0", "off"})


class Widget(str, Enum):
    """Editor control used for a field."""

    INPUT = "input"
    TEXTAREA = "textarea"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DATE = "date"
    FILE = "file"
    RELATION = "relation"
    SELECT = "select"


@dataclass
class RecordValidationError:
    """A single record validation error."""

    field: str
    message: str
    code: str


def _truncate(text: str) -> str:
    if len(text) > DISPLAY_MAX_LENGTH:
        return text[:DISPLAY_MAX_LENGTH] + "..."
    return text


class FieldKind:
    """Behaviour shared by all field kinds; subclasses override per type."""

    type: ClassVar[FieldType]
    widget: ClassVar[Widget] = Widget.INPUT

    def widget_for(self, field: FieldDefinition) -> Widget:
        return self.widget

    def display(self, value: Any) -> str:
        """Render a value for a list cell."""
        if value is None:
            return EMPTY_DISPLAY
        if isinstance(value, str):
            return _truncate(value)
        return str(value)

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        """Convert operator-typed text into a stored value."""
        return text

    def to_form_text(self, value: Any) -> str:
        """Encode a non-null value as a multipart text part."""
        if isinstance(value, str):
            return value
        return json.dumps(value)

    def is_empty(self, value: Any) -> bool:
        """Whether a stored value counts as unset."""
        return value is None

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        """Check a non-empty value before save."""
        return None

    def _type_error(self, field: FieldDefinition, expected: str, value: Any) -> RecordValidationError:
        return RecordValidationError(
            field=field.name,
            message=f"Expected {expected} value, got {type(value).__name__}",
            code="invalid_type",
        )


class TextKind(FieldKind):
    type = FieldType.TEXT

    def widget_for(self, field: FieldDefinition) -> Widget:
        return Widget.TEXTAREA if field.multiline else Widget.INPUT

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if not isinstance(value, str):
            return self._type_error(field, "text", value)
        return None


class EmailKind(TextKind):
    type = FieldType.EMAIL

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if not isinstance(value, str):
            return self._type_error(field, "email", value)
        if value and not EMAIL_PATTERN.match(value):
            return RecordValidationError(
                field=field.name,
                message="Invalid email format",
                code="invalid_email_format",
            )
        return None


class UrlKind(TextKind):
    type = FieldType.URL

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if not isinstance(value, str):
            return self._type_error(field, "URL", value)
        if value and not URL_PATTERN.match(value):
            return RecordValidationError(
                field=field.name,
                message="Invalid URL format. Must start with http:// or https://",
                code="invalid_url_format",
            )
        return None


class NumberKind(FieldKind):
    type = FieldType.NUMBER
    widget = Widget.NUMBER

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        text = text.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            raise FieldValueError(field.name, f"'{text}' is not a number") from None

    def to_form_text(self, value: Any) -> str:
        return str(value)

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return self._type_error(field, "number", value)
        return None


class BooleanKind(FieldKind):
    type = FieldType.BOOLEAN
    widget = Widget.CHECKBOX

    def display(self, value: Any) -> str:
        if value is None:
            return EMPTY_DISPLAY
        return "Yes" if value else "No"

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        token = text.strip().lower()
        if token in TRUE_TOKENS:
            return True
        if token in FALSE_TOKENS or not token:
            return False
        raise FieldValueError(field.name, f"'{text}' is not a boolean")

    def to_form_text(self, value: Any) -> str:
        return "true" if value else "false"

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if not isinstance(value, bool):
            return self._type_error(field, "boolean", value)
        return None


class DateKind(FieldKind):
    type = FieldType.DATE
    widget = Widget.DATE

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        text = text.strip()
        return text or None

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if isinstance(value, datetime):
            return None
        if not isinstance(value, str):
            return self._type_error(field, "date", value)
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return RecordValidationError(
                field=field.name,
                message="Invalid date format. Use ISO 8601 format (e.g., 2024-01-01T12:00:00Z)",
                code="invalid_date_format",
            )
        return None


class JsonKind(FieldKind):
    type = FieldType.JSON
    widget = Widget.TEXTAREA

    def display(self, value: Any) -> str:
        if value is None:
            return EMPTY_DISPLAY
        return _truncate(json.dumps(value, separators=(",", ":")))

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FieldValueError(field.name, f"Invalid JSON: {e.msg}") from e

    def to_form_text(self, value: Any) -> str:
        return json.dumps(value)

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            return RecordValidationError(
                field=field.name,
                message="Value must be JSON-serializable (dict, list, string, number, boolean, or null)",
                code="invalid_json",
            )
        return None


class FileKind(FieldKind):
    type = FieldType.FILE
    widget = Widget.FILE

    def display(self, value: Any) -> str:
        file_value = FileValue.from_value(value)
        if file_value is None:
            return EMPTY_DISPLAY
        return _truncate(file_value.filename)

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        raise FieldValueError(field.name, "file fields take a staged upload, not text")

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if FileValue.from_value(value) is None:
            return RecordValidationError(
                field=field.name,
                message="File metadata must carry at least a filename",
                code="invalid_file_metadata",
            )
        return None


class RelationKind(FieldKind):
    type = FieldType.RELATION
    widget = Widget.RELATION

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        text = text.strip()
        return text or None

    def to_form_text(self, value: Any) -> str:
        return str(value)

    def is_empty(self, value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            return self._type_error(field, "related record id", value)
        return None


class SelectKind(FieldKind):
    type = FieldType.SELECT
    widget = Widget.SELECT

    def parse_input(self, text: str, field: FieldDefinition) -> Any:
        return text or None

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    def validate(self, value: Any, field: FieldDefinition) -> RecordValidationError | None:
        allowed = field.allowed_values
        if allowed and value not in allowed:
            return RecordValidationError(
                field=field.name,
                message=f"Value '{value}' is not one of: {', '.join(str(v) for v in allowed)}",
                code="invalid_choice",
            )
        return None


FIELD_KINDS: dict[FieldType, FieldKind] = {
    kind.type: kind
    for kind in (
        TextKind(),
        NumberKind(),
        BooleanKind(),
        EmailKind(),
        UrlKind(),
        DateKind(),
        JsonKind(),
        FileKind(),
        RelationKind(),
        SelectKind(),
    )
}

_missing_kinds = set(FieldType) - set(FIELD_KINDS)
if _missing_kinds:
    raise RuntimeError(f"No field kind for: {sorted(t.value for t in _missing_kinds)}")


def kind_for(field_type: FieldType | str) -> FieldKind:
    """Return the kind handling a field type.

    Raises:
        UnknownFieldTypeError: If a type string is outside the supported set.
    """
    if not isinstance(field_type, FieldType):
        field_type = FieldType.resolve(field_type)
    return FIELD_KINDS[field_type]


def display_value(value: Any, field: FieldDefinition) -> str:
    """Render a record value for a list cell."""
    return kind_for(field.type).display(value)
