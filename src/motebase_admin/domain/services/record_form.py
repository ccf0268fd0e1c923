"""Schema-driven record editing state.

A RecordForm holds everything the record editor changes: field values, a
baseline snapshot for dirty detection, staged file uploads, files marked for
removal, and the transient password fields of auth collections. It turns
that state into a write payload without knowing anything about a specific
collection beyond its field list.
"""

import copy
import json
from dataclasses import dataclass
from typing import Any

from motebase_admin.core.exceptions import FieldValueError, LocalValidationError
from motebase_admin.domain.entities.collection import FieldDefinition, FieldType
from motebase_admin.domain.entities.record import (
    SYSTEM_FIELDS,
    FileValue,
    StagedFile,
    strip_system_fields,
)
from motebase_admin.domain.services.field_kinds import kind_for
from motebase_admin.domain.services.record_validator import RecordValidator

# Reserved payload key for the write-only password of auth records
PASSWORD_KEY = "password"


@dataclass
class WritePayload:
    """Body of a record create/update request.

    Exactly one transport is used: `json` for plain bodies, or `data` plus
    `files` for multipart bodies carrying file content.
    """

    json: dict[str, Any] | None = None
    data: dict[str, str] | None = None
    files: dict[str, tuple[str, bytes, str]] | None = None

    @property
    def is_multipart(self) -> bool:
        return self.files is not None


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


class RecordForm:
    """Editable state of one record."""

    def __init__(self, fields: list[FieldDefinition] | None = None) -> None:
        self.fields: list[FieldDefinition] = list(fields or [])
        self.values: dict[str, Any] = {}
        self.baseline: dict[str, Any] = {}
        self.uploads: dict[str, StagedFile] = {}
        self.files_to_remove: list[str] = []
        self.password = ""
        self.password_confirm = ""

    def _reset_transient(self) -> None:
        self.uploads = {}
        self.files_to_remove = []
        self.password = ""
        self.password_confirm = ""

    def load_new(self, fields: list[FieldDefinition] | None = None) -> None:
        """Start an empty form for a record that does not exist yet."""
        if fields is not None:
            self.fields = list(fields)
        self.values = {}
        self.baseline = {}
        self._reset_transient()

    def load_existing(self, record: dict[str, Any], fields: list[FieldDefinition] | None = None) -> None:
        """Load a fetched record for editing.

        System fields are stripped and a deep copy of the remaining values
        becomes the dirty-check baseline.
        """
        if fields is not None:
            self.fields = list(fields)
        self.values = strip_system_fields(record)
        self.baseline = copy.deepcopy(self.values)
        self._reset_transient()

    def get_field(self, name: str) -> FieldDefinition | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def set_value(self, name: str, value: Any) -> None:
        self.values[name] = value

    def set_input(self, name: str, text: str) -> Any:
        """Parse operator-typed text for a field and store the result.

        Raises:
            FieldValueError: If the field is unknown or the text cannot be parsed.
        """
        field = self.get_field(name)
        if field is None:
            raise FieldValueError(name, "not a field of this collection")
        value = kind_for(field.type).parse_input(text, field)
        self.values[name] = value
        return value

    # Files

    def stage_file(self, name: str, staged: StagedFile) -> None:
        """Hold a chosen file until save; the record value is left as is."""
        self.uploads[name] = staged
        if name in self.files_to_remove:
            self.files_to_remove.remove(name)

    def clear_staged_file(self, name: str) -> None:
        self.uploads.pop(name, None)

    def clear_existing_file(self, name: str) -> None:
        """Mark an attached file for removal and drop it from the values."""
        if name not in self.files_to_remove:
            self.files_to_remove.append(name)
        self.values.pop(name, None)

    def existing_file(self, name: str) -> FileValue | None:
        return FileValue.from_value(self.values.get(name))

    # Passwords

    @property
    def passwords_match(self) -> bool:
        if not self.password and not self.password_confirm:
            return True
        return self.password == self.password_confirm

    def validate_passwords(self, is_auth: bool) -> None:
        """Reject a non-empty password that differs from its confirmation."""
        if is_auth and self.password and not self.passwords_match:
            raise LocalValidationError("Passwords do not match")

    def validate_values(self) -> None:
        """Check field values against their kinds before save."""
        errors = RecordValidator.validate(self.values, self.fields)
        if errors:
            message = "; ".join(f"{e.field}: {e.message}" for e in errors)
            raise LocalValidationError(message, errors)

    # Dirty state

    def is_dirty(self) -> bool:
        """True when staged files, password text, or edited values exist."""
        if self.uploads:
            return True
        if self.password or self.password_confirm:
            return True
        return _canonical(self.values) != _canonical(self.baseline)

    # Serialization

    def outgoing_values(self, is_auth: bool) -> dict[str, Any]:
        """Field values to write, including removals and the password."""
        data = {key: value for key, value in self.values.items() if key not in SYSTEM_FIELDS}
        for name in self.files_to_remove:
            if name not in self.uploads:
                data[name] = None
        if is_auth and self.password:
            data[PASSWORD_KEY] = self.password
        return data

    def _form_text(self, name: str, value: Any) -> str:
        field = self.get_field(name)
        field_type = field.type if field is not None else FieldType.TEXT
        return kind_for(field_type).to_form_text(value)

    def serialize_for_save(self, is_auth: bool = False) -> WritePayload:
        """Build the write payload for the current state.

        Any staged upload forces a multipart body: one file part per upload
        plus one text part per non-null value. Otherwise the values go out as
        a JSON body.
        """
        data = self.outgoing_values(is_auth)

        if not self.uploads:
            return WritePayload(json=data)

        parts: dict[str, str] = {}
        for name, value in data.items():
            if name in self.uploads:
                continue
            if value is None:
                if name in self.files_to_remove:
                    parts[name] = ""
                continue
            parts[name] = self._form_text(name, value)

        files = {name: staged.as_upload() for name, staged in self.uploads.items()}
        return WritePayload(data=parts, files=files)

    def mark_saved(self) -> None:
        """Adopt the current values as the new baseline after a successful save."""
        self.baseline = copy.deepcopy(self.values)
        self._reset_transient()
