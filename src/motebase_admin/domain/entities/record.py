"""Record helpers and file value objects.

Records are plain mappings keyed by schema field names plus the system
fields maintained by the store. The console never computes system fields.
"""

import json
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Maintained by the store; never editable and never sent on update
SYSTEM_FIELDS = ("id", "created_at", "updated_at")


def strip_system_fields(record: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a record without its system fields."""
    return {key: value for key, value in record.items() if key not in SYSTEM_FIELDS}


@dataclass
class FileValue:
    """Metadata of a file already attached to a record."""

    filename: str
    mime_type: str
    size: int | None = None

    @classmethod
    def from_value(cls, value: Any) -> "FileValue | None":
        """Parse a stored file value (object or JSON text).

        Returns:
            FileValue, or None when the value is empty or unreadable.
        """
        if not value:
            return None
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return None
        if not isinstance(value, dict) or not value.get("filename"):
            return None
        return cls(
            filename=str(value["filename"]),
            mime_type=str(value.get("mime_type") or "application/octet-stream"),
            size=value.get("size"),
        )

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


@dataclass
class StagedFile:
    """A locally chosen file waiting to be uploaded on save."""

    filename: str
    content: bytes
    mime_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "StagedFile":
        """Read a file from disk, guessing its MIME type from the name."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def as_upload(self) -> tuple[str, bytes, str]:
        """Tuple form accepted by httpx for a multipart file part."""
        return (self.filename, self.content, self.mime_type)
