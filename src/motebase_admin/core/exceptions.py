"""Exceptions raised by the admin console."""

from typing import Any


class ConsoleError(Exception):
    """Base class for all console errors."""
    pass


class ApiError(ConsoleError):
    """Raised when the HTTP API answers with a non-2xx status or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class LocalValidationError(ConsoleError):
    """Raised when input is rejected before any request is sent."""

    def __init__(self, message: str, errors: list[Any] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class ImportFormatError(LocalValidationError):
    """Raised when an import document is not a JSON array of collections."""
    pass


class FieldValueError(LocalValidationError):
    """Raised when operator input cannot be converted for its field type."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class ImportConflictError(ConsoleError):
    """Raised when applying an import while name conflicts remain."""
    pass


class ConsoleBusyError(ConsoleError):
    """Raised when a mutating operation starts while another is still running."""
    pass


class UnknownFieldTypeError(ConsoleError, ValueError):
    """Raised when a schema declares a field type outside the supported set."""

    def __init__(self, field_type: str):
        self.field_type = field_type
        super().__init__(f"Unknown field type '{field_type}'")
