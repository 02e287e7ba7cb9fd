from __future__ import annotations


class ZnunyError(Exception):
    """Base class for every error raised by this library."""


class ValidationError(ZnunyError):
    """Request data failed a presence check. Raised before any I/O."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class FileReadError(ZnunyError):
    """An attachment could not be read from disk."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(message)


def require_text(field: str, value: str | None) -> str:
    """Return `value` unchanged, or raise ValidationError when it is blank."""
    if value is None or not value.strip():
        raise ValidationError(field, f"Need a {field}. {field.capitalize()} is empty")
    return value
