from __future__ import annotations

"""Exception classes for the editing core.

Most of these are recovered locally by the services (no-op results, clamping,
implicit cancel) and never reach the user. They exist so that the lower
layers can report the condition explicitly.
"""

from typing import Optional

__all__ = [
    "ScribeError",
    "NoSelectionError",
    "InvalidFieldValue",
    "FragmentParseError",
    "StorageError",
]


class ScribeError(Exception):
    """Base exception for all editor errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class NoSelectionError(ScribeError):
    """Raised when the host has no active selection to act on."""

    def __init__(self, message: str = "No active selection") -> None:
        super().__init__(message)


class InvalidFieldValue(ScribeError):
    """Raised when structured input for a fragment is missing or out of range."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for '{field}': {value!r} ({reason})")


class FragmentParseError(ScribeError):
    """Raised when markup cannot be turned into nodes."""


class StorageError(ScribeError):
    """Raised when the key-value store cannot be read or written."""

    def __init__(self, message: str, key: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, cause)
        self.key = key

    def __str__(self) -> str:
        if self.key:
            return f"[Key: {self.key}] {super().__str__()}"
        return super().__str__()
