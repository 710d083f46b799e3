"""Error taxonomy for API misuse.

These exceptions report programming errors (bad paths, bad dispatch names).
They are never recorded in a notification's own ``errors`` collection.
"""

from __future__ import annotations

__all__ = [
    "NotificationError",
    "KeyNotFoundError",
    "TypeConflictError",
    "InvalidPathError",
    "InvalidTargetError",
    "UnknownOperationError",
]


class NotificationError(Exception):
    """Base exception for result-notification errors."""

    pass


class KeyNotFoundError(NotificationError, KeyError):
    """Raised when ``get`` is called on an absent path without null fallback."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Key {path!r} not found.")
        self.path = path

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class TypeConflictError(NotificationError, TypeError):
    """Raised when traversing through, or appending to, a non-structure."""

    pass


class InvalidPathError(NotificationError, ValueError):
    """Raised when a write is given an empty or malformed path."""

    pass


class InvalidTargetError(NotificationError, AttributeError):
    """Raised when dispatch names a target other than results or errors."""

    pass


class UnknownOperationError(NotificationError, AttributeError):
    """Raised when dispatch names an action the collection does not support."""

    pass
