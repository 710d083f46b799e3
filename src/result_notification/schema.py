"""Pydantic model of the serialized notification tree.

The canonical external representation of a Notification is a mapping with
three keys: ``valid``, ``results`` and ``errors``. Every transport (HTTP
body, message payload, CLI output) goes through this shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["NotificationTree"]


class NotificationTree(BaseModel):
    """Wire form of a Notification.

    Attributes:
        valid: Validity at serialization time. Informational only: readers
            always rederive validity from ``errors``, and a non-boolean value
            on input is discarded rather than rejected.
        results: Nested results tree. ``null`` is read as empty.
        errors: Nested errors tree. ``null`` is read as empty.
    """

    model_config = ConfigDict(extra="ignore")

    valid: bool | None = None
    results: dict[Any, Any] = Field(default_factory=dict)
    errors: dict[Any, Any] = Field(default_factory=dict)

    @field_validator("valid", mode="before")
    @classmethod
    def discard_malformed_valid(cls, value: Any) -> bool | None:
        return value if isinstance(value, bool) else None

    @field_validator("results", "errors", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value
