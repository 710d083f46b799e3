"""Observer pattern implementation for notification events.

Provides event types, observer protocol, and mixin for adding observer
support to notification classes.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "NotificationEventType",
    "NotificationEvent",
    "NotificationObserver",
    "ObservableMixin",
]


class NotificationEventType(Enum):
    """Types of notification events that can be observed."""

    RESULT_CHANGED = auto()
    """Emitted after a mutating action on the results collection."""

    ERROR_CHANGED = auto()
    """Emitted after a mutating action on the errors collection."""

    MERGED = auto()
    """Emitted after another notification is merged into this one."""

    INVALIDATED = auto()
    """Emitted when the notification goes from valid to invalid."""

    REVALIDATED = auto()
    """Emitted when the last error is removed and the notification is valid again."""


@dataclass
class NotificationEvent:
    """A notification event that can be observed.

    Attributes:
        event_type: The type of event that occurred.
        source: The notification that emitted the event.
        data: Event-specific data dictionary.

    Example:
        event = NotificationEvent(
            event_type=NotificationEventType.ERROR_CHANGED,
            source=notification,
            data={"action": "add", "args": ("pet.thylacine", "unknown")},
        )
    """

    event_type: NotificationEventType
    source: object
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class NotificationObserver(Protocol):
    """Anything with an ``on_event`` method can watch a notification.

    Observers are called synchronously, in registration order, after the
    mutation they describe has completed.
    """

    def on_event(self, event: NotificationEvent) -> None:
        """Handle a notification event."""
        ...


class ObservableMixin:
    """Observer registry and event emission for result/error aggregates.

    Subclasses must call ``super().__init__()`` so the registry exists before
    the first mutation. Events are built with the emitting object as
    ``source``; ``emit_validity_change`` turns a before/after validity pair
    into INVALIDATED or REVALIDATED.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._observers: list[NotificationObserver] = []

    @property
    def observers(self) -> list[NotificationObserver]:
        """Registered observers, as a copy."""
        return list(self._observers)

    def add_observer(self, observer: NotificationObserver) -> None:
        """Register ``observer``. Registering the same observer twice is a no-op."""
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: NotificationObserver) -> None:
        """Unregister ``observer`` if it is registered."""
        with suppress(ValueError):
            self._observers.remove(observer)

    def clear_observers(self) -> None:
        self._observers.clear()

    def emit(self, event_type: NotificationEventType, **data: Any) -> NotificationEvent:
        """Deliver an event sourced from this object to every observer.

        Delivery iterates over a snapshot, so an observer may unregister
        itself (or others) while handling the event.

        Args:
            event_type: The kind of change that happened.
            **data: Event payload.

        Returns:
            The delivered event.
        """
        event = NotificationEvent(event_type=event_type, source=self, data=data)
        for observer in tuple(self._observers):
            observer.on_event(event)
        return event

    def emit_validity_change(
        self, was_valid: bool, is_valid: bool, **data: Any
    ) -> NotificationEvent | None:
        """Emit INVALIDATED or REVALIDATED if validity flipped, else nothing."""
        if was_valid == is_valid:
            return None
        return self.emit(
            NotificationEventType.REVALIDATED if is_valid else NotificationEventType.INVALIDATED,
            **data,
        )
