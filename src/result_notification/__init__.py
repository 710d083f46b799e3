"""Notification-pattern error handling: collect results and errors, then merge them."""

from result_notification.collection import DotAddressableCollection, MergePolicy
from result_notification.dispatch import Action, Target, parse_operation
from result_notification.events import (
    NotificationEvent,
    NotificationEventType,
    NotificationObserver,
    ObservableMixin,
)
from result_notification.exceptions import (
    InvalidPathError,
    InvalidTargetError,
    KeyNotFoundError,
    NotificationError,
    TypeConflictError,
    UnknownOperationError,
)
from result_notification.notification import Notification
from result_notification.rich_observers import RichEventObserver, render_notification
from result_notification.schema import NotificationTree

__all__ = [
    # Storage
    "DotAddressableCollection",
    "MergePolicy",
    # Notification
    "Notification",
    "NotificationTree",
    # Dispatch
    "Action",
    "Target",
    "parse_operation",
    # Observer pattern
    "NotificationEvent",
    "NotificationEventType",
    "NotificationObserver",
    "ObservableMixin",
    # Rich observers (require the optional 'rich' extra at call time)
    "RichEventObserver",
    "render_notification",
    # Errors
    "NotificationError",
    "KeyNotFoundError",
    "TypeConflictError",
    "InvalidPathError",
    "InvalidTargetError",
    "UnknownOperationError",
]

__version__ = "0.1.0"
