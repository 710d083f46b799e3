"""Rich-based observer and renderer for notifications.

Provides a console observer that reports notification events as they happen,
and a tree renderer for inspecting a notification's results and errors.

Requires the 'rich' package: pip install rich
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from result_notification.events import (
    NotificationEvent,
    NotificationEventType,
    NotificationObserver,
)

if TYPE_CHECKING:
    from rich.console import Console
    from rich.tree import Tree

    from result_notification.notification import Notification

__all__ = ["RichEventObserver", "render_notification"]

_EVENT_STYLES = {
    NotificationEventType.RESULT_CHANGED: "green",
    NotificationEventType.ERROR_CHANGED: "red",
    NotificationEventType.MERGED: "cyan",
    NotificationEventType.INVALIDATED: "bold red",
    NotificationEventType.REVALIDATED: "bold green",
}


class RichEventObserver(NotificationObserver):
    """Print one line per notification event to a Rich console.

    Example:
        from rich.console import Console

        notification.add_observer(RichEventObserver(Console(stderr=True)))
        notification.add_error("db.connection", "refused")
        # ERROR_CHANGED add ('db.connection', 'refused')
        # INVALIDATED error_count=1

    Requires:
        pip install rich
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        show_args: bool = True,
    ) -> None:
        """Initialize the observer.

        Args:
            console: Console to print to. Defaults to a new Console().
            show_args: If True, include the forwarded arguments in each line.
        """
        from rich.console import Console

        self._console = console or Console()
        self._show_args = show_args
        self._event_counts: dict[NotificationEventType, int] = {}

    @property
    def event_counts(self) -> dict[NotificationEventType, int]:
        """Number of events seen, by type."""
        return dict(self._event_counts)

    def on_event(self, event: NotificationEvent) -> None:
        """Print a line describing the event.

        Args:
            event: The notification event to report.
        """
        from rich.markup import escape

        self._event_counts[event.event_type] = self._event_counts.get(event.event_type, 0) + 1
        style = _EVENT_STYLES.get(event.event_type, "white")
        line = f"[{style}]{event.event_type.name}[/]"

        if event.event_type in (
            NotificationEventType.RESULT_CHANGED,
            NotificationEventType.ERROR_CHANGED,
        ):
            line += f" {event.data.get('action', '')}"
            if self._show_args:
                line += f" {escape(repr(event.data.get('args', ())))}"
        elif event.event_type == NotificationEventType.MERGED:
            line += (
                f" results={event.data.get('result_count', 0)}"
                f" errors={event.data.get('error_count', 0)}"
            )
        else:
            line += f" error_count={event.data.get('error_count', 0)}"

        self._console.print(line)


def _add_branch(tree: Tree, values: Mapping[Any, Any] | list[Any]) -> None:
    from rich.markup import escape

    items = values.items() if isinstance(values, Mapping) else enumerate(values)
    for key, value in items:
        if isinstance(value, (Mapping, list)):
            _add_branch(tree.add(f"[bold]{escape(str(key))}[/]"), value)
        else:
            tree.add(f"[bold]{escape(str(key))}[/]: {escape(repr(value))}")


def render_notification(notification: Notification, *, terse: bool = False) -> Tree:
    """Build a Rich Tree showing validity, results and errors.

    Args:
        notification: The notification to render.
        terse: If True, omit empty results/errors branches.

    Returns:
        A rich.tree.Tree renderable.
    """
    from rich.tree import Tree

    valid = notification.valid()
    root = Tree("[bold green]valid[/]" if valid else "[bold red]invalid[/]")
    for name, style in (("results", "green"), ("errors", "red")):
        values = notification.collection(name).all()
        if terse and not values:
            continue
        _add_branch(root.add(f"[{style}]{name}[/]"), values)
    return root
