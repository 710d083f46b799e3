"""Action/target enumeration and the legacy operation-name grammar.

Notification operations are an ``Action`` applied to a ``Target`` collection.
``parse_operation`` maps string names such as ``"addResult"``,
``"set_errors"`` or ``"results"`` onto those pairs for callers that arrive
through string-keyed boundaries.
"""

from __future__ import annotations

import re
from enum import Enum

from result_notification.exceptions import InvalidTargetError, UnknownOperationError

__all__ = ["Action", "Target", "parse_operation"]


class Action(Enum):
    """Operations a notification can forward to one of its collections."""

    GET = "get"
    SET = "set"
    SET_ALL = "set_all"
    ADD = "add"
    UNSET = "unset"
    HAS = "has"
    ALL = "all"
    COUNT = "count"
    EMPTY = "empty"
    MERGE = "merge"

    @property
    def mutates(self) -> bool:
        """Whether performing this action can change the collection."""
        return self in _MUTATING_ACTIONS


_MUTATING_ACTIONS = frozenset(
    {Action.SET, Action.SET_ALL, Action.ADD, Action.UNSET, Action.MERGE}
)


class Target(Enum):
    """The two collections owned by a notification."""

    RESULTS = "results"
    ERRORS = "errors"


_TARGET_TOKEN = re.compile(r"(result|error)(s)?", re.IGNORECASE)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def parse_operation(name: str) -> tuple[Action, Target]:
    """Derive ``(action, target)`` from an operation name.

    Format: ``[action](Result|Results|Error|Errors)``, in camelCase or
    snake_case. With no action prefix, ``get`` is implied for the singular
    token and ``all`` for the plural one. ``set`` on the plural token
    replaces the whole collection (``set_all``).

    Examples:
        parse_operation("setResult")    # (Action.SET, Target.RESULTS)
        parse_operation("setResults")   # (Action.SET_ALL, Target.RESULTS)
        parse_operation("error")        # (Action.GET, Target.ERRORS)
        parse_operation("unset_error")  # (Action.UNSET, Target.ERRORS)

    Raises:
        InvalidTargetError: If the name does not end in a results/errors token.
        UnknownOperationError: If the action prefix is not a known action.
    """
    match = _TARGET_TOKEN.search(name)
    if match is None or match.end() != len(name):
        raise InvalidTargetError(f"Invalid target collection in {name!r}.")

    plural = match.group(2) is not None
    target = Target(match.group(1).lower() + "s")

    prefix = name[: match.start()].rstrip("_")
    action_name = _CAMEL_BOUNDARY.sub("_", prefix).lower()
    if not action_name:
        action_name = "all" if plural else "get"
    elif plural and action_name == "set":
        action_name = "set_all"

    try:
        action = Action(action_name)
    except ValueError:
        raise UnknownOperationError(f"{action_name!r} not understood.") from None
    return action, target
