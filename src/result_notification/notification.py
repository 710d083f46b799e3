"""Result notifications.

Built on Martin Fowler's "replace throwing exceptions with notification"
idea: pass, return and merge results and errors without boilerplate, with
dot-notation keys.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from result_notification.collection import (
    DotAddressableCollection,
    MergePolicy,
    PathLike,
    Tree,
)
from result_notification.dispatch import Action, Target, parse_operation
from result_notification.events import NotificationEventType, ObservableMixin
from result_notification.exceptions import InvalidTargetError, UnknownOperationError
from result_notification.schema import NotificationTree

__all__ = ["Notification"]

_CHANGE_EVENTS = {
    Target.RESULTS: NotificationEventType.RESULT_CHANGED,
    Target.ERRORS: NotificationEventType.ERROR_CHANGED,
}


class Notification(ObservableMixin):
    """Aggregate of results and errors collected during a unit of work.

    A notification is valid while its errors collection is empty. Validity is
    recomputed on every call and cannot be set directly.

    All operations are an Action applied to one of the two collections, via
    ``perform``. The named methods below are shortcuts for it, and string
    names (``"addError"``, ``"set_results"``) are accepted by ``dispatch`` and
    as attributes for callers that only have an operation name.

    Supports the Observer pattern: mutating calls emit RESULT_CHANGED or
    ERROR_CHANGED, merges emit MERGED, and validity flips emit INVALIDATED
    or REVALIDATED.

    Example:
        pets = Notification()
        cat = Notification()
        cat.set_result("pet.cat.sound", "meow")
        thylacine = Notification()
        thylacine.set_error("pet.thylacine.sound", "unknown")

        pets.merge(cat).merge(thylacine)
        pets.valid()              # False
        pets.serialize(terse=True)
        # {"results": {"pet": {"cat": {...}}}, "errors": {"pet": {...}}}
    """

    def __init__(
        self,
        results: Mapping[Any, Any] | None = None,
        errors: Mapping[Any, Any] | None = None,
        *,
        delimiter: str = ".",
        merge_policy: MergePolicy = MergePolicy.ACCUMULATE,
    ) -> None:
        """Initialize the notification.

        Args:
            results: Initial results tree (deep-copied). Defaults to empty.
            errors: Initial errors tree (deep-copied). Defaults to empty.
            delimiter: Path separator for both collections. Defaults to ".".
            merge_policy: Policy used by ``merge`` for colliding leaves.
                Defaults to ACCUMULATE, so two scalars at the same path
                become a list.
        """
        super().__init__()
        self._merge_policy = merge_policy
        self._collections: dict[Target, DotAddressableCollection] = {
            Target.RESULTS: DotAddressableCollection(
                results, delimiter=delimiter, merge_policy=merge_policy
            ),
            Target.ERRORS: DotAddressableCollection(
                errors, delimiter=delimiter, merge_policy=merge_policy
            ),
        }

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def collection(self, target: Target | str) -> DotAddressableCollection:
        """Return the collection for ``target``.

        Raises:
            InvalidTargetError: If target is not results or errors.
        """
        try:
            return self._collections[Target(target)]
        except ValueError:
            raise InvalidTargetError(f"Invalid target collection {target!r}.") from None

    def perform(self, action: Action | str, target: Target | str, *args: Any) -> Any:
        """Apply ``action`` to the ``target`` collection.

        Args:
            action: The operation to forward.
            target: Which collection to operate on.
            *args: Arguments forwarded to the collection method.

        Returns:
            Whatever the collection method returns.

        Raises:
            InvalidTargetError: If target is not results or errors.
            UnknownOperationError: If the collection has no such operation.
        """
        collection = self.collection(target)
        try:
            action = Action(action)
        except ValueError:
            raise UnknownOperationError(f"{action!r} not understood.") from None
        method = getattr(collection, action.value)

        if not action.mutates:
            return method(*args)

        was_valid = self.valid()
        outcome = method(*args)
        if action is Action.UNSET and not outcome:
            return outcome
        target = Target(target)
        self.emit(
            _CHANGE_EVENTS[target], action=action.value, target=target.value, args=args
        )
        self.emit_validity_change(was_valid, self.valid(), error_count=self.error_count())
        return outcome

    def dispatch(self, operation: str, *args: Any) -> Any:
        """Perform an operation given by name, e.g. ``dispatch("addError", "x")``."""
        action, target = parse_operation(operation)
        return self.perform(action, target, *args)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        """Resolve legacy operation names such as ``addResult`` or ``errors``.

        Only called for attributes that don't exist, so every explicit method
        takes precedence.
        """
        if name.startswith("_"):
            raise AttributeError(
                f"{self.__class__.__name__!r} object has no attribute {name!r}"
            )
        action, target = parse_operation(name)
        return partial(self.perform, action, target)

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def get_result(self, path: PathLike, null_if_not_found: bool = False) -> Any:
        """Return the result at ``path``.

        Args:
            path: Dotted path (or tuple of segments) to read.
            null_if_not_found: Return None instead of raising when absent.

        Raises:
            KeyNotFoundError: If the path is absent and null_if_not_found is False.
        """
        return self.perform(Action.GET, Target.RESULTS, path, null_if_not_found)

    result = get_result

    def set_result(self, path: PathLike, value: Any) -> None:
        """Create or overwrite the result at ``path``.

        Args:
            path: Dotted path; missing intermediate levels are created.
            value: Value to store.

        Raises:
            TypeConflictError: If a scalar sits where a level must be created.
        """
        self.perform(Action.SET, Target.RESULTS, path, value)

    def set_results(self, results: Mapping[Any, Any]) -> None:
        """Replace all results."""
        self.perform(Action.SET_ALL, Target.RESULTS, results)

    def add_result(self, *args: Any) -> None:
        """Append a result: ``add_result(value)`` or ``add_result(path, value)``."""
        self.perform(Action.ADD, Target.RESULTS, *args)

    def unset_result(self, path: PathLike) -> bool:
        """Remove the result at ``path``.

        Args:
            path: Dotted path to remove.

        Returns:
            True if something was removed, False if the path was absent.
        """
        return self.perform(Action.UNSET, Target.RESULTS, path)

    def has_result(self, path: PathLike) -> bool:
        """Check whether a result exists at ``path``."""
        return self.perform(Action.HAS, Target.RESULTS, path)

    def results(self) -> Tree:
        """Return the live results tree."""
        return self.perform(Action.ALL, Target.RESULTS)

    def result_count(self, path: PathLike | None = None) -> int | None:
        """Count root results, or entries at ``path``. None if not countable."""
        return self._collections[Target.RESULTS].count(path)

    resultCount = result_count  # noqa: N815

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def get_error(self, path: PathLike, null_if_not_found: bool = False) -> Any:
        """Return the error at ``path``.

        Args:
            path: Dotted path (or tuple of segments) to read.
            null_if_not_found: Return None instead of raising when absent.

        Raises:
            KeyNotFoundError: If the path is absent and null_if_not_found is False.
        """
        return self.perform(Action.GET, Target.ERRORS, path, null_if_not_found)

    error = get_error

    def set_error(self, path: PathLike, value: Any) -> None:
        """Record an error at ``path``, replacing any error already there.

        Args:
            path: Dotted path; missing intermediate levels are created.
            value: Error message or structure.

        Raises:
            TypeConflictError: If a scalar sits where a level must be created.
        """
        self.perform(Action.SET, Target.ERRORS, path, value)

    def set_errors(self, errors: Mapping[Any, Any]) -> None:
        """Replace all errors. An empty mapping makes the notification valid."""
        self.perform(Action.SET_ALL, Target.ERRORS, errors)

    def add_error(self, *args: Any) -> None:
        """Append an error: ``add_error(message)`` or ``add_error(path, message)``."""
        self.perform(Action.ADD, Target.ERRORS, *args)

    def unset_error(self, path: PathLike) -> bool:
        """Remove the error at ``path``. Removing the last error revalidates.

        Args:
            path: Dotted path to remove.

        Returns:
            True if something was removed, False if the path was absent.
        """
        return self.perform(Action.UNSET, Target.ERRORS, path)

    def has_error(self, path: PathLike) -> bool:
        """Check whether an error exists at ``path``."""
        return self.perform(Action.HAS, Target.ERRORS, path)

    def errors(self) -> Tree:
        """Return the live errors tree."""
        return self.perform(Action.ALL, Target.ERRORS)

    def error_count(self, path: PathLike | None = None) -> int | None:
        """Count root errors, or entries at ``path``. None if not countable."""
        return self._collections[Target.ERRORS].count(path)

    errorCount = error_count  # noqa: N815

    # -------------------------------------------------------------------------
    # Whole-notification operations
    # -------------------------------------------------------------------------

    def valid(self) -> bool:
        """True when nothing has gone wrong so far, i.e. no errors are recorded."""
        return self._collections[Target.ERRORS].count() == 0

    def merge(self, other: Notification) -> Notification:
        """Merge another notification's results and errors into this one.

        Collections are combined with this notification's merge policy.
        Merged values are deep-copied, so the two notifications never share
        nested structures afterwards.

        Args:
            other: The notification to merge in. It is not modified.

        Returns:
            Self, for method chaining (e.g. ``parent.merge(a).merge(b)``).
        """
        was_valid = self.valid()
        for target, collection in self._collections.items():
            collection.merge(other.collection(target), self._merge_policy)
        self.emit(
            NotificationEventType.MERGED,
            other=other,
            result_count=other.result_count(),
            error_count=other.error_count(),
        )
        self.emit_validity_change(was_valid, self.valid(), error_count=self.error_count())
        return self

    def serialize(self, terse: bool = False) -> dict[str, Any]:
        """Turn this notification into a plain tree.

        Args:
            terse: Omit ``valid``, and omit ``results``/``errors`` when empty.

        Returns:
            Dict with ``valid``, ``results`` and ``errors`` keys (deep copies).
        """
        out: dict[str, Any] = {}
        if not terse:
            out["valid"] = self.valid()
        for target, collection in self._collections.items():
            if not terse or not collection.empty():
                out[target.value] = copy.deepcopy(collection.all())
        return out

    @classmethod
    def from_tree(
        cls, tree: Mapping[str, Any] | NotificationTree, **kwargs: Any
    ) -> Notification:
        """Build a notification from its serialized tree.

        Missing ``results``/``errors`` default to empty. A supplied ``valid``
        is ignored: validity is always rederived from ``errors``.

        Args:
            tree: Output of ``serialize`` (or any mapping of the same shape).
            **kwargs: Passed to the constructor (delimiter, merge_policy).

        Raises:
            pydantic.ValidationError: If results or errors is not a mapping.
        """
        if not isinstance(tree, NotificationTree):
            tree = NotificationTree.model_validate(dict(tree))
        return cls(tree.results, tree.errors, **kwargs)

    def to_json(self, terse: bool = False, indent: int | None = None) -> str:
        """Render the serialized tree as JSON."""
        model = NotificationTree(**self.serialize(terse))
        return model.model_dump_json(exclude_unset=True, indent=indent)

    @classmethod
    def from_json(cls, text: str | bytes, **kwargs: Any) -> Notification:
        """Build a notification from JSON produced by ``to_json``."""
        return cls.from_tree(NotificationTree.model_validate_json(text), **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Notification):
            return NotImplemented
        return self.results() == other.results() and self.errors() == other.errors()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(valid={self.valid()}, "
            f"results={self.results()!r}, errors={self.errors()!r})"
        )
