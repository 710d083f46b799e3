"""Dot-addressable nested collections.

Provides DotAddressableCollection, a dict-backed container whose keys may be
written as delimiter-separated paths (``"pet.cat.sound"``) instead of chained
subscripts (``["pet"]["cat"]["sound"]``).
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import Enum
from typing import Any

from result_notification.exceptions import (
    InvalidPathError,
    KeyNotFoundError,
    TypeConflictError,
)

__all__ = ["DotAddressableCollection", "MergePolicy", "PathLike", "Tree", "split_path"]

Tree = dict[Any, Any]
PathLike = str | tuple[Any, ...]

_MISSING: Any = object()


class MergePolicy(Enum):
    """How ``merge`` combines two leaves found at the same path.

    Two mappings are always merged key by key and two lists are always
    concatenated; the policy only decides the remaining cases.
    """

    OVERWRITE = "overwrite"
    """The incoming value replaces the existing one."""

    ACCUMULATE = "accumulate"
    """Scalars and lists are collected into a single list."""


def split_path(path: PathLike, delimiter: str = ".") -> tuple[Any, ...]:
    """Split a path into its segments.

    Args:
        path: A delimited string, or a tuple of segments used verbatim.
        delimiter: Segment separator for string paths.

    Returns:
        Tuple of one or more non-empty segments.

    Raises:
        InvalidPathError: If the path is empty, has an empty segment, or is
            neither a string nor a tuple.
    """
    if isinstance(path, str):
        segments: tuple[Any, ...] = tuple(path.split(delimiter))
    elif isinstance(path, tuple):
        segments = path
    else:
        raise InvalidPathError(
            f"Path must be a string or tuple of segments, got {type(path).__name__}."
        )
    if not segments or any(segment == "" for segment in segments):
        raise InvalidPathError(f"Invalid path {path!r}.")
    return segments


def _resolve_key(node: Tree, segment: Any) -> Any:
    """Find the key in ``node`` that ``segment`` addresses, or ``_MISSING``.

    A segment made of ASCII digits falls back to the matching integer key, so
    entries appended without a key stay reachable by path.
    """
    if segment in node:
        return segment
    if isinstance(segment, str) and segment.isascii() and segment.isdigit():
        index = int(segment)
        if index in node:
            return index
    return _MISSING


def _is_index(key: Any) -> bool:
    """True for integer keys and their JSON form (ASCII-digit strings)."""
    if type(key) is int:
        return True
    return isinstance(key, str) and key.isascii() and key.isdigit()


def _next_index(node: Tree) -> int:
    return max((int(key) for key in node if _is_index(key)), default=-1) + 1


def _merge_into(target: Tree, incoming: Mapping[Any, Any], policy: MergePolicy) -> None:
    for key, value in incoming.items():
        if _is_index(key):
            # unkeyed entries accumulate instead of colliding
            target[_next_index(target)] = copy.deepcopy(value)
        elif key in target:
            target[key] = _merge_values(target[key], value, policy)
        else:
            target[key] = copy.deepcopy(value)


def _merge_values(existing: Any, incoming: Any, policy: MergePolicy) -> Any:
    if isinstance(existing, dict) and isinstance(incoming, Mapping):
        _merge_into(existing, incoming, policy)
        return existing
    if isinstance(existing, list) and isinstance(incoming, list):
        existing.extend(copy.deepcopy(incoming))
        return existing
    if (
        policy is MergePolicy.ACCUMULATE
        and not isinstance(existing, dict)
        and not isinstance(incoming, Mapping)
    ):
        merged = existing if isinstance(existing, list) else [existing]
        if isinstance(incoming, list):
            merged.extend(copy.deepcopy(incoming))
        else:
            merged.append(copy.deepcopy(incoming))
        return merged
    return copy.deepcopy(incoming)


class DotAddressableCollection:
    """Nested key/value store addressed by delimited paths.

    Nodes are scalars, lists (opaque leaves for path traversal) or dicts.
    Insertion order is preserved so serialized output is stable.

    The collection is not safe for unsynchronized concurrent mutation:
    ``set``, ``add`` and ``merge`` traverse then write.

    Example:
        items = DotAddressableCollection({"hello": {"doctor": "name"}})
        items.get("hello.doctor")             # "name"
        items.get("some.undefined.key", True) # None
        items.add("pets", "cat")
        items.add("pets", "dog")              # {"pets": ["cat", "dog"]}
    """

    def __init__(
        self,
        values: Mapping[Any, Any] | None = None,
        *,
        delimiter: str = ".",
        merge_policy: MergePolicy = MergePolicy.OVERWRITE,
    ) -> None:
        """Initialize the collection.

        Args:
            values: Initial nested structure. It is deep-copied.
            delimiter: Path segment separator. Defaults to ".".
            merge_policy: Default policy for ``merge``. Defaults to OVERWRITE.
        """
        if not delimiter:
            raise ValueError("delimiter must be a non-empty string")
        self._delimiter = delimiter
        self._merge_policy = merge_policy
        self._items: Tree = copy.deepcopy(dict(values)) if values else {}

    @property
    def delimiter(self) -> str:
        """Path segment separator."""
        return self._delimiter

    @property
    def merge_policy(self) -> MergePolicy:
        """Default policy applied by ``merge``."""
        return self._merge_policy

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def _find(self, path: PathLike) -> tuple[Tree, Any] | None:
        """Locate ``(parent, key)`` for an existing path, or None if absent."""
        try:
            segments = split_path(path, self._delimiter)
        except InvalidPathError:
            return None
        node = self._items
        for segment in segments[:-1]:
            key = _resolve_key(node, segment)
            if key is _MISSING:
                return None
            child = node[key]
            if not isinstance(child, dict):
                return None
            node = child
        key = _resolve_key(node, segments[-1])
        if key is _MISSING:
            return None
        return node, key

    def _locate_for_write(self, path: PathLike) -> tuple[Tree, Any]:
        """Locate ``(parent, key)`` for a write, creating intermediate dicts."""
        segments = split_path(path, self._delimiter)
        node = self._items
        for depth, segment in enumerate(segments[:-1]):
            key = _resolve_key(node, segment)
            if key is _MISSING:
                key = segment
                node[key] = {}
            child = node[key]
            if not isinstance(child, dict):
                walked = self._delimiter.join(str(s) for s in segments[: depth + 1])
                raise TypeConflictError(
                    f"Cannot descend into {walked!r}: it holds a "
                    f"{type(child).__name__}, not a mapping."
                )
            node = child
        key = _resolve_key(node, segments[-1])
        return node, (segments[-1] if key is _MISSING else key)

    # -------------------------------------------------------------------------
    # Point operations
    # -------------------------------------------------------------------------

    def set(self, path: PathLike, value: Any) -> None:
        """Create or overwrite the value at ``path``."""
        parent, key = self._locate_for_write(path)
        parent[key] = value

    def set_all(self, tree: Mapping[Any, Any]) -> None:
        """Replace the entire contents with a deep copy of ``tree``."""
        self._items = copy.deepcopy(dict(tree))

    def get(self, path: PathLike, null_if_not_found: bool = False) -> Any:
        """Return the value at ``path``.

        Args:
            path: Location to read.
            null_if_not_found: Return None instead of raising when absent.

        Raises:
            KeyNotFoundError: If the path is absent and null_if_not_found is False.
        """
        found = self._find(path)
        if found is not None:
            parent, key = found
            return parent[key]
        if null_if_not_found:
            return None
        raise KeyNotFoundError(path)

    def has(self, path: PathLike) -> bool:
        """Check whether a value exists at ``path``."""
        return self._find(path) is not None

    def unset(self, path: PathLike) -> bool:
        """Remove the value at ``path``.

        Returns:
            True if something was removed, False if the path was absent.
        """
        found = self._find(path)
        if found is None:
            return False
        parent, key = found
        del parent[key]
        return True

    def count(self, path: PathLike | None = None) -> int | None:
        """Count entries at the root, or in the list/dict at ``path``.

        Returns None when the path is absent, invalid, or holds a value that
        cannot be counted.
        """
        if path is None:
            return len(self._items)
        found = self._find(path)
        if found is None:
            return None
        parent, key = found
        value = parent[key]
        if isinstance(value, (dict, list)):
            return len(value)
        return None

    def add(self, path_or_value: Any, value: Any = _MISSING) -> None:
        """Append a value.

        Called with one argument, the value is appended to the root under the
        next free integer key. Called with a path and a value, the value is
        appended to the list at that path, which is created if missing.

        Raises:
            TypeConflictError: If a scalar already exists at the path.
        """
        if value is _MISSING:
            self._items[_next_index(self._items)] = path_or_value
            return
        parent, key = self._locate_for_write(path_or_value)
        if key not in parent:
            parent[key] = [value]
            return
        current = parent[key]
        if isinstance(current, list):
            current.append(value)
        elif isinstance(current, dict):
            current[_next_index(current)] = value
        else:
            raise TypeConflictError(
                f"Key {path_or_value!r} already exists and isn't a list."
            )

    # -------------------------------------------------------------------------
    # Whole-collection operations
    # -------------------------------------------------------------------------

    def all(self) -> Tree:
        """Return the live nested structure."""
        return self._items

    def empty(self) -> bool:
        """True if the root holds no entries."""
        return not self._items

    def merge(
        self,
        tree: Mapping[Any, Any] | DotAddressableCollection,
        policy: MergePolicy | None = None,
    ) -> DotAddressableCollection:
        """Recursively merge ``tree`` into this collection.

        Mappings are merged key by key and lists are concatenated. Other
        collisions follow ``policy`` (the collection default if omitted).
        Incoming values are deep-copied. Merging never fails.

        Returns:
            Self, for method chaining.
        """
        incoming = tree.all() if isinstance(tree, DotAddressableCollection) else tree
        if incoming is self._items:
            incoming = copy.deepcopy(incoming)
        _merge_into(self._items, incoming, policy or self._merge_policy)
        return self

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, tuple)):
            return False
        return self.has(path)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DotAddressableCollection):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self._items == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._items!r})"
