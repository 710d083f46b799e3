"""Shared fixtures and Hypothesis strategies for tests."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import strategies as st

from result_notification import (
    DotAddressableCollection,
    Notification,
    NotificationEvent,
    NotificationEventType,
)

# -----------------------------------------------------------------------------
# Hypothesis Strategies
# -----------------------------------------------------------------------------

# Strategy for single path segments (letters and numbers only, never the delimiter).
# All-digit segments are excluded: they name unkeyed entries, which merge appends.
segments = st.text(
    min_size=1,
    max_size=12,
    alphabet=st.characters(whitelist_categories=("L", "N")),
).filter(lambda s: not (s.isascii() and s.isdigit()))

# Strategy for dotted paths of one to four segments
paths = st.lists(segments, min_size=1, max_size=4).map(".".join)

# Strategy for JSON-compatible scalar leaves
scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(2**31), max_value=2**31),
    st.text(max_size=30),
)

# Strategy for leaves, lists and nested mappings
nodes = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(segments, children, max_size=3),
    ),
    max_leaves=8,
)

# Strategy for nested string-keyed trees (the root is always a mapping)
trees = st.dictionaries(segments, nodes, max_size=5)


# -----------------------------------------------------------------------------
# Test Observers
# -----------------------------------------------------------------------------


class RecordingObserver:
    """Observer that records all events for testing."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    def on_event(self, event: NotificationEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    @property
    def event_types(self) -> list[NotificationEventType]:
        return [e.event_type for e in self.events]


# -----------------------------------------------------------------------------
# Pytest Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def doctor_tree() -> dict[str, Any]:
    """Small nested tree used across collection tests."""
    return {"hello": {"doctor": "name"}}


@pytest.fixture
def doctor_collection(doctor_tree: dict[str, Any]) -> DotAddressableCollection:
    """Create a collection holding the doctor tree."""
    return DotAddressableCollection(doctor_tree)


@pytest.fixture
def pet_results() -> dict[str, Any]:
    return {"yay": ["these", "things", "worked"]}


@pytest.fixture
def pet_errors() -> dict[str, Any]:
    return {"oh no": ["these", "things", "didn't", "work"]}


@pytest.fixture
def notification() -> Notification:
    """Create a fresh, empty Notification."""
    return Notification()


@pytest.fixture
def recorder() -> RecordingObserver:
    """Create a RecordingObserver instance."""
    return RecordingObserver()
