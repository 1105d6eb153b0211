# tests/conftest.py

from __future__ import annotations

import pytest

from storage import MemoryKeyValueStore
from tasklist import TaskStore
from view import TaskListView

from .fakes import NOW, FrozenClock


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def store(kv: MemoryKeyValueStore, clock: FrozenClock) -> TaskStore:
    s = TaskStore(kv, clock=clock)
    s.load()
    return s


@pytest.fixture()
def view(store: TaskStore) -> TaskListView:
    """List view pinned to NOW so urgency classes are deterministic."""
    v = TaskListView(store, now=lambda: NOW)
    v.mount()
    return v
