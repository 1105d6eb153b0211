# tests/test_tasklist.py

from __future__ import annotations

import json

import pytest

from storage import CORRUPT_KEY, TASKS_KEY, MemoryKeyValueStore, StorageError, deserialize_tasks
from tasklist import TaskStore

from .fakes import FailingKeyValueStore, FrozenClock


def _persisted(kv: MemoryKeyValueStore) -> list[dict]:
    return json.loads(kv.get(TASKS_KEY))


def test_create_persists_and_returns_task(store: TaskStore, kv: MemoryKeyValueStore, clock: FrozenClock) -> None:
    task = store.create("  Buy milk  ", "2025-01-01")
    assert task is not None
    assert task.text == "Buy milk"
    assert task.completed is False
    assert task.created_at == clock.ms
    assert task.due_date == "2025-01-01"
    assert task.due_time is None
    assert store.size() == 1
    assert _persisted(kv) == [{
        "id": task.id,
        "text": "Buy milk",
        "completed": False,
        "createdAt": clock.ms,
        "dueDate": "2025-01-01",
        "dueTime": "",
    }]


def test_blank_text_is_silently_rejected(store: TaskStore, kv: MemoryKeyValueStore) -> None:
    assert store.create("   ") is None
    assert store.create("") is None
    assert store.size() == 0
    assert kv.get(TASKS_KEY) is None


def test_invalid_due_values_raise_and_leave_store_untouched(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.create("Pay rent", "2025-02-30")
    with pytest.raises(ValueError):
        store.create("Pay rent", None, "10:00")
    assert store.size() == 0


def test_ids_unique_when_clock_does_not_move(store: TaskStore) -> None:
    ids = [store.create(f"task {i}").id for i in range(50)]
    assert len(set(ids)) == 50
    assert ids == sorted(ids)


def test_ids_stay_above_loaded_ids(kv: MemoryKeyValueStore, clock: FrozenClock) -> None:
    future_id = clock.ms + 10_000
    kv.set(TASKS_KEY, json.dumps([{"id": future_id, "text": "from the future", "completed": False}]))
    store = TaskStore(kv, clock=clock)
    store.load()
    assert store.create("new").id == future_id + 1


def test_toggle_twice_restores_task(store: TaskStore) -> None:
    task = store.create("Call Bob", "2025-01-02", "09:15")
    before = (task.id, task.text, task.created_at, task.due_date, task.due_time)

    assert store.toggle_completed(task.id).completed is True
    assert store.toggle_completed(task.id).completed is False

    after = store.get(task.id)
    assert (after.id, after.text, after.created_at, after.due_date, after.due_time) == before


def test_unknown_ids_are_noops(store: TaskStore, kv: MemoryKeyValueStore) -> None:
    store.create("only")
    blob = kv.get(TASKS_KEY)
    assert store.toggle_completed(12345) is None
    assert store.delete(12345) is False
    assert kv.get(TASKS_KEY) == blob


def test_delete_keeps_relative_order(store: TaskStore, kv: MemoryKeyValueStore) -> None:
    first = store.create("first")
    second = store.create("second")
    third = store.create("third")

    assert store.delete(second.id) is True
    assert [t.id for t in store.list()] == [first.id, third.id]

    assert store.delete(first.id) is True
    assert [t.text for t in store.list()] == ["third"]
    assert [r["id"] for r in _persisted(kv)] == [third.id]


def test_clear_all_empties_store_and_blob(store: TaskStore, kv: MemoryKeyValueStore) -> None:
    for text in ("a", "b", "c"):
        store.create(text)
    store.clear_all()
    assert store.size() == 0
    assert _persisted(kv) == []


def test_round_trip_through_persistence(store: TaskStore, kv: MemoryKeyValueStore, clock: FrozenClock) -> None:
    a = store.create("a", "2025-01-01", "08:00")
    clock.advance(5)
    b = store.create("b")
    c = store.create("c", "2025-06-30")
    store.toggle_completed(b.id)
    store.delete(a.id)

    reloaded = TaskStore(kv, clock=clock)
    reloaded.load()
    assert reloaded.list() == store.list()
    assert [t.id for t in reloaded.list()] == [b.id, c.id]
    assert deserialize_tasks(kv.get(TASKS_KEY)) == store.list()


def test_load_accepts_base_variant_records(kv: MemoryKeyValueStore) -> None:
    kv.set(TASKS_KEY, json.dumps([
        {"id": 1700000000000, "text": "old task", "completed": True},
        {"id": 1700000000001, "text": "newer", "completed": False,
         "createdAt": 1700000000001, "dueDate": "", "dueTime": ""},
    ]))
    store = TaskStore(kv)
    store.load()
    old, newer = store.list()
    assert old.completed is True
    assert old.created_at is None and old.due_date is None and old.due_time is None
    assert newer.created_at == 1700000000001
    assert newer.due_date is None


@pytest.mark.parametrize("blob", ["", "null", "[]"])
def test_load_empty_or_missing(kv: MemoryKeyValueStore, blob: str) -> None:
    kv.set(TASKS_KEY, blob)
    store = TaskStore(kv)
    store.load()
    assert store.size() == 0
    assert kv.get(CORRUPT_KEY) is None


def test_load_never_used(kv: MemoryKeyValueStore) -> None:
    store = TaskStore(kv)
    store.load()
    assert store.size() == 0


@pytest.mark.parametrize("blob", ["{not json", '{"id": 1}', '"tasks"'])
def test_corrupted_blob_is_backed_up_before_overwrite(kv: MemoryKeyValueStore, blob: str) -> None:
    kv.set(TASKS_KEY, blob)
    store = TaskStore(kv)
    store.load()
    assert store.size() == 0
    assert kv.get(CORRUPT_KEY) == blob

    store.create("fresh start")
    assert kv.get(CORRUPT_KEY) == blob
    assert [r["text"] for r in _persisted(kv)] == ["fresh start"]


def test_failed_write_leaves_memory_consistent() -> None:
    kv = FailingKeyValueStore()
    store = TaskStore(kv, clock=FrozenClock())
    store.load()
    task = store.create("keep me")
    kv.fail = True

    with pytest.raises(StorageError):
        store.create("lost")
    with pytest.raises(StorageError):
        store.toggle_completed(task.id)
    with pytest.raises(StorageError):
        store.delete(task.id)
    with pytest.raises(StorageError):
        store.clear_all()

    assert store.list() == deserialize_tasks(kv.get(TASKS_KEY))
    assert store.get(task.id).completed is False


@pytest.mark.parametrize("bad_id", ["NaN", "Infinity", "-Infinity", "1.5"])
def test_load_skips_records_with_unusable_numeric_ids(kv: MemoryKeyValueStore, bad_id: str) -> None:
    kv.set(TASKS_KEY, f'[{{"id": {bad_id}, "text": "x"}}, {{"id": 2, "text": "kept", "createdAt": Infinity}}]')
    store = TaskStore(kv)
    store.load()
    [task] = store.list()
    assert (task.id, task.text, task.created_at) == (2, "kept", None)


def test_load_backs_up_when_backend_read_fails() -> None:
    class UnreadableStore(MemoryKeyValueStore):
        def get(self, key: str):
            if key == TASKS_KEY:
                raise StorageError("permission denied")
            return super().get(key)

    broken = UnreadableStore({TASKS_KEY: "[raw bytes]"})
    store = TaskStore(broken)
    store.load()
    assert store.size() == 0
    assert broken.data[CORRUPT_KEY] == "[raw bytes]"


def test_str_summarises_counts(store: TaskStore) -> None:
    store.create("a")
    b = store.create("b")
    store.toggle_completed(b.id)
    assert str(store) == "Tasks: 2 total, 1 completed"
