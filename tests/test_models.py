# tests/test_models.py

from __future__ import annotations

from models import Task


def test_to_record_uses_persisted_field_names() -> None:
    task = Task(id=7, text="Buy milk", created_at=1000, due_date="2025-01-01")
    assert task.to_record() == {
        "id": 7,
        "text": "Buy milk",
        "completed": False,
        "createdAt": 1000,
        "dueDate": "2025-01-01",
        "dueTime": "",
    }


def test_to_record_omits_missing_created_at() -> None:
    assert "createdAt" not in Task(id=1, text="legacy").to_record()


def test_from_record_treats_empty_strings_as_unset() -> None:
    task = Task.from_record({"id": 1, "text": " hi ", "completed": 1, "dueDate": "", "dueTime": " "})
    assert task == Task(id=1, text="hi", completed=True)


def test_from_record_rejects_bad_ids_and_text() -> None:
    assert Task.from_record({"id": True, "text": "bool id"}) is None
    assert Task.from_record({"id": None, "text": "no id"}) is None
    assert Task.from_record({"id": 1, "text": ""}) is None
    assert Task.from_record({"id": 1}) is None


def test_from_record_ignores_non_numeric_created_at() -> None:
    task = Task.from_record({"id": 1, "text": "x", "createdAt": "yesterday"})
    assert task.created_at is None


def test_from_record_rejects_non_finite_and_fractional_ids() -> None:
    assert Task.from_record({"id": float("nan"), "text": "nan id"}) is None
    assert Task.from_record({"id": float("inf"), "text": "inf id"}) is None
    assert Task.from_record({"id": float("-inf"), "text": "-inf id"}) is None
    assert Task.from_record({"id": 1.5, "text": "half id"}) is None
    assert Task.from_record({"id": 3.0, "text": "whole float"}).id == 3


def test_from_record_drops_non_finite_created_at() -> None:
    assert Task.from_record({"id": 1, "text": "x", "createdAt": float("inf")}).created_at is None
    assert Task.from_record({"id": 1, "text": "x", "createdAt": float("nan")}).created_at is None


def test_repr_shows_every_field() -> None:
    text = repr(Task(id=1, text="x", created_at=5, due_date="2025-01-01", due_time="09:00"))
    assert "created_at=5" in text
    assert "due_date='2025-01-01'" in text
    assert "due_time='09:00'" in text
