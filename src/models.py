"""Data models for the terminal task list.

Only the Task dataclass lives here. Persisted records use camelCase keys
(createdAt, dueDate, dueTime) so that blobs written by the browser version
load unchanged; older records may lack the last three fields entirely.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


def _blank_to_none(value: Any) -> Optional[str]:
    """Absent, None and empty/whitespace strings all mean "unset"."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _whole_number(value: Any) -> Optional[int]:
    """JSON number with no fractional part; NaN, Infinity and bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return None
    return int(value)


@dataclass
class Task:
    """A single to-do item.

    Fields:
        id: Unique integer id, increasing in creation order.
        text: Trimmed, non-empty label.
        completed: Checkbox state.
        created_at: Epoch milliseconds at creation (None for legacy records).
        due_date: "YYYY-MM-DD" or None.
        due_time: "HH:MM" or None; only meaningful with a due_date.
    """
    id: int
    text: str
    completed: bool = False
    created_at: Optional[int] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            'id': self.id,
            'text': self.text,
            'completed': self.completed,
        }
        if self.created_at is not None:
            record['createdAt'] = self.created_at
        record['dueDate'] = self.due_date or ''
        record['dueTime'] = self.due_time or ''
        return record

    @classmethod
    def from_record(cls, raw: Mapping[str, Any]) -> Optional['Task']:
        """Build a Task from a persisted record; None if the record is unusable."""
        tid = _whole_number(raw.get('id'))
        if tid is None:
            return None
        text = _blank_to_none(raw.get('text'))
        if text is None:
            return None
        return cls(
            id=tid,
            text=text,
            completed=bool(raw.get('completed', False)),
            created_at=_whole_number(raw.get('createdAt')),
            due_date=_blank_to_none(raw.get('dueDate')),
            due_time=_blank_to_none(raw.get('dueTime')),
        )
