"""Task store: owns the ordered task list, id allocation and persistence.

Every mutation ends in _persist(), which writes the whole list back under
a single key, so the stored blob always matches memory when a call returns.
The key-value backend is injected; see storage.py for the implementations.
"""
from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional

from models import Task
from dates import split_due
from storage import CORRUPT_KEY, TASKS_KEY, KeyValueStore, deserialize_tasks, serialize_tasks

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    def __init__(self, kv: KeyValueStore, clock: Optional[Clock] = None):
        self.kv = kv
        self._clock: Clock = clock or _now_ms
        self._tasks: List[Task] = []
        self._last_id: int = 0

    # -------------------- loading --------------------
    def load(self) -> None:
        """Replace the in-memory list with the persisted one.

        Never raises. A missing blob means no tasks. A blob that cannot be
        read or decoded also yields no tasks, but the raw stored value is
        first copied to CORRUPT_KEY so the next save cannot destroy it.
        """
        self._tasks = []
        try:
            blob = self.kv.get(TASKS_KEY)
            if blob is not None and blob.strip():
                self._tasks = deserialize_tasks(blob)
        except Exception as exc:
            logger.warning("Persisted tasks are unreadable (%s); backing up to %r", exc, CORRUPT_KEY)
            self._tasks = []
            self._quarantine()
        self._last_id = max((t.id for t in self._tasks), default=0)
        logger.info("Loaded %s", self)

    def _quarantine(self) -> None:
        try:
            self.kv.copy(TASKS_KEY, CORRUPT_KEY)
        except Exception:
            logger.exception("Could not back up corrupted task data")

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        """Millisecond timestamp, bumped past the last id when the clock has not moved."""
        nid = max(self._clock(), self._last_id + 1)
        self._last_id = nid
        return nid

    # -------------------- queries --------------------
    def size(self) -> int:
        return len(self._tasks)

    def list(self) -> List[Task]:
        return list(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # -------------------- task operations --------------------
    def create(self, text: str, due_date: Optional[str] = None,
               due_time: Optional[str] = None) -> Optional[Task]:
        """Append a new task and persist it.

        Returns None (and changes nothing) when text is blank. Raises
        ValueError for a malformed due date/time or a time without a date.
        """
        text = (text or '').strip()
        if not text:
            return None
        d, t = split_due(due_date, due_time)
        task = Task(
            id=self._allocate_id(),
            text=text,
            completed=False,
            created_at=self._clock(),
            due_date=d.isoformat() if d else None,
            due_time=t.strftime('%H:%M') if t else None,
        )
        self._commit(self._tasks + [task])
        logger.debug("Created task id=%s due=%s %s", task.id, task.due_date, task.due_time)
        return task

    def toggle_completed(self, task_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        try:
            self._persist()
        except Exception:
            task.completed = not task.completed
            raise
        logger.debug("Toggled task id=%s completed=%s", task_id, task.completed)
        return task

    def delete(self, task_id: int) -> bool:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            return False
        self._commit(remaining)
        logger.debug("Deleted task id=%s", task_id)
        return True

    def clear_all(self) -> None:
        """Drop every task. Confirmation is the caller's job."""
        count = len(self._tasks)
        self._commit([])
        logger.info("Cleared %d task(s)", count)

    # -------------------- persistence --------------------
    def _commit(self, tasks: List[Task]) -> None:
        """Write tasks, then adopt them; a failed write leaves memory untouched."""
        self.kv.set(TASKS_KEY, serialize_tasks(tasks))
        self._tasks = tasks

    def _persist(self) -> None:
        self.kv.set(TASKS_KEY, serialize_tasks(self._tasks))

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'Tasks: {len(self._tasks)} total, {done} completed'
