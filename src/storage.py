"""Persistence helpers: key-value backends and the task blob codec.

The whole task list is stored as one JSON array under a single key, the
same layout the browser app kept in localStorage. Backends only move
opaque strings around; all JSON handling stays in this module.
"""
from __future__ import annotations
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

from models import Task

logger = logging.getLogger(__name__)

TASKS_KEY = 'tasks'
CORRUPT_KEY = 'tasks.corrupt'


class StorageError(Exception):
    """A backend failed to read or write a value."""


class CorruptDataError(ValueError):
    """A persisted blob could not be decoded into a task list."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def copy(self, src: str, dst: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def copy(self, src: str, dst: str) -> None:
        if src in self.data:
            self.data[dst] = self.data[src]


class FileKeyValueStore:
    """One file per key under a directory: <directory>/<key>.json.

    Writes go to <key>.tmp beside the target and are moved into place
    with os.replace, so a reader never sees a half-written blob.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f'{key}.json'

    def get(self, key: str) -> Optional[str]:
        """Stored text, or None when the key was never written.

        Undecodable bytes raise CorruptDataError and read failures raise
        StorageError, so callers can tell both apart from "never written".
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding='utf-8')
        except UnicodeDecodeError as exc:
            raise CorruptDataError(f"{path} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix('.tmp')
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding='utf-8')
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc

    def copy(self, src: str, dst: str) -> None:
        """Byte-for-byte copy of one key's file to another key."""
        src_path = self.path_for(src)
        if not src_path.exists():
            return
        try:
            shutil.copyfile(src_path, self.path_for(dst))
        except OSError as exc:
            raise StorageError(f"Could not copy {src_path}: {exc}") from exc


def serialize_tasks(tasks: Iterable[Task]) -> str:
    """Encode tasks as the persisted JSON array (insertion order kept)."""
    return json.dumps([t.to_record() for t in tasks], indent=4, ensure_ascii=False)


def deserialize_tasks(blob: str) -> List[Task]:
    """Decode a persisted blob.

    Raises CorruptDataError when the blob is not a JSON array. Individual
    records that are unusable (no int id, empty text, duplicate id) are
    skipped with a warning rather than failing the whole load.
    """
    try:
        data: Any = json.loads(blob)
    except ValueError as exc:
        raise CorruptDataError(f"Invalid JSON: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise CorruptDataError(f"Expected a JSON array, got {type(data).__name__}")
    tasks: List[Task] = []
    seen: set[int] = set()
    for raw in data:
        task = Task.from_record(raw) if isinstance(raw, dict) else None
        if task is None:
            logger.warning("Skipping unusable task record: %r", raw)
            continue
        if task.id in seen:
            logger.warning("Skipping task with duplicate id %s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks
