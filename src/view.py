"""Presentation: task rows, the surface that holds them, and the list view.

The view never rebuilds the whole list after start-up. Adding appends one
row, deleting removes exactly the row for that id, toggling patches the
existing row in place and clearing empties the surface. Urgency is worked
out when a row is rendered or patched, so an open task only turns overdue
on screen after the next user action.
"""
from __future__ import annotations
import shutil
import textwrap
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from models import Task
from tasklist import TaskStore
from dates import format_created_at, format_due_datetime, urgency_class
from theme import color, HEADER_COLOR, ID_COLOR, EMPTY_COLOR, META_COLOR, COMPLETED_STYLE, URGENCY_STYLE

MIN_WIDTH = 30
INDENT = 7
EMPTY_MESSAGE = 'No tasks yet. Add one above!'
CLEAR_ALL_LABEL = '[ Clear all ]'
DELETE_GLYPH = '✕'


@dataclass
class TaskRow:
    """One rendered task: checkbox, label, meta lines and a delete control."""
    task_id: int
    label: str
    checked: bool = False
    created_line: Optional[str] = None
    due_line: Optional[str] = None
    due_class: str = ''
    on_toggle: Optional[Callable[[], object]] = field(default=None, repr=False)
    on_delete: Optional[Callable[[], object]] = field(default=None, repr=False)

    @property
    def classes(self) -> List[str]:
        return ['task-item', 'completed'] if self.checked else ['task-item']

    def check(self) -> None:
        """Click the checkbox."""
        if self.on_toggle is not None:
            self.on_toggle()

    def press_delete(self) -> None:
        """Click the delete control."""
        if self.on_delete is not None:
            self.on_delete()

    def lines(self, position: int, width: int) -> List[str]:
        box = '[x]' if self.checked else '[ ]'
        prefix = f"{position:>3}. {box} "
        text_width = max(1, width - len(prefix) - 2)
        wrapped = textwrap.wrap(self.label, text_width) or ['']
        label_style = COMPLETED_STYLE if self.checked else ''
        out = [color(f"{position:>3}.", ID_COLOR) + f" {box} " + color(wrapped[0], label_style)
               + ' ' + color(DELETE_GLYPH, META_COLOR)]
        pad = ' ' * len(prefix)
        out.extend(pad + color(w, label_style) for w in wrapped[1:])
        if self.created_line:
            out.append(' ' * INDENT + color(self.created_line, META_COLOR))
        if self.due_line:
            out.append(' ' * INDENT + color(self.due_line, URGENCY_STYLE.get(self.due_class, META_COLOR)))
        return out


class Surface:
    """Ordered container of rows (the list element)."""

    def __init__(self) -> None:
        self.children: List[TaskRow] = []

    def append(self, row: TaskRow) -> None:
        self.children.append(row)

    def remove(self, row: TaskRow) -> None:
        if row in self.children:
            self.children.remove(row)

    def clear(self) -> None:
        self.children.clear()

    def __len__(self) -> int:
        return len(self.children)


class TaskListView:
    def __init__(self, store: TaskStore, surface: Optional[Surface] = None,
                 now: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.surface = surface if surface is not None else Surface()
        self.rows: Dict[int, TaskRow] = {}
        self.empty_visible: bool = True
        self.clear_all_visible: bool = False
        self._now = now or datetime.now

    # -------------------- building rows --------------------
    def mount(self) -> None:
        """Render every stored task once; used at start-up."""
        self.surface.clear()
        self.rows.clear()
        for task in self.store.list():
            self.render(task)
        self.refresh_empty_state()

    def render(self, task: Task) -> TaskRow:
        created_text = format_created_at(task.created_at) if task.created_at is not None else None
        created_line = f"Created: {created_text}" if created_text else None
        due_text = format_due_datetime(task.due_date, task.due_time)
        row = TaskRow(
            task_id=task.id,
            label=task.text,
            checked=task.completed,
            created_line=created_line,
            due_line=f"Due: {due_text}" if due_text else None,
            due_class=urgency_class(task, self._now()) if due_text else '',
        )
        tid = task.id
        row.on_toggle = lambda: self.toggle(tid)
        row.on_delete = lambda: self.delete(tid)
        self.rows[tid] = row
        self.surface.append(row)
        return row

    def row_at(self, position: int) -> Optional[TaskRow]:
        """1-based lookup by on-screen position."""
        if position < 1 or position > len(self.surface.children):
            return None
        return self.surface.children[position - 1]

    # -------------------- actions --------------------
    def add(self, text: str, due_date: Optional[str] = None,
            due_time: Optional[str] = None) -> Optional[TaskRow]:
        task = self.store.create(text, due_date, due_time)
        if task is None:
            return None
        row = self.render(task)
        self.refresh_empty_state()
        return row

    def toggle(self, task_id: int) -> bool:
        task = self.store.toggle_completed(task_id)
        if task is None:
            return False
        row = self.rows.get(task_id)
        if row is not None:
            row.checked = task.completed
            row.due_class = urgency_class(task, self._now()) if row.due_line else ''
        return True

    def delete(self, task_id: int) -> bool:
        if not self.store.delete(task_id):
            return False
        row = self.rows.pop(task_id, None)
        if row is not None:
            self.surface.remove(row)
        self.refresh_empty_state()
        return True

    def clear_all(self) -> None:
        self.store.clear_all()
        self.surface.clear()
        self.rows.clear()
        self.refresh_empty_state()

    def refresh_empty_state(self) -> None:
        empty = self.store.size() == 0
        self.empty_visible = empty
        self.clear_all_visible = not empty

    # -------------------- display --------------------
    def render_lines(self, width: Optional[int] = None) -> List[str]:
        if width is None:
            width = shutil.get_terminal_size((80, 24)).columns
        width = max(MIN_WIDTH, width)
        out = [color('MY TASKS', HEADER_COLOR), color('-' * width, HEADER_COLOR)]
        for position, row in enumerate(self.surface.children, start=1):
            out.extend(row.lines(position, width))
        if self.empty_visible:
            out.append(color(EMPTY_MESSAGE, EMPTY_COLOR))
        if self.clear_all_visible:
            out.append('')
            out.append(color(CLEAR_ALL_LABEL, HEADER_COLOR))
        return out

    def display(self) -> None:
        for line in self.render_lines():
            print(line)
