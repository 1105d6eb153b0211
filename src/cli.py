"""Command-line interface loop for the task list.

Rows are addressed by their on-screen position (1, 2, ...); the stored ids
are millisecond timestamps and too long to type. Feedback from a command is
kept in self.message and shown under the list on the next redraw.
"""
import logging
from typing import Callable, List, Optional, Tuple

import click

from storage import StorageError
from view import TaskListView

logger = logging.getLogger(__name__)

# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home).
# Order (3J first) improves reliability in some terminals.
def _clear_screen() -> None:  # pragma: no cover
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


def _confirm_clear(question: str) -> bool:
    return click.confirm(question, default=False)


def parse_add_args(tokens: List[str]) -> Tuple[str, Optional[str], Optional[str]]:
    """Split 'add' arguments into (text, due_date, due_time).

    '--due YYYY-MM-DD' and '--at HH:MM' may appear anywhere; the remaining
    words form the text. Raises ValueError when a flag has no value.
    """
    words: List[str] = []
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    it = iter(tokens)
    for tok in it:
        if tok in ('--due', '--at'):
            value = next(it, None)
            if value is None:
                raise ValueError(f"{tok} needs a value.")
            if tok == '--due':
                due_date = value
            else:
                due_time = value
        else:
            words.append(tok)
    return ' '.join(words), due_date, due_time


class CLI:
    def __init__(self, view: TaskListView, alt_screen: bool = True,
                 confirm: Callable[[str], bool] = _confirm_clear,
                 prompt: Callable[[str], str] = input):
        self.view: TaskListView = view
        self.alt_screen: bool = alt_screen
        self.confirm = confirm
        self.prompt = prompt
        self.message: Optional[str] = None

    def run(self) -> None:
        """Main REPL loop; the list is cleared/redrawn each cycle.

        Every command persists through the store as it runs, so leaving the
        loop (exit, Ctrl-C, EOF) needs no final save.
        """
        exit_message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                self._draw()
                line = self.prompt("\n: ").strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    self._help()
                    self.prompt("\nPress Enter to return to the list...")
                    continue
                if lower in ('exit', 'quit', 'q'):
                    exit_message = "Goodbye."
                    break
                self.handle_command(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)

    def _draw(self) -> None:
        _clear_screen()
        self.view.display()
        if self.message:
            print(f"\n{self.message}")
            self.message = None

    # -------------------- command dispatch --------------------
    def handle_command(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        cmd = tokens[0].lower()
        try:
            if cmd == 'add':
                self._cmd_add(tokens[1:])
            elif cmd in ('x', 'toggle', 'done'):
                self._cmd_toggle(tokens)
            elif cmd in ('rm', 'del', 'delete'):
                self._cmd_rm(tokens)
            elif cmd == 'clear':
                self._cmd_clear()
            else:
                self.message = "Unknown command. Type 'help' for instructions."
        except ValueError as exc:
            self.message = str(exc)
        except StorageError as exc:
            logger.error("Save failed: %s", exc)
            self.message = f"Could not save tasks: {exc}"

    # ---- individual command helpers ----
    def _cmd_add(self, args: List[str]) -> None:
        if args:
            text, due_date, due_time = parse_add_args(args)
        else:
            text, due_date, due_time = self._add_prompts()
        self.view.add(text, due_date, due_time)

    def _add_prompts(self) -> Tuple[str, Optional[str], Optional[str]]:
        text = self.prompt("Task: ").strip()
        if not text:
            return '', None, None
        due_date = self.prompt("Due date (YYYY-MM-DD, blank for none): ").strip()
        if not due_date:
            return text, None, None
        due_time = self.prompt("Due time (HH:MM, blank for end of day): ").strip()
        return text, due_date, due_time or None

    def _position(self, tokens: List[str], usage: str) -> Optional[int]:
        if len(tokens) != 2:
            self.message = usage
            return None
        raw = tokens[1].rstrip('.')
        if not raw.isdigit():
            self.message = "Invalid task number."
            return None
        return int(raw)

    def _cmd_toggle(self, tokens: List[str]) -> None:
        pos = self._position(tokens, "Usage: x <n>")
        if pos is None:
            return
        row = self.view.row_at(pos)
        if row is None:
            self.message = f"No task #{pos}."
            return
        row.check()

    def _cmd_rm(self, tokens: List[str]) -> None:
        pos = self._position(tokens, "Usage: rm <n>")
        if pos is None:
            return
        row = self.view.row_at(pos)
        if row is None:
            self.message = f"No task #{pos}."
            return
        row.press_delete()
        self.message = f'Task "{row.label}" deleted.'

    def _cmd_clear(self) -> None:
        if not self.view.clear_all_visible:
            self.message = "Nothing to clear."
            return
        if not self.confirm("Delete all tasks? This cannot be undone."):
            self.message = "Clear cancelled."
            return
        self.view.clear_all()
        self.message = "All tasks cleared."

    # -------------------- help --------------------
    def _help(self) -> None:
        print("Commands:")
        print("  add                              Add a task (prompts for text, date, time)")
        print("  add <text...> [--due D] [--at T] Shorthand add; D is YYYY-MM-DD, T is HH:MM")
        print("  x <n>                            Toggle task #n complete/incomplete")
        print("  rm <n>                           Delete task #n")
        print("  clear                            Delete all tasks (asks first)")
        print("  help                             Show this help (press Enter to return)")
        print("  exit                             Exit (tasks are saved as you go)")
