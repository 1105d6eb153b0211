"""Main entry point for the terminal task list."""
from typing import Optional

import click

from config import get_settings
from logging_setup import setup_logging
from storage import FileKeyValueStore
from tasklist import TaskStore
from view import TaskListView
from cli import CLI

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


@click.command()
@click.option('--data-dir', type=click.Path(file_okay=False), default=None,
              help='Directory holding tasks.json (default: $TASKS_DATA_DIR or ./data).')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help='Log file verbosity (default: $TASKS_LOG_LEVEL or INFO).')
@click.option('--alt-screen/--no-alt-screen', default=None,
              help='Draw in the terminal alternate screen (default on).')
def main(data_dir: Optional[str], log_level: Optional[str], alt_screen: Optional[bool]) -> None:
    """Manage a simple to-do list in the terminal."""
    settings = get_settings()
    data_path = click.format_filename(data_dir) if data_dir else str(settings.data_dir)
    log_dir = settings.log_dir if data_dir is None else f'{data_path}/logs'
    level = (log_level or settings.log_level).upper()
    if level not in LOG_LEVELS:
        level = 'INFO'
    setup_logging(log_dir=log_dir, file_level=level)

    store = TaskStore(FileKeyValueStore(data_path))
    store.load()
    view = TaskListView(store)
    view.mount()
    CLI(view, alt_screen=settings.alt_screen if alt_screen is None else alt_screen).run()


if __name__ == "__main__":
    main()
