"""Command-line interface for dgpt."""

import logging
from pathlib import Path
from typing import Iterable, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import ui
from .config import Config, ConfigModel, get_config
from .exceptions import DgptError
from .parser import parse
from .storage import Storage
from .task_list import TaskList

logger = logging.getLogger(__name__)

EXIT_COMMAND = "bye"


def get_console(config: Optional[ConfigModel] = None) -> Console:
    """Get a console that respects the no_color setting."""
    config = config or get_config()
    return Console(highlight=False, no_color=config.no_color)


def setup_logging(level: str, verbose: bool = False) -> None:
    """Route log records through rich, once per process."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def respond(line: str, task_list: TaskList, storage: Storage) -> str:
    """Run one command line and turn recoverable errors into a response."""
    try:
        return parse(line, task_list, storage)
    except DgptError as e:
        logger.debug("Command %r rejected: %s", line, e)
        return ui.error(e)


def print_response(console: Console, response: str) -> None:
    style = "red" if response.startswith("OOPS") else None
    console.print(response, style=style, markup=False, soft_wrap=True)


def run_session(console: Console, task_list: TaskList, storage: Storage) -> None:
    """Read commands until ``bye``, end of input or Ctrl-C."""
    console.print(ui.welcome(), markup=False)
    while True:
        try:
            line = console.input("\n> ").strip()
        except (KeyboardInterrupt, EOFError):
            break
        if not line:
            continue
        if line == EXIT_COMMAND:
            break
        print_response(console, respond(line, task_list, storage))
    console.print(ui.goodbye(), markup=False)


def run_lines(console: Console, lines: Iterable[str], task_list: TaskList, storage: Storage) -> None:
    for line in lines:
        print_response(console, respond(line, task_list, storage))


@click.group(invoke_without_command=True)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config_path, verbose):
    """Dgpt - a personal task tracking assistant.

    Without a subcommand, starts an interactive session. Type "bye" to leave.
    """
    ctx.ensure_object(dict)
    config = Config.reload(config_path) if config_path else get_config()
    setup_logging(config.log_level, verbose)

    storage = Storage(config)
    ctx.obj['config'] = config
    ctx.obj['storage'] = storage
    ctx.obj['task_list'] = storage.load()
    ctx.obj['console'] = get_console(config)

    if ctx.invoked_subcommand is None:
        run_session(ctx.obj['console'], ctx.obj['task_list'], storage)


@main.command()
@click.argument("lines", nargs=-1, required=True)
@click.pass_context
def run(ctx, lines):
    """Run each LINE as a command, e.g. dgpt run "todo read book" save"""
    run_lines(ctx.obj['console'], lines, ctx.obj['task_list'], ctx.obj['storage'])


if __name__ == "__main__":
    main()
