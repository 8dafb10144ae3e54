"""CLI interface for talker."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from talker import __version__, ui
from talker.app import Talker
from talker.config import TalkerConfig
from talker.errors import TalkerError
from talker.logging_setup import setup_logging

console = Console()


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="talker")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .talker/config.json)",
)
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TALKER_DATA_FILE",
    default=None,
    help="Task file (default: data/talker.txt)",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, data_file: Path | None) -> None:
    """talker - a command-line task manager.

    Run without a command for an interactive session.

    \b
    Commands inside a session:
      todo read book
      deadline return book /by 20-06-2024 10:00
      event project week /from 10-06-2024 00:00 /to 14-06-2024 18:00
      list, mark 1, unmark 1, delete 1, setPriority 1 h
      find book, findPriority h, on 2024/06/12
      help, bye
    """
    ctx.ensure_object(dict)
    config = TalkerConfig.load(config_path)
    if data_file is not None:
        config = config.with_data_file(data_file)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        _run_interactive(config)


def _start(config: TalkerConfig) -> Talker:
    """Set up logging and load the task list, reporting a failed load."""
    setup_logging(config)
    talker = Talker(config)
    if talker.load_error:
        console.print(Text(talker.load_error, style="yellow"))
    return talker


def _run_interactive(config: TalkerConfig) -> None:
    """Read-execute-print loop until ``bye`` or end of input."""
    talker = _start(config)
    console.print(Panel.fit(Text(ui.welcome(config.name)), title=config.name))

    while True:
        try:
            line = console.input("[bold cyan]>[/bold cyan] ")
        except EOFError:
            console.print(Text(ui.goodbye()))
            break

        try:
            reply = talker.execute(line)
        except TalkerError as e:
            console.print(Text(e.message, style="red"))
            continue

        console.print(Text(reply.text))
        if reply.is_exit:
            break


@main.command("run")
@click.argument("command", nargs=-1, required=True)
@click.pass_context
def run_command(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Run a single command and exit.

    \b
    Examples:
      talker run list
      talker run todo read book
      talker run "deadline return book /by 20-06-2024 10:00"
    """
    talker = _start(ctx.obj["config"])
    try:
        reply = talker.execute(" ".join(command))
    except TalkerError as e:
        console.print(Text(e.message, style="red"))
        ctx.exit(1)
        return

    console.print(Text(reply.text))
