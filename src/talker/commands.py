"""Command table mapping user commands to task list operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from talker import ui
from talker.errors import FormatError, StorageError
from talker.storage import Storage
from talker.task_list import (
    DELETE_USAGE,
    FIND_PRIORITY_USAGE,
    MARK_USAGE,
    SET_PRIORITY_USAGE,
    UNMARK_USAGE,
    TaskList,
    parse_priority,
    parse_query_date,
)

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Sorry, I don't know what that means. Type 'help' to see all commands."
EMPTY_COMMAND = "Please enter a command. Type 'help' to see all commands."


@dataclass
class Reply:
    """Text to show the user, and whether the session should end."""

    text: str
    is_exit: bool = False


# (full command line, arguments after the command word) -> reply
CommandHandler = Callable[[str, list[str]], Reply]


class CommandRegistry:
    """Case-insensitive table of command handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._usage: dict[str, str] = {}

    def register(self, name: str, handler: CommandHandler, usage: str) -> None:
        key = name.lower()
        self._handlers[key] = handler
        self._usage[key] = usage

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._handlers

    def handle(self, line: str) -> Reply:
        """Run the handler for the first word of ``line``.

        Raises:
            TalkerError: Whatever the handler raises; FormatError for an
                empty or unknown command.
        """
        stripped = line.strip()
        if not stripped:
            raise FormatError(EMPTY_COMMAND)

        word, _, rest = stripped.partition(" ")
        name = word.lower()
        handler = self._handlers.get(name)
        if handler is None:
            raise FormatError(UNKNOWN_COMMAND)

        logger.debug("Running command %r", stripped)
        # Handlers see the command word in lowercase
        return handler(f"{name} {rest}".rstrip(), rest.split())

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for usage in self._usage.values():
            lines.append(f"  {usage}")
        return "\n".join(lines)


def _expect_args(args: list[str], count: int, usage: str) -> None:
    if len(args) != count:
        raise FormatError(usage)


def build_registry(task_list: TaskList, storage: Storage | None = None) -> CommandRegistry:
    """Build the command table for one task list.

    Mutating commands save the list through ``storage`` afterwards. A failed
    save keeps the change in memory and adds a warning to the reply.
    """
    registry = CommandRegistry()

    def persist(text: str) -> Reply:
        if storage is None:
            return Reply(text)
        try:
            storage.save(task_list)
        except StorageError as e:
            logger.error("Save failed: %s", e.message)
            return Reply(f"{text}\n{ui.save_failed(e.message)}")
        return Reply(text)

    def cmd_create(line: str, args: list[str]) -> Reply:
        task, size = task_list.create(line)
        return persist(ui.task_added(task, size))

    def cmd_list(line: str, args: list[str]) -> Reply:
        return Reply(ui.task_list(task_list.list_all()))

    def cmd_mark(line: str, args: list[str]) -> Reply:
        _expect_args(args, 1, MARK_USAGE)
        return persist(ui.task_marked(task_list.mark(args[0])))

    def cmd_unmark(line: str, args: list[str]) -> Reply:
        _expect_args(args, 1, UNMARK_USAGE)
        return persist(ui.task_unmarked(task_list.unmark(args[0])))

    def cmd_delete(line: str, args: list[str]) -> Reply:
        _expect_args(args, 1, DELETE_USAGE)
        task, size = task_list.delete(args[0])
        return persist(ui.task_deleted(task, size))

    def cmd_set_priority(line: str, args: list[str]) -> Reply:
        _expect_args(args, 2, SET_PRIORITY_USAGE)
        return persist(ui.priority_set(task_list.set_priority(args[0], args[1])))

    def cmd_find(line: str, args: list[str]) -> Reply:
        keyword = line.partition(" ")[2].strip()
        return Reply(ui.matching_tasks(task_list.find_by_keyword(keyword)))

    def cmd_find_priority(line: str, args: list[str]) -> Reply:
        _expect_args(args, 1, FIND_PRIORITY_USAGE)
        priority = parse_priority(args[0], FIND_PRIORITY_USAGE)
        return Reply(ui.priority_tasks(priority, task_list.find_by_priority(priority)))

    def cmd_on(line: str, args: list[str]) -> Reply:
        target = parse_query_date(line)
        return Reply(ui.tasks_on(target, task_list.tasks_on_date(target)))

    def cmd_help(line: str, args: list[str]) -> Reply:
        return Reply(registry.build_help())

    def cmd_bye(line: str, args: list[str]) -> Reply:
        return Reply(ui.goodbye(), is_exit=True)

    registry.register("todo", cmd_create, "todo <description>")
    registry.register(
        "deadline", cmd_create, "deadline <description> /by <dd-MM-yyyy HH:mm>"
    )
    registry.register(
        "event",
        cmd_create,
        "event <description> /from <dd-MM-yyyy HH:mm> /to <dd-MM-yyyy HH:mm>",
    )
    registry.register("list", cmd_list, "list")
    registry.register("mark", cmd_mark, "mark <task number>")
    registry.register("unmark", cmd_unmark, "unmark <task number>")
    registry.register("delete", cmd_delete, "delete <task number>")
    registry.register("setPriority", cmd_set_priority, "setPriority <task number> <h/m/l>")
    registry.register("find", cmd_find, "find <keyword>")
    registry.register("findPriority", cmd_find_priority, "findPriority <h/m/l>")
    registry.register("on", cmd_on, "on <yyyy/MM/dd>")
    registry.register("help", cmd_help, "help")
    registry.register("bye", cmd_bye, "bye")

    return registry
