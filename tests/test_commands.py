"""Tests for talker.commands module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from talker.commands import UNKNOWN_COMMAND, CommandRegistry, Reply, build_registry
from talker.errors import (
    DuplicateError,
    EmptyListError,
    FormatError,
    NotFoundError,
    StorageError,
)
from talker.storage import Storage
from talker.task_list import TaskList
from talker.tasks import Priority


@pytest.fixture
def task_list() -> TaskList:
    return TaskList()


@pytest.fixture
def storage(data_file: Path) -> Storage:
    return Storage(data_file)


@pytest.fixture
def registry(task_list: TaskList, storage: Storage) -> CommandRegistry:
    return build_registry(task_list, storage)


class TestCommandRegistry:
    """Tests for CommandRegistry dispatch."""

    def test_register_and_handle(self) -> None:
        """Test a registered handler receives the line and arguments."""
        registry = CommandRegistry()
        handler = MagicMock(return_value=Reply("ok"))
        registry.register("echo", handler, "echo <text>")

        reply = registry.handle("  echo hello world ")

        assert reply.text == "ok"
        handler.assert_called_once_with("echo hello world", ["hello", "world"])

    def test_case_insensitive(self) -> None:
        """Test command names match regardless of case."""
        registry = CommandRegistry()
        handler = MagicMock(return_value=Reply("ok"))
        registry.register("setPriority", handler, "setPriority")

        registry.handle("SETPRIORITY 1 h")

        handler.assert_called_once_with("setpriority 1 h", ["1", "h"])
        assert "setPriority" in registry

    def test_unknown_command(self) -> None:
        """Test unknown commands are a FormatError."""
        with pytest.raises(FormatError, match="don't know what that means"):
            CommandRegistry().handle("dance")

    def test_empty_command(self) -> None:
        """Test blank input is a FormatError."""
        with pytest.raises(FormatError, match="Please enter a command"):
            CommandRegistry().handle("   ")

    def test_build_help(self) -> None:
        """Test help lists usages in registration order."""
        registry = CommandRegistry()
        registry.register("b", MagicMock(), "b <x>")
        registry.register("a", MagicMock(), "a")
        assert registry.build_help() == "Available commands:\n  b <x>\n  a"


class TestBuiltRegistry:
    """Tests for the command table built over a task list."""

    def test_every_command_registered(self, registry: CommandRegistry) -> None:
        """Test all commands are available."""
        for name in [
            "todo",
            "deadline",
            "event",
            "list",
            "mark",
            "unmark",
            "delete",
            "setPriority",
            "find",
            "findPriority",
            "on",
            "help",
            "bye",
        ]:
            assert name in registry

    def test_add_saves(
        self, registry: CommandRegistry, task_list: TaskList, data_file: Path
    ) -> None:
        """Test adding a task replies and saves the file."""
        reply = registry.handle("todo read book")
        assert "Got it. I've added this task:" in reply.text
        assert "[T][ ] read book" in reply.text
        assert "Now you have 1 task in the list." in reply.text
        assert len(task_list) == 1
        assert data_file.read_text() == "T | 0 | read book\n"

    def test_deadline_and_event(self, registry: CommandRegistry, data_file: Path) -> None:
        """Test deadline and event commands."""
        registry.handle("deadline return book /by 20-06-2024 10:00")
        reply = registry.handle("event camp /from 10-06-2024 00:00 /to 20-06-2024 00:00")
        assert "2 tasks" in reply.text
        assert data_file.read_text().splitlines() == [
            "D | 0 | return book | 20-06-2024 10:00",
            "E | 0 | camp | 10-06-2024 00:00 | 20-06-2024 00:00",
        ]

    def test_uppercase_command(self, registry: CommandRegistry, task_list: TaskList) -> None:
        """Test task creation works with an uppercase command word."""
        registry.handle("TODO read book")
        assert task_list.tasks[0].description == "read book"

    def test_duplicate(self, registry: CommandRegistry) -> None:
        """Test a duplicate add raises DuplicateError."""
        registry.handle("todo read book")
        with pytest.raises(DuplicateError):
            registry.handle("todo read book")

    def test_list(self, registry: CommandRegistry) -> None:
        """Test listing numbers tasks from 1."""
        registry.handle("todo read book")
        registry.handle("todo buy groceries")
        reply = registry.handle("list")
        assert reply.text == (
            "Here are the tasks in your list:\n"
            "1. [T][ ] read book\n"
            "2. [T][ ] buy groceries"
        )

    def test_list_empty(self, registry: CommandRegistry) -> None:
        """Test listing an empty list."""
        with pytest.raises(EmptyListError):
            registry.handle("list")

    def test_mark_unmark_delete(self, registry: CommandRegistry, data_file: Path) -> None:
        """Test the index commands and that each saves."""
        registry.handle("todo read book")

        reply = registry.handle("mark 1")
        assert "marked this task as done" in reply.text
        assert data_file.read_text() == "T | 1 | read book\n"

        reply = registry.handle("unmark 1")
        assert "not done yet" in reply.text
        assert data_file.read_text() == "T | 0 | read book\n"

        reply = registry.handle("delete 1")
        assert "removed this task" in reply.text
        assert "Now you have 0 tasks in the list." in reply.text
        assert data_file.read_text() == ""

    @pytest.mark.parametrize(
        ("line", "usage"),
        [
            ("mark", "mark <task number>"),
            ("mark 1 2", "mark <task number>"),
            ("unmark", "unmark <task number>"),
            ("delete", "delete <task number>"),
            ("setPriority 1", "setPriority <task number> <h/m/l>"),
            ("setPriority 1 h extra", "setPriority <task number> <h/m/l>"),
            ("findPriority", "findPriority <h/m/l>"),
            ("find", "find <keyword>"),
            ("on", "yyyy/MM/dd"),
        ],
    )
    def test_wrong_argument_count(
        self, registry: CommandRegistry, line: str, usage: str
    ) -> None:
        """Test missing or extra arguments name the grammar."""
        registry.handle("todo read book")
        with pytest.raises(FormatError, match=usage):
            registry.handle(line)

    def test_not_found(self, registry: CommandRegistry) -> None:
        """Test an out-of-range index."""
        with pytest.raises(NotFoundError):
            registry.handle("mark 1")

    def test_set_priority(
        self, registry: CommandRegistry, task_list: TaskList, data_file: Path
    ) -> None:
        """Test setting priority replies and saves."""
        registry.handle("todo read book")
        reply = registry.handle("setPriority 1 h")
        assert "Priority set to high" in reply.text
        assert task_list.tasks[0].priority is Priority.HIGH
        assert data_file.read_text() == "T | 0 | read book | h\n"

    def test_find(self, registry: CommandRegistry) -> None:
        """Test keyword search."""
        registry.handle("todo read book")
        registry.handle("todo buy groceries")
        reply = registry.handle("find book")
        assert "read book" in reply.text
        assert "groceries" not in reply.text

    def test_find_keeps_spaces(self, registry: CommandRegistry) -> None:
        """Test the keyword is the rest of the line."""
        registry.handle("todo read book")
        registry.handle("todo read books")
        reply = registry.handle("find read book")
        assert "1. [T][ ] read book" in reply.text
        assert "2. [T][ ] read books" in reply.text

    def test_find_no_match(self, registry: CommandRegistry) -> None:
        """Test an empty search result is a message, not an error."""
        registry.handle("todo read book")
        assert registry.handle("find car").text == "No matching tasks found."

    def test_find_priority(self, registry: CommandRegistry) -> None:
        """Test priority search."""
        registry.handle("todo read book")
        registry.handle("setPriority 1 l")
        assert "low priority tasks" in registry.handle("findPriority l").text
        assert registry.handle("findPriority h").text == "No high priority tasks found."

    @pytest.mark.parametrize("line", ["findPriority x", "findPriority high", "findPriority"])
    def test_find_priority_bad_code(self, registry: CommandRegistry, line: str) -> None:
        """Test an unknown or missing code names the grammar."""
        with pytest.raises(FormatError, match="findPriority <h/m/l>"):
            registry.handle(line)

    def test_on(self, registry: CommandRegistry) -> None:
        """Test the date query."""
        registry.handle("deadline essay /by 20-06-2024 10:00")
        reply = registry.handle("on 2024/06/15")
        assert reply.text.startswith("Here are the tasks on 15/06/2024:")
        assert "essay" in reply.text
        assert registry.handle("on 2024/06/21").text == "No tasks on 21/06/2024!"

    def test_help(self, registry: CommandRegistry) -> None:
        """Test help lists the grammar."""
        text = registry.handle("help").text
        assert "deadline <description> /by <dd-MM-yyyy HH:mm>" in text
        assert "on <yyyy/MM/dd>" in text

    def test_bye(self, registry: CommandRegistry) -> None:
        """Test bye ends the session."""
        reply = registry.handle("bye")
        assert reply.is_exit is True
        assert "Bye" in reply.text

    def test_queries_do_not_save(self, registry: CommandRegistry, data_file: Path) -> None:
        """Test read-only commands leave the file alone."""
        registry.handle("todo read book")
        data_file.write_text("T | 0 | read book\n# untouched\n")
        registry.handle("list")
        registry.handle("find book")
        assert data_file.read_text().endswith("# untouched\n")

    def test_save_failure_is_reported(self, task_list: TaskList) -> None:
        """Test a failed save keeps the change and warns."""
        storage = MagicMock(spec=Storage)
        storage.save.side_effect = StorageError("Unable to write to file. Error occurred: boom")
        registry = build_registry(task_list, storage)

        reply = registry.handle("todo read book")

        assert len(task_list) == 1
        assert "Got it." in reply.text
        assert "Warning: changes were not saved." in reply.text
        assert "boom" in reply.text

    def test_without_storage(self, task_list: TaskList) -> None:
        """Test the table works without storage."""
        registry = build_registry(task_list)
        registry.handle("todo read book")
        assert len(task_list) == 1

    def test_unknown(self, registry: CommandRegistry) -> None:
        """Test unknown commands."""
        with pytest.raises(FormatError, match=UNKNOWN_COMMAND.split(".")[0]):
            registry.handle("blah")
