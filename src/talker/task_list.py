"""The task list: an ordered, duplicate-free collection of tasks.

All task numbers in the public methods are 1-based, as the user sees them.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from datetime import date, datetime

from talker.errors import DuplicateError, EmptyListError, FormatError, NotFoundError
from talker.tasks import Deadline, Event, Priority, Task, ToDo

QUERY_DATE_FORMAT = "%Y/%m/%d"
_QUERY_DATE_PATTERN = re.compile(r"\d{4}/\d{2}/\d{2}")

TODO_USAGE = "ToDo format wrong. Try again with: todo <description>"
DEADLINE_USAGE = (
    "Deadline format wrong. Try again with: deadline <description> /by <dd-MM-yyyy HH:mm>"
)
EVENT_USAGE = (
    "Event format wrong. Try again with: event <description> "
    "/from <dd-MM-yyyy HH:mm> /to <dd-MM-yyyy HH:mm>"
)
MARK_USAGE = "Mark format wrong. Try again with: mark <task number>"
UNMARK_USAGE = "Unmark format wrong. Try again with: unmark <task number>"
DELETE_USAGE = "Delete format wrong. Try again with: delete <task number>"
SET_PRIORITY_USAGE = (
    "SetPriority format wrong. Try again with: setPriority <task number> <h/m/l>"
)
FIND_USAGE = "Find format wrong. Try again with: find <keyword>"
FIND_PRIORITY_USAGE = "Invalid priority type found! Try again with: findPriority <h/m/l>"
ON_USAGE = "Incorrect date format. Try again with: yyyy/MM/dd"

NOT_FOUND_MESSAGE = "Task not found!"


def _parse_todo(args: str) -> Task:
    description = args.strip()
    if not description:
        raise FormatError(TODO_USAGE)
    return ToDo(description)


def _parse_deadline(args: str) -> Task:
    description, sep, by = args.partition(" /by ")
    if not sep or not description.strip() or not by.strip():
        raise FormatError(DEADLINE_USAGE)
    return Deadline(description.strip(), by)


def _parse_event(args: str) -> Task:
    description, sep, times = args.partition(" /from ")
    start, sep_to, end = times.partition(" /to ")
    if not (sep and sep_to) or not all(s.strip() for s in (description, start, end)):
        raise FormatError(EVENT_USAGE)
    return Event(description.strip(), start, end)


# Command word -> parser for the rest of the line
_TASK_PARSERS: dict[str, Callable[[str], Task]] = {
    "todo": _parse_todo,
    "deadline": _parse_deadline,
    "event": _parse_event,
}

_USAGES = {"todo": TODO_USAGE, "deadline": DEADLINE_USAGE, "event": EVENT_USAGE}


def parse_priority(code: str, usage: str) -> Priority:
    """Resolve an h/m/l code, raising FormatError with ``usage`` otherwise."""
    priority = Priority.from_code(code)
    if priority is None:
        raise FormatError(usage)
    return priority


def parse_query_date(query: str) -> date:
    """Parse the target date out of an ``on yyyy/MM/dd`` command.

    Raises:
        FormatError: If the query is not exactly two tokens or the date is invalid.
    """
    tokens = query.split()
    if len(tokens) != 2:
        raise FormatError(ON_USAGE)
    if not _QUERY_DATE_PATTERN.fullmatch(tokens[1]):
        raise FormatError(ON_USAGE)
    try:
        return datetime.strptime(tokens[1], QUERY_DATE_FORMAT).date()
    except ValueError as e:
        raise FormatError(ON_USAGE) from e


class TaskList:
    """Ordered collection of tasks with no two equal tasks."""

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = []
        for task in tasks or []:
            self.add(task)

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of the tasks in list order."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def add(self, task: Task) -> int:
        """Append a task, returning the new size.

        Raises:
            DuplicateError: If an equal task is already in the list.
        """
        if task in self._tasks:
            raise DuplicateError("You already have this task added!")
        self._tasks.append(task)
        return len(self._tasks)

    def create(self, line: str) -> tuple[Task, int]:
        """Create a task from a ``todo``, ``deadline`` or ``event`` command.

        Args:
            line: The full command, e.g. ``deadline return book /by 01-01-2024 00:00``.

        Returns:
            The new task and the size of the list after adding it.
        """
        command, _, args = line.strip().partition(" ")
        parser = _TASK_PARSERS.get(command)
        if parser is None:
            raise FormatError(
                "Unknown task type. Use one of: " + ", ".join(_TASK_PARSERS)
            )
        if not args.strip():
            raise FormatError(_USAGES[command])
        task = parser(args)
        return task, self.add(task)

    def _resolve(self, index: str | int, usage: str) -> int:
        try:
            number = int(index)
        except (TypeError, ValueError) as e:
            raise FormatError(usage) from e
        if not 1 <= number <= len(self._tasks):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return number - 1

    def mark(self, index: str | int) -> Task:
        """Mark the task at a 1-based index as done."""
        return self._tasks[self._resolve(index, MARK_USAGE)].mark()

    def unmark(self, index: str | int) -> Task:
        """Mark the task at a 1-based index as not done."""
        return self._tasks[self._resolve(index, UNMARK_USAGE)].unmark()

    def set_priority(self, index: str | int, code: str) -> Task:
        """Set the priority of a task from an h/m/l code."""
        try:
            int(index)
        except (TypeError, ValueError) as e:
            raise FormatError(SET_PRIORITY_USAGE) from e
        priority = parse_priority(code, SET_PRIORITY_USAGE)
        return self._tasks[self._resolve(index, SET_PRIORITY_USAGE)].set_priority(priority)

    def delete(self, index: str | int) -> tuple[Task, int]:
        """Remove the task at a 1-based index.

        Returns:
            The removed task and the size of the list afterwards.
        """
        removed = self._tasks.pop(self._resolve(index, DELETE_USAGE))
        return removed, len(self._tasks)

    def list_all(self) -> list[Task]:
        """Return every task.

        Raises:
            EmptyListError: If there are no tasks.
        """
        if not self._tasks:
            raise EmptyListError("List is empty!")
        return list(self._tasks)

    def find_by_keyword(self, keyword: str) -> list[Task]:
        """Return tasks whose description contains the keyword (case-sensitive)."""
        if not keyword or not keyword.strip():
            raise FormatError(FIND_USAGE)
        return [task for task in self._tasks if keyword in task.description]

    def find_by_priority(self, priority: Priority | str) -> list[Task]:
        """Return tasks with a priority, given as a Priority or an h/m/l code."""
        if not isinstance(priority, Priority):
            priority = parse_priority(priority, FIND_PRIORITY_USAGE)
        return [task for task in self._tasks if task.priority is priority]

    def tasks_on(self, query: str) -> list[Task]:
        """Return unfinished tasks still relevant on the date of an ``on`` command.

        Deadlines match up to and including their due date. Events match
        from their start date to their end date inclusive. To-dos never match.
        """
        return self.tasks_on_date(parse_query_date(query))

    def tasks_on_date(self, target: date) -> list[Task]:
        """Return unfinished tasks still relevant on the target date."""
        return [task for task in self._tasks if task.occurs_on(target)]
