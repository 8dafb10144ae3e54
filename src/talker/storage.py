"""Task file persistence.

The task file holds one task per line, fields separated by `` | ``::

    T | 0 | read book
    D | 1 | return book | 20-06-2024 10:00
    E | 0 | project week | 10-06-2024 00:00 | 20-06-2024 00:00 | h

The trailing priority code is only written when the priority is not medium.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from talker.errors import FormatError, StorageError
from talker.task_list import TaskList
from talker.tasks import STORAGE_DELIMITER, TASK_TYPES, Priority, Task

logger = logging.getLogger(__name__)

_STATUS = {"0": False, "1": True}


def encode(tasks: Iterable[Task]) -> str:
    """Serialise tasks to the task file format, one line each."""
    return "".join(task.to_storage_line() + "\n" for task in tasks)


def decode_line(line: str) -> Task:
    """Parse one storage line back into a task.

    Raises:
        StorageError: If the line is malformed.
    """
    fields = line.rstrip("\r\n").split(STORAGE_DELIMITER)
    if len(fields) < 3:
        raise StorageError(f"Expected at least 3 fields, found {len(fields)}")

    tag, status, description, *extra = fields
    task_cls = TASK_TYPES.get(tag.strip())
    if task_cls is None:
        raise StorageError(f"Unknown task type {tag!r}")
    if status.strip() not in _STATUS:
        raise StorageError(f"Invalid status {status!r}")

    priority = Priority.MEDIUM
    if len(extra) == task_cls.date_fields + 1:
        code = extra.pop().strip()
        found = Priority.from_code(code)
        if found is None:
            raise StorageError(f"Invalid priority {code!r}")
        priority = found
    elif len(extra) != task_cls.date_fields:
        raise StorageError(f"Wrong number of fields for task type {tag!r}")

    try:
        return task_cls.from_storage_fields(
            description, extra, is_done=_STATUS[status.strip()], priority=priority
        )
    except FormatError as e:
        raise StorageError(e.message) from e


def decode(text: str) -> list[Task]:
    """Parse the whole task file. Blank lines are ignored.

    The first malformed or duplicate line fails the whole decode, so a
    partly-read file never replaces the list.

    Raises:
        StorageError: Naming the first bad line.
    """
    tasks: list[Task] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            task = decode_line(line)
        except StorageError as e:
            raise StorageError(f"Corrupted task file at line {number}: {e.message}") from e
        if task in tasks:
            raise StorageError(f"Corrupted task file at line {number}: duplicate task")
        tasks.append(task)
    return tasks


class Storage:
    """Reads and writes the task file at a fixed path."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> TaskList:
        """Load the task list, creating the data directory on first run.

        A missing file gives an empty list.

        Raises:
            StorageError: If the file cannot be read or parsed.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                logger.info("No task file at %s, starting empty", self.path)
                return TaskList()
            with open(self.path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Unable to read {self.path}: {e}") from e

        task_list = TaskList(decode(text))
        logger.info("Loaded %d tasks from %s", len(task_list), self.path)
        return task_list

    def save(self, task_list: Iterable[Task]) -> None:
        """Write every task to the file.

        The content goes to a temporary file first and replaces the task file
        in one step, so a failed write leaves the old file intact.

        Raises:
            StorageError: If the file cannot be written.
        """
        content = encode(task_list)
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(content)
            os.replace(tmp_name, self.path)
        except (OSError, UnicodeEncodeError) as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Unable to write to file. Error occurred: {e}") from e
        logger.debug("Saved %d lines to %s", content.count("\n"), self.path)

    def quarantine(self) -> Path | None:
        """Move an unreadable task file aside as ``<name>.corrupt``.

        Returns:
            The new path, or None if there was no file to move.
        """
        if not self.path.is_file():
            return None
        target = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, target)
        except OSError as e:
            raise StorageError(f"Unable to move {self.path} aside: {e}") from e
        logger.warning("Moved unreadable task file to %s", target)
        return target
