"""Task model for talker.

Three variants share one contract: plain to-dos, deadlines and events.
Each variant knows how to display itself, how to write its storage line and
whether it occurs on a given date, so callers never inspect the type.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import ClassVar

from talker.errors import FormatError

# dd-MM-yyyy HH:mm, used for command input and the task file
DATETIME_FORMAT = "%d-%m-%Y %H:%M"
DISPLAY_FORMAT = "%Y/%m/%d %H%M"
STORAGE_DELIMITER = " | "
# strptime alone accepts unpadded fields such as 1-6-2024 9:5
_DATETIME_PATTERN = re.compile(r"\d{2}-\d{2}-\d{4} \d{2}:\d{2}")

DATETIME_HINT = "dd-MM-yyyy HH:mm (01-01-2024 00:00)"


class Priority(str, Enum):
    """Task priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def code(self) -> str:
        """One-letter code used in commands and the task file."""
        return self.value[0]

    @classmethod
    def from_code(cls, code: str) -> Priority | None:
        """Look up a priority by its one-letter code, or None if unknown."""
        for priority in cls:
            if priority.code == code:
                return priority
        return None


def parse_datetime(text: str) -> datetime:
    """Parse a date-time in dd-MM-yyyy HH:mm format.

    Raises:
        FormatError: If the text does not match the format.
    """
    text = text.strip()
    message = f"Invalid date-time format. Use {DATETIME_HINT}"
    if not _DATETIME_PATTERN.fullmatch(text):
        raise FormatError(message)
    try:
        return datetime.strptime(text, DATETIME_FORMAT)
    except ValueError as e:
        raise FormatError(message) from e


def _coerce_datetime(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return parse_datetime(value)


@dataclass(eq=False)
class Task:
    """A unit of work tracked by talker.

    Subclasses set ``tag`` and override the variant hooks. Equality is used
    for duplicate detection and ignores completion and priority.
    """

    tag: ClassVar[str] = "?"
    # number of date-time fields in the storage line
    date_fields: ClassVar[int] = 0

    description: str
    is_done: bool = field(default=False, kw_only=True)
    priority: Priority = field(default=Priority.MEDIUM, kw_only=True)

    def __post_init__(self) -> None:
        if not self.description or not self.description.strip():
            raise FormatError("Task description cannot be empty.")
        if "|" in self.description:
            raise FormatError("Task description cannot contain '|'.")

    def mark(self) -> Task:
        """Mark the task as done."""
        self.is_done = True
        return self

    def unmark(self) -> Task:
        """Mark the task as not done."""
        self.is_done = False
        return self

    def set_priority(self, priority: Priority) -> Task:
        """Replace the task's priority."""
        self.priority = priority
        return self

    @property
    def status_icon(self) -> str:
        return "X" if self.is_done else " "

    def occurs_on(self, target: date) -> bool:
        """Check whether the task is still relevant on the target date."""
        return False

    def to_display_string(self) -> str:
        """Render the task for the user, e.g. ``[T][X] read book``."""
        line = f"[{self.tag}][{self.status_icon}] {self.description}"
        suffix = self._display_suffix()
        if suffix:
            line += f" ({suffix})"
        return line

    def to_storage_line(self) -> str:
        """Render the task as one pipe-delimited line of the task file."""
        fields = [self.tag, "1" if self.is_done else "0", self.description]
        fields.extend(self._storage_fields())
        if self.priority is not Priority.MEDIUM:
            fields.append(self.priority.code)
        return STORAGE_DELIMITER.join(fields)

    @classmethod
    def from_storage_fields(
        cls, description: str, extra: list[str], is_done: bool, priority: Priority
    ) -> Task:
        """Rebuild a task from the variant-specific fields of a storage line."""
        return cls(description, is_done=is_done, priority=priority)

    def _key(self) -> tuple:
        return (self.description,)

    def _display_suffix(self) -> str:
        return ""

    def _storage_fields(self) -> list[str]:
        return []

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __str__(self) -> str:
        return self.to_display_string()


@dataclass(eq=False)
class ToDo(Task):
    """A plain task with no date."""

    tag: ClassVar[str] = "T"
    date_fields: ClassVar[int] = 0


@dataclass(eq=False)
class Deadline(Task):
    """A task that must be done by a date-time.

    ``by`` accepts a datetime or a dd-MM-yyyy HH:mm string.
    """

    tag: ClassVar[str] = "D"
    date_fields: ClassVar[int] = 1

    by: datetime

    def __post_init__(self) -> None:
        super().__post_init__()
        self.by = _coerce_datetime(self.by)

    def occurs_on(self, target: date) -> bool:
        return not self.is_done and target <= self.by.date()

    @classmethod
    def from_storage_fields(
        cls, description: str, extra: list[str], is_done: bool, priority: Priority
    ) -> Task:
        return cls(description, extra[0], is_done=is_done, priority=priority)

    def _key(self) -> tuple:
        return (self.description, self.by)

    def _display_suffix(self) -> str:
        return f"by: {self.by.strftime(DISPLAY_FORMAT)}"

    def _storage_fields(self) -> list[str]:
        return [self.by.strftime(DATETIME_FORMAT)]


@dataclass(eq=False)
class Event(Task):
    """A task spanning a start and end date-time.

    Construction fails if the event starts after it ends.
    """

    tag: ClassVar[str] = "E"
    date_fields: ClassVar[int] = 2

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        super().__post_init__()
        self.start = _coerce_datetime(self.start)
        self.end = _coerce_datetime(self.end)
        if self.start > self.end:
            raise FormatError("Start of event has to be before end of event!")

    def occurs_on(self, target: date) -> bool:
        if self.is_done:
            return False
        return self.start.date() <= target <= self.end.date()

    @classmethod
    def from_storage_fields(
        cls, description: str, extra: list[str], is_done: bool, priority: Priority
    ) -> Task:
        return cls(description, extra[0], extra[1], is_done=is_done, priority=priority)

    def _key(self) -> tuple:
        return (self.description, self.start, self.end)

    def _display_suffix(self) -> str:
        return (
            f"from: {self.start.strftime(DISPLAY_FORMAT)}"
            f" to: {self.end.strftime(DISPLAY_FORMAT)}"
        )

    def _storage_fields(self) -> list[str]:
        return [self.start.strftime(DATETIME_FORMAT), self.end.strftime(DATETIME_FORMAT)]


# Storage tag -> task class
TASK_TYPES: dict[str, type[Task]] = {cls.tag: cls for cls in (ToDo, Deadline, Event)}
