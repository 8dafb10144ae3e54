"""Errors raised by the talker core.

Every error carries a message meant for the user. None of them should end
the session: the dispatcher renders the message and reads the next command.
"""

from __future__ import annotations


class TalkerError(Exception):
    """Base class for all user-recoverable talker errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class FormatError(TalkerError):
    """Command arguments or a date-time could not be parsed."""


class NotFoundError(TalkerError):
    """A task number does not refer to any task in the list."""


class DuplicateError(TalkerError):
    """The task being added is equal to one already in the list."""


class EmptyListError(TalkerError):
    """A query was made against an empty list."""


class StorageError(TalkerError):
    """The task file could not be read, parsed or written."""
