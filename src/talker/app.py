"""A talker session: the task list, its storage and the command table."""

from __future__ import annotations

import logging

from talker import ui
from talker.commands import CommandRegistry, Reply, build_registry
from talker.config import TalkerConfig
from talker.errors import StorageError
from talker.storage import Storage
from talker.task_list import TaskList

logger = logging.getLogger(__name__)


class Talker:
    """Holds the task list for the lifetime of the process.

    A task file that cannot be loaded is reported through ``load_error`` and
    moved aside, and the session starts with an empty list.
    """

    def __init__(self, config: TalkerConfig, storage: Storage | None = None) -> None:
        self.config = config
        self.storage = storage or Storage(config.storage.path)
        self.load_error: str | None = None
        self.task_list = self._load()
        self.registry: CommandRegistry = build_registry(self.task_list, self.storage)

    def _load(self) -> TaskList:
        try:
            return self.storage.load()
        except StorageError as e:
            logger.error("Could not load %s: %s", self.storage.path, e.message)
            moved = None
            try:
                moved = self.storage.quarantine()
            except StorageError as qe:
                logger.error(qe.message)
            self.load_error = ui.load_failed(e.message, str(moved) if moved else None)
            return TaskList()

    def execute(self, line: str) -> Reply:
        """Run one command line.

        Raises:
            TalkerError: If the command fails; the session stays usable.
        """
        return self.registry.handle(line)
