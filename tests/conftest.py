"""Shared fixtures for talker tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from talker.task_list import TaskList
from talker.tasks import Deadline, Event, Priority, ToDo


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def data_file(temp_project: Path) -> Path:
    """Path to a task file inside the temporary project (not yet created)."""
    return temp_project / "data" / "talker.txt"


@pytest.fixture
def sample_lines() -> list[str]:
    """Storage lines covering every task type."""
    return [
        "T | 0 | read book",
        "D | 1 | return book | 20-06-2024 10:00",
        "E | 0 | project week | 10-06-2024 00:00 | 20-06-2024 00:00 | h",
    ]


@pytest.fixture
def sample_task_file(data_file: Path, sample_lines: list[str]) -> Path:
    """Write the sample lines to the task file."""
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("\n".join(sample_lines) + "\n")
    return data_file


@pytest.fixture
def sample_task_list() -> TaskList:
    """A task list with one task of each type."""
    return TaskList(
        [
            ToDo("read book"),
            Deadline("return book", "20-06-2024 10:00", is_done=True),
            Event(
                "project week",
                "10-06-2024 00:00",
                "20-06-2024 00:00",
                priority=Priority.HIGH,
            ),
        ]
    )
