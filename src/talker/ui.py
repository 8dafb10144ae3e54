"""Message formatting for talker replies.

Everything here returns plain text; the CLI decides how to draw it.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from talker.tasks import Priority, Task

DATE_DISPLAY_FORMAT = "%d/%m/%Y"


def _plural(count: int) -> str:
    return "task" if count == 1 else "tasks"


def format_tasks(tasks: Sequence[Task]) -> str:
    """Number tasks from 1, one per line."""
    return "\n".join(f"{i}. {task}" for i, task in enumerate(tasks, start=1))


def welcome(name: str) -> str:
    return f"Hello! I'm {name}\nWhat can I do for you?"


def goodbye() -> str:
    return "Bye. Hope to see you again soon!"


def task_added(task: Task, size: int) -> str:
    return (
        f"Got it. I've added this task:\n  {task}\n"
        f"Now you have {size} {_plural(size)} in the list."
    )


def task_deleted(task: Task, size: int) -> str:
    return (
        f"Noted. I've removed this task:\n  {task}\n"
        f"Now you have {size} {_plural(size)} in the list."
    )


def task_marked(task: Task) -> str:
    return f"Nice! I've marked this task as done:\n  {task}"


def task_unmarked(task: Task) -> str:
    return f"OK, I've marked this task as not done yet:\n  {task}"


def priority_set(task: Task) -> str:
    return f"Priority set to {task.priority.value}:\n  {task}"


def task_list(tasks: Sequence[Task]) -> str:
    return "Here are the tasks in your list:\n" + format_tasks(tasks)


def matching_tasks(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No matching tasks found."
    return "Here are the matching tasks in your list:\n" + format_tasks(tasks)


def priority_tasks(priority: Priority, tasks: Sequence[Task]) -> str:
    if not tasks:
        return f"No {priority.value} priority tasks found."
    return f"Here are your {priority.value} priority tasks:\n" + format_tasks(tasks)


def tasks_on(target: date, tasks: Sequence[Task]) -> str:
    day = target.strftime(DATE_DISPLAY_FORMAT)
    if not tasks:
        return f"No tasks on {day}!"
    return f"Here are the tasks on {day}:\n" + format_tasks(tasks)


def save_failed(message: str) -> str:
    return f"Warning: changes were not saved. {message}"


def load_failed(message: str, moved_to: str | None = None) -> str:
    text = f"Could not load saved tasks. {message}\nStarting with an empty list."
    if moved_to:
        text += f"\nThe old file was moved to {moved_to}."
    return text
