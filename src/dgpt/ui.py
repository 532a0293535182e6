"""Response text for every command.

These functions only build strings; printing and styling is left to the
CLI so the parser can be tested without a terminal.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .task import Task

NAME = "Dgpt"


def _count(size: int) -> str:
    return f"{size} task" if size == 1 else f"{size} tasks"


def _numbered(tasks: Iterable[Task]) -> str:
    return "\n".join(f"{number}. {task}" for number, task in enumerate(tasks, start=1))


def welcome() -> str:
    return f"Hello! I'm {NAME}.\nWhat can I do for you?"


def goodbye() -> str:
    return "Bye. Hope to see you again soon!"


def list_tasks(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "Your list is empty. Add something with \"todo\", \"deadline\", \"event\" or \"recurring\"."
    return "Here are the tasks in your list:\n" + _numbered(tasks)


def marked(task: Task) -> str:
    return f"Nice! I've marked this task as done:\n  {task}"


def unmarked(task: Task) -> str:
    return f"OK, I've marked this task as not done yet:\n  {task}"


def added(task: Task, size: int) -> str:
    return f"Got it. I've added this task:\n  {task}\nNow you have {_count(size)} in the list."


def deleted(task: Task, size: int) -> str:
    return f"Noted. I've removed this task:\n  {task}\nNow you have {_count(size)} in the list."


def found(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "There are no matching tasks in your list."
    return "Here are the matching tasks in your list:\n" + _numbered(tasks)


def saved(path: Optional[Union[str, Path]] = None) -> str:
    if path is None:
        return "Your tasks have been saved."
    return f"Your tasks have been saved to {path}."


def error(exc: BaseException) -> str:
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    return f"OOPS!!! {message}"


def unknown(suggestion: Optional[str] = None) -> str:
    text = "OOPS!!! I'm sorry, but I don't know what that means :-("
    if suggestion:
        text += f"\nDid you mean \"{suggestion}\"?"
    return text
