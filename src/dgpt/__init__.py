"""Dgpt - a personal task tracking assistant driven by one-line commands."""

__version__ = "0.1.0"
__author__ = "Dgpt Team"

from .exceptions import DateFormatError, DgptError, IncorrectInputError, TaskNotFoundError
from .parser import CommandParser, parse
from .task import Deadline, Event, Recurring, Task, ToDo
from .task_list import TaskList

__all__ = [
    "Task",
    "ToDo",
    "Deadline",
    "Event",
    "Recurring",
    "TaskList",
    "CommandParser",
    "parse",
    "DgptError",
    "IncorrectInputError",
    "TaskNotFoundError",
    "DateFormatError",
    "__version__",
]
