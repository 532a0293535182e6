"""The ordered, in-memory task list that every command operates on."""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .exceptions import TaskNotFoundError
from .task import Deadline, Event, Recurring, Task, ToDo
from .utils.datetime import parse_date

logger = logging.getLogger(__name__)


class TaskList:
    """Ordered collection of tasks.

    Positions are 0-based here; the parser converts the 1-based numbers the
    user types. Deleting a task shifts every later task down by one.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None, date_format: Optional[str] = None):
        self._tasks: List[Task] = list(tasks or [])
        self.date_format = date_format

    # -------------------- queries --------------------
    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __getitem__(self, index: int) -> Task:
        return self._tasks[self._check_index(index)]

    def __eq__(self, other) -> bool:
        if not isinstance(other, TaskList):
            return NotImplemented
        return self._tasks == other._tasks

    def __repr__(self) -> str:
        return f"TaskList({self._tasks!r})"

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def size(self) -> int:
        return len(self._tasks)

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._tasks)

    def find(self, keyword: str) -> List[Task]:
        """Return tasks whose description contains ``keyword`` (case-sensitive)."""
        return [task for task in self._tasks if keyword in task.description]

    # -------------------- adding --------------------
    def add(self, task: Task) -> Task:
        self._tasks.append(task)
        logger.debug("Added %s task at position %d", task.kind, len(self._tasks))
        return task

    def add_todo(self, description: str) -> Task:
        return self.add(ToDo(description))

    def add_deadline(self, description: str, due_date_text: str) -> Task:
        """Add a Deadline. Raises DateFormatError before touching the list."""
        due_date = parse_date(due_date_text, self.date_format)
        return self.add(Deadline(description, due_date))

    def add_event(self, description: str, start_text: str, end_text: str) -> Task:
        """Add an Event. Both dates are parsed before the list is modified."""
        start = parse_date(start_text, self.date_format)
        end = parse_date(end_text, self.date_format)
        return self.add(Event(description, start, end))

    def add_recurring(self, description: str, frequency: str) -> Task:
        return self.add(Recurring(description, frequency))

    # -------------------- mutation by position --------------------
    def mark(self, index: int) -> Task:
        task = self[index]
        task.mark()
        return task

    def unmark(self, index: int) -> Task:
        task = self[index]
        task.unmark()
        return task

    def delete(self, index: int) -> Task:
        """Remove and return the task at ``index``."""
        task = self._tasks.pop(self._check_index(index))
        logger.debug("Deleted task at position %d, %d left", index + 1, len(self._tasks))
        return task

    def _check_index(self, index: int) -> int:
        if not self.is_valid_index(index):
            raise TaskNotFoundError(index=index)
        return index
