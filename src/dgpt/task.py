"""Task data model for the dgpt assistant.

A task is a description plus a completion flag. Variants add their own
scheduling fields and a single-letter tag used when rendering:

    [T][ ] buy milk
    [D][X] submit report (by: Dec 1 2024)
    [E][ ] conference (from: Jun 3 2024 to: Jun 5 2024)
    [R][ ] water plants (every: sunday)
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar, Dict, Type

from .utils.datetime import format_date, parse_date, to_input_string


def _as_date(value: Any) -> date:
    """Accept either a ``date`` or input-format text."""
    if isinstance(value, date):
        return value
    return parse_date(value)


@dataclass
class Task:
    """Base task with a description and a completion flag.

    ``done`` is not a constructor argument: every task starts pending and
    only ``mark()``/``unmark()`` change it.
    """

    tag: ClassVar[str] = ""
    kind: ClassVar[str] = ""

    description: str
    done: bool = field(default=False, init=False)

    def mark(self) -> None:
        """Mark the task as done."""
        self.done = True

    def unmark(self) -> None:
        """Mark the task as not done."""
        self.done = False

    def get_description(self) -> str:
        return self.description

    @property
    def status_icon(self) -> str:
        return "X" if self.done else " "

    def get_status_icon(self) -> str:
        return self.status_icon

    def suffix(self) -> str:
        """Variant-specific text shown after the description."""
        return ""

    def render(self) -> str:
        return f"[{self.tag}][{self.status_icon}] {self.description}{self.suffix()}"

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> Dict[str, Any]:
        """Convert the task to a plain dictionary with input-format dates."""
        return {"type": self.kind, "description": self.description, "done": self.done}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create a task of the right variant from a dictionary."""
        kind = data.get("type")
        variant = TASK_TYPES.get(kind)
        if variant is None:
            raise ValueError(f"Unknown task type: {kind!r}")
        task = variant._from_fields(data)
        if data.get("done", False):
            task.mark()
        return task

    @classmethod
    def _from_fields(cls, data: Dict[str, Any]) -> "Task":
        return cls(description=data["description"])


@dataclass
class ToDo(Task):
    """A plain task with no date attached."""

    tag: ClassVar[str] = "T"
    kind: ClassVar[str] = "todo"


@dataclass
class Deadline(Task):
    """A task that has to be done by a date."""

    tag: ClassVar[str] = "D"
    kind: ClassVar[str] = "deadline"

    due_date: date

    def __post_init__(self):
        self.due_date = _as_date(self.due_date)

    def suffix(self) -> str:
        return f" (by: {format_date(self.due_date)})"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["by"] = to_input_string(self.due_date)
        return data

    @classmethod
    def _from_fields(cls, data: Dict[str, Any]) -> "Deadline":
        return cls(description=data["description"], due_date=data["by"])


@dataclass
class Event(Task):
    """A task spanning a start and an end date.

    No ordering is enforced between ``start_time`` and ``end_time``.
    """

    tag: ClassVar[str] = "E"
    kind: ClassVar[str] = "event"

    start_time: date
    end_time: date

    def __post_init__(self):
        self.start_time = _as_date(self.start_time)
        self.end_time = _as_date(self.end_time)

    def suffix(self) -> str:
        return f" (from: {format_date(self.start_time)} to: {format_date(self.end_time)})"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["from"] = to_input_string(self.start_time)
        data["to"] = to_input_string(self.end_time)
        return data

    @classmethod
    def _from_fields(cls, data: Dict[str, Any]) -> "Event":
        return cls(description=data["description"], start_time=data["from"], end_time=data["to"])


@dataclass
class Recurring(Task):
    """A task that repeats. The frequency is free text and is never parsed."""

    tag: ClassVar[str] = "R"
    kind: ClassVar[str] = "recurring"

    frequency: str

    def suffix(self) -> str:
        return f" (every: {self.frequency})"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["every"] = self.frequency
        return data

    @classmethod
    def _from_fields(cls, data: Dict[str, Any]) -> "Recurring":
        return cls(description=data["description"], frequency=data["every"])


TASK_TYPES: Dict[str, Type[Task]] = {
    variant.kind: variant for variant in (ToDo, Deadline, Event, Recurring)
}
