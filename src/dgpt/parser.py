"""Command parser for dgpt.

Turns one line of user input into an operation on a ``TaskList`` and returns
the response text. The first space-delimited word is the command, the rest
of the line (the tail) holds its arguments:

    list
    mark <n> / unmark <n> / delete <n>
    todo <description>
    deadline <description> /by <yyyy-MM-dd>
    event <description> /from <yyyy-MM-dd> /to <yyyy-MM-dd>
    recurring <description> /every <frequency>
    find <keyword>
    save
"""

import logging
import re
from typing import Callable, Dict, Optional, Tuple, TYPE_CHECKING

from fuzzywuzzy import fuzz, process

from . import ui
from .exceptions import DateFormatError, IncorrectInputError, TaskNotFoundError
from .task_list import TaskList

if TYPE_CHECKING:
    from .storage import Storage

logger = logging.getLogger(__name__)

COMMANDS: Tuple[str, ...] = (
    "list", "mark", "unmark", "todo", "deadline", "event", "delete", "find", "save", "recurring",
)
LINE_BREAK_RE = re.compile(r"[\r\n]")
TASK_NUMBER_RE = re.compile(r"[+-]?[0-9]+")


def split_command(text: str) -> Tuple[str, Optional[str]]:
    """Split a line into its command word and tail.

    The line is split on the first space only; an empty tail is treated as
    absent.

    Raises:
        IncorrectInputError: If the line holds a line break.
    """
    text = text.strip()
    if LINE_BREAK_RE.search(text):
        raise IncorrectInputError("Please put each request on a single line.")
    parts = text.split(" ", 1)
    command = parts[0]
    tail = parts[1] if len(parts) == 2 and parts[1] else None
    return command, tail


def parse_index(tail: Optional[str], command: str) -> int:
    """Convert the single 1-based number after ``command`` to a 0-based index."""
    usage = f"You should have only 1 number after your request. (e.g. \"{command} 1\")"
    if tail is None or len(tail.split()) != 1:
        raise IncorrectInputError(usage)
    token = tail.strip()
    # int() alone would also take "1_0" and non-ASCII digits
    if not TASK_NUMBER_RE.fullmatch(token):
        raise IncorrectInputError(f"\"{token}\" is not a task number. {usage}")
    return int(token) - 1


class CommandParser:
    """Maps command lines onto task list operations.

    The parser keeps no state between calls apart from its compiled
    patterns; the task list and storage are passed in on every call.
    """

    def __init__(self):
        self.patterns = {
            'by': re.compile(r" /by "),
            'every': re.compile(r" /every "),
            'slash': re.compile(r" /"),
            'event': re.compile(r"^(?P<description>.+?) /from (?P<start>.+) /to (?P<end>.+)$"),
        }
        self.handlers: Dict[str, Callable[[Optional[str], TaskList, Optional["Storage"]], str]] = {
            'list': self._list,
            'mark': self._mark,
            'unmark': self._unmark,
            'todo': self._todo,
            'deadline': self._deadline,
            'event': self._event,
            'delete': self._delete,
            'find': self._find,
            'save': self._save,
            'recurring': self._recurring,
        }

    def parse(self, text: str, task_list: TaskList, storage: Optional["Storage"] = None) -> str:
        """Run one command line against ``task_list`` and return the response.

        Raises:
            IncorrectInputError: If the command line is malformed.
            TaskNotFoundError: If a task number is outside the list.
        """
        command, tail = split_command(text)
        handler = self.handlers.get(command)
        if handler is None:
            logger.debug("Unknown command %r", command)
            return ui.unknown(self.suggest(command))
        logger.debug("Dispatching %r with tail %r", command, tail)
        return handler(tail, task_list, storage)

    def suggest(self, command: str) -> Optional[str]:
        """Return the known command closest to a mistyped one, if any."""
        if not command:
            return None
        matches = process.extractBests(command, COMMANDS, scorer=fuzz.ratio, score_cutoff=70, limit=1)
        return matches[0][0] if matches else None

    # -------------------- queries --------------------
    def _list(self, tail, task_list, storage):
        if tail is not None:
            raise IncorrectInputError("You should not have anything after your request. (e.g. \"list\")")
        return ui.list_tasks(task_list.tasks)

    def _find(self, tail, task_list, storage):
        if tail is None:
            raise IncorrectInputError(
                "You should input what you're searching for after \"find\" (e.g. \"find book\")"
            )
        return ui.found(task_list.find(tail))

    # -------------------- by position --------------------
    def _checked_index(self, tail: Optional[str], command: str, task_list: TaskList) -> int:
        index = parse_index(tail, command)
        if not task_list.is_valid_index(index):
            raise TaskNotFoundError(index=index)
        return index

    def _mark(self, tail, task_list, storage):
        index = self._checked_index(tail, "mark", task_list)
        return ui.marked(task_list.mark(index))

    def _unmark(self, tail, task_list, storage):
        index = self._checked_index(tail, "unmark", task_list)
        return ui.unmarked(task_list.unmark(index))

    def _delete(self, tail, task_list, storage):
        index = self._checked_index(tail, "delete", task_list)
        task = task_list.delete(index)
        return ui.deleted(task, task_list.size())

    # -------------------- adding --------------------
    def _todo(self, tail, task_list, storage):
        if tail is None or not tail.strip():
            raise IncorrectInputError(
                "You should have a description after your request. (e.g. \"todo read book\")"
            )
        task = task_list.add_todo(tail)
        return ui.added(task, task_list.size())

    def _deadline(self, tail, task_list, storage):
        usage = "(e.g. \"deadline return book /by 2024-12-01\")"
        if tail is None:
            raise IncorrectInputError(f"You should have a description after your request. {usage}")
        parts = self.patterns['by'].split(tail)
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise IncorrectInputError(f"You should have a description and one \"/by\" date. {usage}")
        description, due = parts
        try:
            task = task_list.add_deadline(description, due)
        except DateFormatError as e:
            return ui.error(e)
        return ui.added(task, task_list.size())

    def _event(self, tail, task_list, storage):
        usage = "(e.g. \"event project meeting /from 2024-12-01 /to 2024-12-02\")"
        if tail is None:
            raise IncorrectInputError(f"You should have a description after your request. {usage}")
        if len(self.patterns['slash'].split(tail)) != 3:
            raise IncorrectInputError(f"You should have 2 timings after your request. {usage}")
        match = self.patterns['event'].match(tail)
        if match is None:
            raise IncorrectInputError(f"The timings should start with \"/from\" and then \"/to\". {usage}")
        try:
            task = task_list.add_event(match.group('description'), match.group('start'), match.group('end'))
        except DateFormatError as e:
            return ui.error(e)
        return ui.added(task, task_list.size())

    def _recurring(self, tail, task_list, storage):
        usage = "(e.g. \"recurring water plants /every sunday\")"
        if tail is None:
            raise IncorrectInputError(f"You should have a description after your request. {usage}")
        parts = self.patterns['every'].split(tail, maxsplit=1)
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise IncorrectInputError(f"You should have a description and an \"/every\" frequency. {usage}")
        description, frequency = parts
        task = task_list.add_recurring(description, frequency)
        return ui.added(task, task_list.size())

    # -------------------- persistence --------------------
    def _save(self, tail, task_list, storage):
        if storage is None:
            return ui.error(OSError("No storage is configured, so your tasks cannot be saved."))
        try:
            path = storage.save(task_list)
        except OSError as e:
            logger.error("Saving tasks failed: %s", e)
            return ui.error(e)
        return ui.saved(path)


_default_parser: Optional[CommandParser] = None


def get_parser() -> CommandParser:
    """Get the shared parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = CommandParser()
    return _default_parser


def parse(text: str, task_list: TaskList, storage: Optional["Storage"] = None) -> str:
    """Parse and execute one command line. See ``CommandParser.parse``."""
    return get_parser().parse(text, task_list, storage)