"""Storage layer for dgpt using a markdown file with YAML frontmatter.

The task file looks like this::

    ---
    app: dgpt
    count: 2
    format_version: 1
    saved: '2024-11-30T09:12:44+00:00'
    ---
    - [ ] T | buy milk
    - [x] D | submit report | 2024-12-01
    <!-- end of tasks -->

Each line holds the tag, the description and the variant fields separated
by `` | ``. Inside text, ``\\``, ``|``, newline and carriage return are
written as ``\\\\``, ``\\|``, ``\\n`` and ``\\r``. The closing comment keeps
frontmatter from trimming whitespace off the last field.
"""

import logging
import re
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

import frontmatter
import yaml

from .config import ConfigModel
from .exceptions import DateFormatError
from .task import Deadline, Event, Recurring, Task, ToDo
from .task_list import TaskList
from .utils.datetime import now_utc

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
TASK_LINE_RE = re.compile(r"^- \[(?P<done>[ xX])\]\s+(?P<body>.*)$")
FIELD_SEP_RE = re.compile(r" \| ")
ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
END_MARKER = "<!-- end of tasks -->"

# Order of the fields stored after the description, per variant
VARIANT_FIELDS: Dict[str, List[str]] = {
    ToDo.tag: [],
    Deadline.tag: ["by"],
    Event.tag: ["from", "to"],
    Recurring.tag: ["every"],
}
TAG_TO_KIND = {variant.tag: variant.kind for variant in (ToDo, Deadline, Event, Recurring)}


ESCAPES = {"\\": "\\\\", "|": "\\|", "\n": "\\n", "\r": "\\r"}
UNESCAPES = {"n": "\n", "r": "\r"}


def _escape(text: str) -> str:
    return "".join(ESCAPES.get(char, char) for char in text)


def _unescape(text: str) -> str:
    return ESCAPE_RE.sub(lambda m: UNESCAPES.get(m.group(1), m.group(1)), text)


class TaskMarkdownFormat:
    """Handles conversion between Task objects and markdown lines."""

    @staticmethod
    def to_markdown(task: Task) -> str:
        """Convert a task to a single checkbox line."""
        data = task.to_dict()
        checkbox = "- [x]" if task.done else "- [ ]"
        values = [task.tag, data["description"]] + [data[key] for key in VARIANT_FIELDS[task.tag]]
        return f"{checkbox} " + " | ".join(_escape(str(value)) for value in values)

    @staticmethod
    def from_markdown(line: str) -> Optional[Task]:
        """Parse a markdown line back to a task.

        Returns None for lines that are not task lines.

        Raises:
            ValueError: If the line looks like a task but cannot be decoded.
        """
        match = TASK_LINE_RE.match(line.rstrip("\r\n"))
        if not match:
            return None

        parts = [_unescape(part) for part in FIELD_SEP_RE.split(match.group("body"))]
        tag = parts[0].strip()
        if tag not in VARIANT_FIELDS:
            raise ValueError(f"Unknown task tag {tag!r}")
        keys = ["description"] + VARIANT_FIELDS[tag]
        if len(parts) - 1 != len(keys):
            raise ValueError(f"Expected {len(keys)} fields for a [{tag}] task, got {len(parts) - 1}")

        data: Dict[str, Any] = dict(zip(keys, parts[1:]))
        data["type"] = TAG_TO_KIND[tag]
        data["done"] = match.group("done") in "xX"
        return Task.from_dict(data)


class Storage:
    """File-based storage for the task list."""

    def __init__(self, config: ConfigModel, path: Optional[Path] = None):
        self.config = config
        self.path = Path(path) if path is not None else config.get_data_path()

    def load(self) -> TaskList:
        """Load the task list, recovering from missing or damaged files.

        A missing file gives an empty list. Lines that cannot be decoded are
        skipped and logged.
        """
        task_list = TaskList(date_format=self.config.date_input_format)
        if not self.path.exists():
            logger.info("No task file at %s, starting with an empty list", self.path)
            return task_list

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                post = frontmatter.loads(f.read())
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.error("Could not read task file %s: %s", self.path, e)
            return task_list

        version = post.metadata.get("format_version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            logger.warning("Task file %s has format version %s, expected %s",
                           self.path, version, FORMAT_VERSION)

        # not splitlines(), which also breaks on form feeds and other separators
        for number, line in enumerate(post.content.split("\n"), start=1):
            try:
                task = TaskMarkdownFormat.from_markdown(line)
            except (ValueError, KeyError, DateFormatError) as e:
                logger.warning("Skipping line %d of %s: %s", number, self.path, e)
                continue
            if task is not None:
                task_list.add(task)

        logger.info("Loaded %d tasks from %s", len(task_list), self.path)
        return task_list

    def save(self, task_list: TaskList) -> Path:
        """Write the whole task list to disk.

        Returns:
            The path written to.

        Raises:
            OSError: If the file cannot be written.
        """
        if self.config.backup_on_save:
            self.backup()

        lines = [TaskMarkdownFormat.to_markdown(task) for task in task_list]
        content = "\n".join(lines + [END_MARKER])
        post = frontmatter.Post(
            content,
            app="dgpt",
            format_version=FORMAT_VERSION,
            saved=now_utc().isoformat(timespec="seconds"),
            count=len(task_list),
        )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(frontmatter.dumps(post))
            f.write("\n")

        logger.info("Saved %d tasks to %s", len(task_list), self.path)
        return self.path

    def backup(self) -> Optional[Path]:
        """Copy the current task file into a timestamped backup directory.

        Returns the backup path, or None when there is nothing to back up.
        """
        if not self.path.exists():
            return None

        timestamp = now_utc().strftime("%Y-%m-%d_%H-%M-%S")
        backup_dir = self.config.get_backup_path(timestamp)
        backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = backup_dir / self.path.name

        shutil.copy2(self.path, backup_path)
        logger.info("Backed up %s to %s", self.path, backup_path)
        return backup_path
