"""Exceptions raised by the dgpt command layer.

Every error here is recoverable: the session renders it and keeps reading
commands.
"""

from typing import Optional


class DgptError(Exception):
    """Base class for errors that are shown to the user."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IncorrectInputError(DgptError):
    """Raised when a command line does not have the shape its command expects."""


class TaskNotFoundError(DgptError):
    """Raised when a task position falls outside the task list."""

    def __init__(self, message: str = "There doesn't seem to be a Task at that position.",
                 index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class DateFormatError(DgptError):
    """Raised when a date string does not match the input pattern."""

    def __init__(self, text: str, expected_format: str):
        self.text = text
        self.expected_format = expected_format
        super().__init__(
            f"'{text}' is not a date I understand. Use the format {expected_format} "
            f"(e.g. \"2024-12-01\")."
        )
