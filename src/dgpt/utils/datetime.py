"""Date helpers using one canonical input/display format pair.

Dates are entered as ``2024-12-01`` and shown as ``Dec 1 2024``. The input
format can be overridden through configuration; stored dates always use
``INPUT_FORMAT``.
"""

from datetime import date, datetime, timezone
from typing import Optional

from ..exceptions import DateFormatError

INPUT_FORMAT = "%Y-%m-%d"


def now_utc() -> datetime:
    """Return current datetime in UTC timezone."""
    return datetime.now(timezone.utc)


def parse_date(text: str, fmt: Optional[str] = None) -> date:
    """Parse a date string in the input format.

    Args:
        text: Raw date text as typed by the user.
        fmt: strptime pattern, defaults to ``INPUT_FORMAT``.

    Returns:
        The parsed calendar date.

    Raises:
        DateFormatError: If the text does not match the pattern.
    """
    fmt = fmt or INPUT_FORMAT
    try:
        return datetime.strptime(text.strip(), fmt).date()
    except (ValueError, AttributeError):
        raise DateFormatError(text, _human_pattern(fmt)) from None


def format_date(value: date) -> str:
    """Render a date in the display format (``Dec 1 2024``)."""
    # %-d is not available on every platform
    return f"{value:%b} {value.day} {value.year}"


def to_input_string(value: Optional[date]) -> Optional[str]:
    """Render a date back in the input format, for storage."""
    if value is None:
        return None
    return value.strftime(INPUT_FORMAT)


def _human_pattern(fmt: str) -> str:
    return (fmt.replace("%Y", "yyyy").replace("%m", "MM").replace("%d", "dd")
            .replace("%H", "HH").replace("%M", "mm"))
