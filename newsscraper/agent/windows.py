"""Splitting a date range into extraction windows."""

from collections.abc import Iterator
from datetime import date, timedelta
from enum import Enum

from newsscraper.engines.article import ExtractionWindow
from newsscraper.engines.errors import InvalidRangeError


class WindowMode(str, Enum):
    """How a query's date range is divided.

    SINGLE treats the whole range as one window and leaves pagination
    limits to the source. DAILY issues one window per calendar day,
    keeping each listing within the range a source ranks reliably.
    """
    SINGLE = "single"
    DAILY = "daily"


def daily_windows(start: date, end: date) -> Iterator[ExtractionWindow]:
    """Yield one single-day window per calendar day, oldest first.

    Example:
        >>> [str(w) for w in daily_windows(date(2015, 1, 1), date(2015, 1, 3))]
        ['2015-01-01', '2015-01-02', '2015-01-03']
    """
    if end < start:
        raise InvalidRangeError(start, end)

    current = start
    while current <= end:
        yield ExtractionWindow(current, current)
        current += timedelta(days=1)


def iter_windows(
    start: date,
    end: date,
    mode: WindowMode = WindowMode.SINGLE,
) -> Iterator[ExtractionWindow]:
    """Yield the windows covering [start, end] for the given mode."""
    if end < start:
        raise InvalidRangeError(start, end)

    if mode is WindowMode.DAILY:
        yield from daily_windows(start, end)
    else:
        yield ExtractionWindow(start, end)
