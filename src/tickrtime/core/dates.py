"""Date helpers for earnings calendar queries.

Finnhub's calendar endpoint is unreliable for ranges that cross a month
boundary, so every calendar query is split into month-bounded sub-ranges.
Dates are UTC; Finnhub reports in US Eastern time, so "today" can be off by
one near midnight ET.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive date interval."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def parse_iso_date(value: date | str) -> date:
    """Parse a YYYY-MM-DD string (dates pass through).

    Raises:
        ValueError: if the value is not a valid ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected YYYY-MM-DD string, got {type(value).__name__}")
    return date.fromisoformat(value.strip())


def today() -> date:
    """Today's date in UTC."""
    return datetime.now(UTC).date()


def month_end(day: date) -> date:
    """Last day of the month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=last)


def split_into_month_ranges(start: date | str, end: date | str) -> list[DateRange]:
    """Split ``[start, end]`` into one range per calendar month touched.

    Each range is clipped to ``[start, end]``; consecutive ranges are
    contiguous. Returns an empty list when ``start > end``.

    >>> [r.to_dict() for r in split_into_month_ranges("2024-12-15", "2025-01-14")]
    [{'start': '2024-12-15', 'end': '2024-12-31'}, {'start': '2025-01-01', 'end': '2025-01-14'}]
    """
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)

    ranges: list[DateRange] = []
    current = start_date
    while current <= end_date:
        range_end = min(month_end(current), end_date)
        ranges.append(DateRange(current, range_end))
        current = range_end + timedelta(days=1)
    return ranges
