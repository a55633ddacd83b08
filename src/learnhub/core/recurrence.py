"""Recurring calendar block generation.

Given a start date, a frequency and a number of weeks, enumerate the
dates a study block repeats on. The scan is linear: every day of the
window [start, start + weeks*7) is checked against the frequency's
weekday set.

Weekdays use Python's numbering: 0 = Monday ... 6 = Sunday.
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

import structlog

from learnhub.db.calendar_repository import BlockDraft

logger = structlog.get_logger(__name__)

MAX_WEEKS = 52

BUSINESS_DAYS = frozenset({0, 1, 2, 3, 4})
ALL_DAYS = frozenset(range(7))


class Frequency(str, Enum):
    """How often a block repeats."""

    DAILY = "daily"
    BUSINESS_DAYS = "business_days"
    CUSTOM = "custom"


class RecurrenceError(ValueError):
    """Raised for an invalid recurrence request."""

    pass


def weekdays_for(frequency: Frequency, weekdays: set[int] | None = None) -> frozenset[int]:
    """Weekday set a frequency selects.

    Raises:
        RecurrenceError: If custom weekdays are missing or out of range
    """
    frequency = Frequency(frequency)

    if frequency is Frequency.DAILY:
        return ALL_DAYS
    if frequency is Frequency.BUSINESS_DAYS:
        return BUSINESS_DAYS

    if not weekdays:
        raise RecurrenceError("Custom frequency needs at least one weekday")
    invalid = [d for d in weekdays if d not in ALL_DAYS]
    if invalid:
        raise RecurrenceError(f"Weekdays must be 0-6, got {sorted(invalid)}")
    return frozenset(weekdays)


def generate_recurring_dates(
    start: date,
    frequency: Frequency,
    weeks: int,
    weekdays: set[int] | None = None,
) -> list[date]:
    """Dates a block repeats on, ascending and without duplicates.

    Args:
        start: First candidate day (included if it matches)
        frequency: daily, business_days or custom
        weeks: Length of the window in weeks (1..MAX_WEEKS)
        weekdays: Weekday set for custom frequency

    Returns:
        Every day in [start, start + weeks*7) whose weekday is selected

    Raises:
        RecurrenceError: If weeks is out of range or weekdays are invalid
    """
    if not 1 <= weeks <= MAX_WEEKS:
        raise RecurrenceError(f"Weeks must be between 1 and {MAX_WEEKS}, got {weeks}")

    selected = weekdays_for(frequency, weekdays)

    dates = []
    for offset in range(weeks * 7):
        day = start + timedelta(days=offset)
        if day.weekday() in selected:
            dates.append(day)

    return dates


def plan_recurring_blocks(
    start: date,
    frequency: Frequency,
    weeks: int,
    start_time: str,
    end_time: str,
    title: str | None = None,
    description: str | None = None,
    weekdays: set[int] | None = None,
) -> list[BlockDraft]:
    """One block draft per recurring date, all sharing the same details."""
    dates = generate_recurring_dates(start, frequency, weeks, weekdays)

    logger.debug(
        "recurrence.planned",
        start=start.isoformat(),
        frequency=Frequency(frequency).value,
        weeks=weeks,
        count=len(dates),
    )

    return [
        BlockDraft(
            date=day,
            start_time=start_time,
            end_time=end_time,
            title=title,
            description=description,
        )
        for day in dates
    ]
