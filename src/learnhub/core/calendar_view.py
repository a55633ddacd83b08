"""Month calendar: grid layout, study blocks and completed lessons per day."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

import structlog

from learnhub.db.calendar_repository import (
    BlockDraft,
    CalendarBlockRecord,
    get_blocks_between,
    insert_block,
)
from learnhub.db.progress_repository import CompletionRecord, get_completions_between
from learnhub.utils.text_utils import clean_optional
from learnhub.utils.validators import normalize_time_range

logger = structlog.get_logger(__name__)

MONTH_NAMES = list(calendar.month_name)[1:]
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class CalendarBlockError(ValueError):
    """Raised when a study block is missing required fields."""

    pass


@dataclass
class MonthView:
    """Everything needed to draw one month."""

    year: int
    month: int
    cells: list[date | None]
    blocks_by_date: dict[str, list[CalendarBlockRecord]] = field(default_factory=dict)
    completions_by_date: dict[str, list[CompletionRecord]] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    days_in_month = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days_in_month)


def month_grid(year: int, month: int) -> list[date | None]:
    """Cells of a Sunday-first month grid.

    Leading None cells pad the days before the 1st; no trailing padding.
    """
    first_day, last_day = month_bounds(year, month)
    # date.weekday(): Monday=0 ... Sunday=6; shift so Sunday=0
    leading = (first_day.weekday() + 1) % 7

    cells: list[date | None] = [None] * leading
    cells.extend(date(year, month, d) for d in range(1, last_day.day + 1))
    return cells


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move delta months forward (negative: backward)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_month_view(year: int, month: int) -> MonthView:
    """Load blocks and completed lessons of a month, grouped by ISO date."""
    first_day, last_day = month_bounds(year, month)

    blocks = get_blocks_between(first_day, last_day)

    start = datetime.combine(first_day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(last_day + timedelta(days=1), time.min, tzinfo=timezone.utc)
    completions = get_completions_between(start, end)

    view = MonthView(year=year, month=month, cells=month_grid(year, month))
    for block in blocks:
        view.blocks_by_date.setdefault(block.date.isoformat(), []).append(block)
    for completion in completions:
        day = datetime.fromisoformat(completion.completed_at).date().isoformat()
        view.completions_by_date.setdefault(day, []).append(completion)

    logger.debug(
        "calendar.month_loaded",
        year=year,
        month=month,
        blocks=len(blocks),
        completions=len(completions),
    )
    return view


def add_study_block(
    day: date,
    title: str | None,
    start_time: str | None,
    end_time: str | None,
    description: str | None = None,
) -> CalendarBlockRecord:
    """Validate and store a single study block.

    Raises:
        CalendarBlockError: If title, start or end time is missing
        TimeRangeError: If the times are malformed or end <= start
    """
    title = clean_optional(title)
    if not title or not clean_optional(start_time) or not clean_optional(end_time):
        raise CalendarBlockError("Please fill in all required fields")

    start_time, end_time = normalize_time_range(start_time, end_time)

    block = insert_block(
        BlockDraft(
            date=day,
            start_time=start_time,
            end_time=end_time,
            title=title,
            description=clean_optional(description),
        )
    )
    logger.info("calendar.block_added", block_id=block.id, date=day.isoformat())
    return block
