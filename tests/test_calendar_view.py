"""Tests for the month calendar."""

from datetime import date

import pytest

from learnhub.core.calendar_view import (
    CalendarBlockError,
    add_study_block,
    build_month_view,
    month_bounds,
    month_grid,
    shift_month,
)
from learnhub.core.progress import toggle_lesson_completion
from learnhub.db.calendar_repository import get_block_by_id
from learnhub.utils.validators import TimeRangeError


class TestMonthGrid:
    """Tests for month_grid and helpers."""

    def test_leading_cells_sunday_first(self):
        # 1 October 2026 is a Thursday
        cells = month_grid(2026, 10)
        assert cells[:4] == [None, None, None, None]
        assert cells[4] == date(2026, 10, 1)
        assert cells[-1] == date(2026, 10, 31)
        assert len(cells) == 35

    def test_month_starting_on_sunday(self):
        cells = month_grid(2026, 2)
        assert cells[0] == date(2026, 2, 1)
        assert len(cells) == 28

    def test_leap_february(self):
        assert month_bounds(2028, 2) == (date(2028, 2, 1), date(2028, 2, 29))

    @pytest.mark.parametrize(
        "year,month,delta,expected",
        [
            (2026, 1, -1, (2025, 12)),
            (2026, 12, 1, (2027, 1)),
            (2026, 10, 0, (2026, 10)),
            (2026, 10, 15, (2028, 1)),
        ],
    )
    def test_shift_month(self, year, month, delta, expected):
        assert shift_month(year, month, delta) == expected


class TestAddStudyBlock:
    """Tests for add_study_block."""

    def test_stores_block(self, db):
        block = add_study_block(date(2026, 10, 20), " Review ", "09:00", "10:00", "  ")
        stored = get_block_by_id(block.id)
        assert stored.title == "Review"
        assert stored.description is None
        assert (stored.start_time, stored.end_time) == ("09:00", "10:00")

    @pytest.mark.parametrize(
        "title,start,end",
        [("", "09:00", "10:00"), ("Read", "", "10:00"), ("Read", "09:00", None)],
    )
    def test_required_fields(self, db, title, start, end):
        with pytest.raises(CalendarBlockError, match="Please fill in all required fields"):
            add_study_block(date(2026, 10, 20), title, start, end)

    def test_end_after_start(self, db):
        with pytest.raises(TimeRangeError):
            add_study_block(date(2026, 10, 20), "Read", "10:00", "09:00")

    def test_times_stored_zero_padded(self, db):
        block = add_study_block(date(2026, 10, 20), "Read", " 9:05", "9:45:00")
        assert (block.start_time, block.end_time) == ("09:05", "09:45")


class TestBuildMonthView:
    """Tests for build_month_view."""

    def test_groups_blocks_and_completions_by_day(self, make_course, utc):
        add_study_block(date(2026, 10, 20), "Late", "18:00", "19:00")
        add_study_block(date(2026, 10, 20), "Early", "07:00", "08:00")
        add_study_block(date(2026, 11, 1), "Next month", "07:00", "08:00")
        saved = make_course("Go", lessons=1)
        toggle_lesson_completion(saved.lessons[0].id, now=utc(2026, 10, 21, 8))

        view = build_month_view(2026, 10)
        assert view.label == "October 2026"
        assert [b.title for b in view.blocks_by_date["2026-10-20"]] == ["Early", "Late"]
        assert "2026-11-01" not in view.blocks_by_date
        (completion,) = view.completions_by_date["2026-10-21"]
        assert completion.course_title == "Go"

    def test_single_digit_hours_sort_first(self, db):
        add_study_block(date(2026, 10, 20), "late", "10:00", "11:00")
        add_study_block(date(2026, 10, 20), "early", "9:00", "9:30")

        view = build_month_view(2026, 10)
        assert [b.title for b in view.blocks_by_date["2026-10-20"]] == ["early", "late"]

    def test_completion_on_last_day_included(self, make_course, utc):
        saved = make_course(lessons=1)
        toggle_lesson_completion(saved.lessons[0].id, now=utc(2026, 10, 31, 23, 59))
        view = build_month_view(2026, 10)
        assert "2026-10-31" in view.completions_by_date
        assert build_month_view(2026, 11).completions_by_date == {}
