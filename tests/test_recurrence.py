"""Tests for recurring calendar block generation."""

from datetime import date

import pytest

from learnhub.core.recurrence import (
    MAX_WEEKS,
    Frequency,
    RecurrenceError,
    generate_recurring_dates,
    plan_recurring_blocks,
    weekdays_for,
)

MONDAY = date(2026, 10, 19)
SATURDAY = date(2026, 10, 24)


class TestWeekdaysFor:
    """Tests for weekdays_for."""

    def test_daily_selects_all_days(self):
        assert weekdays_for(Frequency.DAILY) == frozenset(range(7))

    def test_business_days_are_monday_to_friday(self):
        assert weekdays_for(Frequency.BUSINESS_DAYS) == frozenset({0, 1, 2, 3, 4})

    def test_accepts_plain_string(self):
        assert weekdays_for("business_days") == frozenset({0, 1, 2, 3, 4})

    def test_custom_requires_weekdays(self):
        with pytest.raises(RecurrenceError):
            weekdays_for(Frequency.CUSTOM, set())

    def test_custom_rejects_out_of_range(self):
        with pytest.raises(RecurrenceError, match="0-6"):
            weekdays_for(Frequency.CUSTOM, {1, 7})

    def test_daily_ignores_weekdays(self):
        assert weekdays_for(Frequency.DAILY, {2}) == frozenset(range(7))


class TestGenerateRecurringDates:
    """Tests for generate_recurring_dates."""

    def test_daily_one_week(self):
        dates = generate_recurring_dates(MONDAY, Frequency.DAILY, 1)
        assert len(dates) == 7
        assert dates[0] == MONDAY
        assert dates[-1] == date(2026, 10, 25)

    def test_business_days_skip_weekends(self):
        dates = generate_recurring_dates(MONDAY, Frequency.BUSINESS_DAYS, 2)
        assert len(dates) == 10
        assert all(d.weekday() < 5 for d in dates)

    def test_start_on_weekend_is_skipped_for_business_days(self):
        dates = generate_recurring_dates(SATURDAY, Frequency.BUSINESS_DAYS, 1)
        assert dates == [date(2026, 10, 26 + i) for i in range(5)]

    def test_custom_weekdays(self):
        dates = generate_recurring_dates(MONDAY, Frequency.CUSTOM, 2, weekdays={0, 2, 4})
        assert [d.weekday() for d in dates] == [0, 2, 4, 0, 2, 4]

    def test_dates_are_ascending_and_unique(self):
        dates = generate_recurring_dates(SATURDAY, Frequency.DAILY, 3)
        assert dates == sorted(set(dates))

    def test_window_excludes_day_after_last_week(self):
        dates = generate_recurring_dates(MONDAY, Frequency.CUSTOM, 1, weekdays={0})
        assert dates == [MONDAY]

    def test_crosses_month_boundary(self):
        dates = generate_recurring_dates(date(2026, 10, 29), Frequency.DAILY, 1)
        assert dates[-1] == date(2026, 11, 4)

    def test_max_weeks_accepted(self):
        dates = generate_recurring_dates(MONDAY, Frequency.DAILY, MAX_WEEKS)
        assert len(dates) == MAX_WEEKS * 7

    @pytest.mark.parametrize("weeks", [0, -1, MAX_WEEKS + 1])
    def test_weeks_out_of_range(self, weeks):
        with pytest.raises(RecurrenceError, match="Weeks"):
            generate_recurring_dates(MONDAY, Frequency.DAILY, weeks)


class TestPlanRecurringBlocks:
    """Tests for plan_recurring_blocks."""

    def test_one_draft_per_date(self):
        drafts = plan_recurring_blocks(
            MONDAY,
            Frequency.BUSINESS_DAYS,
            1,
            start_time="09:00",
            end_time="10:30",
            title="Deep work",
            description="Chapter reading",
        )
        assert len(drafts) == 5
        assert {d.title for d in drafts} == {"Deep work"}
        assert {(d.start_time, d.end_time) for d in drafts} == {("09:00", "10:30")}
        assert drafts[0].description == "Chapter reading"
        assert [d.date for d in drafts] == [date(2026, 10, 19 + i) for i in range(5)]
