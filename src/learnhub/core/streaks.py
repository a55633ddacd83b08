"""Streak computation over the daily completion log."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from learnhub.db.progress_repository import DailyStreakRecord


def compute_streak(log: Iterable[DailyStreakRecord], today: date) -> int:
    """Length of the run of active days ending today.

    Walks the log in date-descending order, ignoring records dated after
    today. The i-th remaining record extends the streak only if it is
    exactly i days before today and has at least one completed lesson;
    the walk stops at the first record that doesn't.

    Args:
        log: Day records, newest first (as get_streak_log() returns them)
        today: The day the streak must end on

    Returns:
        Number of consecutive days, 0 if today has no completions
    """
    streak = 0
    past = (record for record in log if record.date <= today)
    for index, record in enumerate(past):
        days_ago = (today - record.date).days
        if days_ago == index and record.lessons_completed > 0:
            streak += 1
        else:
            break
    return streak


def today_count(log: Iterable[DailyStreakRecord], today: date) -> int:
    """Lessons completed today according to the log (0 if absent)."""
    for record in log:
        if record.date == today:
            return record.lessons_completed
    return 0


def streak_label(streak: int) -> str:
    """Human wording, e.g. "1 day" / "3 days"."""
    return f"{streak} {'day' if streak == 1 else 'days'}"
