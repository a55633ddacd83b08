"""Tests for learnhub CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from learnhub.cli.commands import app
from learnhub.config.app_config import load_app_config
from learnhub.core.course_editor import CourseDraft, LessonDraft, save_course
from learnhub.core.progress import toggle_lesson_completion
from learnhub.db.database import init_db

runner = CliRunner()


@pytest.fixture
def cli_db(workspace) -> Path:
    """The database the CLI opens (from config), initialized in the workspace."""
    db_path = load_app_config().database.path
    init_db(db_path)
    return workspace / db_path


@pytest.fixture
def course(cli_db):
    return save_course(
        CourseDraft(title="Python 101", topic="Python"),
        [LessonDraft(content_type="text", title="Setup")],
    )


class TestInitDb:
    def test_creates_database(self, workspace):
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0
        assert "Database ready" in result.stdout
        assert (workspace / "db" / "learnhub.db").exists()


class TestListCommand:
    """Tests for learnhub list."""

    def test_empty(self, cli_db):
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No content found" in result.stdout

    def test_shows_courses(self, course):
        result = runner.invoke(app, ["list", "--type", "course"])

        assert result.exit_code == 0
        assert "Python 101" in result.stdout

    def test_type_filter(self, course):
        result = runner.invoke(app, ["list", "-t", "book"])

        assert result.exit_code == 0
        assert "No content found" in result.stdout

    def test_invalid_type(self, cli_db):
        result = runner.invoke(app, ["list", "--type", "video"])

        assert result.exit_code != 0


class TestStreakCommand:
    def test_no_activity(self, cli_db):
        result = runner.invoke(app, ["streak"])

        assert result.exit_code == 0
        assert "0 days" in result.stdout

    def test_after_completion(self, course):
        toggle_lesson_completion(course.lessons[0].id)

        result = runner.invoke(app, ["streak"])

        assert result.exit_code == 0
        assert "1 day" in result.stdout


class TestDashboardCommand:
    def test_shows_summary(self, course):
        result = runner.invoke(app, ["dashboard"])

        assert result.exit_code == 0
        assert "Dashboard" in result.stdout
        assert "Python 101" in result.stdout
        assert "0/1" in result.stdout


class TestScheduleCommand:
    """Tests for learnhub schedule."""

    def test_business_days(self, cli_db):
        result = runner.invoke(
            app,
            [
                "schedule", "2026-10-19",
                "--from", "09:00",
                "--to", "10:00",
                "--title", "Deep work",
                "--frequency", "business_days",
                "--weeks", "1",
            ],
        )

        assert result.exit_code == 0
        assert "Added 5 study blocks" in result.stdout
        assert "2026-10-23" in result.stdout

    def test_custom_weekdays(self, cli_db):
        result = runner.invoke(
            app,
            [
                "schedule", "2026-10-19",
                "--from", "09:00", "--to", "10:00", "-t", "Review",
                "-f", "custom", "-w", "2", "-d", "5", "-d", "6",
            ],
        )

        assert result.exit_code == 0
        assert "Added 4 study blocks" in result.stdout

    def test_custom_without_weekday(self, cli_db):
        result = runner.invoke(
            app,
            ["schedule", "2026-10-19", "--from", "09:00", "--to", "10:00", "-t", "X", "-f", "custom"],
        )

        assert result.exit_code == 1
        assert "weekday" in result.stdout

    def test_end_before_start(self, cli_db):
        result = runner.invoke(
            app,
            ["schedule", "2026-10-19", "--from", "10:00", "--to", "09:00", "-t", "X"],
        )

        assert result.exit_code == 1
        assert "must be after" in result.stdout

    def test_blank_title(self, cli_db):
        result = runner.invoke(
            app,
            ["schedule", "2026-10-19", "--from", "09:00", "--to", "10:00", "-t", "  "],
        )

        assert result.exit_code == 1
        assert "title" in result.stdout

    def test_too_many_weeks(self, cli_db):
        result = runner.invoke(
            app,
            ["schedule", "2026-10-19", "--from", "09:00", "--to", "10:00", "-t", "X", "-w", "53"],
        )

        assert result.exit_code == 1


class TestCalendarCommand:
    def test_month_with_blocks(self, cli_db):
        runner.invoke(
            app,
            ["schedule", "2026-10-19", "--from", "09:00", "--to", "10:00", "-t", "Deep", "-w", "1"],
        )

        result = runner.invoke(app, ["calendar", "2026", "10"])

        assert result.exit_code == 0
        assert "October 2026" in result.stdout
        assert "2026-10-19" in result.stdout

    def test_invalid_month(self, cli_db):
        result = runner.invoke(app, ["calendar", "2026", "13"])

        assert result.exit_code != 0
