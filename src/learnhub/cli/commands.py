"""CLI commands for learnhub.

Commands:
- init-db: Create the database schema
- serve: Run the Web API with uvicorn
- list: Show courses and books
- streak: Show the current study streak
- dashboard: Show the dashboard summary
- schedule: Add recurring study blocks
- calendar: Print a month with its study blocks
"""

from datetime import date, datetime, timezone

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from learnhub.config.app_config import load_app_config
from learnhub.core.calendar_view import DAY_NAMES, build_month_view
from learnhub.core.dashboard import build_dashboard
from learnhub.core.library import ContentType, LibraryFilters, list_library
from learnhub.core.recurrence import Frequency, RecurrenceError, plan_recurring_blocks
from learnhub.core.streaks import compute_streak, streak_label, today_count
from learnhub.db.calendar_repository import insert_blocks
from learnhub.db.database import get_db_path, init_db
from learnhub.db.progress_repository import get_streak_log
from learnhub.utils.validators import TimeRangeError, normalize_time_range

app = typer.Typer(
    name="learnhub",
    help="Personal learning hub: books, courses, streaks and a study calendar.",
    no_args_is_help=True,
)

console = Console()


def _open_db() -> None:
    """Point the repositories at the configured database (schema is idempotent)."""
    init_db(load_app_config().database.path)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _truncate(text: str | None, max_len: int = 60) -> str:
    """Truncate text with ellipsis if too long."""
    text = text or ""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


@app.command(name="init-db")
def init_db_command() -> None:
    """Create the database and its tables."""
    _open_db()
    console.print(f"[green]✓ Database ready[/green] [dim]{get_db_path()}[/dim]")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    server = load_app_config().server
    uvicorn.run(
        "learnhub.web.api:create_app",
        factory=True,
        host=host or server.host,
        port=port or server.port,
        reload=reload,
    )


@app.command(name="list")
def list_content(
    content_type: ContentType = typer.Option(
        ContentType.ALL, "--type", "-t", help="all, course or book"
    ),
    topic: str = typer.Option("all", "--topic", help="Only items with this topic"),
    search: str = typer.Option("", "--search", "-s", help="Search in title and topic"),
) -> None:
    """List courses and books."""
    _open_db()
    items = list_library(LibraryFilters(content_type=content_type, topic=topic, search=search))

    if not items:
        console.print("[yellow]No content found. Add a course or upload a book first.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Type", style="cyan", width=8)
    table.add_column("Title")
    table.add_column("Topic")
    table.add_column("Tags")
    table.add_column("ID", style="dim")

    for item in items:
        table.add_row(
            item.type.value,
            _truncate(item.title),
            item.topic or "",
            ", ".join(t.name for t in item.tags),
            item.id,
        )

    console.print(table)


@app.command()
def streak() -> None:
    """Show the current streak and today's completed lessons."""
    _open_db()
    today = _utc_today()
    log = get_streak_log(until=today)
    days = compute_streak(log, today)

    color = "green" if days > 0 else "yellow"
    console.print(f"[{color}]🔥 {streak_label(days)}[/{color}]")
    console.print(f"  [dim]completed today:[/dim] {today_count(log, today)}")


@app.command()
def dashboard() -> None:
    """Show streak, totals and course progress."""
    _open_db()
    summary = build_dashboard()

    header = (
        f"Streak: [bold]{streak_label(summary.streak)}[/bold] | "
        f"Today: {summary.lessons_today} lessons\n"
        f"Courses: {summary.total_courses} ({summary.active_courses} active) | "
        f"Books: {summary.total_books}"
    )
    console.print(Panel(header, title="[bold]Dashboard[/bold]", expand=False))

    if summary.course_progress:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Course")
        table.add_column("Lessons", justify="right")
        table.add_column("Progress", justify="right")
        for entry in summary.course_progress:
            progress = entry.progress
            table.add_row(
                _truncate(entry.course.title),
                f"{progress.completed_lessons}/{progress.total_lessons}",
                f"{progress.percentage:.0f}%",
            )
        console.print(table)

    if summary.recent_activity:
        console.print("\n[bold]Recent activity[/bold]")
        for completion in summary.recent_activity:
            console.print(
                f"  [green]✓[/green] {completion.lesson_title} "
                f"[dim]({completion.course_title}, {completion.completed_at[:10]})[/dim]"
            )


@app.command()
def schedule(
    start: datetime = typer.Argument(..., formats=["%Y-%m-%d"], help="First day (YYYY-MM-DD)"),
    start_time: str = typer.Option(..., "--from", help="Start time HH:MM"),
    end_time: str = typer.Option(..., "--to", help="End time HH:MM"),
    title: str = typer.Option(..., "--title", "-t", help="Block title"),
    frequency: Frequency = typer.Option(Frequency.DAILY, "--frequency", "-f"),
    weeks: int = typer.Option(4, "--weeks", "-w", help="Number of weeks (1-52)"),
    weekday: list[int] | None = typer.Option(
        None, "--weekday", "-d", help="Weekday for custom frequency (0=Mon ... 6=Sun), repeatable"
    ),
    description: str | None = typer.Option(None, "--description"),
) -> None:
    """Add a study block on every matching day of the next N weeks."""
    _open_db()
    if not title.strip():
        console.print("[red]✗ Please enter a title[/red]")
        raise typer.Exit(code=1)

    try:
        start_time, end_time = normalize_time_range(start_time, end_time)
        drafts = plan_recurring_blocks(
            start=start.date(),
            frequency=frequency,
            weeks=weeks,
            start_time=start_time,
            end_time=end_time,
            title=title.strip(),
            description=description,
            weekdays=set(weekday) if weekday else None,
        )
    except (RecurrenceError, TimeRangeError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    blocks = insert_blocks(drafts)
    console.print(f"[green]✓ Added {len(blocks)} study blocks[/green]")
    if blocks:
        console.print(
            f"  [dim]from[/dim] {blocks[0].date.isoformat()} "
            f"[dim]to[/dim] {blocks[-1].date.isoformat()}"
        )


@app.command()
def calendar(
    year: int | None = typer.Argument(None, help="Year (default: current)"),
    month: int | None = typer.Argument(None, min=1, max=12, help="Month 1-12 (default: current)"),
) -> None:
    """Print a month with study blocks and completed lessons."""
    _open_db()
    today = _utc_today()
    view = build_month_view(year or today.year, month or today.month)

    table = Table(title=view.label, show_header=True, header_style="bold", show_lines=True)
    for name in DAY_NAMES:
        table.add_column(name, justify="center", width=9)

    row: list[str] = []
    for cell in view.cells:
        if cell is None:
            row.append("")
        else:
            key = cell.isoformat()
            text = str(cell.day)
            blocks = len(view.blocks_by_date.get(key, []))
            done = len(view.completions_by_date.get(key, []))
            if blocks:
                text += f"\n[cyan]{blocks} blk[/cyan]"
            if done:
                text += f"\n[green]✓{done}[/green]"
            row.append(text)
        if len(row) == 7:
            table.add_row(*row)
            row = []
    if row:
        table.add_row(*row, *[""] * (7 - len(row)))

    console.print(table)

    for key in sorted(view.blocks_by_date):
        for block in view.blocks_by_date[key]:
            console.print(
                f"  [cyan]{key}[/cyan] {block.start_time}-{block.end_time} {block.title or ''}"
            )


if __name__ == "__main__":
    app()
