"""Repository functions for calendar_blocks table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import structlog

from learnhub.db.database import get_db, new_id, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class CalendarBlockRecord:
    """A scheduled study interval on a given date."""

    id: str
    date: date
    start_time: str
    end_time: str
    title: str | None
    description: str | None
    created_at: str


@dataclass
class BlockDraft:
    """Values for a block that has not been stored yet."""

    date: date
    start_time: str
    end_time: str
    title: str | None = None
    description: str | None = None


def insert_block(draft: BlockDraft) -> CalendarBlockRecord:
    """Insert one calendar block."""
    return insert_blocks([draft])[0]


def insert_blocks(drafts: list[BlockDraft]) -> list[CalendarBlockRecord]:
    """Insert several blocks in one transaction (used by recurring schedules)."""
    now = utc_now()
    records = [
        CalendarBlockRecord(
            id=new_id(),
            date=d.date,
            start_time=d.start_time,
            end_time=d.end_time,
            title=d.title,
            description=d.description,
            created_at=now,
        )
        for d in drafts
    ]

    with get_db() as conn:
        conn.executemany(
            """
            INSERT INTO calendar_blocks (
                id, date, start_time, end_time, title, description, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    r.id,
                    r.date.isoformat(),
                    r.start_time,
                    r.end_time,
                    r.title,
                    r.description,
                    r.created_at,
                )
                for r in records
            ],
        )

    logger.debug("calendar_blocks.inserted", count=len(records))
    return records


def get_block_by_id(block_id: str) -> CalendarBlockRecord | None:
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM calendar_blocks WHERE id = ?", (block_id,)
        ).fetchone()

    return _row_to_record(row) if row else None


def get_blocks_between(first_day: date, last_day: date) -> list[CalendarBlockRecord]:
    """Blocks dated first_day..last_day inclusive, by date then start time."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT * FROM calendar_blocks
            WHERE date >= ? AND date <= ?
            ORDER BY date ASC, start_time ASC
            """,
            (first_day.isoformat(), last_day.isoformat()),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def delete_block(block_id: str) -> bool:
    """Delete a block.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM calendar_blocks WHERE id = ?", (block_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("calendar_blocks.deleted", block_id=block_id)
    return deleted


def _row_to_record(row) -> CalendarBlockRecord:
    return CalendarBlockRecord(
        id=row["id"],
        date=date.fromisoformat(row["date"]),
        start_time=row["start_time"],
        end_time=row["end_time"],
        title=row["title"],
        description=row["description"],
        created_at=row["created_at"],
    )
