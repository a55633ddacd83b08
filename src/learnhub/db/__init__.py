"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repository functions per table group (books, courses and lessons,
  tags, progress and streaks, calendar blocks)
"""

from learnhub.db.database import RecordNotFoundError, get_db, init_db

__all__ = ["RecordNotFoundError", "get_db", "init_db"]
