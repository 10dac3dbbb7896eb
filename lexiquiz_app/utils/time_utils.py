"""
Centralized Utilities for Time Handling in LexiQuiz.
Goal: Ensure every timestamp reaching the engines is timezone-aware UTC.
"""
from datetime import datetime, timezone
from typing import Optional


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    """
    Get the current timezone-aware UTC datetime.
    Always use this instead of datetime.utcnow() or datetime.now().
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Treat naive datetimes as UTC and convert aware ones to UTC.

    SQLite drops tzinfo on round-trip, so values loaded from the database are
    naive even though they were stored as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
