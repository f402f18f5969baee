"""
Date helpers.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime (stored and signed as UTC)."""
    return datetime.now(UTC)
