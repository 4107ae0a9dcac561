"""Datetime helpers. Expiry timestamps are compared in UTC."""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to an aware UTC datetime.

    Naive values are taken to already be UTC (that is how they are stored).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
