"""
Shared helpers.

Timestamp conversion between epoch milliseconds (wire) and aware UTC
datetimes (Python).
"""

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def from_epoch_millis(millis: int | None) -> datetime | None:
    """Interpret epoch milliseconds as a UTC datetime. None stays None."""
    if millis is None:
        return None
    return EPOCH + timedelta(milliseconds=millis)


def to_epoch_millis(value: datetime) -> int:
    """Epoch milliseconds for a datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)
