"""
Domain model for DrugRecord entity.
Storage-agnostic representation of one tracked drug.
"""
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    """Current instant in UTC, truncated to whole milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_instant(value: datetime) -> str:
    """
    Format an instant as ISO-8601 UTC with a Z suffix.

    Millisecond precision is used unless the value carries sub-millisecond
    digits, which are kept so that reading and writing back is lossless.
    """
    value = to_utc(value)
    timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    return value.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


class ExpiryStatus(str, Enum):
    """Expiry risk of a record relative to the current date."""
    CRITICAL = "critical"
    WARNING = "warning"
    SAFE = "safe"


class DrugRecord:
    """Domain model representing one inventory entry."""

    def __init__(
        self,
        id: str,
        name: str,
        quantity: int,
        expiry_date: datetime,
        added_at: datetime
    ):
        self.id = id
        self.name = name
        self.quantity = quantity
        self.expiry_date = expiry_date
        self.added_at = added_at

    def __eq__(self, other):
        if not isinstance(other, DrugRecord):
            return NotImplemented
        return (
            self.id == other.id
            and self.name == other.name
            and self.quantity == other.quantity
            and self.expiry_date == other.expiry_date
            and self.added_at == other.added_at
        )

    def __repr__(self):
        return f"DrugRecord(id={self.id}, name={self.name}, quantity={self.quantity}, expiry_date={self.expiry_date.isoformat()})"
