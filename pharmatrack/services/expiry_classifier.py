"""
Expiry and stock classification.
Pure functions over a record and the current instant; nothing is cached.
"""
from datetime import datetime, timezone, tzinfo
from typing import Iterable
from pharmatrack.models.drug_model import DrugRecord, ExpiryStatus, to_utc

DEFAULT_WARNING_DAYS = 30
DEFAULT_LOW_STOCK_THRESHOLD = 5


def days_until_expiry(expiry_date: datetime, now: datetime, tz: tzinfo = timezone.utc) -> int:
    """
    Whole calendar days from today in timezone tz until the expiry date.

    Expiry dates are stored as UTC midnight of the entered day, so their
    calendar date is read in UTC; only now is shifted into tz. An expiry at
    any time on today's calendar date yields 0.
    """
    expiry_day = to_utc(expiry_date).date()
    today = to_utc(now).astimezone(tz).date()
    return (expiry_day - today).days


def classify(
    record: DrugRecord,
    now: datetime,
    warning_days: int = DEFAULT_WARNING_DAYS,
    tz: tzinfo = timezone.utc
) -> ExpiryStatus:
    """Classify a record as critical (expired), warning (within window) or safe."""
    days = days_until_expiry(record.expiry_date, now, tz)
    if days < 0:
        return ExpiryStatus.CRITICAL
    if days <= warning_days:
        return ExpiryStatus.WARNING
    return ExpiryStatus.SAFE


def is_low_stock(record: DrugRecord, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> bool:
    return record.quantity < threshold


def is_out_of_stock(record: DrugRecord) -> bool:
    return record.quantity == 0


def is_expired(record: DrugRecord, now: datetime) -> bool:
    """Strict instant comparison, independent of calendar-day rounding."""
    return to_utc(record.expiry_date) < to_utc(now)


def critical_count(records: Iterable[DrugRecord], now: datetime) -> int:
    return sum(1 for record in records if is_expired(record, now))


def expiry_label(record: DrugRecord, now: datetime, tz: tzinfo = timezone.utc) -> str:
    """
    Human-readable expiry text for list rows.

    Examples:
        Expired 3d ago · 28 Sep 2026
        Expires TODAY · 17 Oct 2026
        Expires in 75d · 31 Dec 2026
    """
    days = days_until_expiry(record.expiry_date, now, tz)
    expiry_day = to_utc(record.expiry_date)
    formatted = f"{expiry_day.day:02d} {_MONTHS[expiry_day.month - 1]} {expiry_day.year}"
    if days < 0:
        return f"Expired {abs(days)}d ago · {formatted}"
    if days == 0:
        return f"Expires TODAY · {formatted}"
    return f"Expires in {days}d · {formatted}"


_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
