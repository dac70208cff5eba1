"""
Validation boundary for new drug entries.
Rejects bad form input before the inventory is touched.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional, Union

from pharmatrack.core.exceptions import ValidationException

QUANTITY_PATTERN = re.compile(r"^[0-9]+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

NAME_REQUIRED = "Drug name is required."
QUANTITY_INVALID = "Enter a valid quantity (0 or more)."
EXPIRY_DATE_INVALID = "Use format: YYYY-MM-DD (e.g. 2026-12-31)"


class ValidatedDrugInput:
    """Parsed, trusted values ready to become a DrugRecord."""

    def __init__(self, name: str, quantity: int, expiry_date: datetime):
        self.name = name
        self.quantity = quantity
        self.expiry_date = expiry_date


def validate_drug_input(
    name: str,
    quantity: Union[str, int],
    expiry_date: str
) -> ValidatedDrugInput:
    """
    Validate raw add-drug input, collecting every field error.

    Args:
        name: Drug name as typed
        quantity: Unit count as text (ints are accepted from JSON clients)
        expiry_date: Calendar date as YYYY-MM-DD

    Returns:
        ValidatedDrugInput with trimmed name, integer quantity and the
        expiry date normalized to UTC midnight of that calendar day

    Raises:
        ValidationException: If any field is invalid
    """
    errors = {}

    clean_name = (name or "").strip()
    if not clean_name:
        errors["name"] = NAME_REQUIRED

    parsed_quantity = _parse_quantity(quantity)
    if parsed_quantity is None:
        errors["quantity"] = QUANTITY_INVALID

    parsed_expiry = _parse_expiry_date(expiry_date)
    if parsed_expiry is None:
        errors["expiry_date"] = EXPIRY_DATE_INVALID

    if errors:
        raise ValidationException(
            f"Invalid drug input: {', '.join(sorted(errors))}",
            errors=errors
        )

    return ValidatedDrugInput(clean_name, parsed_quantity, parsed_expiry)


def _parse_quantity(value: Union[str, int, None]) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    text = (value or "").strip()
    if not QUANTITY_PATTERN.match(text):
        return None
    return int(text)


def _parse_expiry_date(value: str) -> Optional[datetime]:
    text = (value or "").strip()
    if not DATE_PATTERN.match(text):
        return None
    try:
        day = date.fromisoformat(text)
    except ValueError:
        return None
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
