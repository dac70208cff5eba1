"""
Inventory codec.
Converts the whole record collection to and from the persisted JSON array.
"""
from typing import List
from pydantic import TypeAdapter, ValidationError
from pharmatrack.core.exceptions import DeserializationException
from pharmatrack.models.drug_model import DrugRecord, to_utc
from pharmatrack.models.dto.drug_dto import PersistedDrugRecord

_records_adapter = TypeAdapter(List[PersistedDrugRecord])


def encode_records(records: List[DrugRecord]) -> bytes:
    """
    Serialize records, in order, to a UTF-8 JSON array.

    Args:
        records: Complete inventory collection

    Returns:
        bytes: JSON payload with camelCase keys
    """
    items = [
        PersistedDrugRecord(
            id=record.id,
            name=record.name,
            quantity=record.quantity,
            expiry_date=to_utc(record.expiry_date),
            added_at=to_utc(record.added_at)
        )
        for record in records
    ]
    return _records_adapter.dump_json(items, by_alias=True)


def decode_records(payload: bytes) -> List[DrugRecord]:
    """
    Parse a persisted payload back into records.

    Args:
        payload: Bytes previously produced by encode_records

    Returns:
        List of DrugRecord objects in stored order

    Raises:
        DeserializationException: If the payload is not a valid inventory array
    """
    try:
        items = _records_adapter.validate_json(payload)
    except ValidationError as e:
        raise DeserializationException(
            f"Persisted inventory is unreadable: {e.error_count()} validation error(s)"
        ) from e

    seen_ids = set()
    records = []
    for item in items:
        if item.id in seen_ids:
            raise DeserializationException(f"Persisted inventory contains duplicate id '{item.id}'")
        seen_ids.add(item.id)
        records.append(
            DrugRecord(
                id=item.id,
                name=item.name,
                quantity=item.quantity,
                expiry_date=to_utc(item.expiry_date),
                added_at=to_utc(item.added_at)
            )
        )
    return records
