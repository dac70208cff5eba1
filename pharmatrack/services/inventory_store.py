"""
Inventory Store.
Owns the canonical in-memory drug collection and keeps the durable copy in step.
"""
import asyncio
import uuid
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Callable, List, Optional, Union
from zoneinfo import ZoneInfo

from pharmatrack.core import config
from pharmatrack.core.exceptions import DeserializationException, StorageUnavailableException
from pharmatrack.core.logging import get_logger
from pharmatrack.models.drug_model import DrugRecord, ExpiryStatus, utc_now
from pharmatrack.repositories.storage_gateway import StorageGateway
from pharmatrack.services import expiry_classifier
from pharmatrack.services.drug_validator import validate_drug_input
from pharmatrack.services.inventory_codec import decode_records, encode_records
from pharmatrack.services.write_behind import WriteBehindQueue

logger = get_logger(__name__)


class InventoryStore:
    """State owner for the drug inventory."""

    def __init__(
        self,
        gateway: StorageGateway,
        clock: Callable[[], datetime] = utc_now,
        warning_days: Optional[int] = None,
        low_stock_threshold: Optional[int] = None,
        timezone: Optional[tzinfo] = None
    ):
        self.gateway = gateway
        self.clock = clock
        self.warning_days = warning_days if warning_days is not None else config.settings.expiry_warning_days
        self.low_stock_threshold = (
            low_stock_threshold if low_stock_threshold is not None else config.settings.low_stock_threshold
        )
        self.timezone = timezone or _resolve_timezone(config.settings.reference_timezone)
        self.loaded = False
        self._load_task: Optional[asyncio.Future] = None
        self._records: List[DrugRecord] = []
        self._writes = WriteBehindQueue(gateway.save)

    @property
    def records(self) -> List[DrugRecord]:
        """Snapshot of the collection, newest first."""
        return list(self._records)

    async def initialize(self) -> None:
        """
        Hydrate the collection from storage. Runs once.

        Unreadable storage and corrupt payloads both fall back to an empty
        inventory. Persistence writes are only allowed after this completes.
        """
        if self._load_task is None:
            # Claimed before the first await so overlapping callers share one load
            self._load_task = asyncio.ensure_future(self._load())
        await self._load_task

    async def _load(self) -> None:
        records: List[DrugRecord] = []
        try:
            payload = await asyncio.to_thread(self.gateway.load)
        except StorageUnavailableException as e:
            logger.error("inventory_load_failed", error=e.message)
            payload = None

        if payload is not None:
            try:
                records = decode_records(payload)
            except DeserializationException as e:
                logger.error("inventory_load_discarded", error=e.message)
                records = []

        self._records = records
        self.loaded = True
        logger.info("inventory_loaded", count=len(records))

    def add_drug(
        self,
        name: str,
        quantity: Union[str, int],
        expiry_date: str
    ) -> DrugRecord:
        """
        Validate raw input and prepend a new record.

        Raises:
            ValidationException: If any field is invalid; nothing is created
        """
        data = validate_drug_input(name, quantity, expiry_date)

        record = DrugRecord(
            id=self._generate_id(),
            name=data.name,
            quantity=data.quantity,
            expiry_date=data.expiry_date,
            added_at=self.clock()
        )
        self._records.insert(0, record)
        logger.info("drug_added", drug_id=record.id, name=record.name, quantity=record.quantity)

        self._persist()
        return record

    def dispense_drug(self, drug_id: str) -> None:
        """Take one unit; quantity floors at 0. Unknown ids are ignored."""
        for index, record in enumerate(self._records):
            if record.id == drug_id:
                break
        else:
            logger.debug("dispense_ignored", drug_id=drug_id)
            return

        # Replace rather than mutate so earlier snapshots stay unchanged
        self._records[index] = DrugRecord(
            id=record.id,
            name=record.name,
            quantity=max(0, record.quantity - 1),
            expiry_date=record.expiry_date,
            added_at=record.added_at
        )
        logger.info("drug_dispensed", drug_id=drug_id, quantity=self._records[index].quantity)
        self._persist()

    def delete_drug(self, drug_id: str) -> None:
        """Remove a record by id. Unknown ids are ignored."""
        remaining = [record for record in self._records if record.id != drug_id]
        if len(remaining) == len(self._records):
            logger.debug("delete_ignored", drug_id=drug_id)
            return

        self._records = remaining
        logger.info("drug_deleted", drug_id=drug_id)
        self._persist()

    def get_drug(self, drug_id: str) -> Optional[DrugRecord]:
        for record in self._records:
            if record.id == drug_id:
                return record
        return None

    def search(self, query: Optional[str] = None) -> List[DrugRecord]:
        """Case-insensitive name filter over the snapshot. Blank query returns all."""
        needle = (query or "").strip().lower()
        if not needle:
            return self.records
        return [record for record in self._records if needle in record.name.lower()]

    def critical_count(self, now: Optional[datetime] = None) -> int:
        return expiry_classifier.critical_count(self._records, now or self.clock())

    def classify(self, record: DrugRecord, now: Optional[datetime] = None) -> ExpiryStatus:
        return expiry_classifier.classify(
            record,
            now or self.clock(),
            warning_days=self.warning_days,
            tz=self.timezone
        )

    def is_low_stock(self, record: DrugRecord) -> bool:
        return expiry_classifier.is_low_stock(record, self.low_stock_threshold)

    async def flush(self) -> None:
        """Wait for queued persistence writes to finish."""
        await self._writes.flush()

    def _persist(self) -> None:
        if not self.loaded:
            logger.debug("persist_skipped_before_load", count=len(self._records))
            return
        self._writes.submit(encode_records(self._records))

    def _generate_id(self) -> str:
        """
        Generate a unique record id.

        Format: drug_{epoch_millis}_{9 hex chars}
        """
        existing = {record.id for record in self._records}
        while True:
            millis = int(self.clock().timestamp() * 1000)
            drug_id = f"drug_{millis}_{uuid.uuid4().hex[:9]}"
            if drug_id not in existing:
                return drug_id


def _resolve_timezone(name: str) -> tzinfo:
    if name.upper() in ("UTC", "Z"):
        return dt_timezone.utc
    return ZoneInfo(name)
