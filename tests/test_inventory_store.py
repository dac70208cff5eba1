"""
Unit tests for InventoryStore.
Tests mutations, derived metrics and the persistence round-trip.
"""
import asyncio
import json
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
from zoneinfo import ZoneInfo
import pytest
from pharmatrack.core.exceptions import StorageUnavailableException, ValidationException
from pharmatrack.models.drug_model import DrugRecord, ExpiryStatus
from pharmatrack.repositories.file_storage_gateway import FileStorageGateway
from pharmatrack.repositories.memory_storage_gateway import InMemoryStorageGateway
from pharmatrack.repositories.storage_gateway import StorageGateway
from pharmatrack.services import expiry_classifier
from pharmatrack.services.inventory_codec import decode_records, encode_records
from pharmatrack.services.inventory_store import InventoryStore

NOW = datetime(2026, 10, 17, 9, 30, 0, tzinfo=timezone.utc)


def build_store(gateway):
    return InventoryStore(gateway=gateway, clock=lambda: NOW, timezone=timezone.utc)


class TestInventoryStoreMutations:
    """Test suite for add, dispense and delete."""

    def test_add_drug_prepends_parsed_record(self, store):
        """Test a valid add lands at index 0 with parsed values."""
        store.add_drug("Paracetamol", "20", "2027-03-01")

        record = store.add_drug("  Amoxicillin 500mg ", "100", "2026-12-31")

        assert store.records[0] is record
        assert len(store.records) == 2
        assert record.name == "Amoxicillin 500mg"
        assert record.quantity == 100
        assert record.expiry_date == datetime(2026, 12, 31, tzinfo=timezone.utc)
        assert record.added_at == NOW
        assert re.match(r"^drug_\d+_[0-9a-f]{9}$", record.id)

    def test_add_drug_generates_unique_ids(self, store):
        """Test ids never collide within the collection."""
        for _ in range(50):
            store.add_drug("Saline", "1", "2027-01-01")

        assert len({record.id for record in store.records}) == 50

    def test_add_drug_rejects_negative_quantity(self, store, memory_gateway):
        """Test invalid input creates nothing and writes nothing."""
        with pytest.raises(ValidationException) as exc_info:
            store.add_drug("Amoxicillin 500mg", "-5", "2026-12-31")

        assert "quantity" in exc_info.value.errors
        assert store.records == []
        assert memory_gateway.save_count == 0

    def test_dispense_decrements_by_one(self, store):
        """Test quantity n becomes n - 1."""
        record = store.add_drug("Saline", "3", "2027-01-01")

        store.dispense_drug(record.id)

        assert store.get_drug(record.id).quantity == 2

    def test_dispense_floors_at_zero(self, store):
        """Test dispensing an empty record leaves it at 0."""
        record = store.add_drug("Saline", "1", "2027-01-01")

        store.dispense_drug(record.id)
        store.dispense_drug(record.id)

        assert store.get_drug(record.id).quantity == 0

    def test_dispense_does_not_alter_earlier_snapshot(self, store):
        """Test a snapshot taken before a dispense keeps its values."""
        record = store.add_drug("Saline", "4", "2027-01-01")
        snapshot = store.records

        store.dispense_drug(record.id)

        assert snapshot[0].quantity == 4
        assert store.records[0].quantity == 3

    def test_dispense_expired_drug_is_allowed(self, store):
        """Test expiry status never blocks dispensing."""
        record = store.add_drug("Old Stock", "2", "2026-01-01")

        store.dispense_drug(record.id)

        assert store.classify(store.get_drug(record.id)) == ExpiryStatus.CRITICAL
        assert store.get_drug(record.id).quantity == 1

    def test_delete_removes_only_target(self, store):
        """Test delete removes exactly one record and keeps order."""
        first = store.add_drug("A", "1", "2027-01-01")
        second = store.add_drug("B", "1", "2027-01-01")
        third = store.add_drug("C", "1", "2027-01-01")

        store.delete_drug(second.id)

        assert [record.id for record in store.records] == [third.id, first.id]

    def test_delete_twice_equals_once(self, store, memory_gateway):
        """Test delete is idempotent and the repeat does not write."""
        record = store.add_drug("A", "1", "2027-01-01")
        store.delete_drug(record.id)
        saves_after_first_delete = memory_gateway.save_count

        store.delete_drug(record.id)

        assert store.records == []
        assert memory_gateway.save_count == saves_after_first_delete

    def test_unknown_id_is_noop(self, store, memory_gateway):
        """Test dispense and delete on a missing id change nothing and raise nothing."""
        store.add_drug("A", "5", "2027-01-01")
        before = store.records
        saves = memory_gateway.save_count

        store.dispense_drug("drug_missing")
        store.delete_drug("drug_missing")

        assert store.records == before
        assert memory_gateway.save_count == saves

    def test_example_scenario(self, store):
        """Test add, dispense three times, then delete."""
        record = store.add_drug("Amoxicillin 500mg", "100", "2026-12-31")
        assert len(store.records) == 1
        assert store.records[0].quantity == 100
        assert store.critical_count() == 0

        for _ in range(3):
            store.dispense_drug(record.id)
        assert store.records[0].quantity == 97
        assert store.critical_count() == 0

        store.delete_drug(record.id)
        assert store.records == []
        assert store.critical_count() == 0


class TestInventoryStoreQueries:
    """Test suite for read-only queries."""

    def test_critical_count_tracks_expired_records(self, store):
        """Test critical_count counts expiry instants before now."""
        store.add_drug("Expired", "1", "2026-10-01")
        store.add_drug("Expires today", "1", "2026-10-17")
        store.add_drug("Fine", "1", "2027-10-01")

        assert store.critical_count() == 2
        assert store.critical_count(now=datetime(2026, 9, 1, tzinfo=timezone.utc)) == 0

    def test_classify_uses_store_clock(self, store):
        """Test classify defaults to the injected clock."""
        warning = store.add_drug("Soon", "1", "2026-11-16")
        safe = store.add_drug("Later", "1", "2026-11-17")

        assert store.classify(warning) == ExpiryStatus.WARNING
        assert store.classify(safe) == ExpiryStatus.SAFE

    def test_entered_date_keeps_its_day_west_of_utc(self, memory_gateway):
        """Test a date expiring today stays day 0 when the reference zone is behind UTC."""
        # 10:00 on 31 Dec in New York
        now = datetime(2026, 12, 31, 15, 0, tzinfo=timezone.utc)
        store = InventoryStore(gateway=memory_gateway, clock=lambda: now, timezone=ZoneInfo("America/New_York"))
        asyncio.run(store.initialize())

        record = store.add_drug("Saline", "5", "2026-12-31")

        assert expiry_classifier.days_until_expiry(record.expiry_date, now, store.timezone) == 0
        assert store.classify(record) == ExpiryStatus.WARNING
        assert expiry_classifier.expiry_label(record, now, store.timezone) == "Expires TODAY · 31 Dec 2026"

    def test_is_low_stock_uses_threshold(self, store):
        """Test the configured low-stock threshold."""
        low = store.add_drug("Low", "4", "2027-01-01")
        ok = store.add_drug("Ok", "5", "2027-01-01")

        assert store.is_low_stock(low) is True
        assert store.is_low_stock(ok) is False

    def test_search_filters_by_name(self, store):
        """Test case-insensitive substring search."""
        store.add_drug("Amoxicillin 500mg", "1", "2027-01-01")
        store.add_drug("Ibuprofen", "1", "2027-01-01")

        assert [record.name for record in store.search("AMOX")] == ["Amoxicillin 500mg"]
        assert len(store.search("  ")) == 2
        assert store.search("zzz") == []

    def test_records_is_a_copy(self, store):
        """Test callers cannot mutate the collection through the snapshot."""
        store.add_drug("A", "1", "2027-01-01")

        store.records.clear()

        assert len(store.records) == 1


class TestInventoryStorePersistence:
    """Test suite for load, save and the loaded gate."""

    @pytest.fixture
    def stored_records(self):
        return [
            DrugRecord("drug_2", "Ibuprofen", 8, datetime(2027, 2, 1, tzinfo=timezone.utc), NOW),
            DrugRecord("drug_1", "Saline", 0, datetime(2026, 1, 1, tzinfo=timezone.utc), NOW - timedelta(days=1)),
        ]

    def test_initialize_loads_prior_data(self, stored_records):
        """Test persisted records are restored in order."""
        gateway = InMemoryStorageGateway(key="k", store={"k": encode_records(stored_records)})
        store = build_store(gateway)

        asyncio.run(store.initialize())

        assert store.loaded is True
        assert store.records == stored_records

    def test_initialize_without_prior_data(self):
        """Test an empty gateway yields an empty inventory."""
        store = build_store(InMemoryStorageGateway(key="k"))

        asyncio.run(store.initialize())

        assert store.loaded is True
        assert store.records == []

    def test_initialize_falls_back_on_storage_failure(self):
        """Test unreadable storage is treated as absent."""
        gateway = Mock(spec=StorageGateway)
        gateway.load.side_effect = StorageUnavailableException("permission denied")
        store = build_store(gateway)

        asyncio.run(store.initialize())

        assert store.loaded is True
        assert store.records == []

    def test_initialize_discards_corrupt_payload(self):
        """Test a corrupt blob falls back to an empty inventory."""
        gateway = InMemoryStorageGateway(key="k", store={"k": b'{"not": "an array"}'})
        store = build_store(gateway)

        asyncio.run(store.initialize())

        assert store.loaded is True
        assert store.records == []

    def test_initialize_runs_once(self, stored_records):
        """Test a second initialize does not reload over in-memory changes."""
        gateway = InMemoryStorageGateway(key="k", store={"k": encode_records(stored_records)})
        store = build_store(gateway)
        asyncio.run(store.initialize())
        store.delete_drug("drug_1")

        asyncio.run(store.initialize())

        assert [record.id for record in store.records] == ["drug_2"]

    def test_overlapping_initialize_loads_once(self, stored_records):
        """Test concurrent initialize calls share one load and keep later changes."""
        gateway = Mock(spec=StorageGateway)
        gateway.load.return_value = encode_records(stored_records)
        store = build_store(gateway)

        async def scenario():
            first = asyncio.ensure_future(store.initialize())
            second = asyncio.ensure_future(store.initialize())
            await asyncio.gather(first, second)
            store.delete_drug("drug_1")
            await store.initialize()

        asyncio.run(scenario())

        assert gateway.load.call_count == 1
        assert [record.id for record in store.records] == ["drug_2"]

    def test_no_write_before_load(self):
        """Test mutations before initialize never overwrite storage."""
        gateway = Mock(spec=StorageGateway)
        store = build_store(gateway)

        store.add_drug("Saline", "1", "2027-01-01")

        gateway.save.assert_not_called()

    def test_every_mutation_writes_full_collection(self, store, memory_gateway):
        """Test the persisted blob mirrors memory after each mutation."""
        first = store.add_drug("A", "2", "2027-01-01")
        second = store.add_drug("B", "3", "2027-01-01")
        assert decode_records(memory_gateway.load()) == store.records

        store.dispense_drug(first.id)
        assert decode_records(memory_gateway.load()) == store.records

        store.delete_drug(second.id)
        persisted = json.loads(memory_gateway.load())
        assert [item["id"] for item in persisted] == [first.id]
        assert persisted[0]["quantity"] == 1
        assert memory_gateway.save_count == 4

    def test_save_failure_keeps_memory_state(self):
        """Test a failed write leaves the in-memory view intact."""
        gateway = Mock(spec=StorageGateway)
        gateway.load.return_value = None
        gateway.save.side_effect = StorageUnavailableException("disk full")
        store = build_store(gateway)
        asyncio.run(store.initialize())

        record = store.add_drug("Saline", "2", "2027-01-01")
        store.dispense_drug(record.id)

        assert store.records[0].quantity == 1
        assert gateway.save.call_count == 2

    def test_async_mutations_persist_latest_snapshot(self):
        """Test rapid mutations on the event loop end with the newest collection stored."""
        gateway = InMemoryStorageGateway(key="k")
        store = build_store(gateway)

        async def scenario():
            await store.initialize()
            record = store.add_drug("Saline", "10", "2027-01-01")
            store.add_drug("Ibuprofen", "5", "2027-01-01")
            store.dispense_drug(record.id)
            await store.flush()

        asyncio.run(scenario())

        assert decode_records(gateway.load()) == store.records
        assert store.records[1].quantity == 9

    def test_file_round_trip_across_sessions(self, tmp_path):
        """Test a second session reads exactly what the first one saved."""
        first_session = build_store(FileStorageGateway(key="@pharmatrack_inventory", directory=str(tmp_path)))
        asyncio.run(first_session.initialize())
        record = first_session.add_drug("Amoxicillin 500mg", "100", "2026-12-31")
        first_session.add_drug("Ibuprofen", "4", "2026-11-01")
        first_session.dispense_drug(record.id)

        second_session = build_store(FileStorageGateway(key="@pharmatrack_inventory", directory=str(tmp_path)))
        asyncio.run(second_session.initialize())

        assert second_session.records == first_session.records
