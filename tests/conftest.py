"""
Shared test fixtures and utilities.
"""
import asyncio
from datetime import datetime, timezone
import pytest
from pharmatrack.repositories.memory_storage_gateway import InMemoryStorageGateway
from pharmatrack.services.inventory_store import InventoryStore

# Fixed reference instant used by every store under test
NOW = datetime(2026, 10, 17, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed current instant."""
    return NOW


@pytest.fixture
def memory_gateway():
    """Empty in-memory storage gateway."""
    return InMemoryStorageGateway(key="@pharmatrack_inventory")


@pytest.fixture
def store(memory_gateway):
    """Initialized InventoryStore over an empty in-memory gateway with a fixed clock."""
    inventory_store = InventoryStore(
        gateway=memory_gateway,
        clock=lambda: NOW,
        warning_days=30,
        low_stock_threshold=5,
        timezone=timezone.utc
    )
    asyncio.run(inventory_store.initialize())
    return inventory_store
