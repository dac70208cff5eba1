"""
Dependency injection container for FastAPI.
Provides singleton-like behavior for the storage gateway and inventory store.
"""
from functools import lru_cache
from fastapi import Request
from pharmatrack.core import config
from pharmatrack.repositories.storage_gateway import StorageGateway
from pharmatrack.repositories.file_storage_gateway import FileStorageGateway
from pharmatrack.repositories.memory_storage_gateway import InMemoryStorageGateway
from pharmatrack.repositories.s3_storage_gateway import S3StorageGateway
from pharmatrack.services.inventory_store import InventoryStore


@lru_cache()
def get_storage_gateway() -> StorageGateway:
    """Get the StorageGateway singleton for the configured backend."""
    backend = config.settings.storage_backend.lower()
    if backend == "file":
        return FileStorageGateway()
    if backend == "s3":
        return S3StorageGateway()
    if backend == "memory":
        return InMemoryStorageGateway()
    raise ValueError(f"Unknown storage backend: {config.settings.storage_backend}")


@lru_cache()
def get_inventory_store() -> InventoryStore:
    """Get InventoryStore singleton instance with injected gateway."""
    return InventoryStore(gateway=get_storage_gateway())


def get_request_store(request: Request) -> InventoryStore:
    """Resolve the store owned by the running application."""
    return request.app.state.inventory_store
