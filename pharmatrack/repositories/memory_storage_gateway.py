"""
In-memory Storage Gateway.
Keeps blobs in a process-local dict; nothing survives a restart.
"""
from typing import Dict, Optional
from pharmatrack.core import config
from pharmatrack.repositories.storage_gateway import StorageGateway


class InMemoryStorageGateway(StorageGateway):
    """Dict-backed gateway, used by the memory backend and in tests."""

    def __init__(self, key: Optional[str] = None, store: Optional[Dict[str, bytes]] = None):
        super().__init__(key or config.settings.storage_key)
        self.store = store if store is not None else {}
        self.save_count = 0

    def load(self) -> Optional[bytes]:
        return self.store.get(self.key)

    def save(self, payload: bytes) -> None:
        self.store[self.key] = bytes(payload)
        self.save_count += 1
