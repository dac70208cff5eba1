"""
Abstract base class for the persistence gateway.
Defines the contract for storing the inventory blob under one fixed key.
"""
from abc import ABC, abstractmethod
from typing import Optional


class StorageGateway(ABC):
    """Abstract key-value gateway bound to a single storage key."""

    def __init__(self, key: str):
        self.key = key

    @abstractmethod
    def load(self) -> Optional[bytes]:
        """
        Return the last saved blob, or None if nothing was ever saved.

        Raises:
            StorageUnavailableException: If storage cannot be read
        """
        pass

    @abstractmethod
    def save(self, payload: bytes) -> None:
        """
        Replace the stored blob with payload.

        Raises:
            StorageUnavailableException: If the write cannot complete
        """
        pass
