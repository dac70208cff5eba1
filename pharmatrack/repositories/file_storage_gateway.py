"""
File Storage Gateway for on-device persistence.
Stores the inventory blob as a single file inside the storage directory.
"""
import os
import re
import tempfile
from pathlib import Path
from typing import Optional
from pharmatrack.core import config
from pharmatrack.core.exceptions import StorageUnavailableException
from pharmatrack.core.logging import get_logger
from pharmatrack.repositories.storage_gateway import StorageGateway

logger = get_logger(__name__)


class FileStorageGateway(StorageGateway):
    """Gateway backed by one file per key on the local filesystem."""

    def __init__(self, key: Optional[str] = None, directory: Optional[str] = None):
        super().__init__(key or config.settings.storage_key)
        self.directory = Path(directory or config.settings.storage_dir)
        self.path = self.directory / self._key_to_filename(self.key)

    def load(self) -> Optional[bytes]:
        """
        Read the stored blob.

        Returns:
            bytes: File content, or None if the file does not exist

        Raises:
            StorageUnavailableException: If the file cannot be read
        """
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableException(f"Failed to read {self.path}: {str(e)}") from e

    def save(self, payload: bytes) -> None:
        """
        Atomically replace the stored blob.

        The payload is written to a temporary file in the same directory
        and renamed over the target.

        Raises:
            StorageUnavailableException: If the write fails
        """
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".tmp-", dir=self.directory)
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
            logger.debug("storage_saved", path=str(self.path), size=len(payload))
        except OSError as e:
            raise StorageUnavailableException(f"Failed to write {self.path}: {str(e)}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    @staticmethod
    def _key_to_filename(key: str) -> str:
        """
        Map a storage key to a safe filename.

        Format: @pharmatrack_inventory -> _pharmatrack_inventory.json
        """
        return re.sub(r"[^A-Za-z0-9._-]", "_", key) + ".json"
