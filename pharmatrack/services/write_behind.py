"""
Write-behind queue for inventory persistence.

At most one write is in flight. A payload submitted while a write is running
replaces any payload still waiting, so the durable copy always converges on
the most recent snapshot.
"""
import asyncio
from typing import Callable, Optional

from pharmatrack.core.exceptions import StorageUnavailableException
from pharmatrack.core.logging import get_logger

logger = get_logger(__name__)


class WriteBehindQueue:
    """Single-slot, latest-wins queue in front of a blocking save callable."""

    def __init__(self, save: Callable[[bytes], None]):
        self._save = save
        self._pending: Optional[bytes] = None
        self._task: Optional[asyncio.Task] = None

    def submit(self, payload: bytes) -> None:
        """
        Queue payload for persistence without blocking the caller.

        Without a running event loop the payload is written synchronously.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write(payload)
            return

        if self._pending is not None:
            logger.debug("write_superseded", dropped_bytes=len(self._pending))
        self._pending = payload
        if self._task is None or self._task.done():
            self._task = loop.create_task(self._drain())

    async def flush(self) -> None:
        """Wait until nothing is queued or in flight."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    async def _drain(self) -> None:
        while self._pending is not None:
            payload, self._pending = self._pending, None
            await asyncio.to_thread(self._write, payload)

    def _write(self, payload: bytes) -> None:
        try:
            self._save(payload)
        except StorageUnavailableException as e:
            logger.error("inventory_save_failed", error=e.message)
