import asyncio
import json
from typing import Any, Dict, Optional

from carevault.core.config import SYNC_DURATION, SYNC_START_DELAY, get_logger
from carevault.core.storage import BaseKeyValueStore
from carevault.core.sync_status import SyncStatus, SyncStatusStore

logger = get_logger(__name__)


class SyncOrchestrator:
    """Persists app data and drives the simulated cloud sync cycle.

    Every save schedules a cycle (wait ``start_delay``, go ``syncing``, wait
    ``sync_duration``, go ``synced``). Cycles are numbered; a newer save
    cancels the cycle in flight, and a cycle only writes status while it is
    still the latest one, so the badge never steps back to an older cycle.
    """

    def __init__(
            self,
            storage: BaseKeyValueStore,
            start_delay: float = SYNC_START_DELAY,
            sync_duration: float = SYNC_DURATION,
    ):
        self.storage = storage
        self.status_store = SyncStatusStore(storage)
        self.start_delay = start_delay
        self.sync_duration = sync_duration
        self._sequence = 0
        self._task: Optional[asyncio.Task] = None
        self._key_locks: Dict[str, asyncio.Lock] = {}

    @property
    def sequence(self) -> int:
        return self._sequence

    def lock_for(self, key: str) -> asyncio.Lock:
        """Lock shared by every read-modify-write of the value under ``key``."""
        if key not in self._key_locks:
            self._key_locks[key] = asyncio.Lock()
        return self._key_locks[key]

    async def get_status(self) -> SyncStatus:
        return await self.status_store.get_status()

    async def save_and_sync(self, key: str, data: Any) -> asyncio.Task:
        """Writes ``data`` under ``key``, marks it pending and schedules a sync cycle."""
        await self.storage.set(key, json.dumps(data))
        await self.status_store.mark_for_sync()
        logger.info(f"Saved '{key}', sync scheduled in {self.start_delay}s")
        return self._schedule(self.start_delay)

    async def sync_to_cloud(self) -> None:
        """Runs one sync cycle right away and waits for it to finish."""
        task = self._schedule(0)
        await asyncio.wait({task})

    def _schedule(self, delay: float) -> asyncio.Task:
        self._sequence += 1
        if self._task is not None and not self._task.done():
            logger.debug(f"Superseding sync cycle #{self._sequence - 1}")
            self._task.cancel()
        self._task = asyncio.create_task(self._run_cycle(self._sequence, delay))
        return self._task

    def _is_current(self, seq: int) -> bool:
        return seq == self._sequence

    async def _run_cycle(self, seq: int, delay: float) -> None:
        await asyncio.sleep(delay)
        try:
            if not self._is_current(seq):
                return
            await self.status_store.begin_sync()
            logger.info(f"Sync cycle #{seq} started")

            # Simulated network round trip
            await asyncio.sleep(self.sync_duration)

            if not self._is_current(seq):
                return
            status = await self.status_store.complete_sync()
            logger.info(f"Sync cycle #{seq} complete at {status.last_sync}")
        except Exception as e:
            logger.error(f"Sync cycle #{seq} failed: {e}", exc_info=True)
            await self._flag_error(seq)

    async def _flag_error(self, seq: int) -> None:
        if not self._is_current(seq):
            return
        try:
            await self.status_store.mark_error()
        except Exception as e:
            # The backend that just failed may refuse this write too
            logger.critical(f"Could not record sync error status: {e}")

    async def wait_idle(self) -> None:
        """Waits until the most recent sync cycle has finished."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def aclose(self) -> None:
        """Cancels the sync cycle in flight, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait({self._task})
        self._task = None
