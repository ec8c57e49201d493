import asyncio
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from carevault.core.config import get_logger
from carevault.core.storage import BaseKeyValueStore, StorageKeys

logger = get_logger(__name__)


class SyncState(str, Enum):
    SYNCED = "synced"
    SYNCING = "syncing"
    PENDING = "pending"
    ERROR = "error"


class SyncStatus(BaseModel):
    """Persisted sync badge state. Serialized with camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    status: SyncState = SyncState.SYNCED
    last_sync: Optional[str] = Field(None, alias="lastSync", description="ISO-8601 UTC timestamp of the last completed sync")
    pending_changes: int = Field(0, ge=0, alias="pendingChanges", description="Mutations since the last completed sync")


def utc_timestamp() -> str:
    """Current UTC time as e.g. ``2025-01-15T09:30:00.123Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class SyncStatusStore:
    """State machine over the ``syncStatus`` record.

    Transitions:
      (any)   -> pending   mark_for_sync()   counter + 1
      (any)   -> syncing   begin_sync()
      (any)   -> synced    complete_sync()   lastSync = now, counter = 0
      (any)   -> error     mark_error()
    """

    def __init__(self, storage: BaseKeyValueStore):
        self.storage = storage
        # Transitions are read-modify-write over an async backend
        self.lock = asyncio.Lock()

    async def get_status(self) -> SyncStatus:
        stored = await self.storage.get(StorageKeys.SYNC_STATUS)
        if stored:
            try:
                return SyncStatus.model_validate_json(stored)
            except ValidationError as e:
                logger.warning(f"Ignoring unreadable sync status record: {e.error_count()} error(s)")
        # Older profiles only kept a bare timestamp under "lastSync"
        legacy = await self.storage.get(StorageKeys.LAST_SYNC)
        return SyncStatus(status=SyncState.SYNCED, last_sync=legacy, pending_changes=0)

    async def _write(self, status: SyncStatus) -> SyncStatus:
        await self.storage.set(StorageKeys.SYNC_STATUS, status.model_dump_json(by_alias=True))
        return status

    async def mark_for_sync(self) -> SyncStatus:
        async with self.lock:
            current = await self.get_status()
            updated = current.model_copy(update={
                "status": SyncState.PENDING,
                "pending_changes": current.pending_changes + 1,
            })
            logger.debug(f"Marked for sync, {updated.pending_changes} pending change(s)")
            return await self._write(updated)

    async def begin_sync(self) -> SyncStatus:
        async with self.lock:
            current = await self.get_status()
            return await self._write(current.model_copy(update={"status": SyncState.SYNCING}))

    async def complete_sync(self) -> SyncStatus:
        timestamp = utc_timestamp()
        completed = SyncStatus(status=SyncState.SYNCED, last_sync=timestamp, pending_changes=0)
        async with self.lock:
            await self._write(completed)
            await self.storage.set(StorageKeys.LAST_SYNC, timestamp)
        return completed

    async def mark_error(self) -> SyncStatus:
        async with self.lock:
            current = await self.get_status()
            return await self._write(current.model_copy(update={"status": SyncState.ERROR}))
