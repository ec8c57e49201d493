import asyncio

import pytest

from carevault.orchestrator import SyncOrchestrator
from carevault.stores.in_memory import InMemoryStore


class YieldingStore(InMemoryStore):
    """Store that suspends on every call, the way a networked backend does."""

    async def get(self, key):
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key, value):
        await asyncio.sleep(0)
        await super().set(key, value)


# Short timings so sync cycles finish within a test
FAST_START_DELAY = 0.05
FAST_SYNC_DURATION = 0.1


@pytest.fixture
def store():
    """Provides a fresh, empty store for each test."""
    return InMemoryStore()


@pytest.fixture
def yielding_store():
    return YieldingStore()


@pytest.fixture
async def orchestrator(store):
    """Orchestrator over the test store with fast sync timings."""
    orch = SyncOrchestrator(store, start_delay=FAST_START_DELAY, sync_duration=FAST_SYNC_DURATION)
    yield orch
    await orch.aclose()
