import argparse
import asyncio
import os

from dotenv import load_dotenv

from carevault.core.config import get_logger
from carevault.orchestrator import SyncOrchestrator
from carevault.repository import MedicalRecordRepository, PatientRepository, dashboard_stats
from carevault.seed import initialize_app_data
from carevault.session import Session
from carevault.stores.in_memory import InMemoryStore

logger = get_logger(__name__)


async def watch_badge(orchestrator: SyncOrchestrator, seconds: float, every: float = 0.5):
    """Prints the sync badge the way a dashboard header would poll it."""
    loop = asyncio.get_running_loop()
    end = loop.time() + seconds
    while loop.time() < end:
        status = await orchestrator.get_status()
        print(f"  [badge] {status.status.value:<8} pending={status.pending_changes} lastSync={status.last_sync}")
        await asyncio.sleep(every)


async def main():
    logger.info("Booting CareVault local simulation (in-memory store)")
    store = InMemoryStore()
    orchestrator = SyncOrchestrator(
        store,
        start_delay=float(os.getenv("CAREVAULT_SYNC_START_DELAY", "1.0")),
        sync_duration=float(os.getenv("CAREVAULT_SYNC_DURATION", "2.0")),
    )
    await initialize_app_data(store)

    session = Session(store)
    await session.login("nurse", "nurse@health.gov")

    patients = PatientRepository(orchestrator)
    records = MedicalRecordRepository(orchestrator, patients)

    async def simulate_nurse():
        await asyncio.sleep(0.5)
        print("\n[Nurse] Registering a patient...")
        patient = await patients.register(first_name="Ada", last_name="Lovelace", blood_type="A-")
        await asyncio.sleep(0.2)
        print("[Nurse] Adding a note...")
        record = await records.add_record(
            patient.id, "note", "Intake", "Patient admitted for observation.",
            uploaded_by=await session.email(),
        )
        print(f"[Nurse] Stored encoded content: {record.encrypted_content}")
        print(f"[Nurse] Decoded back: {records.read_content(record)}")

    await asyncio.gather(
        watch_badge(orchestrator, seconds=5),
        simulate_nurse(),
    )
    await orchestrator.wait_idle()

    stats = dashboard_stats(await patients.load(), await records.load())
    print("\n[Dashboard]", stats.model_dump())
    print("[Badge]", (await orchestrator.get_status()).model_dump(by_alias=True))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="CareVault local sync simulation")
    parser.add_argument("--config", type=str, default=".env", help="Path to the .env profile")
    args = parser.parse_args()
    load_dotenv(args.config, override=False)
    asyncio.run(main())
