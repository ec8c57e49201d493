import argparse
import asyncio
import os

from dotenv import load_dotenv

from carevault.core.config import get_logger
from carevault.orchestrator import SyncOrchestrator
from carevault.repository import PatientRepository
from carevault.seed import initialize_app_data
from carevault.stores.redis_store import RedisStore

logger = get_logger(__name__)


async def main(env_file: str, reset: bool):
    # Load the specific profile passed via CLI
    load_dotenv(env_file, override=False)

    store = RedisStore(
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379"),
        prefix=os.getenv("CAREVAULT_KEY_PREFIX", "carevault:"),
    )
    orchestrator = SyncOrchestrator(store)
    try:
        if reset:
            logger.info("Clearing profile before seeding")
            await store.clear()
        await initialize_app_data(store)

        patients = PatientRepository(orchestrator)
        logger.info(f"Profile holds {len(await patients.load())} patients")
        logger.info(f"Sync status on open: {(await orchestrator.get_status()).model_dump(by_alias=True)}")

        await patients.register(first_name="Grace", last_name="Hopper")
        logger.info(f"After save: {(await orchestrator.get_status()).status.value}")
        await orchestrator.wait_idle()
        logger.info(f"After sync: {(await orchestrator.get_status()).model_dump(by_alias=True)}")
    finally:
        await orchestrator.aclose()
        await store.aclose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="CareVault Redis-backed profile")
    parser.add_argument("--config", type=str, default=".env", help="Path to the .env profile")
    parser.add_argument("--reset", action="store_true", help="Wipe the profile's keys first")
    args = parser.parse_args()
    asyncio.run(main(args.config, args.reset))
