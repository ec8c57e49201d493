import logging
import os

import colorlog
from colorlog import ColoredFormatter
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
KEY_PREFIX = os.getenv("CAREVAULT_KEY_PREFIX", "carevault:")

# Simulated cloud sync timings, in seconds
SYNC_START_DELAY = float(os.getenv("CAREVAULT_SYNC_START_DELAY", "1.0"))
SYNC_DURATION = float(os.getenv("CAREVAULT_SYNC_DURATION", "2.0"))

handler = colorlog.StreamHandler()
handler.setFormatter(ColoredFormatter(
    '%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    log_colors={
        'INFO': 'green',
        'DEBUG': 'cyan',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'bold_red'
    }
))


def get_logger(module_name: str):
    logger = colorlog.getLogger(module_name)
    if handler not in logger.handlers:
        logger.addHandler(handler)
    logger.setLevel(level=getattr(logging, LOG_LEVEL, logging.INFO))
    return logger


def mute_backend_logging(level=logging.WARNING):
    # Keep the storage client and event loop chatter out of the sync log
    for name in ("redis", "redis.asyncio", "asyncio"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = False


mute_backend_logging()
