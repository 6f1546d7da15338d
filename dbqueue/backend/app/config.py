# dbqueue/backend/app/config.py
import os

from dotenv import load_dotenv

# Load settings from .env at project root
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def get_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set in environment/.env")
    return url


def sql_echo() -> bool:
    return os.getenv("SQL_ECHO", "false").strip().lower() in _TRUTHY


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").strip().upper()


def max_claim_count() -> int:
    """Largest batch the HTTP surface will claim in one request."""
    return int(os.getenv("MAX_CLAIM_COUNT", "100"))
