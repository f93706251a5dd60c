"""
Ledger configuration.

Every setting comes from the environment (or a .env file next to
the process). The database URL is also the store selector:
sqlite:///... for a local file, postgresql://... for a shared
server.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Settings for the ledger core and its HTTP adapter."""

    APP_NAME: str = "Finance Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./finance_ledger.db"
    )

    # Upper bound, in seconds, on any single wait for the store.
    # Running out raises StoreUnavailableError.
    STORE_TIMEOUT_SECONDS: float = float(
        os.getenv("STORE_TIMEOUT_SECONDS", "5")
    )

    # Re-runs of an atomic unit after a serialization conflict
    # before ConflictError reaches the caller
    CONFLICT_RETRIES: int = int(os.getenv("CONFLICT_RETRIES", "3"))


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
