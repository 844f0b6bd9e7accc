"""
Ledger configuration.

Values come from environment variables, with a .env file in
the working directory loaded first for local development.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Settings:
    """Settings for the API process, migrations and maintenance jobs."""

    APP_NAME: str = "School Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = _env_flag("DEBUG")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Bind address when served by an ASGI server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/school_ledger",
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Absolute amount below which a currency group counts as
    # balanced and a line delta counts as zero.
    BALANCE_TOLERANCE: Decimal = Decimal(os.getenv("BALANCE_TOLERANCE", "0.01"))

    # Currency for lines that name none
    DEFAULT_CURRENCY_ID: int = int(os.getenv("DEFAULT_CURRENCY_ID", "1"))


@lru_cache()
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()
