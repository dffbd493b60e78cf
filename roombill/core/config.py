"""Application configuration settings."""

import os
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using a mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/roombill.db"
    return "sqlite:///./roombill.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Roombill"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Database - defaults to volume path if /data exists
    DATABASE_URL: str = _get_default_database_url()

    # Fallbacks used when the settings table has no usable value
    DEFAULT_WATER_RATE: Decimal = Decimal("18")
    DEFAULT_ELECTRIC_RATE: Decimal = Decimal("8")
    DEFAULT_TRASH_FEE: Decimal = Decimal("30")

    # Invoice numbers: INV-<yy><mm>-<room number>, yy in the Buddhist era
    INVOICE_PREFIX: str = "INV"
    INVOICE_YEAR_OFFSET: int = 543


settings = Settings()
