from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Dead Stock Marketplace"
    ENVIRONMENT: str = "local"

    # ==============================
    # Session database
    # ==============================
    DATABASE_URL: str = "sqlite:///./deadstock_session.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Store (read path)
    # ==============================
    STORE_URL: Optional[str] = None
    STORE_ANON_KEY: Optional[str] = None
    STORE_TIMEOUT_SECONDS: int = 15
    OFFERS_TABLE: str = "Inventory Offers"
    REQUESTS_TABLE: str = "Inventory Requests"
    CATALOG_TABLE: str = "Master"

    # ==============================
    # Webhooks (write path)
    # ==============================
    OFFER_WEBHOOK_URL: Optional[str] = None
    REQUEST_WEBHOOK_URL: Optional[str] = None
    REGISTER_WEBHOOK_URL: Optional[str] = None
    PROFILE_WEBHOOK_URL: Optional[str] = None
    WEBHOOK_TIMEOUT_SECONDS: int = 15

    # ==============================
    # Rules
    # ==============================
    NEAR_EXPIRY_DAYS: int = 90
    ACTIVITY_FEED_LIMIT: int = 5
    DRUG_SEARCH_MIN_CHARS: int = 3
    DRUG_SEARCH_LIMIT: int = 10


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
