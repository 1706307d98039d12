"""Application settings, overridable through HOTEL_* environment variables or a .env file"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HOTEL_", env_file=".env", extra="ignore")

    APP_NAME: str = "Hotel Booking API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Security (development defaults; set HOTEL_SECRET_KEY in production)
    SECRET_KEY: str = "change-me-hotel-booking-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Booking codes
    BOOKING_CODE_PREFIX: str = "BOOK"
    BOOKING_CODE_LENGTH: int = 8
    BOOKING_CODE_MAX_ATTEMPTS: int = Field(default=10, ge=1)

    # Payment proof uploads
    MAX_PAYMENT_SCREENSHOT_BYTES: int = 5 * 1024 * 1024

    # Reference data (properties, room categories, rooms) loaded at startup
    SEED_FILE: Optional[str] = "seed_data.json"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
