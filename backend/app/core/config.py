"""
Application settings for Rail Connect
Loaded from environment variables and .env
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENVIRONMENT: str = "development"
    APP_NAME: str = "Rail Connect API"
    LOG_LEVEL: str = "INFO"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    # Firebase
    USE_MOCK_FIREBASE: bool = False
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None
    FIREBASE_CREDENTIALS_JSON: Optional[str] = None

    # Prompt-completion service (Gemini)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    PROMPT_TIMEOUT_SECONDS: float = 15.0

    # Booking policy
    SEAT_AVAILABILITY_RATE: float = 0.7
    CONVENIENCE_FEE_BASE: float = 20.0
    CONVENIENCE_FEE_PER_PASSENGER: float = 11.80
    BOOKING_QUOTA: str = "GENERAL (GN)"

    @field_validator("SEAT_AVAILABILITY_RATE")
    @classmethod
    def validate_availability_rate(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("SEAT_AVAILABILITY_RATE must be between 0 and 1")
        return v

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
