# growth_garden/config/settings.py

import logging
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)

class AppSettings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Covers the remote Growth Garden API connection, the client-side cache,
    calendar/time handling for the calculators, and logging/error reporting.
    """
    # --- Remote API ---
    GARDEN_API_URL: str = "http://localhost:3001"
    API_REQUEST_TIMEOUT: float = 30.0
    API_MUTATION_TIMEOUT: float = 60.0
    API_RETRY_ATTEMPTS: int = Field(default=3, ge=1)
    API_RETRY_WAIT_SECONDS: float = Field(default=0.5, ge=0.0)

    # --- Client cache ---
    # Mirrors the 30s stale time the web client used for its query cache
    CACHE_TTL_SECONDS: float = Field(default=30.0, ge=0.0)

    # --- Session registry ---
    MAX_SESSIONS: int = Field(default=500, ge=1)
    SESSION_IDLE_TTL_SECONDS: float = Field(default=1800.0, gt=0.0)

    # --- Localization & calendar ---
    DEFAULT_LANGUAGE: str = "en"
    GARDEN_TIMEZONE: str = "UTC"
    ACTIVITY_TREND_DAYS: int = Field(default=30, ge=1)

    # --- Logging / error reporting ---
    ERROR_LOG_FILE: str = "error.log"
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1
    APP_ENV: str = "development"
    APP_RELEASE_VERSION: str = "unknown"

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file='.env', # Load from .env file if it exists
        env_file_encoding='utf-8',
        extra='ignore', # Ignore extra environment variables
    )

# --- Create a single instance of the settings ---
settings = AppSettings()

logger.debug(">>> DEBUG SETTINGS: STARTING Pydantic settings.py <<<")
for key, value in settings.model_dump().items():
    if "DSN" in key:
        logger.debug(f">>> DEBUG SETTINGS: {key}: {'Loaded' if value else 'Missing/Empty'}")
    else:
        logger.debug(f">>> DEBUG SETTINGS: {key}: {value}")
if not settings.GARDEN_API_URL: logger.critical(">>> CRITICAL SETTINGS: GARDEN_API_URL is missing!")
logger.debug(">>> DEBUG SETTINGS: END OF Pydantic settings.py <<<")
