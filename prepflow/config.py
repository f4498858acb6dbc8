"""
prepflow Configuration Management

Pydantic settings for the preprocessing step: where the execution service
lives, how long a batch may take, and how logging is set up.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from prepflow.utils.logging_utils import setup_universal_logging


class Settings(BaseSettings):
    """
    Application settings with automatic environment variable loading.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # === CORE APPLICATION METADATA ===
    APP_NAME: str = "prepflow"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = (
        "Configure, validate and submit tabular preprocessing jobs "
        "against uploaded datasets."
    )
    DEBUG: bool = False
    TESTING: bool = False

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # === EXECUTION SERVICE ===
    PREPROCESS_SERVICE_URL: str = "http://127.0.0.1:5000"
    PREPROCESS_ENDPOINT: str = "/preprocess"
    DOWNLOAD_ENDPOINT: str = "/download/preprocessed"
    # Preprocessing large uploads can take minutes
    PREPROCESS_TIMEOUT_SECONDS: float = 300.0
    ALLOWED_EXTENSIONS: List[str] = ["csv", "tsv", "xlsx", "xls", "json", "parquet"]

    # === LOGGING ===
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_LEVEL: str = "WARNING"
    LOG_FILE: str = "logs/prepflow.log"
    LOG_MAX_SIZE: int = 50 * 1024 * 1024  # 50MB
    LOG_BACKUP_COUNT: int = 10
    # Rotation strategy: 'size' (default) or 'time'
    LOG_ROTATION_TYPE: str = "size"
    LOG_ROTATION_WHEN: str | None = "midnight"
    LOG_ROTATION_INTERVAL: int = 1

    @field_validator("PREPROCESS_SERVICE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("PREPROCESS_ENDPOINT", "DOWNLOAD_ENDPOINT")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        return v if v.startswith("/") else f"/{v}"

    @field_validator("LOG_LEVEL", "LOG_CONSOLE_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("ALLOWED_EXTENSIONS", mode="before")
    @classmethod
    def parse_allowed_extensions(cls, v):
        if isinstance(v, str):
            return [ext.strip().lstrip(".").lower() for ext in v.split(",") if ext.strip()]
        return v

    @field_validator("PREPROCESS_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("PREPROCESS_TIMEOUT_SECONDS must be positive")
        return v

    @property
    def preprocess_url(self) -> str:
        return f"{self.PREPROCESS_SERVICE_URL}{self.PREPROCESS_ENDPOINT}"

    def create_directories(self) -> None:
        """Create the log directory if it doesn't exist."""
        Path(self.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)

    def setup_logging(self) -> None:
        """Initialize application logging."""
        setup_universal_logging(
            log_file=self.LOG_FILE,
            log_level=self.LOG_LEVEL,
            rotation_type=self.LOG_ROTATION_TYPE,
            rotation_when=self.LOG_ROTATION_WHEN,
            rotation_interval=self.LOG_ROTATION_INTERVAL,
            max_bytes=self.LOG_MAX_SIZE,
            backup_count=self.LOG_BACKUP_COUNT,
            console_log_level=self.LOG_CONSOLE_LEVEL,
        )


class DevelopmentSettings(Settings):
    """Development environment settings."""
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"


class ProductionSettings(Settings):
    """Production environment settings."""
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_LEVEL: str = "ERROR"


class TestingSettings(Settings):
    """Testing environment settings."""
    TESTING: bool = True
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    PREPROCESS_SERVICE_URL: str = "http://preprocess.test"
    PREPROCESS_TIMEOUT_SECONDS: float = 5.0


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings based on environment.
    Uses lru_cache to avoid recreating settings on every call.
    """
    env = os.getenv("PREPFLOW_ENV", "development").lower()

    settings: Settings
    if env == "production":
        settings = ProductionSettings()
    elif env == "testing":
        settings = TestingSettings()
    else:
        settings = DevelopmentSettings()

    return settings
