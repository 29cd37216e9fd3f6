"""
Engine configuration, read from PAYMENTS_* environment variables or a .env file.
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Payments engine configuration"""

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging goes to stderr; stdout is reserved for the account report
    log_level: str = "WARNING"

    # Abort the run on the first malformed input row instead of skipping it
    strict: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level


def get_settings() -> EngineSettings:
    """Build configuration from the current environment"""
    return EngineSettings()
