"""
Process settings read from `.env` and the environment.
Only what every entrypoint needs lives here: project identity, log level, and the database.
API-specific knobs, including the monitoring service address, are in
`device_management.api.api_config`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    "PROJECT_NAME",
    "ENV",
    "LOG_LEVEL",
    "DATABASE_URL",
)


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    PROJECT_NAME: str
    ENV: str
    LOG_LEVEL: str
    DATABASE_URL: str

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


def load_settings(*, load_env: bool = True) -> Settings:
    """Validate settings; every name in REQUIRED_ENV_VARS must be set and non-empty."""

    if load_env:
        load_dotenv()

    values = {key: os.getenv(key, "") for key in REQUIRED_ENV_VARS}
    missing = sorted(key for key, value in values.items() if not value)
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Set them in `.env` or the process environment."
        )

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
