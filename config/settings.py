from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger("satbot")

DEFAULT_ENV_FILE = ".env"


class Settings(BaseModel):
    """Application settings resolved from the process environment and a .env file.

    Keep all credentials and config centralized here.
    """

    model_config = ConfigDict(frozen=True)

    groq_api_key: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    context_file: str = "context.txt"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v


# Settings field -> environment variable name
_ENV_KEYS = {
    "groq_api_key": "GROQ_API_KEY",
    "host": "HOST",
    "port": "PORT",
    "log_level": "LOG_LEVEL",
    "context_file": "CONTEXT_FILE",
}


def resolve_settings(
    file_values: Mapping[str, Optional[str]], environ: Mapping[str, str]
) -> Settings:
    """Merge .env values with the environment; non-empty environment values win."""
    resolved = {}
    for field, key in _ENV_KEYS.items():
        value = environ.get(key) or file_values.get(key)
        if value:
            resolved[field] = value.strip()
    return Settings(**resolved)


def read_env_file(path: str | Path) -> dict[str, Optional[str]]:
    env_path = Path(path)
    if not env_path.is_file():
        logger.warning("Could not open %s, relying on process environment", env_path)
        return {}
    values = dotenv_values(env_path)
    logger.info("Environment variables loaded from %s", env_path)
    return dict(values)


def load_settings(env_file: str | Path | None = None) -> Settings:
    env_file = env_file or os.getenv("ENV_FILE", DEFAULT_ENV_FILE)
    return resolve_settings(read_env_file(env_file), os.environ)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
