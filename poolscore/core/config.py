"""Application configuration via environment variables (or a .env file)."""

import json
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="POOLSCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Both are required for the data endpoints; without them only /health answers.
    database_url: Optional[str] = None
    database_key: Optional[str] = None

    cors_origins: Annotated[list[str], NoDecode] = ["*"]
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    sql_echo: bool = False

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        """Accept a comma separated string as well as a JSON list."""
        if not isinstance(value, str):
            return value
        if value.strip().startswith("["):
            return json.loads(value)
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def store_configured(self) -> bool:
        return bool(self.database_url) and bool(self.database_key)
