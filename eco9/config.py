"""Application configuration, read from ECO9_* environment variables or .env.

get_settings() is cached: one Settings instance per process.
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ECO9_", env_file=".env", case_sensitive=False)

    # Activity store: "memory" keeps everything in-process, "sql" uses database_url
    activity_store: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///./data/eco9.db"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgres://, SQLAlchemy wants postgresql://."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
