"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a TASKDATA_* environment variable
    - get_settings() is cached (lru_cache): one instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - clone_mode defaults to legacy: partial clones survive a mid-loop failure unless
      atomic is asked for explicitly
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from taskdata.core.domain_types import CloneMode


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TASKDATA_", env_file=".env", case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///tasks.sqlite3"
    database_echo: bool = False
    sqlite_wal: bool = True

    # Service behavior
    clone_mode: CloneMode = CloneMode.LEGACY

    @field_validator("clone_mode", mode="before")
    @classmethod
    def normalize_clone_mode(cls, v):
        return CloneMode.parse(v)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
