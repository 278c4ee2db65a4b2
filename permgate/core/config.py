from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # Logging
    log_level: str = "WARNING"
    log_dir: Optional[str] = None
    log_to_file: bool = False
    log_to_console: bool = True

    # Log every can() outcome at INFO instead of denials only at DEBUG
    log_decisions: bool = False

    # Dump
    dump_indent: Optional[int] = None  # None = compact JSON

    model_config = SettingsConfigDict(
        env_prefix="PERMGATE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
