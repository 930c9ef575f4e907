"""Application settings, read from the environment and an optional .env file"""
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='PRICING_',
        env_file='.env',
        env_ignore_empty=True,
        extra='ignore'
    )

    app_title: str = "Revenue & Pricing API"

    # Where properties and bookings come from
    data_backend: Literal["memory", "postgrest"] = "memory"
    postgrest_url: Optional[str] = None
    postgrest_api_key: Optional[str] = None
    postgrest_timeout_seconds: float = 10.0

    # Where season rules are kept
    season_rules_backend: Literal["json", "memory"] = "json"
    season_rules_dir: str = "data/season_rules"

    default_tenant_id: str = "default"

    log_level: str = "INFO"
    log_file: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
