"""Application settings using Pydantic Settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from incident_report.config.constants import (
    DEFAULT_REPORTS_KEY,
    LATITUDE_RANGE,
    LONGITUDE_RANGE,
)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INCIDENT_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Storage
    storage_backend: Literal["memory", "file", "redis"] = "file"
    settings_path: str = "./incident_settings.json"
    reports_key: str = DEFAULT_REPORTS_KEY

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_timeout: float = 5.0

    # Location
    location_provider: Literal["fixed", "ip"] = "ip"
    fixed_latitude: float = 0.0
    fixed_longitude: float = 0.0
    geoip_url: str = "http://ip-api.com/json"
    geoip_timeout: float = 10.0

    # Map viewer
    open_map_on_submit: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("fixed_latitude")
    @classmethod
    def validate_fixed_latitude(cls, v: float) -> float:
        low, high = LATITUDE_RANGE
        if not low <= v <= high:
            raise ValueError(f"Latitude must be between {low} and {high}")
        return v

    @field_validator("fixed_longitude")
    @classmethod
    def validate_fixed_longitude(cls, v: float) -> float:
        low, high = LONGITUDE_RANGE
        if not low <= v <= high:
            raise ValueError(f"Longitude must be between {low} and {high}")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
