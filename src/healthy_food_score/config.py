"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from healthy_food_score.domain.scores import SCORE_VERSIONS, V2

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    taxonomy_base_url: str
    taxonomy_api_key: str | None = None
    lookup_timeout_seconds: float = 5.0
    additive_rules_ttl_seconds: int = 300
    default_version: str = V2
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("default_version")
    @classmethod
    def _known_version(cls, value: str) -> str:
        return parse_version(value)


def parse_version(raw: str | None, default: str = V2) -> str:
    """Normalize a score version string, rejecting unknown values."""
    if raw is None:
        return default
    cleaned = raw.strip().lower().replace("-", "_")
    if not cleaned:
        return default
    if cleaned not in SCORE_VERSIONS:
        raise ValueError(f"Unknown score version: {raw}")
    return cleaned
