"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Place providers (any subset may be configured)
    google_places_api_key: str = ""
    foursquare_api_key: str = ""
    mapbox_token: str = ""

    # "auto" chains every configured provider; "fixtures" reads the bundled JSON
    places_provider: Literal["auto", "fixtures"] = "auto"

    # Region defaults
    default_municipality: str = "Atlántico"
    places_language: str = "es"
    places_region: str = "co"
    google_photo_max_width: int = 1200

    # Timeouts (milliseconds)
    lookup_hard_timeout_ms: int = 4000

    # Cache TTLs (hours)
    places_cache_ttl_hours: int = 12

    # Max concurrent lookups while enriching one itinerary
    enrich_concurrency: int = 4


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
