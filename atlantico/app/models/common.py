"""Common types and enums shared across all models."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel

Weekday = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

# Weekday key -> ordered list of (open, close) "HH:MM" pairs
OpeningHours = dict[Weekday, list[tuple[str, str]]]


class StopType(str, Enum):
    """Kind of visit."""

    destination = "destination"
    experience = "experience"
    restaurant = "restaurant"
    transport = "transport"


class Provenance(BaseModel):
    """Provenance metadata for lookup results."""

    source: str  # Provider identifier (e.g., "places.google", "places.fixtures")
    ref_id: str | None = None
    source_url: str | None = None
    fetched_at: datetime
    cache_hit: bool | None = None
