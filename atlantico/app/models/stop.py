"""Stop and itinerary models - the shape shared by producers and consumers."""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field, field_validator, model_validator

from atlantico.app.models.common import OpeningHours, StopType


class Stop(BaseModel):
    """One planned visit within an itinerary."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    start: datetime
    duration_minutes: int = Field(..., gt=0)

    description: str | None = None
    tip: str | None = None
    local_insight: str | None = None
    municipality: str | None = None
    category: str | None = None
    type: StopType | None = None

    # Absent until enrichment supplies them
    lat: float | None = None
    lng: float | None = None

    image_url: str | None = None
    photos: list[str] = Field(default_factory=list)
    rating: float | None = Field(default=None, ge=0, le=5)
    price_level: int | None = Field(default=None, ge=0, le=4)
    address: str | None = None
    website: str | None = None
    phone: str | None = None
    opening_hours: OpeningHours | None = None

    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        """Drop repeated tags, keeping first-seen order."""
        return list(dict.fromkeys(v))

    @property
    def end(self) -> datetime:
        """Moment the visit finishes."""
        return self.start + timedelta(minutes=self.duration_minutes)


class Itinerary(BaseModel):
    """Ordered sequence of stops."""

    stops: list[Stop]

    @model_validator(mode="after")
    def check_consistent_timezones(self) -> "Itinerary":
        """Starts must be all naive or all timezone-aware, or they cannot be compared."""
        aware = {stop.start.utcoffset() is not None for stop in self.stops}
        if len(aware) > 1:
            raise ValueError("stop start times mix naive and timezone-aware datetimes")
        return self
