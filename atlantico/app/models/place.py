"""Place lookup result - normalized across providers."""

from pydantic import BaseModel, Field

from atlantico.app.models.common import OpeningHours, Provenance


class Place(BaseModel):
    """Best-matching place returned by a lookup provider."""

    id: str
    name: str
    source: str  # "google", "foursquare", "mapbox", "fixtures"
    lat: float | None = None
    lng: float | None = None
    address: str | None = None
    photo: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    price_level: int | None = Field(default=None, ge=0, le=4)
    website: str | None = None
    phone: str | None = None
    opening_hours: OpeningHours | None = None
    provenance: Provenance | None = None
