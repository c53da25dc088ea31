"""Place adapters for Google Places, Foursquare and Mapbox.

Each provider normalizes its upstream payload into Place. Providers with no
credentials configured return no results instead of calling out.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote

import httpx

from atlantico.app.adapters.provenance import place_provenance
from atlantico.app.models.common import OpeningHours, Weekday
from atlantico.app.models.place import Place

logger = logging.getLogger(__name__)

GOOGLE_PLACES_URL = "https://maps.googleapis.com/maps/api/place"
FOURSQUARE_SEARCH_URL = "https://api.foursquare.com/v3/places/search"
MAPBOX_GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"

# Google period days: 0 = Sunday
GOOGLE_DAY_KEYS: tuple[Weekday, ...] = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

GOOGLE_DETAIL_FIELDS = (
    "name,formatted_address,geometry,opening_hours,website,formatted_phone_number,"
    "international_phone_number,price_level,rating,photos,place_id"
)

# Approximate Atlántico department bounding box (min_lng,min_lat,max_lng,max_lat)
ATLANTICO_BBOX = "-75.3,10.3,-74.2,11.3"
FOURSQUARE_NEAR = "Barranquilla, CO"


@asynccontextmanager
async def _http_client(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the shared client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return
    owned = httpx.AsyncClient(timeout=4.0)
    try:
        yield owned
    finally:
        await owned.aclose()


def _hhmm(raw: str) -> str:
    """Convert "0900" to "09:00"."""
    return f"{raw[:2]}:{raw[2:4]}"


def normalize_google_periods(periods: list[dict[str, Any]] | None) -> OpeningHours | None:
    """Convert Google opening_hours.periods into {"mon": [("09:00", "18:00")], ...}.

    Periods without an open day, open time or close time (e.g. open 24h)
    are skipped. Returns None when periods is missing or not a list.
    """
    if not isinstance(periods, list):
        return None

    result: OpeningHours = {}
    for period in periods:
        open_ = period.get("open") or {}
        close = period.get("close") or {}
        day = open_.get("day")
        opens = open_.get("time")
        closes = close.get("time")
        if day is None or not opens or not closes:
            continue
        key = GOOGLE_DAY_KEYS[day]
        result.setdefault(key, []).append((_hhmm(opens), _hhmm(closes)))
    return result


class GooglePlacesLookup:
    """Google Places text search followed by place details per hit."""

    name = "google"

    def __init__(
        self,
        api_key: str,
        *,
        language: str = "es",
        region: str = "co",
        photo_max_width: int = 1200,
        base_url: str = GOOGLE_PLACES_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._language = language
        self._region = region
        self._photo_max_width = photo_max_width
        self._base_url = base_url.rstrip("/")
        self._client = client

    def photo_url(self, photo_reference: str) -> str | None:
        """Direct photo URL for a photo reference."""
        if not self._api_key or not photo_reference:
            return None
        params = {
            "maxwidth": str(self._photo_max_width),
            "photoreference": photo_reference,
            "key": self._api_key,
        }
        return str(httpx.URL(f"{self._base_url}/photo", params=params))

    async def _text_search(
        self, client: httpx.AsyncClient, query: str, limit: int
    ) -> list[dict[str, Any]]:
        params = {
            "query": query,
            "language": self._language,
            "region": self._region,
            "key": self._api_key,
        }
        response = await client.get(f"{self._base_url}/textsearch/json", params=params)
        response.raise_for_status()
        data = response.json()
        if data.get("status") == "OVER_QUERY_LIMIT":
            logger.warning("Google Places over query limit for %r", query)
        results: list[dict[str, Any]] = data.get("results") or []
        return results[:limit]

    async def _details(self, client: httpx.AsyncClient, place_id: str) -> dict[str, Any] | None:
        params = {
            "place_id": place_id,
            "fields": GOOGLE_DETAIL_FIELDS,
            "language": self._language,
            "key": self._api_key,
        }
        response = await client.get(f"{self._base_url}/details/json", params=params)
        response.raise_for_status()
        data = response.json()
        if data.get("status") != "OK":
            return None
        result: dict[str, Any] | None = data.get("result")
        return result

    async def find_places(self, query: str, limit: int = 5) -> list[Place]:
        """Search Google Places and return up to ``limit`` detailed matches."""
        if not self._api_key:
            return []

        async with _http_client(self._client) as client:
            hits = await self._text_search(client, query, limit)

            places: list[Place] = []
            for hit in hits:
                details = await self._details(client, hit["place_id"])
                if details is None:
                    continue

                location = (details.get("geometry") or {}).get("location") or {}
                hit_location = (hit.get("geometry") or {}).get("location") or {}
                photos = details.get("photos") or []
                photo_ref = photos[0].get("photo_reference") if photos else None

                places.append(
                    Place(
                        id=details.get("place_id") or hit["place_id"],
                        name=details.get("name") or hit.get("name", ""),
                        source=self.name,
                        lat=location.get("lat", hit_location.get("lat")),
                        lng=location.get("lng", hit_location.get("lng")),
                        address=details.get("formatted_address"),
                        photo=self.photo_url(photo_ref) if photo_ref else None,
                        rating=details.get("rating"),
                        price_level=details.get("price_level"),
                        website=details.get("website"),
                        phone=details.get("international_phone_number")
                        or details.get("formatted_phone_number"),
                        opening_hours=normalize_google_periods(
                            (details.get("opening_hours") or {}).get("periods") or []
                        ),
                        provenance=place_provenance(
                            self.name,
                            ref_id=hit["place_id"],
                            url=f"{self._base_url}/details/json?place_id={hit['place_id']}",
                        ),
                    )
                )
        return places


class FoursquareLookup:
    """Foursquare v3 place search around Barranquilla."""

    name = "foursquare"

    def __init__(
        self,
        api_key: str,
        *,
        near: str = FOURSQUARE_NEAR,
        base_url: str = FOURSQUARE_SEARCH_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._near = near
        self._base_url = base_url
        self._client = client

    async def find_places(self, query: str, limit: int = 5) -> list[Place]:
        """Search Foursquare and return up to ``limit`` matches."""
        if not self._api_key:
            return []

        params = {"query": query, "near": self._near, "limit": str(limit)}
        async with _http_client(self._client) as client:
            response = await client.get(
                self._base_url, params=params, headers={"Authorization": self._api_key}
            )
            response.raise_for_status()
            data = response.json()

        places: list[Place] = []
        for item in data.get("results") or []:
            main = (item.get("geocodes") or {}).get("main") or {}
            rating = item.get("rating")
            places.append(
                Place(
                    id=item["fsq_id"],
                    name=item.get("name", ""),
                    source=self.name,
                    lat=main.get("latitude"),
                    lng=main.get("longitude"),
                    address=(item.get("location") or {}).get("formatted_address"),
                    # Foursquare rates 0-10
                    rating=rating / 2 if rating is not None else None,
                    provenance=place_provenance(
                        self.name, ref_id=item["fsq_id"], url=self._base_url
                    ),
                )
            )
        return places


class MapboxLookup:
    """Mapbox geocoding restricted to Colombia and the Atlántico bbox."""

    name = "mapbox"

    def __init__(
        self,
        token: str,
        *,
        language: str = "es",
        base_url: str = MAPBOX_GEOCODING_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token = token
        self._language = language
        self._base_url = base_url.rstrip("/")
        self._client = client

    async def find_places(self, query: str, limit: int = 5) -> list[Place]:
        """Geocode ``query`` and return up to ``limit`` features."""
        if not self._token:
            return []

        url = f"{self._base_url}/{quote(query)}.json"
        params = {
            "access_token": self._token,
            "language": self._language,
            "country": "CO",
            "limit": str(limit),
            "bbox": ATLANTICO_BBOX,
        }
        async with _http_client(self._client) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()

        places: list[Place] = []
        for feature in data.get("features") or []:
            center = feature.get("center") or [None, None]
            places.append(
                Place(
                    id=str(feature["id"]),
                    name=feature.get("text") or feature.get("place_name", ""),
                    source=self.name,
                    lat=center[1],
                    lng=center[0],
                    address=feature.get("place_name"),
                    provenance=place_provenance(self.name, ref_id=str(feature["id"]), url=url),
                )
            )
        return places
