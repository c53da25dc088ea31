"""Tests for the Google Places, Foursquare and Mapbox adapters."""

from typing import Any

import httpx
import pytest

from atlantico.app.adapters.places import (
    FoursquareLookup,
    GooglePlacesLookup,
    MapboxLookup,
    normalize_google_periods,
)

GOOGLE_SEARCH = {
    "status": "OK",
    "results": [
        {
            "place_id": "gp-salgar",
            "name": "Castillo de Salgar",
            "geometry": {"location": {"lat": 11.02, "lng": -74.94}},
        },
        {"place_id": "gp-other", "name": "Otro"},
    ],
}

GOOGLE_DETAILS = {
    "status": "OK",
    "result": {
        "place_id": "gp-salgar",
        "name": "Castillo de Salgar",
        "formatted_address": "Salgar, Puerto Colombia, Atlántico",
        "geometry": {"location": {"lat": 11.0247, "lng": -74.9432}},
        "rating": 4.5,
        "price_level": 2,
        "website": "https://salgar.example.org",
        "formatted_phone_number": "605 000 0001",
        "international_phone_number": "+57 605 000 0001",
        "photos": [{"photo_reference": "ref-123", "height": 800, "width": 1200}],
        "opening_hours": {
            "periods": [
                {"open": {"day": 1, "time": "0900"}, "close": {"day": 1, "time": "1700"}},
                {"open": {"day": 0, "time": "1000"}, "close": {"day": 0, "time": "1400"}},
            ]
        },
    },
}


def google_handler(requests: list[httpx.Request]) -> Any:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/textsearch/json"):
            return httpx.Response(200, json=GOOGLE_SEARCH)
        if request.url.path.endswith("/details/json"):
            return httpx.Response(200, json=GOOGLE_DETAILS)
        return httpx.Response(404)

    return handler


class TestNormalizeGooglePeriods:
    """Opening-hours normalization."""

    def test_periods_become_weekday_windows(self) -> None:
        periods = [
            {"open": {"day": 1, "time": "0900"}, "close": {"day": 1, "time": "1200"}},
            {"open": {"day": 1, "time": "1400"}, "close": {"day": 1, "time": "1800"}},
            {"open": {"day": 6, "time": "1000"}, "close": {"day": 6, "time": "2200"}},
        ]

        assert normalize_google_periods(periods) == {
            "mon": [("09:00", "12:00"), ("14:00", "18:00")],
            "sat": [("10:00", "22:00")],
        }

    def test_open_all_day_periods_are_skipped(self) -> None:
        # Google encodes 24/7 as a single open period with no close
        assert normalize_google_periods([{"open": {"day": 0, "time": "0000"}}]) == {}

    def test_missing_periods(self) -> None:
        assert normalize_google_periods(None) is None


class TestGooglePlacesLookup:
    """Text search + details."""

    @pytest.mark.asyncio
    async def test_find_places_normalizes_details(self) -> None:
        requests: list[httpx.Request] = []
        client = httpx.AsyncClient(transport=httpx.MockTransport(google_handler(requests)))
        lookup = GooglePlacesLookup("test-key", client=client)

        places = await lookup.find_places("Castillo de Salgar Puerto Colombia", limit=1)

        assert len(places) == 1
        place = places[0]
        assert place.id == "gp-salgar"
        assert place.source == "google"
        assert place.lat == 11.0247
        assert place.lng == -74.9432
        assert place.address == "Salgar, Puerto Colombia, Atlántico"
        assert place.rating == 4.5
        assert place.price_level == 2
        assert place.phone == "+57 605 000 0001"
        assert place.opening_hours == {"mon": [("09:00", "17:00")], "sun": [("10:00", "14:00")]}
        assert place.photo is not None
        assert "photoreference=ref-123" in place.photo
        assert "maxwidth=1200" in place.photo
        assert place.provenance is not None
        assert place.provenance.source == "places.google"
        assert place.provenance.ref_id == "gp-salgar"
        assert "test-key" not in (place.provenance.source_url or "")

        # limit=1 -> one search + one details call
        assert len(requests) == 2
        search_params = dict(requests[0].url.params)
        assert search_params["query"] == "Castillo de Salgar Puerto Colombia"
        assert search_params["language"] == "es"
        assert search_params["region"] == "co"
        assert dict(requests[1].url.params)["place_id"] == "gp-salgar"

        await client.aclose()

    @pytest.mark.asyncio
    async def test_details_not_ok_are_skipped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/textsearch/json"):
                return httpx.Response(200, json=GOOGLE_SEARCH)
            return httpx.Response(200, json={"status": "NOT_FOUND"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        lookup = GooglePlacesLookup("test-key", client=client)

        assert await lookup.find_places("x") == []

        await client.aclose()

    @pytest.mark.asyncio
    async def test_http_error_propagates(self) -> None:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )
        lookup = GooglePlacesLookup("test-key", client=client)

        with pytest.raises(httpx.HTTPStatusError):
            await lookup.find_places("x")

        await client.aclose()

    @pytest.mark.asyncio
    async def test_without_key_makes_no_requests(self) -> None:
        requests: list[httpx.Request] = []
        client = httpx.AsyncClient(transport=httpx.MockTransport(google_handler(requests)))

        assert await GooglePlacesLookup("", client=client).find_places("x") == []
        assert requests == []

        await client.aclose()


class TestFoursquareLookup:
    """Foursquare v3 search."""

    @pytest.mark.asyncio
    async def test_find_places(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "fsq_id": "fsq-1",
                            "name": "Museo del Caribe",
                            "geocodes": {"main": {"latitude": 10.98, "longitude": -74.78}},
                            "location": {"formatted_address": "Calle 36, Barranquilla"},
                            "rating": 8.8,
                        }
                    ]
                },
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        lookup = FoursquareLookup("fsq-key", client=client)

        places = await lookup.find_places("Museo del Caribe", limit=1)

        assert len(places) == 1
        assert places[0].source == "foursquare"
        assert places[0].lat == 10.98
        assert places[0].address == "Calle 36, Barranquilla"
        assert places[0].rating == pytest.approx(4.4)
        assert captured[0].headers["Authorization"] == "fsq-key"
        assert dict(captured[0].url.params)["near"] == "Barranquilla, CO"

        await client.aclose()


class TestMapboxLookup:
    """Mapbox geocoding."""

    @pytest.mark.asyncio
    async def test_find_places(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200,
                json={
                    "features": [
                        {
                            "id": "poi.1",
                            "text": "Muelle de Puerto Colombia",
                            "place_name": "Muelle de Puerto Colombia, Atlántico, Colombia",
                            "center": [-74.9613, 10.9929],
                        }
                    ]
                },
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        lookup = MapboxLookup("mb-token", client=client)

        places = await lookup.find_places("Muelle Puerto Colombia", limit=1)

        assert places[0].name == "Muelle de Puerto Colombia"
        assert places[0].lat == 10.9929
        assert places[0].lng == -74.9613
        assert places[0].source == "mapbox"

        params = dict(captured[0].url.params)
        assert params["country"] == "CO"
        assert params["bbox"] == "-75.3,10.3,-74.2,11.3"
        assert params["limit"] == "1"
        assert captured[0].url.raw_path.decode().startswith(
            "/geocoding/v5/mapbox.places/Muelle%20Puerto%20Colombia.json"
        )

        await client.aclose()
