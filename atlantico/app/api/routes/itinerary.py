"""Itinerary endpoints - enrich, reflow, and both in one call."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends

from atlantico.app.adapters.base import PlaceLookup
from atlantico.app.adapters.lookup import build_place_lookup
from atlantico.app.config import Settings, get_settings
from atlantico.app.enrichment.enrich import enrich_itinerary
from atlantico.app.models.stop import Itinerary
from atlantico.app.pipeline import prepare_itinerary
from atlantico.app.scheduling.reflow import reflow

router = APIRouter(prefix="/itinerary", tags=["itinerary"])


@lru_cache
def get_place_lookup() -> PlaceLookup:
    """Process-wide place lookup, so its query cache outlives a request."""
    return build_place_lookup(get_settings())


@router.post("/enrich", response_model=Itinerary)
async def enrich(
    body: Itinerary,
    lookup: Annotated[PlaceLookup, Depends(get_place_lookup)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Itinerary:
    """Fill missing stop details from place lookups; never fails on lookup errors."""
    stops = await enrich_itinerary(
        body.stops,
        lookup,
        default_municipality=settings.default_municipality,
        concurrency=settings.enrich_concurrency,
    )
    return Itinerary(stops=stops)


@router.post("/reflow", response_model=Itinerary)
async def reflow_itinerary(body: Itinerary) -> Itinerary:
    """Shift start times forward so no stop overlaps the previous one."""
    return Itinerary(stops=reflow(body.stops))


@router.post("/prepare", response_model=Itinerary)
async def prepare(
    body: Itinerary,
    lookup: Annotated[PlaceLookup, Depends(get_place_lookup)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Itinerary:
    """Enrich then reflow."""
    stops = await prepare_itinerary(body.stops, lookup, settings)
    return Itinerary(stops=stops)
