"""Itinerary preparation: enrich every stop, then reflow once."""

import logging
from collections.abc import Sequence

from atlantico.app.adapters.base import PlaceLookup
from atlantico.app.config import Settings, get_settings
from atlantico.app.enrichment.enrich import enrich_itinerary
from atlantico.app.models.stop import Stop
from atlantico.app.scheduling.reflow import reflow

logger = logging.getLogger(__name__)


async def prepare_itinerary(
    stops: Sequence[Stop],
    lookup: PlaceLookup,
    settings: Settings | None = None,
) -> list[Stop]:
    """Turn raw stops into a display-ready itinerary.

    Enrichment runs per stop (bounded concurrency, fail-open); reflow then
    runs once across the whole enriched sequence.
    """
    settings = settings or get_settings()
    enriched = await enrich_itinerary(
        stops,
        lookup,
        default_municipality=settings.default_municipality,
        concurrency=settings.enrich_concurrency,
    )
    prepared = reflow(enriched)

    shifted = sum(1 for before, after in zip(enriched, prepared) if before.start != after.start)
    logger.info(
        "Prepared itinerary",
        extra={"structured": {"stops": len(prepared), "shifted": shifted}},
    )
    return prepared
