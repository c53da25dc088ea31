"""Stop enrichment - fill a stop's missing details from a place lookup.

Merge policy is fill-missing-only: a field the caller already set (anything
other than None or "") always wins over the looked-up value. Coordinates
are the exception in one direction only: they are replaced when the
caller's value is absent or not a finite number.

Lookups are fail-open. Whatever goes wrong while looking up or merging,
the caller gets its original stop back.
"""

import asyncio
import logging
import math
from collections.abc import Sequence
from typing import Any, TypeVar

from atlantico.app.adapters.base import PlaceLookup
from atlantico.app.config import get_settings
from atlantico.app.models.common import OpeningHours, Weekday
from atlantico.app.models.place import Place
from atlantico.app.models.stop import Stop
from atlantico.app.utils.metrics import enrich_outcomes_total

logger = logging.getLogger(__name__)

T = TypeVar("T")

HOURS_TIP_LABEL = "Horarios"

# Monday first; labels as shown to visitors
DAY_LABELS: tuple[tuple[Weekday, str], ...] = (
    ("mon", "Lun"),
    ("tue", "Mar"),
    ("wed", "Mié"),
    ("thu", "Jue"),
    ("fri", "Vie"),
    ("sat", "Sáb"),
    ("sun", "Dom"),
)


def coalesce(current: T | None, fallback: T | None) -> T | None:
    """Keep ``current`` unless it is None or an empty string."""
    if current is not None and current != "":
        return current
    return fallback


def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers (bools excluded)."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def opening_hours_to_tip(hours: OpeningHours | None) -> str | None:
    """Render opening hours as a one-line tip, e.g. "Horarios: Lun: 09:00–17:00".

    Days without windows are skipped; returns None if no day has any.
    """
    if not hours:
        return None

    parts: list[str] = []
    for key, label in DAY_LABELS:
        windows = hours.get(key)
        if not windows:
            continue
        rendered = ", ".join(f"{opens}–{closes}" for opens, closes in windows)
        parts.append(f"{label}: {rendered}")

    if not parts:
        return None
    return f"{HOURS_TIP_LABEL}: {' · '.join(parts)}"


def build_query(stop: Stop, default_municipality: str) -> str:
    """Name, municipality (or region default) and category, space-joined."""
    parts = [stop.name, stop.municipality or default_municipality]
    if stop.category:
        parts.append(stop.category)
    return " ".join(p for p in parts if p)


def merge_place(stop: Stop, place: Place) -> Stop:
    """Copy of ``stop`` with gaps filled from ``place``."""
    tip_from_hours = opening_hours_to_tip(place.opening_hours)

    update: dict[str, Any] = {
        "lat": stop.lat if is_finite_number(stop.lat) or place.lat is None else place.lat,
        "lng": stop.lng if is_finite_number(stop.lng) or place.lng is None else place.lng,
        "image_url": coalesce(stop.image_url, place.photo),
        "rating": coalesce(stop.rating, place.rating),
        "price_level": coalesce(stop.price_level, place.price_level),
        "address": coalesce(stop.address, place.address),
        "website": coalesce(stop.website, place.website),
        "phone": coalesce(stop.phone, place.phone),
        "tip": coalesce(stop.tip, tip_from_hours),
        "tags": list(dict.fromkeys([*stop.tags, place.source])),
    }
    return stop.model_copy(update=update)


async def enrich_stop(
    stop: Stop,
    lookup: PlaceLookup,
    *,
    default_municipality: str | None = None,
) -> Stop:
    """Enrich one stop from the best-matching place.

    Args:
        stop: Stop to enrich (never mutated)
        lookup: Place lookup capability
        default_municipality: Used in the query when the stop has none
            (defaults to settings.default_municipality)

    Returns:
        Enriched copy, or ``stop`` itself when there is no match or the
        lookup fails
    """
    if default_municipality is None:
        default_municipality = get_settings().default_municipality
    query = build_query(stop, default_municipality)

    try:
        place = await lookup.find_one_place(query)
        if place is None:
            logger.debug("No place match for stop %s (query=%r)", stop.id, query)
            enrich_outcomes_total.labels(outcome="no_match").inc()
            return stop
        enriched = merge_place(stop, place)
    except Exception:
        logger.warning(
            "Place lookup failed for stop %s, keeping original", stop.id, exc_info=True
        )
        enrich_outcomes_total.labels(outcome="lookup_error").inc()
        return stop

    enrich_outcomes_total.labels(outcome="enriched").inc()
    return enriched


async def enrich_itinerary(
    stops: Sequence[Stop],
    lookup: PlaceLookup,
    *,
    default_municipality: str | None = None,
    concurrency: int = 1,
) -> list[Stop]:
    """Enrich every stop, at most ``concurrency`` lookups in flight.

    Output order always matches input order, whatever order lookups finish in.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _enrich(stop: Stop) -> Stop:
        async with semaphore:
            return await enrich_stop(stop, lookup, default_municipality=default_municipality)

    return list(await asyncio.gather(*(_enrich(s) for s in stops)))
