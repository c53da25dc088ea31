"""Models package - re-exports for convenience."""

from atlantico.app.models.common import OpeningHours, Provenance, StopType, Weekday
from atlantico.app.models.place import Place
from atlantico.app.models.stop import Itinerary, Stop

__all__ = [
    # Common
    "OpeningHours",
    "Provenance",
    "StopType",
    "Weekday",
    # Stops
    "Stop",
    "Itinerary",
    # Lookup results
    "Place",
]
