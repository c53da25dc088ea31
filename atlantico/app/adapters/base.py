"""Place lookup capability consumed by the enrichment service."""

from typing import Protocol

from atlantico.app.models.place import Place


class PlaceLookup(Protocol):
    """Anything that can resolve a free-text query to one best-matching place."""

    async def find_one_place(self, query: str) -> Place | None:
        """Return the best match for ``query``, or None when nothing matches."""
        ...


class PlaceProvider(Protocol):
    """Single upstream place source, chained by ChainedPlaceLookup."""

    name: str

    async def find_places(self, query: str, limit: int = 5) -> list[Place]:
        """Return up to ``limit`` normalized places for ``query``."""
        ...
