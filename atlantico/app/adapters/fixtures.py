"""Fixture-based place provider for local development and tests."""

import json
from pathlib import Path
from typing import Any

from atlantico.app.adapters.provenance import fixture_url, place_provenance
from atlantico.app.models.place import Place

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


class FixturePlaceLookup:
    """Resolves queries against a JSON file of known places.

    The fixture file maps a lowercase key to a place payload. A query
    matches an entry when the entry's key or name appears in the
    lowercased query, so "Castillo de Salgar Puerto Colombia" finds
    "castillo de salgar".
    """

    name = "fixtures"

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or FIXTURES_DIR / "places.json"
        self._data: dict[str, dict[str, Any]] | None = None

    def _load(self) -> dict[str, dict[str, Any]]:
        if self._data is None:
            with open(self._path, encoding="utf-8") as f:
                self._data = json.load(f)
        return self._data

    async def find_places(self, query: str, limit: int = 5) -> list[Place]:
        """Return up to ``limit`` fixture places mentioned in ``query``."""
        query_lower = query.lower()
        places: list[Place] = []
        for key, payload in self._load().items():
            if key not in query_lower and payload["name"].lower() not in query_lower:
                continue
            places.append(
                Place(
                    **payload,
                    source=self.name,
                    provenance=place_provenance(self.name, ref_id=key, url=fixture_url(key)),
                )
            )
            if len(places) >= limit:
                break
        return places

    async def find_one_place(self, query: str) -> Place | None:
        """Best fixture match for ``query``."""
        places = await self.find_places(query, limit=1)
        return places[0] if places else None
