"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from atlantico.app.models import Place, Stop


class StubLookup:
    """In-memory PlaceLookup that records every query it receives."""

    def __init__(
        self,
        place: Place | None = None,
        error: Exception | None = None,
        by_query: dict[str, Place] | None = None,
    ) -> None:
        self.place = place
        self.error = error
        self.by_query = by_query or {}
        self.queries: list[str] = []

    async def find_one_place(self, query: str) -> Place | None:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        if self.by_query:
            return self.by_query.get(query)
        return self.place


@pytest.fixture
def make_stop() -> Callable[..., Stop]:
    """Factory for stops with sensible defaults.

    Usage:
        stop = make_stop("a", "09:00", 60, name="Museo")
    """

    def _make(
        stop_id: str = "s1",
        start: str = "09:00",
        duration: int = 60,
        **fields: Any,
    ) -> Stop:
        fields.setdefault("name", f"Stop {stop_id}")
        return Stop(
            id=stop_id,
            start=datetime.fromisoformat(f"2025-06-12T{start}"),
            duration_minutes=duration,
            **fields,
        )

    return _make


@pytest.fixture
def full_place() -> Place:
    """Place with every optional field populated."""
    return Place(
        id="gp-1",
        name="Castillo de Salgar",
        source="google",
        lat=11.0247,
        lng=-74.9432,
        address="Salgar, Puerto Colombia",
        photo="https://images.example.org/salgar.jpg",
        rating=4.5,
        price_level=2,
        website="https://salgar.example.org",
        phone="+57 605 000 0001",
        opening_hours={"mon": [("09:00", "17:00")]},
    )


@pytest.fixture
def stub_lookup() -> StubLookup:
    """Lookup with no match; set .place, .error or .by_query to configure."""
    return StubLookup()
