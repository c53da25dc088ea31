"""Chained place lookup: providers in preference order behind one cache."""

import logging
import uuid
from collections.abc import Sequence

import httpx

from atlantico.app.adapters.base import PlaceProvider
from atlantico.app.adapters.fixtures import FixturePlaceLookup
from atlantico.app.adapters.places import FoursquareLookup, GooglePlacesLookup, MapboxLookup
from atlantico.app.config import Settings
from atlantico.app.models.place import Place
from atlantico.app.tools.executor import (
    ToolCache,
    ToolConfig,
    ToolContext,
    ToolExecutionError,
    ToolExecutor,
    ToolTimeoutError,
)
from atlantico.app.utils.logging import LookupAttemptLogger
from atlantico.app.utils.metrics import PrometheusLookupMetrics

logger = logging.getLogger(__name__)


class ProvidersUnavailableError(Exception):
    """Every configured provider failed for a query."""


class ChainedPlaceLookup:
    """Ask each provider in turn until one returns results.

    A provider that errors, times out or finds nothing hands over to the
    next one. The final result for a query, including "no match", is
    cached for ``cache_ttl_seconds`` so repeated stops do not burn quota.
    A query on which every provider failed is not cached.
    """

    def __init__(
        self,
        providers: Sequence[PlaceProvider],
        *,
        executor: ToolExecutor | None = None,
        cache: ToolCache | None = None,
        hard_timeout_ms: int | None = 4000,
        cache_ttl_seconds: int = 12 * 3600,
        limit: int = 1,
    ) -> None:
        self._providers = list(providers)
        self._executor = executor or ToolExecutor(
            metrics=PrometheusLookupMetrics(), logger=LookupAttemptLogger()
        )
        self._cache = cache if cache is not None else ToolCache()
        self._provider_config = ToolConfig(hard_timeout_ms=hard_timeout_ms)
        self._cache_config = ToolConfig(cache_ttl_seconds=cache_ttl_seconds)
        self._limit = limit

    @property
    def providers(self) -> list[PlaceProvider]:
        return list(self._providers)

    async def _search(self, query: str, trace_id: str) -> list[Place]:
        failures: list[str] = []
        for provider in self._providers:
            ctx = ToolContext(trace_id=trace_id, tool_name=f"places.{provider.name}")
            try:
                result = await self._executor.execute(
                    ctx,
                    self._provider_config,
                    lambda q, p=provider: p.find_places(q, self._limit),
                    query,
                )
            except (ToolTimeoutError, ToolExecutionError) as e:
                logger.warning(
                    "Place provider %s failed for %r: %s", provider.name, query, e.__cause__ or e
                )
                failures.append(provider.name)
                continue
            if result.value:
                return result.value
        # A full outage must not be cached as a miss
        if failures and len(failures) == len(self._providers):
            raise ProvidersUnavailableError(f"All place providers failed: {', '.join(failures)}")
        return []

    async def find_places(self, query: str) -> list[Place]:
        """Results from the first provider that has any, cached per query.

        When every provider fails the query is answered with no results
        and nothing is cached.
        """
        trace_id = uuid.uuid4().hex
        try:
            result = await self._executor.execute(
                ToolContext(trace_id=trace_id, tool_name="places"),
                self._cache_config,
                lambda q: self._search(q, trace_id),
                query,
                cache=self._cache,
            )
        except ToolExecutionError as e:
            logger.warning("Place lookup unavailable for %r: %s", query, e.__cause__ or e)
            return []
        return result.value

    async def find_one_place(self, query: str) -> Place | None:
        """Best match for ``query`` across all providers."""
        places = await self.find_places(query)
        return places[0] if places else None


def build_place_lookup(
    settings: Settings, client: httpx.AsyncClient | None = None
) -> ChainedPlaceLookup:
    """Chain every provider that has credentials, Google first.

    With ``places_provider="fixtures"`` only the bundled fixture file is used.
    """
    providers: list[PlaceProvider] = []
    if settings.places_provider == "fixtures":
        providers.append(FixturePlaceLookup())
    else:
        if settings.google_places_api_key:
            providers.append(
                GooglePlacesLookup(
                    settings.google_places_api_key,
                    language=settings.places_language,
                    region=settings.places_region,
                    photo_max_width=settings.google_photo_max_width,
                    client=client,
                )
            )
        if settings.foursquare_api_key:
            providers.append(FoursquareLookup(settings.foursquare_api_key, client=client))
        if settings.mapbox_token:
            providers.append(
                MapboxLookup(settings.mapbox_token, language=settings.places_language, client=client)
            )

    if not providers:
        logger.warning("No place providers configured; stops will not be enriched")

    return ChainedPlaceLookup(
        providers,
        hard_timeout_ms=settings.lookup_hard_timeout_ms,
        cache_ttl_seconds=settings.places_cache_ttl_hours * 3600,
    )
