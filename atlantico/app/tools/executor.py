"""Async lookup executor with hard timeout, TTL caching, metrics and logging.

Every call to an external place provider goes through ToolExecutor:
- Hard timeout per call (asyncio.wait_for)
- Optional in-memory cache keyed by normalized query, with TTL
- Latency/error/cache-hit metrics and structured attempt logging

There are no retries and no circuit breaker: a failed lookup surfaces as
ToolTimeoutError or ToolExecutionError, and callers fall through to the
next provider or degrade to "no match".
"""

import asyncio
import hashlib
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from atlantico.app.models.common import Provenance

T = TypeVar("T")


# Exception types
class ToolTimeoutError(Exception):
    """Lookup exceeded its hard timeout."""

    pass


class ToolExecutionError(Exception):
    """Lookup failed."""

    pass


@dataclass
class ToolResult(Generic[T]):
    """Wrapper for lookup results with provenance metadata."""

    value: T
    provenance: Provenance


@dataclass(frozen=True)
class ToolContext:
    """Context for lookup execution with tracing."""

    trace_id: str
    tool_name: str


@dataclass
class ToolConfig:
    """Configuration for lookup execution."""

    hard_timeout_ms: int | None = None
    cache_ttl_seconds: int = 0


@dataclass
class CacheEntry(Generic[T]):
    """Cached lookup result with metadata."""

    value: T
    cached_at: datetime
    ttl_seconds: int

    def is_fresh(self, now: datetime) -> bool:
        """Check if cache entry is still valid."""
        return (now - self.cached_at).total_seconds() < self.ttl_seconds


class ToolCache:
    """In-memory cache for lookup results."""

    def __init__(self) -> None:
        self._cache: dict[str, CacheEntry[Any]] = {}

    def make_key(self, tool_name: str, query: str) -> str:
        """Generate deterministic cache key from a case-insensitive query."""
        normalized = " ".join(query.lower().split())
        hash_digest = hashlib.sha256(normalized.encode()).hexdigest()
        return f"{tool_name}:{hash_digest}"

    def get(self, key: str, now: datetime) -> Any | None:
        """Get cached value if fresh, None otherwise."""
        entry = self._cache.get(key)
        if entry and entry.is_fresh(now):
            return entry.value
        elif entry:
            # Expired - remove
            del self._cache[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: int, now: datetime) -> None:
        """Store value in cache with TTL."""
        self._cache[key] = CacheEntry(value=value, cached_at=now, ttl_seconds=ttl_seconds)

    def clear(self) -> None:
        """Drop every entry."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# Metrics interface (implemented by utils.metrics.PrometheusLookupMetrics)
class ToolMetrics:
    """Interface for lookup metrics."""

    def record_latency(self, source: str, outcome: str, latency_ms: float) -> None:
        """Record lookup latency."""
        pass

    def inc_error(self, source: str, reason: str) -> None:
        """Increment error counter."""
        pass

    def inc_cache_hit(self, source: str) -> None:
        """Increment cache hit counter."""
        pass


# Logging interface (implemented by utils.logging.LookupAttemptLogger)
class ToolLogger:
    """Interface for structured logging."""

    def log_attempt(
        self,
        ctx: ToolContext,
        outcome: str,
        latency_ms: float,
        cache_hit: bool = False,
        error_reason: str | None = None,
    ) -> None:
        """Log lookup attempt."""
        pass


class ToolExecutor:
    """Runs a single async lookup with timeout, cache, metrics and logging."""

    def __init__(
        self,
        metrics: ToolMetrics | None = None,
        logger: ToolLogger | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
            clock: Injectable wall clock for cache TTLs (default: UTC now)
        """
        self._metrics = metrics or ToolMetrics()
        self._logger = logger or ToolLogger()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def execute(
        self,
        ctx: ToolContext,
        config: ToolConfig,
        fn: Callable[[str], Awaitable[T]],
        query: str,
        *,
        cache: ToolCache | None = None,
    ) -> ToolResult[T]:
        """Execute a lookup.

        Args:
            ctx: Lookup context with trace_id/tool name
            config: Execution configuration
            fn: Async function taking the query string
            query: Free-text lookup query
            cache: Cache store (used only when config.cache_ttl_seconds > 0)

        Returns:
            ToolResult[T] wrapping the lookup result with Provenance metadata

        Raises:
            ToolTimeoutError: Execution exceeded hard timeout
            ToolExecutionError: Any other failure (original error chained)
        """
        start_time = time.monotonic()
        now = self._clock()

        use_cache = cache is not None and config.cache_ttl_seconds > 0
        cache_key = ""
        if use_cache:
            assert cache is not None
            cache_key = cache.make_key(ctx.tool_name, query)
            cached_entry = cache.get(cache_key, now)
            if cached_entry is not None:
                elapsed_ms = (time.monotonic() - start_time) * 1000
                self._metrics.record_latency(ctx.tool_name, "cache_hit", elapsed_ms)
                self._metrics.inc_cache_hit(ctx.tool_name)
                self._logger.log_attempt(ctx, "cache_hit", elapsed_ms, cache_hit=True)

                # Entries hold (result, fetched_at) so a cached "no match" is still a hit
                cached_result, cached_at = cached_entry
                provenance = Provenance(
                    source=ctx.tool_name,
                    ref_id=ctx.tool_name,
                    fetched_at=cached_at,
                    cache_hit=True,
                )
                return ToolResult(value=cached_result, provenance=provenance)

        try:
            if config.hard_timeout_ms is None:
                result = await fn(query)
            else:
                result = await asyncio.wait_for(fn(query), timeout=config.hard_timeout_ms / 1000)
        except TimeoutError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.tool_name, "timeout", elapsed_ms)
            self._metrics.inc_error(ctx.tool_name, "timeout")
            self._logger.log_attempt(ctx, "timeout", elapsed_ms, error_reason="timeout")
            raise ToolTimeoutError(f"Lookup {ctx.tool_name} timed out") from e
        except Exception as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.tool_name, "error", elapsed_ms)
            self._metrics.inc_error(ctx.tool_name, "execution_error")
            self._logger.log_attempt(
                ctx, "error", elapsed_ms, error_reason=type(e).__name__
            )
            raise ToolExecutionError(f"Lookup {ctx.tool_name} failed") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        fetched_at = self._clock()
        self._metrics.record_latency(ctx.tool_name, "success", elapsed_ms)
        self._logger.log_attempt(ctx, "success", elapsed_ms)

        if use_cache:
            assert cache is not None
            cache.set(cache_key, (result, fetched_at), config.cache_ttl_seconds, now)

        provenance = Provenance(
            source=ctx.tool_name,
            ref_id=ctx.tool_name,
            fetched_at=fetched_at,
            cache_hit=False,
        )
        return ToolResult(value=result, provenance=provenance)
