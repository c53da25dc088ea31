"""Prometheus metrics for place lookups and stop enrichment.

``source`` labels are lookup names: ``places`` for the cached chain and
``places.<provider>`` for a single provider call.
"""

from prometheus_client import Counter, Histogram

place_lookup_latency_ms = Histogram(
    "place_lookup_latency_ms",
    "Place lookup latency in milliseconds",
    ["source", "outcome"],
    # Providers are cut off at the hard timeout (4 s by default)
    buckets=[25, 50, 100, 250, 500, 1000, 2000, 4000, 8000],
)

place_lookup_errors_total = Counter(
    "place_lookup_errors_total",
    "Place lookups that timed out or failed",
    ["source", "reason"],
)

place_lookup_cache_hits_total = Counter(
    "place_lookup_cache_hits_total",
    "Place lookups answered from the query cache",
    ["source"],
)

# enriched, no_match or lookup_error
enrich_outcomes_total = Counter(
    "enrich_outcomes_total",
    "Stop enrichment outcomes",
    ["outcome"],
)


class PrometheusLookupMetrics:
    """Records executor events on the place lookup metrics."""

    def record_latency(self, source: str, outcome: str, latency_ms: float) -> None:
        place_lookup_latency_ms.labels(source=source, outcome=outcome).observe(latency_ms)

    def inc_error(self, source: str, reason: str) -> None:
        place_lookup_errors_total.labels(source=source, reason=reason).inc()

    def inc_cache_hit(self, source: str) -> None:
        place_lookup_cache_hits_total.labels(source=source).inc()
