"""Where a place came from, recorded on every Place a provider returns."""

from datetime import UTC, datetime
from urllib.parse import quote

from atlantico.app.models.common import Provenance


def place_provenance(
    provider: str,
    *,
    ref_id: str | None = None,
    url: str | None = None,
    cache_hit: bool = False,
) -> Provenance:
    """Provenance for a place just fetched from ``provider``.

    ``source`` reads ``places.<provider>``, matching the lookup names used in
    metrics and logs. ``ref_id`` is the provider's own id for the place and
    ``url`` must already have credentials stripped.
    """
    return Provenance(
        source=f"places.{provider}",
        ref_id=ref_id,
        source_url=url,
        fetched_at=datetime.now(UTC),
        cache_hit=cache_hit,
    )


def fixture_url(key: str) -> str:
    return f"fixtures://places/{quote(key)}"
