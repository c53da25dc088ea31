"""Health check endpoints.

- /health: liveness, always 200
- /healthz: which place providers are configured; 503 when none is
"""

import json
from typing import Any

from fastapi import APIRouter, Response

from atlantico.app.config import Settings, get_settings

router = APIRouter()


def check_places(settings: Settings) -> tuple[bool, dict[str, str]]:
    """Report configuration status per place provider.

    Returns:
        (any_provider_usable, {provider: status})
    """
    if settings.places_provider == "fixtures":
        return (True, {"fixtures": "ok"})

    providers = {
        "google": "ok" if settings.google_places_api_key else "not_configured",
        "foursquare": "ok" if settings.foursquare_api_key else "not_configured",
        "mapbox": "ok" if settings.mapbox_token else "not_configured",
    }
    return (any(status == "ok" for status in providers.values()), providers)


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | Response:
    """Component health.

    Enrichment still works without providers (every stop passes through
    unchanged), so this reports "degraded" rather than failing outright.

    Returns:
        200 with provider status if at least one provider is usable
        503 otherwise
    """
    settings = get_settings()
    places_ok, places_status = check_places(settings)

    response_body = {
        "status": "ok" if places_ok else "degraded",
        "components": {"places": places_status},
    }

    if not places_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
