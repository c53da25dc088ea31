"""Test that constants are accessible from Settings and not duplicated."""

import pytest

from atlantico.app.config import Settings, get_settings


def test_settings_accessible() -> None:
    """Test that Settings can be imported and accessed."""
    settings = get_settings()
    assert settings is not None
    assert get_settings() is settings


def test_region_defaults() -> None:
    settings = Settings()
    assert settings.default_municipality == "Atlántico"
    assert settings.places_language == "es"
    assert settings.places_region == "co"


def test_timeout_and_ttl_constants() -> None:
    settings = Settings()
    assert settings.lookup_hard_timeout_ms > 0
    assert settings.places_cache_ttl_hours == 12


def test_enrich_concurrency() -> None:
    settings = Settings()
    assert settings.enrich_concurrency > 0


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENRICH_CONCURRENCY", "8")
    monkeypatch.setenv("DEFAULT_MUNICIPALITY", "Barranquilla")

    settings = Settings()

    assert settings.enrich_concurrency == 8
    assert settings.default_municipality == "Barranquilla"
