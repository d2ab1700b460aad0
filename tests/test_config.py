from __future__ import annotations

from typing import Any

import pytest

from config import resolution
from config.resolution import load_settings, parse_jurisdiction_codes


def test_parse_jurisdiction_codes() -> None:
    assert parse_jurisdiction_codes("Osceola=59, seminole = 69,") == {"osceola": 59, "seminole": 69}
    assert parse_jurisdiction_codes("") == {}
    assert parse_jurisdiction_codes(None) == {}


@pytest.mark.parametrize("raw", ["osceola", "osceola=x", "=59"])
def test_parse_jurisdiction_codes_rejects_bad_entries(raw: str) -> None:
    with pytest.raises(ValueError, match="Invalid jurisdiction code"):
        parse_jurisdiction_codes(raw)


def test_load_settings_defaults(monkeypatch: Any) -> None:
    monkeypatch.setattr(resolution, "load_dotenv", lambda *a, **k: False)
    for name in (
        "PARCEL_REGISTRY_URL",
        "PARCEL_REGISTRY_TIMEOUT",
        "PARCEL_REGISTRY_MAX_RETRIES",
        "RESOLVER_CONCURRENCY",
        "FUZZY_RESULT_LIMIT",
        "PARCEL_JURISDICTION_CODES",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.registry_url == resolution.PARCEL_REGISTRY_URL
    assert settings.concurrency == resolution.DEFAULT_CONCURRENCY
    assert settings.fuzzy_result_limit == 500
    assert dict(settings.jurisdiction_codes) == {"orange": 58}


def test_load_settings_env_overrides(monkeypatch: Any) -> None:
    monkeypatch.setattr(resolution, "load_dotenv", lambda *a, **k: False)
    monkeypatch.setenv("PARCEL_REGISTRY_TIMEOUT", "5")
    monkeypatch.setenv("RESOLVER_CONCURRENCY", "8")
    monkeypatch.setenv("PARCEL_JURISDICTION_CODES", "osceola=59")

    settings = load_settings()

    assert settings.timeout_seconds == 5.0
    assert settings.concurrency == 8
    assert settings.jurisdiction_codes["orange"] == 58
    assert settings.jurisdiction_codes["osceola"] == 59


def test_default_codes_are_read_only() -> None:
    with pytest.raises(TypeError):
        resolution.JURISDICTION_CODES["osceola"] = 59  # type: ignore[index]
