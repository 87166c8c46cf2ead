from __future__ import annotations

from typing import Any

import pytest

from lotfinder._api.remote_config import fetch_remote_config
from lotfinder.config import LotFinderConfig
from lotfinder.exceptions import LotFinderConfigError, LotFinderTransportError


def test_from_env_reads_lotfinder_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOTFINDER_CATALOG_API_KEY", "cat-key")
    monkeypatch.setenv("LOTFINDER_DIRECTORY_URL", "https://dir.example.co")
    monkeypatch.setenv("LOTFINDER_DIRECTORY_API_KEY", "anon-key")
    monkeypatch.setenv("LOTFINDER_PAGE_SIZE", "25")
    monkeypatch.setenv("LOTFINDER_PAGE_DELAY", "0.5")

    config = LotFinderConfig.from_env()

    assert config.catalog_api_key == "cat-key"
    assert config.directory_url == "https://dir.example.co"
    assert config.directory_api_key == "anon-key"
    assert config.page_size == 25
    assert config.page_delay == 0.5
    assert config.max_pages == 10
    assert config.missing_fields() == []


def test_legacy_names_and_overrides() -> None:
    config = LotFinderConfig.from_mapping(
        {
            "REACT_APP_MARKETCHECK_API_KEY": "legacy-cat",
            "REACT_APP_SUPABASE_URL": "https://legacy.example.co",
            "REACT_APP_SUPABASE_ANON_KEY": "legacy-anon",
            "LOTFINDER_MAX_PAGES": "not-a-number",
        },
        max_pages=3,
    )

    assert config.catalog_api_key == "legacy-cat"
    assert config.directory_url == "https://legacy.example.co"
    assert config.max_pages == 3


def test_require_complete_names_missing_values() -> None:
    config = LotFinderConfig(catalog_api_key="cat-key", directory_url="  ")

    with pytest.raises(LotFinderConfigError) as exc_info:
        config.require_complete()

    assert "directory_url" in str(exc_info.value)
    assert "directory_api_key" in str(exc_info.value)
    assert "catalog_api_key" not in str(exc_info.value)


class _SettingsTransport:
    def __init__(self, payload: Any = None, error: LotFinderTransportError | None = None) -> None:
        self._payload = payload
        self._error = error
        self.urls: list[str] = []

    async def get_json(self, url: str, *, headers: Any = None) -> Any:
        self.urls.append(url)
        if self._error is not None:
            raise self._error
        return self._payload


@pytest.mark.asyncio
async def test_remote_config_loads_complete_settings() -> None:
    transport = _SettingsTransport(
        {
            "REACT_APP_MARKETCHECK_API_KEY": "cat",
            "REACT_APP_SUPABASE_URL": "https://dir.example.co",
            "REACT_APP_SUPABASE_ANON_KEY": "anon",
        }
    )

    config = await fetch_remote_config(transport, "https://app.example.com/settings", page_delay=0.0)

    assert transport.urls == ["https://app.example.com/settings"]
    assert config.catalog_api_key == "cat"
    assert config.page_delay == 0.0


@pytest.mark.asyncio
async def test_remote_config_missing_endpoint() -> None:
    transport = _SettingsTransport(error=LotFinderTransportError("HTTP 404", status_code=404))

    with pytest.raises(LotFinderConfigError, match="endpoint not found"):
        await fetch_remote_config(transport, "https://app.example.com/settings")


@pytest.mark.asyncio
async def test_remote_config_server_error() -> None:
    transport = _SettingsTransport(error=LotFinderTransportError("HTTP 500", status_code=500))

    with pytest.raises(LotFinderConfigError, match="returned status 500"):
        await fetch_remote_config(transport, "https://app.example.com/settings")


@pytest.mark.asyncio
async def test_remote_config_missing_keys() -> None:
    transport = _SettingsTransport({"REACT_APP_MARKETCHECK_API_KEY": "cat"})

    with pytest.raises(LotFinderConfigError, match="missing"):
        await fetch_remote_config(transport, "https://app.example.com/settings")
