from __future__ import annotations

import os
import socket
import sys
from collections.abc import Callable
from copy import deepcopy
from pathlib import Path
from typing import Any

import pytest

BASE_URL = "https://znuny.example/otrs/nph-genericinterface.pl/Webservice/GenericTicketConnectorREST"


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = repo_root / "src"
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Prevent accidental real network calls in unit tests.

    Respx mocks should still work because they intercept at the HTTP client layer.
    """
    if (os.environ.get("ALLOW_NETWORK_TESTS") or "").strip().lower() in {"1", "true", "yes"}:
        return

    def _blocked(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError(
            "Network access is disabled in tests (set ALLOW_NETWORK_TESTS=1 to override)."
        )

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked, raising=True)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@pytest.fixture
def make_settings() -> Callable[..., Any]:
    """Build Settings from a mapping, without reading the environment."""
    from znuny_rest_client.config.settings import Settings

    def _make(overrides: dict[str, Any] | None = None) -> Settings:
        data: dict[str, Any] = {
            "znuny": {
                "base_url": BASE_URL,
                "username": "agent",
                "password": "s3cret",
            },
        }
        if overrides:
            data = _deep_merge(data, overrides)
        return Settings.from_mapping(data)

    return _make
