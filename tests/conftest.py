from __future__ import annotations

from typing import Callable

import httpx
import pytest

from emailit import AsyncEmailitClient


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep EMAILIT_* variables and any local .env out of every test."""
    for name in (
        "EMAILIT_API_KEY",
        "EMAILIT_BASE_URL",
        "EMAILIT_TIMEOUT",
        "EMAILIT_LOG_FORMAT",
        "EMAILIT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_client():
    """Build a client whose HTTP traffic is answered by *handler*."""

    def _make(
        handler: Callable[[httpx.Request], object],
        api_key: str = "test-key",
    ) -> AsyncEmailitClient:
        return AsyncEmailitClient(api_key, _transport=httpx.MockTransport(handler))

    return _make
