"""Tests for the per-API-key client cache."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from emailit import AsyncEmailitClient, EmailitClientFactory


def _no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.fixture
def factory():
    return EmailitClientFactory(
        "https://api.test", 12.5, _transport=httpx.MockTransport(_no_network)
    )


class TestCreateClient:
    def test_same_key_same_instance(self, factory):
        assert factory.create_client("key-a") is factory.create_client("key-a")
        assert len(factory) == 1

    def test_different_keys_different_instances(self, factory):
        a = factory.create_client("key-a")
        b = factory.create_client("key-b")
        assert a is not b
        assert a.settings.api_key == "key-a"
        assert b.settings.api_key == "key-b"
        assert len(factory) == 2

    @pytest.mark.parametrize("api_key", ["", "   ", None])
    def test_blank_key_rejected(self, factory, api_key):
        with pytest.raises(ValueError, match="API key is required"):
            factory.create_client(api_key)
        assert len(factory) == 0

    def test_clients_share_configuration(self, factory):
        client = factory.create_client("key-a")
        assert isinstance(client, AsyncEmailitClient)
        assert client.settings.base_url == "https://api.test"
        assert client.settings.timeout == 12.5

    def test_defaults(self):
        client = EmailitClientFactory().create_client("key-a")
        assert client.settings.base_url == "https://api.emailit.com"
        assert client.settings.timeout == 30.0

    async def test_concurrent_first_use_builds_once(self, factory):
        clients = await asyncio.gather(
            *(asyncio.to_thread(factory.create_client, "shared") for _ in range(16))
        )
        assert all(c is clients[0] for c in clients)
        assert len(factory) == 1


class TestClose:
    async def test_aclose_closes_and_clears(self, factory):
        a = factory.create_client("key-a")
        b = factory.create_client("key-b")
        await factory.aclose()
        assert a.is_closed and b.is_closed
        assert len(factory) == 0

        fresh = factory.create_client("key-a")
        assert fresh is not a
        assert not fresh.is_closed

    async def test_aclose_twice_and_on_empty(self, factory):
        await factory.aclose()
        factory.create_client("key-a")
        await factory.aclose()
        await factory.aclose()
        assert len(factory) == 0

    async def test_aclose_survives_failing_client(self, factory, monkeypatch, caplog):
        broken = factory.create_client("broken")
        healthy = factory.create_client("healthy")

        async def fail() -> None:
            raise RuntimeError("socket already gone")

        monkeypatch.setattr(broken, "aclose", fail)
        with caplog.at_level(logging.WARNING, logger="emailit"):
            await factory.aclose()

        assert healthy.is_closed
        assert len(factory) == 0
        assert any("Failed to close" in r.getMessage() for r in caplog.records)

    async def test_context_manager(self):
        async with EmailitClientFactory(
            _transport=httpx.MockTransport(_no_network)
        ) as factory:
            client = factory.create_client("key-a")
        assert client.is_closed
