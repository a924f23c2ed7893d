"""Per-API-key client cache for multi-tenant deployments."""

from __future__ import annotations

import logging
import threading

import httpx

from emailit.client import AsyncEmailitClient
from emailit.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, EmailitSettings

logger = logging.getLogger(__name__)


class EmailitClientFactory:
    """Thread-safe cache handing out one :class:`AsyncEmailitClient` per key.

    Every client shares the factory's ``base_url`` and ``timeout``; only the
    API key differs. Reads of an already-cached key take no lock; inserts are
    double-checked under a lock so each key is built exactly once.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        _transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = _transport
        self._clients: dict[str, AsyncEmailitClient] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._clients)

    async def __aenter__(self) -> EmailitClientFactory:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    def create_client(self, api_key: str) -> AsyncEmailitClient:
        """Return the cached client for *api_key*, building it on first use."""
        if not api_key or not api_key.strip():
            raise ValueError("API key is required.")

        client = self._clients.get(api_key)
        if client is not None:
            return client

        with self._lock:
            client = self._clients.get(api_key)
            if client is None:
                settings = EmailitSettings(
                    api_key=api_key,
                    base_url=self._base_url,
                    timeout=self._timeout,
                )
                client = AsyncEmailitClient(settings=settings, _transport=self._transport)
                self._clients[api_key] = client
                logger.debug("Created Emailit client (%d cached)", len(self._clients))
            return client

    async def aclose(self) -> None:
        """Close every cached client and empty the cache. Never raises."""
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()

        for client in clients:
            try:
                await client.aclose()
            except Exception:
                logger.warning("Failed to close Emailit client", exc_info=True)
