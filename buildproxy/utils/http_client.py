"""
HTTP client factory for calls to the upstream document processing API.

Clients share one connection pool configuration and always carry a bounded
timeout, so a stalled upstream turns into an error instead of a hung request.
"""

import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Dict

import httpx

from ..config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_HTTP_TIMEOUT, Settings

logger = logging.getLogger(__name__)


class ServiceType(Enum):
    """Upstream services the proxy talks to."""
    NUTRIENT = "nutrient"


class HTTPClientFactory:
    """
    Factory for creating and managing HTTP clients.

    Provides consistent configuration for timeouts and connection pooling.
    """

    def __init__(
        self,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ):
        self._clients: Dict[ServiceType, httpx.AsyncClient] = {}
        self._http_timeout = http_timeout
        self._connect_timeout = connect_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> 'HTTPClientFactory':
        return cls(http_timeout=settings.http_timeout, connect_timeout=settings.connect_timeout)

    def _get_connection_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_keepalive_connections=20,
            max_connections=100,
            keepalive_expiry=30.0
        )

    def _get_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self._connect_timeout,
            read=self._http_timeout,
            write=self._http_timeout,
            pool=self._connect_timeout
        )

    def create_client(
        self,
        service_type: ServiceType,
        **overrides
    ) -> httpx.AsyncClient:
        """
        Create an HTTP client for the given service.

        Args:
            service_type: Type of service the client will be used for
            **overrides: Override default client configuration (e.g. transport)

        Returns:
            Configured AsyncClient instance
        """
        config = {
            'timeout': self._get_timeout(),
            'limits': self._get_connection_limits(),
            'follow_redirects': False,
        }
        config.update(overrides)

        client = httpx.AsyncClient(**config)
        self._clients[service_type] = client
        return client

    async def close_all_clients(self):
        """Close all managed clients."""
        for client in self._clients.values():
            try:
                await client.aclose()
            except Exception as e:
                logger.warning(f"Error closing HTTP client: {e}")

        self._clients.clear()


@asynccontextmanager
async def lifespan_http_clients(factory: HTTPClientFactory):
    """
    Context manager for HTTP client lifecycle management.

    Use this in FastAPI lifespan events to ensure proper client cleanup.
    """
    try:
        yield factory
    finally:
        await factory.close_all_clients()
