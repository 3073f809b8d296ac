"""Connection lifecycle shared by the Redis-backed wrappers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import redis.asyncio as redis

from messagekit.core.config import get_settings
from messagekit.observability.logging import get_logger

logger = get_logger(__name__)


class RedisBackendBase(ABC):
    """
    Abstract base class for wrappers around a single Redis key.

    Owns the connection pool and client. A pre-built ``client`` may be
    passed in instead of a URL; the wrapper then takes ownership of it and
    closes it on disconnect.
    """

    def __init__(
        self,
        name: str,
        url: str | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        settings = get_settings().redis

        self._name = name
        self._url = url or settings.url.get_secret_value()
        self._max_connections = settings.max_connections
        self._socket_timeout = settings.socket_timeout
        self._socket_connect_timeout = settings.socket_connect_timeout

        self._pool: redis.ConnectionPool | None = None
        self._client: redis.Redis | None = client
        self._connected = False

    @property
    def name(self) -> str:
        """Namespaced Redis key."""
        return self._name

    @property
    def url(self) -> str:
        """Connection URL without credentials."""
        return self._url.split("@")[-1]

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        if self._client is None:
            raise RuntimeError("Not connected to Redis")
        return self._client

    @abstractmethod
    async def connect(self) -> None:
        """
        Connect to Redis.

        Raises:
            ConnectionError: If connection fails.
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Disconnect from Redis.

        Raises:
            DisconnectError: If the connection cannot be closed.
        """
        pass

    async def health_check(self) -> bool:
        """Check Redis health."""
        if self._client is None:
            return False
        try:
            await self._client.ping()
            return True
        except Exception:
            return False

    async def _open(self) -> None:
        """Create the client if needed and verify the connection."""
        if self._connected:
            return

        if self._client is None:
            self._pool = redis.ConnectionPool.from_url(
                self._url,
                max_connections=self._max_connections,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_connect_timeout,
                decode_responses=True,
            )
            self._client = redis.Redis(connection_pool=self._pool)

        await self._client.ping()

        self._connected = True
        logger.debug("Connected to Redis", key=self._name, url=self.url)

    async def _close(self) -> None:
        """Close the client and its pool."""
        try:
            if self._client is not None:
                await self._client.aclose()

            if self._pool is not None:
                await self._pool.disconnect()
        finally:
            self._client = None
            self._pool = None
            self._connected = False

        logger.debug("Disconnected from Redis", key=self._name)

    async def __aenter__(self) -> Any:
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.disconnect()
