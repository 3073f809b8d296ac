"""FIFO queue backed by a Redis list."""

from __future__ import annotations

from typing import Any

import redis.asyncio as redis

from messagekit.core.exceptions import (
    ConnectionError,
    DisconnectError,
    QueueQueryError,
    QueueReadError,
    QueueWriteError,
)
from messagekit.observability.logging import get_logger
from messagekit.queue.base import RedisBackendBase
from messagekit.queue.serialization import decode, encode

KEY_PREFIX = "queue:"


class MessageQueue(RedisBackendBase):
    """
    FIFO queue of JSON values stored in the list ``queue:<queue_name>``.

    ``push`` appends to the tail and ``pop`` removes from the head. There is
    no consumer tracking: a popped value is gone.
    """

    def __init__(
        self,
        queue_name: str,
        url: str | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        super().__init__(f"{KEY_PREFIX}{queue_name}", url=url, client=client)
        self._logger = get_logger(__name__, queue=self.name)

    async def connect(self) -> None:
        """Connect to the queue."""
        try:
            await self._open()
            self._logger.info("Connected to message queue")
        except Exception as e:
            self._logger.error("Failed to connect to queue", error=str(e))
            raise ConnectionError(
                "Failed to connect to the message queue",
                details={"queue": self.name, "url": self.url},
            ) from e

    async def disconnect(self) -> None:
        """Disconnect from the queue."""
        try:
            await self._close()
            self._logger.info("Disconnected from message queue")
        except Exception as e:
            self._logger.error("Failed to disconnect from queue", error=str(e))
            raise DisconnectError(
                "Failed to disconnect from queue",
                details={"queue": self.name},
            ) from e

    async def push(self, data: Any) -> None:
        """
        Add data to the end of the queue.

        Args:
            data: Any JSON-serializable value.

        Raises:
            QueueWriteError: If the value cannot be encoded or stored.
        """
        try:
            await self.client.rpush(self.name, encode(data))
        except Exception as e:
            self._logger.error("Failed to push to queue", error=str(e))
            raise QueueWriteError(self.name) from e

    async def pop(self) -> Any:
        """
        Remove and return the first element of the queue.

        Returns:
            The decoded value, or None if the queue is empty.

        Raises:
            QueueReadError: On transport failure or malformed stored JSON.
        """
        try:
            data = await self.client.lpop(self.name)
            return decode(data)
        except Exception as e:
            self._logger.error("Failed to pop from queue", error=str(e))
            raise QueueReadError(self.name) from e

    async def size(self) -> int:
        """
        Get the number of elements in the queue.

        Raises:
            QueueQueryError: If the length cannot be read.
        """
        try:
            return await self.client.llen(self.name)
        except Exception as e:
            self._logger.error("Failed to retrieve queue length", error=str(e))
            raise QueueQueryError(self.name) from e
