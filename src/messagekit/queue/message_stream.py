"""Consumer-group stream backed by Redis Streams."""

from __future__ import annotations

from typing import Any

import redis.asyncio as redis
from redis.exceptions import ResponseError

from messagekit.core.config import get_settings
from messagekit.core.exceptions import (
    NoMessageFound,
    StreamConnectError,
    StreamDisconnectError,
    StreamPurgeError,
    StreamQueryError,
    StreamWriteError,
)
from messagekit.core.types import StreamMessage
from messagekit.observability.logging import get_logger
from messagekit.queue.base import RedisBackendBase
from messagekit.queue.processed import ProcessedIdBuffer
from messagekit.queue.serialization import PAYLOAD_FIELD, decode_entry, encode

KEY_PREFIX = "stream:"
GROUP_SUFFIX = ":consumer:group"


class MessageStream(RedisBackendBase):
    """
    Consumer-group wrapper around the stream ``stream:<stream_name>``.

    Features:
    - One consumer group per stream name, created at the stream tail
    - Entries abandoned by another consumer are reclaimed before new reads
    - Entries are acknowledged as soon as they are handed to the caller
    - Acknowledged entries are deleted from the stream in batches

    An instance holds a buffer of acknowledged IDs and is meant to be
    driven by one caller at a time.
    """

    def __init__(
        self,
        stream_name: str,
        url: str | None = None,
        client: redis.Redis | None = None,
        consumer_id: str | None = None,
        max_processed_ids: int | None = None,
        block_ms: int | None = None,
    ) -> None:
        super().__init__(f"{KEY_PREFIX}{stream_name}", url=url, client=client)

        settings = get_settings().stream

        self._consumer_group = f"{stream_name}{GROUP_SUFFIX}"
        self._consumer_id = consumer_id or settings.consumer_id
        self._block_ms = settings.block_ms if block_ms is None else block_ms
        self._claim_min_idle_ms = settings.claim_min_idle_ms

        self._processed_ids = ProcessedIdBuffer(
            settings.max_processed_ids
            if max_processed_ids is None
            else max_processed_ids
        )

        self._logger = get_logger(
            __name__, stream=self.name, consumer=self._consumer_id
        )

    @property
    def consumer_group(self) -> str:
        """Get the consumer group name."""
        return self._consumer_group

    @property
    def consumer_id(self) -> str:
        """Get this consumer's name within the group."""
        return self._consumer_id

    @property
    def processed_ids(self) -> ProcessedIdBuffer:
        """Acknowledged IDs not yet deleted from the stream."""
        return self._processed_ids

    async def connect(self) -> None:
        """
        Connect to the stream and make sure the consumer group exists.

        An existing group is left untouched.

        Raises:
            StreamConnectError: If the connection or group creation fails.
        """
        try:
            await self._open()
            await self._ensure_consumer_group()
            self._logger.info("Connected to message stream", group=self._consumer_group)
        except Exception as e:
            self._logger.error(
                "Failed to connect to stream",
                group=self._consumer_group,
                error=str(e),
            )
            raise StreamConnectError(self.name, self._consumer_group) from e

    async def disconnect(self) -> None:
        """
        Flush processed IDs and disconnect from the stream.

        A failed flush is logged and ignored.

        Raises:
            StreamDisconnectError: If the connection cannot be closed.
        """
        try:
            await self.delete_processed_messages()
        except Exception as e:
            self._logger.warning(
                "Failed to flush processed messages on disconnect",
                pending_deletes=len(self._processed_ids),
                error=str(e),
            )

        try:
            await self._close()
            self._logger.info("Disconnected from message stream")
        except Exception as e:
            self._logger.error("Failed to disconnect from stream", error=str(e))
            raise StreamDisconnectError(self.name) from e

    async def add_message(self, data: Any) -> str:
        """
        Add a message to the stream.

        Args:
            data: Any JSON-serializable value.

        Returns:
            ID of the new stream entry.

        Raises:
            StreamWriteError: If the value cannot be encoded or stored.
        """
        try:
            message_id = await self.client.xadd(self.name, {PAYLOAD_FIELD: encode(data)})
        except Exception as e:
            self._logger.error("Failed to add message", error=str(e))
            raise StreamWriteError(self.name) from e

        self._logger.debug("Added message", message_id=message_id)
        return str(message_id)

    async def get_failed_message(self) -> StreamMessage:
        """
        Claim one pending entry that another consumer left unacknowledged.

        Ownership moves to this consumer. The entry is not acknowledged here.

        Returns:
            The claimed entry, or an empty result if nothing is pending.

        Raises:
            Exception: The underlying Redis or decode error, unchanged.
        """
        try:
            response = await self.client.xautoclaim(
                self.name,
                self._consumer_group,
                self._consumer_id,
                min_idle_time=self._claim_min_idle_ms,
                start_id="0-0",
                count=1,
            )

            # Entries deleted while pending are parsed as (None, None)
            messages = [
                (message_id, fields)
                for message_id, fields in (response[1] if response else [])
                if message_id is not None
            ]
            if not messages:
                return StreamMessage.empty()

            message_id, fields = messages[0]
            message = decode_entry(fields)

        except Exception as e:
            self._logger.error("Failed to claim pending message", error=str(e))
            raise

        self._logger.info("Claimed pending message", message_id=message_id)
        return StreamMessage(id=str(message_id), message=message)

    async def consume_message(self) -> StreamMessage:
        """
        Get the next message for this consumer.

        Failed messages are retrieved before new ones. Waits up to
        ``block_ms`` for a new entry. Whatever is returned has already been
        acknowledged.

        Returns:
            The entry, or an empty result if nothing arrived in time.
        """
        result = StreamMessage.empty()

        try:
            result = await self.get_failed_message()
        except Exception as e:
            self._logger.debug("Skipping pending message recovery", error=str(e))

        if result.is_empty:
            try:
                result = await self._read_new_message()
            except NoMessageFound:
                self._logger.debug("No message found", block_ms=self._block_ms)
            except Exception as e:
                self._logger.error("Failed to read from stream", error=str(e))

        if not result.is_empty:
            await self._acknowledge(result.id)

        return result

    async def delete_processed_messages(self) -> None:
        """
        Remove acknowledged entries from the stream.

        The buffer is only cleared after the delete succeeds.

        Raises:
            StreamPurgeError: If the entries cannot be deleted.
        """
        message_ids = self._processed_ids.snapshot()
        if not message_ids:
            return

        try:
            await self.client.xdel(self.name, *message_ids)
        except Exception as e:
            self._logger.error(
                "Failed to delete processed messages",
                count=len(message_ids),
                error=str(e),
            )
            raise StreamPurgeError(
                self.name, self._consumer_group, self._consumer_id, len(message_ids)
            ) from e

        self._processed_ids.discard_all(message_ids)
        self._logger.info("Deleted processed messages", count=len(message_ids))

    async def length(self) -> int:
        """
        Get the number of entries in the stream, across all groups.

        Raises:
            StreamQueryError: If the length cannot be read.
        """
        try:
            return await self.client.xlen(self.name)
        except Exception as e:
            self._logger.error("Failed to get stream length", error=str(e))
            raise StreamQueryError(self.name) from e

    async def pending_count(self) -> int:
        """
        Get the number of entries delivered to the group but not acknowledged.

        Raises:
            StreamQueryError: If the pending summary cannot be read.
        """
        try:
            info = await self.client.xpending(self.name, self._consumer_group)
        except Exception as e:
            self._logger.error("Failed to get pending count", error=str(e))
            raise StreamQueryError(self.name, "pending count") from e

        if info:
            return int(info["pending"])
        return 0

    async def _ensure_consumer_group(self) -> None:
        """Create the consumer group at the stream tail unless it exists."""
        try:
            await self.client.xgroup_create(
                self.name,
                self._consumer_group,
                id="$",
                mkstream=True,
            )
            self._logger.info("Created consumer group", group=self._consumer_group)
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise

    async def _read_new_message(self) -> StreamMessage:
        """
        Read one entry never delivered to this group.

        Raises:
            NoMessageFound: If nothing arrives within ``block_ms``.
        """
        response = await self.client.xreadgroup(
            groupname=self._consumer_group,
            consumername=self._consumer_id,
            streams={self.name: ">"},
            count=1,
            block=self._block_ms,
        )

        if not response:
            raise NoMessageFound(self.name, self._consumer_id)

        _, messages = response[0]
        if not messages:
            raise NoMessageFound(self.name, self._consumer_id)

        message_id, fields = messages[0]

        try:
            message = decode_entry(fields)
        except Exception as e:
            # Still acknowledged so a bad entry cannot wedge the group
            self._logger.warning(
                "Failed to deserialize stream entry",
                message_id=message_id,
                error=str(e),
            )
            message = None

        return StreamMessage(id=str(message_id), message=message)

    async def _acknowledge(self, message_id: str) -> None:
        """Acknowledge an entry and flush the processed IDs when full."""
        try:
            await self.client.xack(self.name, self._consumer_group, message_id)
            self._processed_ids.add(message_id)

            if self._processed_ids.is_full():
                await self.delete_processed_messages()

        except Exception as e:
            self._logger.error(
                "Failed to acknowledge message",
                message_id=message_id,
                error=str(e),
            )
