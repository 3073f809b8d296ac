"""Exception hierarchy for messagekit."""

from __future__ import annotations

from typing import Any


class MessageKitError(Exception):
    """Base exception for all messagekit errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# Connection lifecycle
class ConnectionError(MessageKitError):
    """Failed to connect to the data store."""

    pass


class DisconnectError(MessageKitError):
    """Failed to close the data store connection."""

    pass


# Queue Errors
class QueueError(MessageKitError):
    """Base error for queue operations."""

    def __init__(self, message: str, queue_name: str) -> None:
        super().__init__(message, {"queue": queue_name})
        self.queue_name = queue_name


class QueueWriteError(QueueError):
    """Failed to push to a queue."""

    def __init__(self, queue_name: str) -> None:
        super().__init__(f"Failed to push data to queue ({queue_name})", queue_name)


class QueueReadError(QueueError):
    """Failed to pop from a queue or to parse the stored value."""

    def __init__(self, queue_name: str) -> None:
        super().__init__(f"Failed to pop from queue ({queue_name})", queue_name)


class QueueQueryError(QueueError):
    """Failed to query queue length."""

    def __init__(self, queue_name: str) -> None:
        super().__init__(
            f"Failed to retrieve queue length ({queue_name})", queue_name
        )


# Stream Errors
class StreamError(MessageKitError):
    """Base error for stream operations."""

    def __init__(
        self,
        message: str,
        stream_name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        all_details = {"stream": stream_name}
        if details:
            all_details.update(details)
        super().__init__(message, all_details)
        self.stream_name = stream_name


class StreamConnectError(StreamError, ConnectionError):
    """Failed to connect to a stream or create its consumer group."""

    def __init__(self, stream_name: str, group: str) -> None:
        super().__init__(
            f"Failed to connect to the stream ({stream_name})",
            stream_name,
            {"group": group},
        )


class StreamDisconnectError(StreamError, DisconnectError):
    """Failed to close the stream connection."""

    def __init__(self, stream_name: str) -> None:
        super().__init__(
            f"Failed to disconnect from the stream ({stream_name})", stream_name
        )


class StreamWriteError(StreamError):
    """Failed to add a message to a stream."""

    def __init__(self, stream_name: str) -> None:
        super().__init__(
            f"Failed to add message to stream ({stream_name})", stream_name
        )


class StreamPurgeError(StreamError):
    """Failed to delete processed entries from a stream."""

    def __init__(self, stream_name: str, group: str, consumer: str, count: int) -> None:
        super().__init__(
            f"Failed to delete processed messages ({stream_name} {group} {consumer})",
            stream_name,
            {"group": group, "consumer": consumer, "count": count},
        )


class StreamQueryError(StreamError):
    """Failed to query stream state."""

    def __init__(self, stream_name: str, what: str = "length") -> None:
        super().__init__(
            f"Failed to get {what} of stream ({stream_name})", stream_name
        )


class NoMessageFound(StreamError):
    """No pending or new entry was available for this consumer."""

    def __init__(self, stream_name: str, consumer: str) -> None:
        super().__init__(
            "No message found",
            stream_name,
            {"consumer": consumer},
        )
