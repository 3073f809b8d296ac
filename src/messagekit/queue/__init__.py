"""Redis-backed queue and stream wrappers."""

from messagekit.queue.base import RedisBackendBase
from messagekit.queue.message_queue import MessageQueue
from messagekit.queue.message_stream import MessageStream
from messagekit.queue.processed import ProcessedIdBuffer

__all__ = [
    "RedisBackendBase",
    "MessageQueue",
    "MessageStream",
    "ProcessedIdBuffer",
]
