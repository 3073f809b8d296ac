"""messagekit - async FIFO queue and consumer-group stream wrappers for Redis."""

from messagekit.core.config import Settings
from messagekit.core.exceptions import MessageKitError
from messagekit.core.types import StreamMessage
from messagekit.queue.message_queue import MessageQueue
from messagekit.queue.message_stream import MessageStream

__version__ = "1.0.0"
__all__ = [
    "Settings",
    "MessageKitError",
    "StreamMessage",
    "MessageQueue",
    "MessageStream",
    "__version__",
]
