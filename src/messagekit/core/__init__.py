"""Core module for messagekit."""

from messagekit.core.config import Settings
from messagekit.core.exceptions import MessageKitError
from messagekit.core.types import StreamMessage

__all__ = [
    "Settings",
    "MessageKitError",
    "StreamMessage",
]
