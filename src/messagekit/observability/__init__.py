"""Logging for messagekit."""

from messagekit.observability.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
