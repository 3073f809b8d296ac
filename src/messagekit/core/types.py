"""Result types shared by the queue and stream wrappers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StreamMessage(BaseModel):
    """
    An entry read from a message stream.

    Both fields are ``None`` when no pending or new entry was available.
    A malformed payload keeps its ``id`` with ``message`` set to ``None``.
    """

    id: str | None = Field(
        default=None,
        description="Stream entry ID assigned by Redis",
    )
    message: Any = Field(
        default=None,
        description="Decoded payload passed to add_message()",
    )

    @classmethod
    def empty(cls) -> StreamMessage:
        """Result for an empty read."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.id is None
