"""Buffer of acknowledged stream entry IDs awaiting deletion."""

from __future__ import annotations

from typing import Iterable, Iterator


class ProcessedIdBuffer:
    """
    Insertion-ordered set of entry IDs acknowledged by one consumer.

    The owner flushes the buffer (deletes the IDs from the stream) once
    :meth:`is_full` reports that the high-water mark was crossed, and again
    on shutdown.
    """

    def __init__(self, max_size: int = 10000) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._ids: dict[str, None] = {}

    @property
    def max_size(self) -> int:
        """High-water mark."""
        return self._max_size

    def add(self, message_id: str) -> None:
        self._ids[message_id] = None

    def is_full(self) -> bool:
        """True once the buffer holds more IDs than the high-water mark."""
        return len(self._ids) > self._max_size

    def snapshot(self) -> list[str]:
        """Buffered IDs in acknowledgement order."""
        return list(self._ids)

    def discard_all(self, message_ids: Iterable[str]) -> None:
        """Remove the given IDs, keeping any added since the snapshot."""
        for message_id in message_ids:
            self._ids.pop(message_id, None)

    def clear(self) -> None:
        self._ids.clear()

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __repr__(self) -> str:
        return f"ProcessedIdBuffer(size={len(self._ids)}, max_size={self._max_size})"
