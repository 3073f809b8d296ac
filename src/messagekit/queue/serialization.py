"""Serialization utilities for queue and stream payloads."""

from __future__ import annotations

import json
from typing import Any

# Field holding the JSON payload of a stream entry
PAYLOAD_FIELD = "data"


def encode(value: Any) -> str:
    """
    Serialize a value for storage.

    Args:
        value: Any JSON-serializable value.

    Returns:
        JSON text.

    Raises:
        TypeError: If the value is not JSON-serializable.
    """
    return json.dumps(value)


def decode(data: str | bytes | None) -> Any:
    """
    Deserialize a stored value.

    ``None`` (missing key or empty list) is returned unchanged.

    Raises:
        ValueError: If the stored text is not valid JSON.
    """
    if data is None:
        return None

    if isinstance(data, bytes):
        data = data.decode()

    return json.loads(data)


def decode_entry(fields: dict[str, Any]) -> Any:
    """Deserialize the payload of a stream entry."""
    if PAYLOAD_FIELD not in fields:
        raise ValueError(f"Stream entry has no '{PAYLOAD_FIELD}' field")
    return decode(fields[PAYLOAD_FIELD])
