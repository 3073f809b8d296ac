"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import uuid
from typing import AsyncGenerator, Generator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio


# Set test environment
os.environ.setdefault("MESSAGEKIT_REDIS__URL", "redis://localhost:6379/1")
os.environ.setdefault("MESSAGEKIT_STREAM_CONSUMER_ID", "test-consumer")


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """Reload settings from the environment for every test."""
    from messagekit.core.config import configure_settings

    configure_settings(None)
    yield
    configure_settings(None)


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Redis client double; every command is an AsyncMock."""
    client = AsyncMock()
    client.ping.return_value = True
    return client


@pytest.fixture
def entity_name() -> str:
    """Unique queue/stream name so tests never share keys."""
    return f"test-{uuid.uuid4().hex[:8]}"


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator:
    """Create a Redis client for testing, skipping when no server is up."""
    import redis.asyncio as redis
    from messagekit.core.config import get_settings

    settings = get_settings()
    client = redis.from_url(
        settings.redis.url.get_secret_value(), decode_responses=True
    )

    try:
        await client.ping()
    except Exception:
        await client.aclose()
        pytest.skip("Redis is not available")

    yield client

    await client.aclose()


@pytest_asyncio.fixture
async def message_queue(redis_client, entity_name) -> AsyncGenerator:
    """Connected queue against the live Redis."""
    from messagekit.core.config import get_settings
    from messagekit.queue.message_queue import MessageQueue

    queue = MessageQueue(
        entity_name, url=get_settings().redis.url.get_secret_value()
    )
    await queue.connect()

    yield queue

    # Cleanup
    await redis_client.delete(queue.name)
    if queue.is_connected:
        await queue.disconnect()


@pytest_asyncio.fixture
async def message_stream(redis_client, entity_name) -> AsyncGenerator:
    """Connected stream against the live Redis."""
    from messagekit.core.config import get_settings
    from messagekit.queue.message_stream import MessageStream

    stream = MessageStream(
        entity_name, url=get_settings().redis.url.get_secret_value()
    )
    await stream.connect()

    yield stream

    # Cleanup
    if stream.is_connected:
        await stream.disconnect()
    await redis_client.delete(stream.name)
