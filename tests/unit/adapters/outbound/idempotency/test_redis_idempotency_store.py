"""Unit tests for Redis idempotency store adapter."""

from unittest.mock import AsyncMock, patch

import pytest

from app.adapters.outbound.idempotency.redis_idempotency_store import RedisIdempotencyStore


@pytest.fixture
def mock_redis_client():
    """Create a mock Redis client."""
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def redis_store():
    """Create Redis idempotency store with test URL."""
    return RedisIdempotencyStore("redis://localhost:6379/0")


@pytest.mark.asyncio
async def test_get_response_returns_none_when_missing(redis_store, mock_redis_client):
    """Test get_response returns None for an unseen key."""
    with patch(
        "app.adapters.outbound.idempotency.redis_idempotency_store.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_store._client = None

        result = await redis_store.get_response("key-1")

        assert result is None
        mock_redis_client.get.assert_called_once_with("stage_transition:response:key-1")


@pytest.mark.asyncio
async def test_get_response_returns_stored_value(redis_store, mock_redis_client):
    """Test get_response returns the stored JSON."""
    mock_redis_client.get.return_value = '{"success": true, "stageId": "cl_completed"}'

    with patch(
        "app.adapters.outbound.idempotency.redis_idempotency_store.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_store._client = None

        result = await redis_store.get_response("key-1")

        assert result == '{"success": true, "stageId": "cl_completed"}'


@pytest.mark.asyncio
async def test_store_response_sets_ttl(redis_store, mock_redis_client):
    """Test store_response writes with the given TTL."""
    with patch(
        "app.adapters.outbound.idempotency.redis_idempotency_store.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_store._client = None

        await redis_store.store_response("key-1", '{"success": true}', 3600)

        mock_redis_client.setex.assert_called_once_with(
            "stage_transition:response:key-1", 3600, '{"success": true}'
        )


@pytest.mark.asyncio
async def test_client_is_reused_and_closed(redis_store, mock_redis_client):
    """Test the client is created once and released on close."""
    with patch(
        "app.adapters.outbound.idempotency.redis_idempotency_store.aioredis.from_url",
        new_callable=AsyncMock,
    ) as mock_from_url:
        mock_from_url.return_value = mock_redis_client
        redis_store._client = None

        await redis_store.get_response("a")
        await redis_store.get_response("b")
        await redis_store.close()

        mock_from_url.assert_called_once()
        mock_redis_client.close.assert_called_once()
        assert redis_store._client is None
