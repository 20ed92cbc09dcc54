"""Redis idempotency store adapter."""

from typing import Optional

from redis import asyncio as aioredis

from app.application.ports.idempotency_store import IdempotencyStore


class RedisIdempotencyStore(IdempotencyStore):
    """Redis adapter for replaying stage transition responses."""

    RESPONSE_KEY_PREFIX = "stage_transition:response:"

    def __init__(self, redis_url: str) -> None:
        """
        Initialize Redis idempotency store.

        Args:
            redis_url: Redis connection URL
        """
        self._redis_url = redis_url
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    def _make_response_key(self, key: str) -> str:
        """
        Make Redis key for a stored response.

        Args:
            key: Idempotency key

        Returns:
            Redis key string
        """
        return f"{self.RESPONSE_KEY_PREFIX}{key}"

    async def get_response(self, key: str) -> Optional[str]:
        """
        Get the stored response for an idempotency key.

        Args:
            key: Idempotency key

        Returns:
            Stored JSON response, or None if not found
        """
        client = await self._get_client()
        return await client.get(self._make_response_key(key))

    async def store_response(self, key: str, response: str, ttl_seconds: int) -> None:
        """
        Store the response for an idempotency key with a TTL.

        Args:
            key: Idempotency key
            response: JSON response to store
            ttl_seconds: Time-to-live in seconds
        """
        client = await self._get_client()
        await client.setex(self._make_response_key(key), ttl_seconds, response)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.close()
            self._client = None
