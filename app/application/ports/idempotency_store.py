"""Idempotency store port."""

from abc import ABC, abstractmethod
from typing import Optional


class IdempotencyStore(ABC):
    """Port interface for replaying responses to repeated requests."""

    @abstractmethod
    async def get_response(self, key: str) -> Optional[str]:
        """
        Get the stored response for an idempotency key.

        Args:
            key: Client-supplied idempotency key

        Returns:
            Serialized response, or None if the key is unseen
        """
        pass

    @abstractmethod
    async def store_response(self, key: str, response: str, ttl_seconds: int) -> None:
        """
        Store the response for an idempotency key with a TTL.

        Args:
            key: Client-supplied idempotency key
            response: Serialized response
            ttl_seconds: Time-to-live in seconds
        """
        pass
