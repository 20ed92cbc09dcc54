"""No-op idempotency store adapter for when idempotency is disabled."""

from typing import Optional

from app.application.ports.idempotency_store import IdempotencyStore


class NoOpIdempotencyStore(IdempotencyStore):
    """No-op adapter that never replays a stored response."""

    async def get_response(self, key: str) -> Optional[str]:
        """
        Always return None (no stored response).

        Args:
            key: Idempotency key (ignored)

        Returns:
            Always None
        """
        return None

    async def store_response(self, key: str, response: str, ttl_seconds: int) -> None:
        """
        No-op (does nothing).

        Args:
            key: Idempotency key (ignored)
            response: Response string (ignored)
            ttl_seconds: TTL (ignored)
        """
        pass
