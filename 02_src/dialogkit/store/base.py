"""Session store contract."""

from typing import Protocol


def session_key(user_id: int, chat_id: int) -> str:
    """Store key of the dialog session of a user in a chat."""
    return f"dialog:{user_id}:{chat_id}"


class ISessionStore(Protocol):
    """Flat key-value cache with per-key TTL, shared between workers."""

    async def init(self) -> None:
        """Open connections / create tables."""
        ...

    async def close(self) -> None:
        """Release connections."""
        ...

    async def get(self, key: str) -> bytes | None:
        """Get a value, None if missing or expired."""
        ...

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Set a value that expires after `ttl` seconds."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a value (no-op if missing)."""
        ...
