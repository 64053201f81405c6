"""Namespaced views over the shared session store."""

from .base import ISessionStore


def user_data_prefix(user_id: int, chat_id: int) -> str:
    return f"userdata:{user_id}:{chat_id}:"


def chat_data_prefix(chat_id: int) -> str:
    return f"chatdata:{chat_id}:"


class PrefixedStore:
    """Key-value view that prepends a fixed prefix to every key.

    Handlers keep their own per-user or per-chat data next to the dialog
    sessions without being able to touch keys outside their namespace.
    """

    def __init__(self, store: ISessionStore, prefix: str):
        self._store = store
        self.prefix = prefix

    async def get(self, key: str) -> bytes | None:
        return await self._store.get(self.prefix + key)

    async def set(self, key: str, value: bytes | str, ttl: int) -> None:
        if isinstance(value, str):
            value = value.encode("utf-8")
        await self._store.set(self.prefix + key, value, ttl)

    async def delete(self, key: str) -> None:
        await self._store.delete(self.prefix + key)

    def sub(self, prefix: str) -> "PrefixedStore":
        """Nested view, e.g. ``store.sub("prefs:")``."""
        return PrefixedStore(self._store, self.prefix + prefix)
