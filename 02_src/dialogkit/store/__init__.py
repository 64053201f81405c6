"""Session store module."""

from ..config import BotConfig
from .base import ISessionStore, session_key
from .codec import decode_session, encode_session
from .prefixed import PrefixedStore, chat_data_prefix, user_data_prefix
from .redis_store import RedisSessionStore
from .sqlite_store import SqliteSessionStore


def create_session_store(config: BotConfig) -> ISessionStore:
    """Redis when a DSN is configured, SQLite otherwise."""
    if config.redis_dsn:
        return RedisSessionStore.from_dsn(config.redis_dsn)
    return SqliteSessionStore(config.db_path)


__all__ = [
    "ISessionStore",
    "PrefixedStore",
    "RedisSessionStore",
    "SqliteSessionStore",
    "chat_data_prefix",
    "create_session_store",
    "decode_session",
    "encode_session",
    "session_key",
    "user_data_prefix",
]
