"""Loading and saving dialog sessions."""

from ..config import DEFAULT_DIALOG_TTL
from ..errors import CorruptedSessionError
from ..logging_config import dialog_context, get_logger
from ..models import DialogSession
from ..store import ISessionStore, decode_session, encode_session, session_key
from .registry import DialogHandler, DialogRegistry

logger = get_logger(__name__)


class SessionRepository:
    """Sessions in the shared store, re-read on every event and never cached."""

    def __init__(
        self,
        store: ISessionStore,
        registry: DialogRegistry,
        ttl: int = DEFAULT_DIALOG_TTL,
    ):
        self._store = store
        self._registry = registry
        self._ttl = ttl

    @property
    def store(self) -> ISessionStore:
        return self._store

    async def load(
        self, user_id: int, chat_id: int
    ) -> tuple[DialogSession, DialogHandler] | None:
        """Session and its handler, None if no usable dialog is in progress.

        Undecodable sessions and sessions of unregistered dialogs are deleted.
        """
        key = session_key(user_id, chat_id)
        raw = await self._store.get(key)
        if raw is None:
            logger.debug(
                "Dialog not found",
                extra={"context": {"user_id": user_id, "chat_id": chat_id}},
            )
            return None

        try:
            session = decode_session(raw)
        except CorruptedSessionError as e:
            logger.error(
                "Dropping corrupted dialog session: %s",
                e,
                extra={"context": {"user_id": user_id, "chat_id": chat_id}},
            )
            await self._store.delete(key)
            return None

        handler = self._registry.get(session.dialog_name)
        if handler is None:
            logger.error(
                "Missing handler for dialog %s",
                session.dialog_name,
                extra={"context": dialog_context(session)},
            )
            await self._store.delete(key)
            return None

        return session, handler

    async def peek(self, user_id: int, chat_id: int) -> DialogSession | None:
        """Decoded session without handler lookup or cleanup."""
        raw = await self._store.get(session_key(user_id, chat_id))
        if raw is None:
            return None
        return decode_session(raw)

    async def exists(self, user_id: int, chat_id: int) -> bool:
        return await self._store.get(session_key(user_id, chat_id)) is not None

    async def save(self, session: DialogSession) -> None:
        await self._store.set(
            session_key(session.user_id, session.chat_id),
            encode_session(session),
            self._ttl,
        )

    async def delete(self, user_id: int, chat_id: int) -> None:
        await self._store.delete(session_key(user_id, chat_id))
