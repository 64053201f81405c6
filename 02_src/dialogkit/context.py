"""Per-event context handed to dialog handlers and commands."""

from typing import TYPE_CHECKING

from .errors import TransportError
from .logging_config import get_logger
from .models import DialogSession, InboundEvent
from .store import ISessionStore, PrefixedStore, chat_data_prefix, user_data_prefix
from .transport import ITransport, LazyDownload

if TYPE_CHECKING:
    from .dialog.orchestrator import DialogOrchestrator

logger = get_logger(__name__)


class Context:
    """Who sent the current event and how to answer them."""

    def __init__(
        self,
        transport: ITransport,
        user_id: int,
        chat_id: int,
        message_id: int | None = None,
        is_private: bool = True,
        username: str | None = None,
        orchestrator: "DialogOrchestrator | None" = None,
        store: ISessionStore | None = None,
        tagged_users: list[int] | None = None,
    ):
        self.transport = transport
        self.user_id = user_id
        self.chat_id = chat_id
        self.message_id = message_id
        self.is_private = is_private
        self.username = username
        self.tagged_users = list(tagged_users or [])
        self.session: DialogSession | None = None
        self._orchestrator = orchestrator
        self._store = store

    @classmethod
    def from_event(
        cls,
        transport: ITransport,
        event: InboundEvent,
        orchestrator: "DialogOrchestrator | None" = None,
        store: ISessionStore | None = None,
    ) -> "Context":
        return cls(
            transport=transport,
            user_id=event.user_id,
            chat_id=event.chat_id,
            message_id=event.message_id,
            is_private=event.is_private,
            username=event.username,
            orchestrator=orchestrator,
            store=store,
            tagged_users=event.tagged_users,
        )

    @property
    def reply_id(self) -> int | None:
        """Message to reply to: the current one, else the dialog's latest."""
        if self.message_id:
            return self.message_id
        if self.session is not None:
            record = self.session.pending_record()
            if record is not None:
                return record.correlation_message_id or record.query.message_id
        return None

    async def send_message(self, text: str) -> int | None:
        """Send text to the chat. Delivery errors are logged, not raised."""
        return await self._send(text, None)

    async def send_reply(self, text: str) -> int | None:
        """Send text as a reply to the current message."""
        return await self._send(text, self.reply_id)

    def download_file(self, file_ref: str) -> LazyDownload:
        return self.transport.download_attachment(file_ref)

    async def start_dialog(self, name: str) -> None:
        """Start the named dialog with the sender of this event."""
        if self._orchestrator is None:
            raise RuntimeError("No dialog orchestrator bound to context")
        await self._orchestrator.start_dialog(self, name)

    def user_cache(self) -> PrefixedStore:
        """Data of the sender, scoped to the current chat."""
        return PrefixedStore(
            self._bound_store(), user_data_prefix(self.user_id, self.chat_id)
        )

    def chat_cache(self) -> PrefixedStore:
        """Data shared by everyone in the current chat."""
        return PrefixedStore(self._bound_store(), chat_data_prefix(self.chat_id))

    @property
    def tagged_user_count(self) -> int:
        return len(self.tagged_users)

    def tagged_user_cache(self, num: int) -> PrefixedStore:
        """Data of the num-th user mentioned in the message, in this chat."""
        if num < 0 or num >= len(self.tagged_users):
            raise IndexError(
                f"num {num} out of range ({len(self.tagged_users)} tagged users)"
            )
        return PrefixedStore(
            self._bound_store(), user_data_prefix(self.tagged_users[num], self.chat_id)
        )

    def _bound_store(self) -> ISessionStore:
        if self._store is None:
            raise RuntimeError("No session store bound to context")
        return self._store

    async def _send(self, text: str, reply_to: int | None) -> int | None:
        try:
            return await self.transport.send_message(
                self.chat_id, text, reply_to=reply_to
            )
        except TransportError as e:
            logger.error(
                "Failed to send message: %s",
                e,
                extra={"context": {"chat_id": self.chat_id}},
            )
            return None
