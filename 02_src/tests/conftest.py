"""Pytest configuration and fixtures."""

import itertools
import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dialogkit.errors import TransportError  # noqa: E402
from dialogkit.models import EventKind, InboundEvent  # noqa: E402
from dialogkit.transport import LazyDownload  # noqa: E402

USER_ID = 1001
CHAT_ID = 2002


class FakeTransport:
    """In-memory transport recording everything the bot sends."""

    def __init__(self):
        self._ids = itertools.count(100)
        self.sent: list[dict] = []
        self.edits: list[dict] = []
        self.callbacks: list[tuple[str, str]] = []
        self.files: dict[str, bytes] = {}
        self.downloads_opened = 0
        self.fail_sends = False
        self.closed = False

    @property
    def texts(self) -> list[str]:
        return [m["text"] for m in self.sent]

    async def send_message(self, chat_id, text, reply_to=None):
        return await self.send_prompt(chat_id, text, reply_to=reply_to)

    async def send_prompt(self, chat_id, text, keyboard=None, reply_to=None):
        if self.fail_sends:
            raise TransportError("sendMessage failed: Bad Gateway")
        message_id = next(self._ids)
        self.sent.append(
            {
                "chat_id": chat_id,
                "text": text,
                "keyboard": keyboard,
                "reply_to": reply_to,
                "message_id": message_id,
            }
        )
        return message_id

    async def edit_prompt(self, chat_id, message_id, text, keyboard=None):
        if self.fail_sends:
            raise TransportError("editMessageText failed: Bad Gateway")
        self.edits.append(
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "text": text,
                "keyboard": keyboard,
            }
        )

    async def answer_callback(self, callback_id, text=""):
        self.callbacks.append((callback_id, text))

    def download_attachment(self, file_ref):
        async def open_file():
            self.downloads_opened += 1
            if file_ref not in self.files:
                return httpx.Response(404)
            return httpx.Response(200, content=self.files[file_ref])

        return LazyDownload(open_file)

    async def get_updates(self, offset, timeout):
        return []

    async def get_chat(self, chat_id):
        return {"id": chat_id, "type": "private"}

    async def close(self):
        self.closed = True


class EventFactory:
    """Builds inbound events for one user in one chat."""

    def __init__(self, user_id=USER_ID, chat_id=CHAT_ID, is_private=True):
        self.user_id = user_id
        self.chat_id = chat_id
        self.is_private = is_private
        self._ids = itertools.count(500)

    def text(self, text, reply_to=None):
        return InboundEvent(
            kind=EventKind.TEXT,
            user_id=self.user_id,
            chat_id=self.chat_id,
            payload=text,
            message_id=next(self._ids),
            reply_to_message_id=reply_to,
            is_private=self.is_private,
        )

    def file(self, file_ref, reply_to=None):
        return InboundEvent(
            kind=EventKind.FILE,
            user_id=self.user_id,
            chat_id=self.chat_id,
            payload=file_ref,
            message_id=next(self._ids),
            reply_to_message_id=reply_to,
            is_private=self.is_private,
        )

    def press(self, data, message_id=None):
        return InboundEvent(
            kind=EventKind.CALLBACK,
            user_id=self.user_id,
            chat_id=self.chat_id,
            payload=data,
            message_id=message_id,
            reply_to_message_id=message_id,
            is_private=self.is_private,
            callback_id=f"cb{next(self._ids)}",
        )


@pytest_asyncio.fixture
async def store():
    """Create in-memory session store for testing."""
    from dialogkit.store import SqliteSessionStore

    st = SqliteSessionStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def transport():
    """Create fake transport."""
    return FakeTransport()


@pytest.fixture
def events():
    """Event factory for a private chat."""
    return EventFactory()


@pytest.fixture
def group_events():
    """Event factory for a group chat."""
    return EventFactory(chat_id=-3003, is_private=False)


@pytest.fixture
def registry():
    """Create empty dialog registry."""
    from dialogkit.dialog import DialogRegistry

    return DialogRegistry()


@pytest.fixture
def sessions(store, registry):
    """Create SessionRepository over the in-memory store."""
    from dialogkit.dialog import SessionRepository

    return SessionRepository(store, registry, ttl=3600)


@pytest.fixture
def orchestrator(transport, sessions, registry):
    """Create DialogOrchestrator for testing."""
    from dialogkit.dialog import DialogOrchestrator

    return DialogOrchestrator(transport, sessions, registry)


@pytest.fixture
def make_context(transport, orchestrator, store):
    """Factory for handler contexts."""
    from dialogkit.context import Context

    def _make(
        user_id=USER_ID,
        chat_id=CHAT_ID,
        is_private=True,
        message_id=None,
        tagged_users=None,
    ):
        return Context(
            transport=transport,
            user_id=user_id,
            chat_id=chat_id,
            message_id=message_id,
            is_private=is_private,
            orchestrator=orchestrator,
            store=store,
            tagged_users=tagged_users,
        )

    return _make
