"""Tests for Application."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from demo import register_demo
from dialogkit.app import CALLBACK_NOT_HANDLED, Application
from dialogkit.config import BotConfig
from dialogkit.errors import TransportError
from dialogkit.store import SqliteSessionStore

from conftest import CHAT_ID, USER_ID, FakeTransport


def message(text, message_id=10, user_id=USER_ID, chat_id=CHAT_ID, update_id=1):
    return {
        "update_id": update_id,
        "message": {
            "message_id": message_id,
            "from": {"id": user_id, "username": "ann"},
            "chat": {"id": chat_id, "type": "private"},
            "text": text,
        },
    }


def press(data, message_id, callback_id="cb-1", update_id=2):
    return {
        "update_id": update_id,
        "callback_query": {
            "id": callback_id,
            "from": {"id": USER_ID},
            "data": data,
            "message": {
                "message_id": message_id,
                "chat": {"id": CHAT_ID, "type": "private"},
            },
        },
    }


@pytest_asyncio.fixture
async def app():
    """Started application with demo dialogs and a fake transport."""
    application = Application(
        BotConfig(polling=False),
        transport=FakeTransport(),
        store=SqliteSessionStore(":memory:"),
    )
    register_demo(application)
    await application.start()
    yield application
    await application.stop()


class TestApplicationStart:
    """Tests for Application.start()."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self, app):
        """Test that start initializes all components."""
        assert app.store is not None
        assert app.transport is not None
        assert app.orchestrator is not None
        assert app._consumer_task is not None
        assert app._poller_task is None

    @pytest.mark.asyncio
    async def test_start_wires_orchestrator(self, app):
        """Test that the orchestrator shares the store and transport."""
        assert app.orchestrator._transport is app.transport
        assert app.orchestrator.sessions._store is app.store

    @pytest.mark.asyncio
    async def test_start_creates_database_tables(self, app):
        """Test that start creates database tables."""
        async with app.store._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ) as cursor:
            tables = [row[0] for row in await cursor.fetchall()]
            assert "sessions" in tables

    def test_components_unavailable_before_start(self):
        """Test that properties raise before start."""
        application = Application(BotConfig(polling=False))
        with pytest.raises(RuntimeError):
            application.orchestrator


class TestApplicationStop:
    """Tests for Application.stop()."""

    @pytest.mark.asyncio
    async def test_stop_closes_components(self):
        """Test that stop cancels tasks and closes transport and store."""
        transport = FakeTransport()
        store = SqliteSessionStore(":memory:")
        application = Application(BotConfig(polling=False), transport, store)
        await application.start()
        consumer = application._consumer_task

        await application.stop()

        assert consumer.done()
        assert transport.closed
        assert store._conn is None

    @pytest.mark.asyncio
    async def test_enqueue_before_start_raises(self):
        application = Application(BotConfig(polling=False))
        with pytest.raises(RuntimeError, match="not started"):
            await application.enqueue(message("/hello"))


class TestProcessUpdate:
    """Tests for update routing."""

    @pytest.mark.asyncio
    async def test_command(self, app):
        await app.process_update(message("/hello"))

        assert app.transport.texts == ["Hello World!"]
        assert app.transport.sent[0]["reply_to"] is None

    @pytest.mark.asyncio
    async def test_unknown_command(self, app):
        await app.process_update(message("/nope", message_id=33))

        assert app.transport.texts == ["unknown command: nope"]
        assert app.transport.sent[0]["reply_to"] == 33

    @pytest.mark.asyncio
    async def test_plain_text_without_default_handler_dropped(self, app):
        await app.process_update(message("just chatting"))

        assert app.transport.sent == []

    @pytest.mark.asyncio
    async def test_default_handler(self, app):
        seen = []

        async def echo(ctx, text):
            seen.append(text)

        app.set_default_handler(echo)
        await app.process_update(message("just chatting"))

        assert seen == ["just chatting"]

    @pytest.mark.asyncio
    async def test_dialog_through_updates(self, app):
        """Test the demo fruit dialog end to end."""
        transport = app.transport
        await app.process_update(message("/startdlg"))
        prompt_id = transport.sent[-1]["message_id"]
        assert transport.texts[-1] == "Pick your favorite"

        await app.process_update(press("1:Q0", prompt_id, callback_id="a"))
        await app.process_update(press("done:Q0", prompt_id, callback_id="b"))
        await app.process_update(message("sweet", message_id=11))

        assert transport.texts[-1] == "You picked Orange because: sweet"
        assert transport.callbacks == [("a", ""), ("b", "")]
        assert not await app.orchestrator.sessions.exists(USER_ID, CHAT_ID)

    @pytest.mark.asyncio
    async def test_commands_work_while_choice_pending(self, app):
        """Test that text not matching the pending query reaches commands."""
        await app.process_update(message("/startdlg"))

        await app.process_update(message("/hello", message_id=11))

        assert app.transport.texts[-1] == "Hello World!"
        assert await app.orchestrator.sessions.exists(USER_ID, CHAT_ID)

    @pytest.mark.asyncio
    async def test_commands_not_recorded_as_text_answer(self, app):
        """Test that a command sent while a text step is pending runs as a command."""
        transport = app.transport
        await app.process_update(message("/startdlg"))
        prompt_id = transport.sent[-1]["message_id"]
        await app.process_update(press("0:Q0", prompt_id, callback_id="a"))
        await app.process_update(press("done:Q0", prompt_id, callback_id="b"))
        assert transport.texts[-1] == "Why?"

        await app.process_update(message("/hello", message_id=11))

        assert transport.texts[-1] == "Hello World!"
        session = await app.orchestrator.sessions.peek(USER_ID, CHAT_ID)
        assert session.pending_query_name == "Q1"
        assert session.pending_record().text_response is None

        await app.process_update(message("juicy", message_id=12))
        assert transport.texts[-1] == "You picked Apple because: juicy"

    @pytest.mark.asyncio
    async def test_command_restarts_dialog_at_text_step(self, app):
        transport = app.transport
        await app.process_update(message("/startdlg"))
        prompt_id = transport.sent[-1]["message_id"]
        await app.process_update(press("2:Q0", prompt_id, callback_id="a"))
        await app.process_update(press("done:Q0", prompt_id, callback_id="b"))
        assert transport.texts[-1] == "Why?"

        await app.process_update(message("/startdlg", message_id=11))

        assert transport.texts[-1] == "Pick your favorite"
        session = await app.orchestrator.sessions.peek(USER_ID, CHAT_ID)
        assert session.pending_query_name == "Q0"

    @pytest.mark.asyncio
    async def test_unhandled_callback_acknowledged(self, app):
        await app.process_update(press("0:Q0", 999))

        assert app.transport.callbacks == [("cb-1", CALLBACK_NOT_HANDLED)]

    @pytest.mark.asyncio
    async def test_callback_ack_failure_logged(self, app):
        """Test that a failed acknowledgement does not break processing."""
        app.transport.answer_callback = AsyncMock(side_effect=TransportError("gone"))

        await app.process_update(press("0:Q0", 999))

        app.transport.answer_callback.assert_awaited_once_with(
            "cb-1", CALLBACK_NOT_HANDLED
        )

    @pytest.mark.asyncio
    async def test_file_outside_dialog_dropped(self, app):
        update = {
            "message": {
                "message_id": 5,
                "from": {"id": USER_ID},
                "chat": {"id": CHAT_ID, "type": "private"},
                "document": {"file_id": "doc"},
            }
        }

        await app.process_update(update)

        assert app.transport.sent == []


class TestQueue:
    """Tests for the update queue."""

    @pytest.mark.asyncio
    async def test_enqueue_processes_in_order(self, app):
        await app.enqueue(message("/hello", update_id=1))
        await app.enqueue(message("/nope", update_id=2))

        await asyncio.wait_for(app.join(), timeout=5)

        assert app.transport.texts == ["Hello World!", "unknown command: nope"]

    @pytest.mark.asyncio
    async def test_consumer_survives_failing_update(self, app):
        await app.enqueue({"message": {"from": {"id": 1}}})
        await app.enqueue(message("/hello"))

        await asyncio.wait_for(app.join(), timeout=5)

        assert app.transport.texts == ["Hello World!"]


class TestPolling:
    """Tests for long polling."""

    @pytest.mark.asyncio
    async def test_poller_feeds_queue_and_advances_offset(self):
        offsets = []

        class PollingTransport(FakeTransport):
            def __init__(self):
                super().__init__()
                self.batches = [[message("/hello", update_id=7)]]

            async def get_updates(self, offset, timeout):
                offsets.append(offset)
                if self.batches:
                    return self.batches.pop(0)
                await asyncio.sleep(0.01)
                return []

        transport = PollingTransport()
        application = Application(
            BotConfig(polling=True, poll_timeout=0, poll_offset=3),
            transport=transport,
            store=SqliteSessionStore(":memory:"),
        )
        register_demo(application)
        await application.start()
        try:
            for _ in range(100):
                if transport.texts:
                    break
                await asyncio.sleep(0.01)
        finally:
            await application.stop()

        assert transport.texts == ["Hello World!"]
        assert offsets[0] == 3
        assert offsets[1] == 8
