"""Application bootstrap, lifecycle and the update feed."""

import asyncio
from typing import Any, Protocol

from .commands import (
    CommandCallback,
    CommandRouter,
    DefaultMessageHandler,
    parse_command,
)
from .config import BotConfig
from .context import Context
from .dialog import DialogHandler, DialogOrchestrator, DialogRegistry, SessionRepository
from .errors import TransportError
from .logging_config import get_logger
from .models import EventKind, InboundEvent
from .store import ISessionStore, create_session_store
from .transport import HttpTransport, ITransport, parse_update

logger = get_logger(__name__)

CALLBACK_NOT_HANDLED = "Input not handled"


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def enqueue(self, update: dict[str, Any]) -> None:
        """Queue a raw update for sequential processing."""
        ...


class Application:
    """Main application bootstrap.

    Updates from the webhook or the long-poller go through one queue and are
    processed by a single consumer, so dialog transitions in this process are
    strictly sequential.
    """

    def __init__(
        self,
        config: BotConfig | None = None,
        transport: ITransport | None = None,
        store: ISessionStore | None = None,
    ):
        self._config = config or BotConfig.from_env()
        self._transport = transport
        self._store = store
        self._registry = DialogRegistry()
        self._commands = CommandRouter()

        # Components (will be initialized in start())
        self._orchestrator: DialogOrchestrator | None = None
        self._queue: asyncio.Queue | None = None
        self._consumer_task: asyncio.Task | None = None
        self._poller_task: asyncio.Task | None = None
        self._running = False

    def register_dialog(self, name: str, handler: DialogHandler) -> None:
        self._registry.register(name, handler)

    def register_command(self, name: str, callback: CommandCallback) -> None:
        self._commands.register(name, callback)

    def set_default_handler(self, handler: DefaultMessageHandler) -> None:
        self._commands.set_default_handler(handler)

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Session store (no dependencies)
        if self._store is None:
            self._store = create_session_store(self._config)
        await self._store.init()
        logger.info("Session store initialized")

        # 2. Transport
        if self._transport is None:
            self._transport = HttpTransport(
                self._config.token,
                self._config.method_url_template,
                self._config.file_url_template,
            )
        logger.info("Transport initialized")

        # 3. Orchestrator (depends on Store, Transport, Registry)
        sessions = SessionRepository(
            self._store, self._registry, ttl=self._config.dialog_ttl
        )
        self._orchestrator = DialogOrchestrator(
            self._transport, sessions, self._registry
        )
        logger.info("Orchestrator initialized with dialogs %s", self._registry.names())

        # 4. Update feed
        self._queue = asyncio.Queue()
        self._running = True
        self._consumer_task = asyncio.create_task(self._consume())
        if self._config.polling:
            self._poller_task = asyncio.create_task(self._poll())
            logger.info("Long polling started")
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._running = False
        for task in (self._poller_task, self._consumer_task):
            if task:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._poller_task = None
        self._consumer_task = None

        if self._transport:
            await self._transport.close()
        if self._store:
            await self._store.close()
            logger.info("Session store closed")

    async def enqueue(self, update: dict[str, Any]) -> None:
        """Queue a raw update for sequential processing."""
        if not self._running or self._queue is None:
            raise RuntimeError("Application not started")
        await self._queue.put(update)

    async def join(self) -> None:
        """Wait until every queued update was processed."""
        if self._queue is not None:
            await self._queue.join()

    async def process_update(self, update: dict[str, Any]) -> None:
        """Handle every event contained in a raw update."""
        for event in parse_update(update):
            await self.handle_event(event)

    async def handle_event(self, event: InboundEvent) -> None:
        """Route commands first, then the dialog of the event, then default handling."""
        ctx = Context.from_event(
            self.transport, event, orchestrator=self.orchestrator, store=self.store
        )

        # Commands are never dialog answers, so a running dialog can be restarted
        if event.kind is EventKind.TEXT and parse_command(event.payload) is not None:
            await self._commands.dispatch(ctx, event.payload)
            return

        result = await self.orchestrator.handle_event(event, ctx)

        if event.kind is EventKind.CALLBACK:
            await self._answer_callback(
                event, "" if result.handled else CALLBACK_NOT_HANDLED
            )
            return

        if result.handled:
            return

        ctx.session = None
        if event.kind is EventKind.TEXT:
            await self._commands.dispatch(ctx, event.payload)
        else:
            logger.debug(
                "Dropping file outside of a dialog",
                extra={"context": {"chat_id": event.chat_id, "user_id": event.user_id}},
            )

    async def _answer_callback(self, event: InboundEvent, text: str) -> None:
        if not event.callback_id:
            return
        try:
            await self.transport.answer_callback(event.callback_id, text)
        except TransportError as e:
            logger.error("Callback %r returned error: %s", event.payload, e)

    async def _consume(self) -> None:
        """Process queued updates one at a time."""
        while self._running:
            try:
                update = await self._queue.get()
                try:
                    await self.process_update(update)
                finally:
                    self._queue.task_done()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Update processing error: %s", e, exc_info=True)

    async def _poll(self) -> None:
        """Long-poll the Bot API and feed the queue."""
        offset = self._config.poll_offset
        while self._running:
            try:
                updates = await self.transport.get_updates(
                    offset, self._config.poll_timeout
                )
                for update in updates:
                    offset = max(offset, update["update_id"] + 1)
                    await self._queue.put(update)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Polling error: %s", e, exc_info=True)
                await asyncio.sleep(1)

    @property
    def config(self) -> BotConfig:
        return self._config

    @property
    def transport(self) -> ITransport:
        """Get transport instance."""
        if not self._transport:
            raise RuntimeError("Application not started")
        return self._transport

    @property
    def store(self) -> ISessionStore:
        """Get session store instance."""
        if not self._store:
            raise RuntimeError("Application not started")
        return self._store

    @property
    def orchestrator(self) -> DialogOrchestrator:
        """Get dialog orchestrator instance."""
        if not self._orchestrator:
            raise RuntimeError("Application not started")
        return self._orchestrator
