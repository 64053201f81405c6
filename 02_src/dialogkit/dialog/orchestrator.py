"""Dialog orchestrator: load, classify, run handler, persist."""

from dataclasses import dataclass, field
from enum import Enum

from ..context import Context
from ..errors import CorruptedSessionError, TransportError
from ..logging_config import dialog_context, get_logger
from ..models import (
    RETRY,
    DialogSession,
    EditPrompt,
    InboundEvent,
    OutboundOperation,
    Query,
    SendPrompt,
)
from ..transport import ITransport
from .classifier import InputClassifier, Verdict
from .keyboard import render_keyboard
from .registry import DialogHandler, DialogRegistry
from .sessions import SessionRepository

logger = get_logger(__name__)


class Outcome(str, Enum):
    """How an inbound event was dealt with."""

    NOT_HANDLED = "not_handled"  # not dialog input, use default handling
    HANDLED = "handled"
    FAILED = "failed"  # handler raised, dialog abandoned


@dataclass
class HandleResult:
    outcome: Outcome
    operations: list[OutboundOperation] = field(default_factory=list)

    @property
    def handled(self) -> bool:
        return self.outcome is not Outcome.NOT_HANDLED


class DialogOrchestrator:
    """Drives dialogs one inbound event at a time.

    The store is the only source of truth: the session is loaded fresh for
    every event and either saved or deleted before returning. Message delivery
    is best-effort; a failed send never rolls back the saved state.
    """

    def __init__(
        self,
        transport: ITransport,
        sessions: SessionRepository,
        registry: DialogRegistry,
        classifier: InputClassifier | None = None,
    ):
        self._transport = transport
        self._sessions = sessions
        self._registry = registry
        self._classifier = classifier or InputClassifier()

    @property
    def sessions(self) -> SessionRepository:
        return self._sessions

    async def handle_event(
        self, event: InboundEvent, ctx: Context | None = None
    ) -> HandleResult:
        """Feed an event to the dialog of its (user, chat), if there is one."""
        loaded = await self._sessions.load(event.user_id, event.chat_id)
        if loaded is None:
            return HandleResult(Outcome.NOT_HANDLED)
        session, handler = loaded

        if ctx is None:
            ctx = Context.from_event(
                self._transport, event, orchestrator=self, store=self._sessions.store
            )
        ctx.session = session

        try:
            classification = self._classifier.classify(session, event)
        except CorruptedSessionError as e:
            logger.error(
                "Dropping inconsistent dialog: %s",
                e,
                extra={"context": dialog_context(session)},
            )
            await self._sessions.delete(session.user_id, session.chat_id)
            return HandleResult(Outcome.NOT_HANDLED)

        if classification.verdict is Verdict.REJECT:
            return HandleResult(Outcome.NOT_HANDLED)

        if classification.verdict is Verdict.IGNORE:
            return HandleResult(Outcome.HANDLED)

        if classification.verdict is Verdict.STOP:
            operations = [classification.edit] if classification.edit else []
            await self._deliver(session, operations)
            await self._sessions.save(session)
            return HandleResult(Outcome.HANDLED, operations)

        return await self._run_handler(ctx, session, handler)

    async def start_dialog(self, ctx: Context, name: str) -> HandleResult:
        """Start dialog `name` for the context's user, replacing any running one.

        Raises:
            UnknownDialogError: no handler is registered under `name`.
        """
        handler = self._registry.require(name)
        session = DialogSession(
            user_id=ctx.user_id,
            chat_id=ctx.chat_id,
            dialog_name=name,
            is_private=ctx.is_private,
            username=ctx.username,
        )
        ctx.session = session
        logger.info("Starting dialog", extra={"context": dialog_context(session)})
        return await self._run_handler(ctx, session, handler)

    async def abandon(self, user_id: int, chat_id: int) -> bool:
        """Delete the dialog of a (user, chat). Returns False if there was none."""
        if not await self._sessions.exists(user_id, chat_id):
            return False
        await self._sessions.delete(user_id, chat_id)
        logger.info(
            "Dialog abandoned",
            extra={"context": {"user_id": user_id, "chat_id": chat_id}},
        )
        return True

    async def _run_handler(
        self, ctx: Context, session: DialogSession, handler: DialogHandler
    ) -> HandleResult:
        try:
            result = await handler(ctx, session)
            if not (result is None or result is RETRY or isinstance(result, Query)):
                raise TypeError(f"dialog handler returned {type(result).__name__}")
        except Exception:
            # A half-updated session must not stay in the store
            logger.exception(
                "Dialog handler failed", extra={"context": dialog_context(session)}
            )
            await self._sessions.delete(session.user_id, session.chat_id)
            return HandleResult(Outcome.FAILED)

        if result is RETRY:
            if session.pending_query_name is None:
                logger.warning(
                    "Dialog asked to retry before its first query",
                    extra={"context": dialog_context(session)},
                )
                return HandleResult(Outcome.HANDLED)
            await self._sessions.save(session)
            return HandleResult(Outcome.HANDLED)

        if result is None:
            await self._sessions.delete(session.user_id, session.chat_id)
            logger.info("Dialog completed", extra={"context": dialog_context(session)})
            return HandleResult(Outcome.HANDLED)

        session.advance_to(result)
        prompt = SendPrompt(
            chat_id=session.chat_id,
            text=result.prompt,
            keyboard=render_keyboard(result, session),
        )
        await self._deliver(session, [prompt])
        await self._sessions.save(session)
        return HandleResult(Outcome.HANDLED, [prompt])

    async def _deliver(
        self, session: DialogSession, operations: list[OutboundOperation]
    ) -> None:
        for op in operations:
            try:
                if isinstance(op, SendPrompt):
                    op.message_id = await self._transport.send_prompt(
                        op.chat_id, op.text, keyboard=op.keyboard, reply_to=op.reply_to
                    )
                    session.set_delivered(op.message_id)
                elif isinstance(op, EditPrompt):
                    await self._transport.edit_prompt(
                        op.chat_id, op.message_id, op.text, keyboard=op.keyboard
                    )
            except TransportError as e:
                logger.error(
                    "Failed to deliver dialog message: %s",
                    e,
                    extra={"context": dialog_context(session)},
                )
