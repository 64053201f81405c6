"""Classification of inbound events against the pending query."""

from dataclasses import dataclass
from enum import Enum

from ..errors import CorruptedSessionError
from ..logging_config import dialog_context, get_logger
from ..models import (
    DialogSession,
    EditPrompt,
    EventKind,
    InboundEvent,
    Query,
    QueryKind,
)
from .keyboard import decode_button, render_keyboard

logger = get_logger(__name__)


class Verdict(str, Enum):
    """What the orchestrator should do with an event."""

    ADVANCE = "advance"  # response recorded, run the handler
    STOP = "stop"  # session changed, echo update only, no handler call
    IGNORE = "ignore"  # stale or duplicate button press, acknowledge silently
    REJECT = "reject"  # not dialog input, leave it to default handling


@dataclass
class Classification:
    verdict: Verdict
    edit: EditPrompt | None = None


class InputClassifier:
    """Validates an event against the session's pending query and records it."""

    def classify(self, session: DialogSession, event: InboundEvent) -> Classification:
        query = session.pending_query()
        if query is None:
            raise CorruptedSessionError(
                f"dialog {session.dialog_name!r} has no pending query"
            )

        # In shared chats only replies to the query message count
        if not session.is_private and (
            query.message_id is None or event.reply_to_message_id != query.message_id
        ):
            if event.kind is EventKind.CALLBACK and self._is_stale_press(query, event):
                return Classification(Verdict.IGNORE)
            return Classification(Verdict.REJECT)

        if event.kind is EventKind.CALLBACK:
            return self._classify_button(session, event)

        if event.kind is EventKind.TEXT and query.kind is QueryKind.TEXT_INPUT:
            session.record_text_response(event.payload, event.message_id)
            return Classification(Verdict.ADVANCE)

        if event.kind is EventKind.FILE and query.kind is QueryKind.FILE_INPUT:
            session.record_text_response(event.payload, event.message_id)
            return Classification(Verdict.ADVANCE)

        return Classification(Verdict.REJECT)

    @staticmethod
    def _is_stale_press(query: Query, event: InboundEvent) -> bool:
        """Button of an earlier query of this dialog."""
        press = decode_button(event.payload)
        return press is not None and press.query_name != query.name

    def _classify_button(
        self, session: DialogSession, event: InboundEvent
    ) -> Classification:
        query = session.pending_query()
        if not query.kind.has_choice_response:
            return Classification(Verdict.REJECT)

        press = decode_button(event.payload)
        if press is None or press.query_name != query.name:
            logger.debug(
                "Ignoring stale button press %r",
                event.payload,
                extra={"context": dialog_context(session)},
            )
            return Classification(Verdict.IGNORE)

        if press.is_done:
            if query.kind is QueryKind.MULTI_CHOICE:
                return Classification(Verdict.ADVANCE)
            return Classification(Verdict.IGNORE)

        if press.index >= len(query.choices):
            return Classification(Verdict.IGNORE)

        if query.kind is QueryKind.SINGLE_CHOICE:
            # A single choice answer replaces any earlier (rejected) pick
            session.clear_choices()
            session.toggle_choice(press.index)
            return Classification(Verdict.ADVANCE)

        session.toggle_choice(press.index)
        if query.message_id is None:
            return Classification(Verdict.STOP)

        return Classification(
            Verdict.STOP,
            edit=EditPrompt(
                chat_id=session.chat_id,
                message_id=query.message_id,
                text=query.prompt,
                keyboard=render_keyboard(query, session),
            ),
        )
