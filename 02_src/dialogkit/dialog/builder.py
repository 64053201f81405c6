"""Declarative step-by-step dialogs."""

import dataclasses
import inspect
from typing import TYPE_CHECKING, Any, Callable, Protocol

from ..errors import DialogError
from ..logging_config import dialog_context, get_logger
from ..models import (
    RETRY,
    DialogSession,
    Query,
    QueryKind,
    file_input_query,
    multi_choice_query,
    single_choice_query,
    text_input_query,
)
from ..transport import LazyDownload
from .registry import DialogHandler

if TYPE_CHECKING:
    from ..context import Context

logger = get_logger(__name__)

# validator(response) or validator(response, previous_responses); may be async.
# Raising ValueError (e.g. StepValidationError) rejects the response.
Validator = Callable[..., Any]
# finalizer(ctx, responses); may be async
Finalizer = Callable[["Context", list[Any]], Any]


class StepNaming(Protocol):
    """Maps step positions to query names and back."""

    def name_for(self, index: int) -> str:
        ...

    def index_of(self, name: str) -> int | None:
        ...


class PrefixStepNaming:
    """Step `i` is asked as query ``f"{prefix}{i}"``."""

    def __init__(self, prefix: str = "Q"):
        self.prefix = prefix

    def name_for(self, index: int) -> str:
        return f"{self.prefix}{index}"

    def index_of(self, name: str) -> int | None:
        if not name.startswith(self.prefix):
            return None
        suffix = name[len(self.prefix):]
        return int(suffix) if suffix.isdigit() else None


@dataclasses.dataclass
class DialogStep:
    query: Query
    validator: Validator | None = None


class DialogBuilder:
    """Compiles a list of question steps into a dialog handler.

    The handler keeps no state of its own: the current step is recovered from
    the pending query name of the session.

    Args:
        naming: Strategy turning step positions into query names.
        pass_previous: Also pass the list of preceding responses to validators.
    """

    def __init__(self, naming: StepNaming | None = None, pass_previous: bool = False):
        self._naming = naming or PrefixStepNaming()
        self._pass_previous = pass_previous
        self._steps: list[DialogStep] = []
        self._finalizer: Finalizer | None = None

    def add_text_input_query(
        self, prompt: str, validator: Validator | None = None
    ) -> "DialogBuilder":
        return self._add(text_input_query(self._next_name(), prompt), validator)

    def add_file_input_query(
        self, prompt: str, validator: Validator | None = None
    ) -> "DialogBuilder":
        return self._add(file_input_query(self._next_name(), prompt), validator)

    def add_single_choice_query(
        self, prompt: str, choices: list[str], validator: Validator | None = None
    ) -> "DialogBuilder":
        return self._add(
            single_choice_query(self._next_name(), prompt, choices), validator
        )

    def add_multi_choice_query(
        self, prompt: str, choices: list[str], validator: Validator | None = None
    ) -> "DialogBuilder":
        return self._add(
            multi_choice_query(self._next_name(), prompt, choices), validator
        )

    def set_finalizer(self, finalizer: Finalizer) -> "DialogBuilder":
        self._finalizer = finalizer
        return self

    def build(self) -> DialogHandler:
        if not self._steps:
            raise ValueError("Dialog needs at least one step")

        steps = list(self._steps)
        naming = self._naming
        finalizer = self._finalizer
        pass_previous = self._pass_previous

        async def handler(ctx: "Context", session: DialogSession) -> Any:
            pending = session.pending_query()
            if pending is None:
                return dataclasses.replace(steps[0].query)

            index = naming.index_of(pending.name)
            if index is None or not 0 <= index < len(steps):
                raise DialogError(f"query {pending.name!r} is not a step of this dialog")

            validator = steps[index].validator
            if validator is not None:
                responses = _collect_responses(steps[: index + 1], ctx, session)
                try:
                    if pass_previous:
                        result = validator(responses[index], responses[:index])
                    else:
                        result = validator(responses[index])
                    if inspect.isawaitable(result):
                        await result
                except ValueError as e:
                    logger.info(
                        "Step %s rejected response: %s",
                        index,
                        e,
                        extra={"context": dialog_context(session)},
                    )
                    await ctx.send_message(str(e))
                    return RETRY
                finally:
                    await _close_downloads(responses)

            if index + 1 < len(steps):
                return dataclasses.replace(steps[index + 1].query)

            if finalizer is not None:
                # Fresh downloads, the validator may have consumed its own
                responses = _collect_responses(steps, ctx, session)
                try:
                    result = finalizer(ctx, responses)
                    if inspect.isawaitable(result):
                        await result
                finally:
                    await _close_downloads(responses)
            return None

        return handler

    def _next_name(self) -> str:
        return self._naming.name_for(len(self._steps))

    def _add(self, query: Query, validator: Validator | None) -> "DialogBuilder":
        self._steps.append(DialogStep(query=query, validator=validator))
        return self


def _step_response(step: DialogStep, ctx: "Context", session: DialogSession) -> Any:
    """Response of a step in the form its validator expects."""
    name = step.query.name
    kind = step.query.kind

    if kind is QueryKind.TEXT_INPUT:
        text, _ = session.response_for(name)
        return text

    if kind is QueryKind.FILE_INPUT:
        file_ref, ok = session.response_for(name)
        return ctx.download_file(file_ref) if ok else None

    choices, _ = session.choices_for(name)
    if kind is QueryKind.SINGLE_CHOICE:
        return min(choices) if choices else None
    return sorted(choices)


def _collect_responses(
    steps: list[DialogStep], ctx: "Context", session: DialogSession
) -> list[Any]:
    return [_step_response(step, ctx, session) for step in steps]


async def _close_downloads(responses: list[Any]) -> None:
    for response in responses:
        if isinstance(response, LazyDownload):
            await response.aclose()
