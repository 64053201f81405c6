"""Query-related data models."""

from dataclasses import dataclass, field
from enum import Enum


class QueryKind(str, Enum):
    """Kinds of questions a dialog can ask."""

    TEXT_INPUT = "text_input"
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    FILE_INPUT = "file_input"
    RETRY = "retry"

    @property
    def has_text_response(self) -> bool:
        return self in (QueryKind.TEXT_INPUT, QueryKind.FILE_INPUT)

    @property
    def has_choice_response(self) -> bool:
        return self in (QueryKind.SINGLE_CHOICE, QueryKind.MULTI_CHOICE)


@dataclass
class Query:
    """One question presented to the user."""

    name: str
    kind: QueryKind
    prompt: str
    choices: list[str] = field(default_factory=list)
    message_id: int | None = None  # set once the query was delivered

    def __post_init__(self):
        if self.kind is QueryKind.RETRY:
            raise ValueError("RETRY is not a query kind that can be asked")
        if self.kind.has_choice_response and not self.choices:
            raise ValueError(f"query {self.name!r} needs at least one choice")
        if not self.kind.has_choice_response and self.choices:
            raise ValueError(f"query {self.name!r} does not take choices")


class _Retry:
    """Handler result meaning "ask the pending query again"."""

    kind = QueryKind.RETRY

    def __repr__(self) -> str:
        return "RETRY"

    def __bool__(self) -> bool:
        return True


RETRY = _Retry()


def text_input_query(name: str, prompt: str) -> Query:
    return Query(name=name, kind=QueryKind.TEXT_INPUT, prompt=prompt)


def file_input_query(name: str, prompt: str) -> Query:
    return Query(name=name, kind=QueryKind.FILE_INPUT, prompt=prompt)


def single_choice_query(name: str, prompt: str, choices: list[str]) -> Query:
    return Query(
        name=name, kind=QueryKind.SINGLE_CHOICE, prompt=prompt, choices=list(choices)
    )


def multi_choice_query(name: str, prompt: str, choices: list[str]) -> Query:
    return Query(
        name=name, kind=QueryKind.MULTI_CHOICE, prompt=prompt, choices=list(choices)
    )
