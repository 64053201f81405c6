"""Core data models for dialogkit."""

from .events import (
    Button,
    EditPrompt,
    EventKind,
    InboundEvent,
    Keyboard,
    OutboundOperation,
    SendPrompt,
)
from .query import (
    RETRY,
    Query,
    QueryKind,
    file_input_query,
    multi_choice_query,
    single_choice_query,
    text_input_query,
)
from .session import DialogSession, QueryRecord

__all__ = [
    # Queries
    "Query",
    "QueryKind",
    "RETRY",
    "text_input_query",
    "file_input_query",
    "single_choice_query",
    "multi_choice_query",
    # Sessions
    "DialogSession",
    "QueryRecord",
    # Events
    "EventKind",
    "InboundEvent",
    "Button",
    "Keyboard",
    "SendPrompt",
    "EditPrompt",
    "OutboundOperation",
]
