"""Inbound chat events and outbound message operations."""

from dataclasses import dataclass, field
from enum import Enum


class EventKind(str, Enum):
    """What the user did."""

    TEXT = "text"
    CALLBACK = "callback"  # inline button press
    FILE = "file"


@dataclass
class InboundEvent:
    """A single user action delivered by the chat platform."""

    kind: EventKind
    user_id: int
    chat_id: int
    payload: str  # message text, callback data or file reference
    message_id: int | None = None  # message carrying the event
    # For callbacks: the message the pressed button belongs to
    reply_to_message_id: int | None = None
    is_private: bool = True
    callback_id: str | None = None
    username: str | None = None
    tagged_users: list[int] = field(default_factory=list)  # mentioned user ids


@dataclass
class Button:
    """An inline keyboard button."""

    text: str
    data: str


Keyboard = list[list[Button]]


@dataclass
class SendPrompt:
    """Send a new message, usually a query."""

    chat_id: int
    text: str
    keyboard: Keyboard | None = None
    reply_to: int | None = None
    message_id: int | None = None  # filled in after delivery


@dataclass
class EditPrompt:
    """Edit an already delivered message in place."""

    chat_id: int
    message_id: int
    text: str
    keyboard: Keyboard | None = field(default=None)


OutboundOperation = SendPrompt | EditPrompt
