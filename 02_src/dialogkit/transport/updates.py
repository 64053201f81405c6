"""Conversion of raw Bot API updates into inbound events."""

from typing import Any

from ..models import EventKind, InboundEvent

# Message fields carrying a single uploaded file
_FILE_FIELDS = ("video", "video_note", "audio", "voice", "sticker", "document")


def get_file_ids(message: dict[str, Any]) -> list[str]:
    """File references attached to a message."""
    ids = []
    photos = message.get("photo") or []
    if photos:
        ids.append(photos[0]["file_id"])
    for name in _FILE_FIELDS:
        attachment = message.get(name)
        if attachment:
            ids.append(attachment["file_id"])
    return ids


def get_tagged_users(message: dict[str, Any]) -> list[int]:
    """Ids of users mentioned through message entities."""
    users = []
    for entity in (message.get("entities") or []) + (
        message.get("caption_entities") or []
    ):
        user = entity.get("user")
        if user:
            users.append(user["id"])
    return users


def display_name(user: dict[str, Any]) -> str:
    for key in ("username", "first_name", "last_name"):
        if user.get(key):
            return user[key]
    return f"user:{user.get('id')}"


def parse_update(update: dict[str, Any]) -> list[InboundEvent]:
    """Events contained in one update (several for multi-file messages)."""
    message = update.get("message")
    if message and message.get("from"):
        return _parse_message(message)

    callback = update.get("callback_query")
    if callback and callback.get("message"):
        return [_parse_callback(callback)]

    return []


def _parse_message(message: dict[str, Any]) -> list[InboundEvent]:
    user = message["from"]
    chat = message["chat"]
    reply = message.get("reply_to_message") or {}

    common = dict(
        user_id=user["id"],
        chat_id=chat["id"],
        message_id=message.get("message_id"),
        reply_to_message_id=reply.get("message_id"),
        is_private=chat.get("type") == "private",
        username=display_name(user),
        tagged_users=get_tagged_users(message),
    )

    text = message.get("text")
    if text:
        return [InboundEvent(kind=EventKind.TEXT, payload=text, **common)]

    return [
        InboundEvent(kind=EventKind.FILE, payload=file_id, **common)
        for file_id in get_file_ids(message)
    ]


def _parse_callback(callback: dict[str, Any]) -> InboundEvent:
    message = callback["message"]
    chat = message["chat"]
    user = callback["from"]

    return InboundEvent(
        kind=EventKind.CALLBACK,
        user_id=user["id"],
        chat_id=chat["id"],
        payload=callback.get("data") or "",
        message_id=message.get("message_id"),
        reply_to_message_id=message.get("message_id"),
        is_private=chat.get("type") == "private",
        callback_id=callback["id"],
        username=display_name(user),
    )
