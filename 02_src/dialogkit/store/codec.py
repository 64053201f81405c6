"""JSON encoding of dialog sessions."""

import json

from ..errors import CorruptedSessionError
from ..models import DialogSession, Query, QueryKind, QueryRecord


def encode_session(session: DialogSession) -> bytes:
    """Serialize a session to UTF-8 JSON."""
    data = {
        "name": session.dialog_name,
        "user_id": session.user_id,
        "chat_id": session.chat_id,
        "username": session.username,
        "is_private": session.is_private,
        "pending_query": session.pending_query_name,
        "queries": {
            name: {
                "query": {
                    "name": record.query.name,
                    "kind": record.query.kind.value,
                    "prompt": record.query.prompt,
                    "choices": record.query.choices,
                    "message_id": record.query.message_id,
                },
                "response": record.text_response,
                "choices": sorted(record.choice_selections),
                "reply_id": record.correlation_message_id,
            }
            for name, record in session.queries.items()
        },
    }
    return json.dumps(data, ensure_ascii=False).encode("utf-8")


def decode_session(raw: bytes | str) -> DialogSession:
    """Deserialize a session, raising CorruptedSessionError on bad data."""
    try:
        data = json.loads(raw)
        queries = {}
        for name, item in data["queries"].items():
            q = item["query"]
            query = Query(
                name=q["name"],
                kind=QueryKind(q["kind"]),
                prompt=q["prompt"],
                choices=list(q.get("choices") or []),
                message_id=q.get("message_id"),
            )
            queries[name] = QueryRecord(
                query=query,
                text_response=item.get("response"),
                choice_selections={int(i) for i in item.get("choices") or []},
                correlation_message_id=item.get("reply_id"),
            )
        session = DialogSession(
            user_id=int(data["user_id"]),
            chat_id=int(data["chat_id"]),
            dialog_name=data["name"],
            is_private=bool(data["is_private"]),
            username=data.get("username"),
            pending_query_name=data.get("pending_query"),
            queries=queries,
        )
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise CorruptedSessionError(f"cannot decode dialog session: {e}") from e

    if (
        session.pending_query_name is not None
        and session.pending_query_name not in session.queries
    ):
        raise CorruptedSessionError(
            f"pending query {session.pending_query_name!r} missing from session"
        )
    return session
