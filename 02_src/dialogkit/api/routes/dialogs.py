"""Dialog inspection routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import Application
from ...errors import CorruptedSessionError


class QueryRecordResponse(BaseModel):
    """Response model for one asked query."""

    name: str
    kind: str
    prompt: str
    choices: list[str]
    message_id: int | None
    response: str | None
    selected: list[int]


class DialogSessionResponse(BaseModel):
    """Response model for a dialog session."""

    dialog: str
    user_id: int
    chat_id: int
    username: str | None
    is_private: bool
    pending_query: str | None
    queries: list[QueryRecordResponse]


class AbandonResponse(BaseModel):
    """Response model for abandon."""

    abandoned: bool


def create_dialogs_router(app: Application) -> APIRouter:
    """Create dialogs router."""
    router = APIRouter(prefix="/api/dialogs", tags=["dialogs"])

    @router.get("/{user_id}/{chat_id}", response_model=DialogSessionResponse)
    async def get_dialog(user_id: int, chat_id: int) -> dict:
        """Get the dialog in progress for a user in a chat."""
        sessions = app.orchestrator.sessions
        try:
            session = await sessions.peek(user_id, chat_id)
        except CorruptedSessionError as e:
            raise HTTPException(status_code=500, detail=str(e))

        if session is None:
            raise HTTPException(status_code=404, detail="No dialog in progress")

        return {
            "dialog": session.dialog_name,
            "user_id": session.user_id,
            "chat_id": session.chat_id,
            "username": session.username,
            "is_private": session.is_private,
            "pending_query": session.pending_query_name,
            "queries": [
                {
                    "name": record.query.name,
                    "kind": record.query.kind.value,
                    "prompt": record.query.prompt,
                    "choices": record.query.choices,
                    "message_id": record.query.message_id,
                    "response": record.text_response,
                    "selected": sorted(record.choice_selections),
                }
                for record in session.queries.values()
            ],
        }

    @router.delete("/{user_id}/{chat_id}", response_model=AbandonResponse)
    async def abandon_dialog(user_id: int, chat_id: int) -> dict:
        """Abandon the dialog in progress."""
        abandoned = await app.orchestrator.abandon(user_id, chat_id)
        if not abandoned:
            raise HTTPException(status_code=404, detail="No dialog in progress")
        return {"abandoned": True}

    return router
