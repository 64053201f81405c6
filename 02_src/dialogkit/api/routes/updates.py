"""Webhook route receiving chat platform updates."""

from typing import Any

from fastapi import APIRouter, Header, HTTPException
from pydantic import BaseModel

from ...app import Application

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_updates_router(app: Application) -> APIRouter:
    """Create webhook router."""
    router = APIRouter(prefix="/api", tags=["updates"])

    @router.post("/updates", response_model=StatusResponse)
    async def receive_update(
        update: dict[str, Any],
        secret: str | None = Header(None, alias=SECRET_HEADER),
    ) -> dict:
        """Queue an update for the single update consumer."""
        expected = app.config.webhook_secret
        if expected and secret != expected:
            raise HTTPException(status_code=403, detail="Invalid secret token")

        try:
            await app.enqueue(update)
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return {"status": "ok"}

    return router
