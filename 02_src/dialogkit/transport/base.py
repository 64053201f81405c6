"""Chat platform transport contract."""

from typing import Any, Protocol

from ..models import Keyboard
from .download import LazyDownload


class ITransport(Protocol):
    """Send/edit primitives of the chat platform."""

    async def send_message(
        self, chat_id: int, text: str, reply_to: int | None = None
    ) -> int:
        """Send plain text. Returns the new message id."""
        ...

    async def send_prompt(
        self,
        chat_id: int,
        text: str,
        keyboard: Keyboard | None = None,
        reply_to: int | None = None,
    ) -> int:
        """Send a query prompt with an optional inline keyboard."""
        ...

    async def edit_prompt(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Keyboard | None = None,
    ) -> None:
        """Replace text and keyboard of a delivered prompt."""
        ...

    async def answer_callback(self, callback_id: str, text: str = "") -> None:
        """Acknowledge a button press."""
        ...

    def download_attachment(self, file_ref: str) -> LazyDownload:
        """Stream of an uploaded file, opened on first read."""
        ...

    async def get_updates(self, offset: int, timeout: int) -> list[dict[str, Any]]:
        """Long-poll for raw updates."""
        ...

    async def get_chat(self, chat_id: int) -> dict[str, Any]:
        """Chat (or user) info."""
        ...

    async def close(self) -> None:
        ...
