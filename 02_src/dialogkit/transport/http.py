"""Bot API transport over HTTP."""

from typing import Any

import httpx

from ..errors import TransportError
from ..logging_config import get_logger
from ..models import Keyboard
from .download import LazyDownload

logger = get_logger(__name__)


def keyboard_markup(keyboard: Keyboard) -> dict:
    """Inline keyboard in Bot API JSON form."""
    return {
        "inline_keyboard": [
            [{"text": button.text, "callback_data": button.data} for button in row]
            for row in keyboard
        ]
    }


class HttpTransport:
    """Telegram-style Bot API client."""

    def __init__(
        self,
        token: str,
        method_url_template: str,
        file_url_template: str,
        client: httpx.AsyncClient | None = None,
    ):
        if not token:
            raise ValueError("Bot token not set")

        self._token = token
        self._method_url_template = method_url_template
        self._file_url_template = file_url_template
        self._client = client or httpx.AsyncClient(timeout=30.0)

    async def close(self) -> None:
        await self._client.aclose()

    async def send_message(
        self, chat_id: int, text: str, reply_to: int | None = None
    ) -> int:
        """Send plain text. Returns the new message id."""
        return await self.send_prompt(chat_id, text, reply_to=reply_to)

    async def send_prompt(
        self,
        chat_id: int,
        text: str,
        keyboard: Keyboard | None = None,
        reply_to: int | None = None,
    ) -> int:
        """Send a query prompt with an optional inline keyboard."""
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if keyboard:
            payload["reply_markup"] = keyboard_markup(keyboard)
        if reply_to:
            payload["reply_to_message_id"] = reply_to

        result = await self._call("sendMessage", payload)
        return result["message_id"]

    async def edit_prompt(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Keyboard | None = None,
    ) -> None:
        """Replace text and keyboard of a delivered prompt."""
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
        }
        if keyboard:
            payload["reply_markup"] = keyboard_markup(keyboard)

        await self._call("editMessageText", payload)

    async def answer_callback(self, callback_id: str, text: str = "") -> None:
        """Acknowledge a button press."""
        payload: dict[str, Any] = {"callback_query_id": callback_id}
        if text:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

    async def get_updates(self, offset: int, timeout: int) -> list[dict[str, Any]]:
        """Long-poll for raw updates."""
        return await self._call(
            "getUpdates",
            {"offset": offset, "timeout": timeout},
            timeout=timeout + 10,
        )

    async def get_chat(self, chat_id: int) -> dict[str, Any]:
        return await self._call("getChat", {"chat_id": chat_id})

    def download_attachment(self, file_ref: str) -> LazyDownload:
        """Stream of an uploaded file; nothing is requested before the first read."""

        async def open_file() -> httpx.Response:
            file_info = await self._call("getFile", {"file_id": file_ref})
            url = self._file_url_template.format(
                token=self._token, path=file_info["file_path"]
            )
            request = self._client.build_request("GET", url)
            try:
                return await self._client.send(request, stream=True)
            except httpx.HTTPError as e:
                # Keep the URL (it contains the token) out of the message
                raise TransportError(f"download failed: {type(e).__name__}") from None

        return LazyDownload(open_file)

    async def _call(
        self, method: str, payload: dict[str, Any], timeout: float | None = None
    ) -> Any:
        url = self._method_url_template.format(token=self._token, method=method)
        kwargs: dict[str, Any] = {"json": payload}
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await self._client.post(url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} failed: {type(e).__name__}") from None

        try:
            data = response.json()
        except ValueError:
            raise TransportError(
                f"{method} failed: {response.status_code} {response.reason_phrase}"
            ) from None

        if not data.get("ok"):
            description = data.get("description", response.status_code)
            raise TransportError(f"{method} failed: {description}")

        logger.debug("Bot API call %s succeeded", method)
        return data["result"]
