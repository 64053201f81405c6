"""Slash commands and the fallback for messages outside dialogs."""

import inspect
from typing import Any, Awaitable, Callable

from .context import Context
from .logging_config import get_logger

logger = get_logger(__name__)

# callback(ctx, *args) where args are the whitespace separated words
CommandCallback = Callable[..., Awaitable[Any]]
DefaultMessageHandler = Callable[[Context, str], Awaitable[None]]


def parse_command(text: str) -> tuple[str, list[str]] | None:
    """Split ``"/name@bot arg1 arg2"`` into name and args, None if not a command."""
    if not text.startswith("/"):
        return None
    head, *args = text.split()
    name = head[1:].split("@", 1)[0]
    if not name:
        return None
    return name, args


class CommandRouter:
    """Default handling of text that does not belong to a dialog."""

    def __init__(self):
        self._commands: dict[str, CommandCallback] = {}
        self._default_handler: DefaultMessageHandler | None = None

    def register(self, name: str, callback: CommandCallback) -> None:
        self._commands[name] = callback

    def set_default_handler(self, handler: DefaultMessageHandler) -> None:
        self._default_handler = handler

    async def dispatch(self, ctx: Context, text: str) -> bool:
        """Run a command or the default handler. Returns False if nobody took it."""
        parsed = parse_command(text)
        if parsed is None:
            if self._default_handler is None:
                return False
            await self._default_handler(ctx, text)
            return True

        name, args = parsed
        callback = self._commands.get(name)
        if callback is None:
            await ctx.send_reply(f"unknown command: {name}")
            return True

        try:
            inspect.signature(callback).bind(ctx, *args)
        except TypeError:
            expected = _positional_count(callback) - 1
            await ctx.send_reply(f"expected {expected} argument(s), got {len(args)}")
            return True

        try:
            await callback(ctx, *args)
        except Exception as e:
            logger.error(
                "Command %s failed: %s",
                name,
                e,
                exc_info=True,
                extra={"context": {"chat_id": ctx.chat_id, "user_id": ctx.user_id}},
            )
            await ctx.send_reply(str(e))
        return True


def _positional_count(callback: CommandCallback) -> int:
    return sum(
        1
        for p in inspect.signature(callback).parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    )
