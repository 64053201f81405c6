"""Named dialog handlers."""

from typing import TYPE_CHECKING, Awaitable, Callable, Union

from ..errors import UnknownDialogError
from ..models import DialogSession, Query
from ..models.query import _Retry

if TYPE_CHECKING:
    from ..context import Context

# Returns the next query, RETRY to ask the pending one again, or None when done
DialogHandler = Callable[
    ["Context", DialogSession], Awaitable[Union[Query, _Retry, None]]
]


class DialogRegistry:
    """Maps stable dialog names to handlers so sessions survive restarts."""

    def __init__(self):
        self._handlers: dict[str, DialogHandler] = {}

    def register(self, name: str, handler: DialogHandler) -> None:
        if not name:
            raise ValueError("Dialog name must not be empty")
        self._handlers[name] = handler

    def get(self, name: str) -> DialogHandler | None:
        return self._handlers.get(name)

    def require(self, name: str) -> DialogHandler:
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownDialogError(name)
        return handler

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers
