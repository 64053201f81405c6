"""Button payload format and choice keyboards.

A button press carries ``"<selector>:<query name>"`` where the selector is a
0-based choice index or ``"done"``.
"""

from dataclasses import dataclass

from ..models import Button, DialogSession, Keyboard, Query, QueryKind

DONE_SELECTOR = "done"
DONE_LABEL = "Done"
CHECKED_MARK = "☒ "
UNCHECKED_MARK = "☐ "


@dataclass(frozen=True)
class ButtonPress:
    """Decoded callback payload."""

    query_name: str
    index: int | None = None  # None for the done button

    @property
    def is_done(self) -> bool:
        return self.index is None


def encode_button(selector: int | str, query_name: str) -> str:
    return f"{selector}:{query_name}"


def decode_button(data: str) -> ButtonPress | None:
    """Parse a callback payload, None if it is not one of ours."""
    selector, sep, query_name = data.partition(":")
    if not sep or not query_name:
        return None
    if selector == DONE_SELECTOR:
        return ButtonPress(query_name=query_name)
    if not selector.isdigit():
        return None
    return ButtonPress(query_name=query_name, index=int(selector))


def render_keyboard(query: Query, session: DialogSession | None = None) -> Keyboard | None:
    """Inline keyboard of a choice query, None for other kinds."""
    if query.kind is QueryKind.SINGLE_CHOICE:
        return [
            [
                Button(text=choice, data=encode_button(i, query.name))
                for i, choice in enumerate(query.choices)
            ]
        ]

    if query.kind is QueryKind.MULTI_CHOICE:
        selected: set[int] = set()
        if session is not None:
            selected, _ = session.choices_for(query.name)
        row = [
            Button(
                text=(CHECKED_MARK if i in selected else UNCHECKED_MARK) + choice,
                data=encode_button(i, query.name),
            )
            for i, choice in enumerate(query.choices)
        ]
        done = [Button(text=DONE_LABEL, data=encode_button(DONE_SELECTOR, query.name))]
        return [row, done]

    return None
