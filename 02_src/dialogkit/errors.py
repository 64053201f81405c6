"""Exceptions raised by the dialog engine and its collaborators."""


class DialogError(Exception):
    """Base class for dialog engine errors."""


class UnknownDialogError(DialogError):
    """No handler is registered under the requested dialog name."""

    def __init__(self, name: str):
        super().__init__(f"unknown dialog: {name}")
        self.name = name


class CorruptedSessionError(DialogError):
    """A stored session could not be decoded or is internally inconsistent."""


class StepValidationError(ValueError):
    """A step validator rejected the user's response.

    The message is shown to the user before the query is asked again.
    """


class TransportError(RuntimeError):
    """The chat platform rejected or failed a request."""
