"""Dialog module."""

from .builder import DialogBuilder, PrefixStepNaming, StepNaming
from .classifier import Classification, InputClassifier, Verdict
from .keyboard import ButtonPress, decode_button, encode_button, render_keyboard
from .orchestrator import DialogOrchestrator, HandleResult, Outcome
from .registry import DialogHandler, DialogRegistry
from .sessions import SessionRepository

__all__ = [
    "ButtonPress",
    "Classification",
    "DialogBuilder",
    "DialogHandler",
    "DialogOrchestrator",
    "DialogRegistry",
    "HandleResult",
    "InputClassifier",
    "Outcome",
    "PrefixStepNaming",
    "SessionRepository",
    "StepNaming",
    "Verdict",
    "decode_button",
    "encode_button",
    "render_keyboard",
]
