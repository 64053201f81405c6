"""dialogkit: resumable multi-turn chat-bot dialogs."""

from .app import Application, IApplication
from .commands import CommandRouter
from .config import BotConfig
from .context import Context
from .dialog import (
    DialogBuilder,
    DialogHandler,
    DialogOrchestrator,
    DialogRegistry,
    HandleResult,
    InputClassifier,
    Outcome,
    PrefixStepNaming,
    SessionRepository,
    StepNaming,
)
from .errors import (
    CorruptedSessionError,
    DialogError,
    StepValidationError,
    TransportError,
    UnknownDialogError,
)
from .models import (
    RETRY,
    DialogSession,
    EventKind,
    InboundEvent,
    Query,
    QueryKind,
    QueryRecord,
)
from .store import (
    ISessionStore,
    PrefixedStore,
    RedisSessionStore,
    SqliteSessionStore,
)
from .transport import HttpTransport, ITransport, LazyDownload

__all__ = [
    # Application
    "Application",
    "IApplication",
    "BotConfig",
    "Context",
    "CommandRouter",
    # Models
    "Query",
    "QueryKind",
    "QueryRecord",
    "RETRY",
    "DialogSession",
    "EventKind",
    "InboundEvent",
    # Dialogs
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
    # Components
    "ISessionStore",
    "SqliteSessionStore",
    "RedisSessionStore",
    "PrefixedStore",
    "ITransport",
    "HttpTransport",
    "LazyDownload",
    # Errors
    "DialogError",
    "UnknownDialogError",
    "CorruptedSessionError",
    "StepValidationError",
    "TransportError",
]
