"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "dialogs.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_API_ENDPOINT = "https://api.telegram.org/"
DEFAULT_DIALOG_TTL = 24 * 60 * 60  # seconds


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def normalize_api_endpoint(endpoint: str) -> tuple[str, str]:
    """
    Build Bot API URL templates from a bare endpoint.

    Returns:
        (method template, file template), both formatted with token and
        method/path, e.g. ``"http://host/bot{token}/{method}"``.
    """
    if not endpoint.startswith(("http://", "https://")):
        endpoint = "http://" + endpoint
    if not endpoint.endswith("/"):
        endpoint += "/"
    return endpoint + "bot{token}/{method}", endpoint + "file/bot{token}/{path}"


@dataclass
class BotConfig:
    """Runtime settings of the bot process."""

    token: str = ""
    api_endpoint: str = DEFAULT_API_ENDPOINT
    redis_dsn: str | None = None
    db_path: PathLike | None = None
    dialog_ttl: int = DEFAULT_DIALOG_TTL
    poll_timeout: int = 30
    poll_offset: int = 0
    polling: bool = True
    webhook_secret: str | None = None

    @property
    def method_url_template(self) -> str:
        return normalize_api_endpoint(self.api_endpoint)[0]

    @property
    def file_url_template(self) -> str:
        return normalize_api_endpoint(self.api_endpoint)[1]

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Read settings from environment variables."""
        return cls(
            token=os.getenv("BOT_TOKEN", ""),
            api_endpoint=os.getenv("BOT_API_ENDPOINT", DEFAULT_API_ENDPOINT),
            redis_dsn=os.getenv("REDIS_DSN") or None,
            db_path=os.getenv("DATABASE_URL") or None,
            dialog_ttl=int(os.getenv("DIALOG_TTL_SECONDS", str(DEFAULT_DIALOG_TTL))),
            poll_timeout=int(os.getenv("POLL_TIMEOUT", "30")),
            poll_offset=int(os.getenv("POLL_OFFSET", "0")),
            polling=os.getenv("BOT_POLLING", "1").lower() not in ("0", "false", "no"),
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
        )
