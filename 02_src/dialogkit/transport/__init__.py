"""Transport module."""

from .base import ITransport
from .download import LazyDownload
from .http import HttpTransport, keyboard_markup
from .updates import get_file_ids, get_tagged_users, parse_update

__all__ = [
    "HttpTransport",
    "ITransport",
    "LazyDownload",
    "get_file_ids",
    "get_tagged_users",
    "keyboard_markup",
    "parse_update",
]
