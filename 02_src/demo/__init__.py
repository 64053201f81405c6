"""Demo dialogs and commands."""

from .dialogs import build_file_dialog, build_fruit_dialog, register_demo

__all__ = ["build_file_dialog", "build_fruit_dialog", "register_demo"]
