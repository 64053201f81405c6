"""Example dialogs wired to slash commands."""

from typing import Any

from dialogkit import Application, Context, DialogBuilder, StepValidationError
from dialogkit.logging_config import get_logger

logger = get_logger(__name__)

FRUITS = ["Apple", "Orange", "Banana", "Grapes", "Melon"]


def pick_at_least_one(choices: list[int]) -> None:
    if len(choices) < 1:
        raise StepValidationError("pick at least one")


def longer_than_one(text: str) -> None:
    if len(text) < 2:
        raise StepValidationError("please write a longer response")


async def report_fruits(ctx: Context, responses: list[Any]) -> None:
    choices, reason = responses
    picked = ", ".join(FRUITS[i] for i in choices)
    await ctx.send_message(f"You picked {picked} because: {reason}")


async def report_file_header(ctx: Context, responses: list[Any]) -> None:
    async with responses[0] as file:
        header = await file.read(4)
    await ctx.send_reply(header.hex())


def build_fruit_dialog():
    return (
        DialogBuilder()
        .add_multi_choice_query("Pick your favorite", FRUITS, pick_at_least_one)
        .add_text_input_query("Why?", longer_than_one)
        .set_finalizer(report_fruits)
        .build()
    )


def build_file_dialog():
    return (
        DialogBuilder()
        .add_file_input_query("Upload a file")
        .set_finalizer(report_file_header)
        .build()
    )


async def cmd_hello(ctx: Context) -> None:
    await ctx.send_message("Hello World!")


async def cmd_start_dialog(ctx: Context) -> None:
    await ctx.start_dialog("dlg")


async def cmd_file_dialog(ctx: Context) -> None:
    await ctx.start_dialog("filedlg")


def register_demo(app: Application) -> None:
    """Register the demo dialogs and their commands."""
    app.register_dialog("dlg", build_fruit_dialog())
    app.register_dialog("filedlg", build_file_dialog())
    app.register_command("hello", cmd_hello)
    app.register_command("startdlg", cmd_start_dialog)
    app.register_command("filedlg", cmd_file_dialog)
    logger.info("Demo dialogs registered")
