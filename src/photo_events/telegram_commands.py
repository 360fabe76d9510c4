"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Create a new photo event")
    DONE = TelegramCommand("done", "Finish adding photos and publish the event")
    DISABLE = TelegramCommand("disable", "Stop guest uploads for an event")
    CANCEL = TelegramCommand("cancel", "Abandon the current conversation")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_bot_command(text: str | None) -> BotCommand | None:
    """Return the bot command a message invokes, if any.

    Accepts ``/name``, ``/name@BotName`` and trailing arguments. Slash
    tokens that are not bot commands (such as ``/both``) return ``None`` so
    they reach the conversation as plain replies.
    """
    if not text or not text.startswith("/"):
        return None
    token = text.split(maxsplit=1)[0][1:].split("@", maxsplit=1)[0].lower()
    for entry in BotCommand:
        if entry.value.command == token:
            return entry
    return None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
