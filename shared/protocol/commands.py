from __future__ import annotations

import re
from enum import StrEnum
from typing import List, Optional, Tuple, Union

from .messages import Status

_PATH_SEPARATORS = re.compile(r"[\\/]")


class ChatCommand(StrEnum):
    """Slash commands understood by both peers."""

    HELP = "/help"
    CLOSE = "/close"
    ECHO = "/echo"
    SMILE = "/smile"
    LIKE = "/like"
    NAME = "/name"
    STATUS = "/status"
    FILE = "/file"


HELP_LINES: List[str] = [
    "/help: show this list",
    "/close: close the connection",
    "/echo: send the last received message",
    "/smile: send a smile",
    "/like: send a thumb up",
    "/name NAME: change your current name to NAME (??? if invalid input)",
    "/status [AVAILABLE | BUSY]: change your current status",
    "/file FILEPATH: send the file located in FILEPATH",
]

SMILE_GLYPH: List[str] = [
    " /000000\\ ",
    "|  ^  ^  |",
    "| \\____/ |",
    " \\______/ ",
]

LIKE_GLYPH: List[str] = [
    " ( ((           ",
    "  \\ =\\          ",
    " __\\_  `-\\      ",
    "(____))(  \\---- ",
    "(____)) _       ",
    "(____))         ",
    "(___))____/---- ",
]


def normalize_command(command: Union[str, ChatCommand]) -> str:
    """Convert enum/string into canonical command text."""
    return command.value if isinstance(command, ChatCommand) else str(command)


def is_command(value: str) -> bool:
    try:
        ChatCommand(value)
        return True
    except ValueError:
        return False


def split_command(line: str) -> Tuple[Optional[ChatCommand], str]:
    """Split ``line`` into its command token and the text after the first space.

    Returns ``(None, line)`` when the first word is not a known command.
    """
    token, _, argument = line.partition(" ")
    if not is_command(token):
        return None, line
    return ChatCommand(token), argument


def parse_name(argument: str, default: str) -> str:
    return argument if argument.strip() else default


def parse_status(argument: str) -> Status:
    return Status.parse(argument)


def received_filename(argument: str, fallback: str) -> str:
    """Last path segment of the sender's path, whichever separator it used."""
    name = _PATH_SEPARATORS.split(argument.strip())[-1]
    if name in ("", ".", ".."):
        return fallback
    return name


__all__ = [
    "ChatCommand",
    "HELP_LINES",
    "SMILE_GLYPH",
    "LIKE_GLYPH",
    "normalize_command",
    "is_command",
    "split_command",
    "parse_name",
    "parse_status",
    "received_filename",
]
