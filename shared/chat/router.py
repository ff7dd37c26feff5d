from __future__ import annotations

from collections.abc import Callable
from typing import Dict, Generic, Optional, Tuple, TypeVar

from shared.protocol.commands import ChatCommand, normalize_command, split_command

T = TypeVar("T")

Handler = Callable[[str, str], T]


class CommandRouter(Generic[T]):
    """Maps slash commands to handlers, with a fallback for plain text.

    Handlers receive ``(argument, line)``: the text after the command token and
    the whole line the token came from.
    """

    def __init__(self, fallback: Handler[T]) -> None:
        self._handlers: Dict[str, Handler[T]] = {}
        self._fallback = fallback

    def register(self, command: ChatCommand, handler: Handler[T]) -> None:
        self._handlers[normalize_command(command)] = handler

    def resolve(self, line: str) -> Tuple[Optional[ChatCommand], Handler[T], str]:
        command, argument = split_command(line)
        handler = self._handlers.get(command.value) if command else None
        if handler is None:
            return None, self._fallback, line
        return command, handler, argument
