from __future__ import annotations

import io
from typing import Iterable, List

import pytest

from shared.chat.console import ChatConsole
from shared.protocol import MessageFramer, ProtocolDesync


class ScriptedConsole(ChatConsole):
    """Console fed from a list of keyboard lines; EOF once they run out."""

    def __init__(self, inputs: Iterable[str] = ()) -> None:
        super().__init__()
        self.inputs: List[str] = list(inputs)
        self.prompts: List[str] = []
        self.output: List[str] = []
        self.errors: List[str] = []

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.inputs:
            raise EOFError
        return self.inputs.pop(0)

    def write(self, text: str) -> None:
        self.output.append(text)

    def write_error(self, text: str) -> None:
        self.errors.append(text)


class Endpoint(io.BytesIO):
    """In-memory stream that stays readable after the session releases it."""

    released = False

    def close(self) -> None:
        self.released = True


def frame(*messages: List[str]) -> bytes:
    """Wire bytes for each message, each one closed by a sentinel."""
    sink = io.BytesIO()
    framer = MessageFramer(io.BytesIO(), sink)
    for lines in messages:
        framer.send_message(lines)
    return sink.getvalue()


def unframe(data: bytes) -> List[List[str]]:
    """Every complete message found in ``data``."""
    framer = MessageFramer(io.BytesIO(data), io.BytesIO())
    messages = []
    while True:
        try:
            messages.append(framer.receive_message().lines)
        except ProtocolDesync:
            return messages


@pytest.fixture
def scripted_console():
    return ScriptedConsole


@pytest.fixture
def endpoint():
    return Endpoint


@pytest.fixture
def wire():
    class Wire:
        frame = staticmethod(frame)
        unframe = staticmethod(unframe)

    return Wire
