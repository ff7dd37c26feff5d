from __future__ import annotations

import sys
from typing import Literal

from shared.protocol.messages import DEFAULT_PROTOCOL, Identity, ProtocolConfig

Side = Literal["local", "remote"]


class ChatConsole:
    """Keyboard + terminal hooks used by the turn loop.

    Subclass and override ``read_line`` / ``write`` / ``write_error`` to drive a
    session from something other than a terminal.
    """

    def __init__(self, config: ProtocolConfig = DEFAULT_PROTOCOL) -> None:
        self.config = config

    def render_label(self, identity: Identity, side: Side) -> str:
        """Coloured ``name[ (Busy)]> `` prompt. Display only, never sent."""
        color = self.config.your_color if side == "local" else self.config.its_color
        label = identity.name
        if identity.busy:
            label += self.config.busy_qualifier
        return f"{color}{label}> {self.config.reset_color}"

    def prompt(self, identity: Identity) -> str:
        """Show the local label and block for one keyboard line (EOFError at end of input)."""
        return self.read_line(self.render_label(identity, "local"))

    def show(self, text: str) -> None:
        self.write(text)

    def show_from(self, identity: Identity, side: Side, text: str) -> None:
        self.write(self.render_label(identity, side) + text)

    def error(self, text: str) -> None:
        self.write_error(text)

    def read_line(self, prompt: str) -> str:
        return input(prompt)

    def write(self, text: str) -> None:
        print(text, flush=True)

    def write_error(self, text: str) -> None:
        print(text, file=sys.stderr, flush=True)


__all__ = ["ChatConsole", "Side"]
