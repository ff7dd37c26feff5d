from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Optional

logger = logging.getLogger(__name__)


def is_usable(endpoint: Any) -> bool:
    """An endpoint is usable when it exists and has not been closed."""
    return endpoint is not None and not getattr(endpoint, "closed", False)


@dataclass
class PeerConnection:
    """A connected socket exposed as a byte source + byte sink pair."""

    sock: socket.socket
    peername: str = ""
    source: Optional[BinaryIO] = field(default=None, init=False)
    sink: Optional[BinaryIO] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if not self.peername:
            try:
                self.peername = str(self.sock.getpeername())
            except OSError:
                self.peername = "unknown"
        self.source = self.sock.makefile("rb")
        self.sink = self.sock.makefile("wb")

    def close(self) -> None:
        for endpoint in (self.source, self.sink):
            if endpoint is None:
                continue
            try:
                endpoint.close()
            except OSError as exc:
                logger.debug("Error closing stream for %s: %s", self.peername, exc)
        try:
            self.sock.close()
        except OSError as exc:
            logger.warning("Couldn't close connection socket: %s", exc)
        logger.info("Connection to %s closed", self.peername)

    def __enter__(self) -> "PeerConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
