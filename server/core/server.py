from __future__ import annotations

import logging
import socket
from typing import Optional, Tuple

from shared.chat.connection import PeerConnection
from shared.protocol.errors import ConnectionUnavailable

logger = logging.getLogger(__name__)


class ChatListener:
    """Listening socket that accepts exactly one peer within a bounded wait."""

    def __init__(self, host: str, port: int, accept_timeout: float) -> None:
        self.host = host
        self.port = port
        self.accept_timeout = accept_timeout
        self._sock: Optional[socket.socket] = None

    @property
    def address(self) -> Tuple[str, int]:
        if self._sock is None:
            return self.host, self.port
        return self._sock.getsockname()[:2]

    def start(self) -> None:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            sock.listen(1)
            sock.settimeout(self.accept_timeout)
        except OSError as exc:
            sock.close()
            raise ConnectionUnavailable(f"Couldn't create listening socket: {exc}") from exc
        self._sock = sock
        logger.info("Listening on %s:%s", self.host, self.port)

    def accept(self) -> PeerConnection:
        if self._sock is None:
            self.start()
        assert self._sock is not None
        try:
            conn, addr = self._sock.accept()
        except TimeoutError as exc:
            raise ConnectionUnavailable("Time's over") from exc
        except OSError as exc:
            raise ConnectionUnavailable(f"Couldn't accept connection: {exc}") from exc
        # the turn exchange itself never times out
        conn.settimeout(None)
        logger.info("Peer linked from %s", addr)
        return PeerConnection(conn, peername=str(addr))

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError as exc:
            logger.warning("Couldn't close listening socket: %s", exc)
        self._sock = None
