from __future__ import annotations

import logging
import socket

from shared.chat.connection import PeerConnection
from shared.protocol.errors import ConnectionUnavailable

logger = logging.getLogger(__name__)


def connect_to_peer(host: str, port: int) -> PeerConnection:
    """Single connection attempt to the listening peer; no retries."""
    try:
        sock = socket.create_connection((host, port))
    except socket.gaierror as exc:
        raise ConnectionUnavailable(f"Couldn't find address {host}") from exc
    except OSError as exc:
        raise ConnectionUnavailable(f"Couldn't create socket: {exc}") from exc
    logger.info("Connected to %s:%s", host, port)
    return PeerConnection(sock, peername=f"{host}:{port}")
