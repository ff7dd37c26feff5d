from __future__ import annotations

import logging
import sys
from typing import Optional

from client.core import connect_to_peer
from shared.chat import ChatConsole, ChatSession
from shared.protocol.errors import ConfigError, ConnectionUnavailable
from shared.settings import Settings, load_settings

logger = logging.getLogger(__name__)


def run_client(settings: Settings, console: Optional[ChatConsole] = None) -> int:
    """Connect to the listening peer, then chat with it as the responder."""
    console = console or ChatConsole()
    try:
        connection = connect_to_peer(settings.peer_host, settings.port)
    except ConnectionUnavailable as exc:
        logger.error("No peer: %s", exc)
        console.error(exc.message)
        return 1

    with connection:
        session = ChatSession(
            connection.source,
            connection.sink,
            initiator=False,
            console=console,
            download_dir=settings.download_dir,
        )
        clean = session.run()
    return 0 if clean else 1


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    logging.basicConfig(level=settings.log_level)
    return run_client(settings)


if __name__ == "__main__":
    raise SystemExit(main())
