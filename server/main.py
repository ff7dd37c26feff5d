from __future__ import annotations

import logging
import sys
from typing import Optional

from server.core import ChatListener
from shared.chat import ChatConsole, ChatSession
from shared.protocol.errors import ConfigError, ConnectionUnavailable
from shared.settings import Settings, load_settings

logger = logging.getLogger(__name__)


def run_server(settings: Settings, console: Optional[ChatConsole] = None) -> int:
    """Wait for one peer, then chat with it as the initiator."""
    console = console or ChatConsole()
    listener = ChatListener(settings.bind_host, settings.port, settings.accept_timeout)
    try:
        listener.start()
        console.show("Listening...")
        connection = listener.accept()
        console.show("Linked!")
    except ConnectionUnavailable as exc:
        logger.error("No peer: %s", exc)
        console.error(exc.message)
        listener.close()
        return 1

    try:
        with connection:
            session = ChatSession(
                connection.source,
                connection.sink,
                initiator=True,
                console=console,
                download_dir=settings.download_dir,
            )
            clean = session.run()
    finally:
        listener.close()
    return 0 if clean else 1


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    logging.basicConfig(level=settings.log_level)
    return run_server(settings)


if __name__ == "__main__":
    raise SystemExit(main())
