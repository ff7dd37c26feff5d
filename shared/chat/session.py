from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from shared.protocol.commands import ChatCommand
from shared.protocol.constants import FAREWELL_LINE
from shared.protocol.errors import ProtocolDesync
from shared.protocol.file_channel import FileChannel
from shared.protocol.framing import MessageFramer
from shared.protocol.messages import DEFAULT_PROTOCOL, ProtocolConfig
from shared.protocol.transform import RotationTransform, Transform

from .connection import is_usable
from .console import ChatConsole
from .interpreter import CommandInterpreter
from .state import ConversationState, SessionState, TurnAction

logger = logging.getLogger(__name__)


class ChatSession:
    """Strictly alternating receive/send loop between two peers.

    The initiator opens with a welcome message so that both ends are not
    waiting to receive at the same time; the responder starts by receiving.
    """

    def __init__(
        self,
        source: Optional[BinaryIO],
        sink: Optional[BinaryIO],
        initiator: bool,
        console: Optional[ChatConsole] = None,
        config: ProtocolConfig = DEFAULT_PROTOCOL,
        download_dir: Path = Path("."),
        transform: Optional[Transform] = None,
    ) -> None:
        self.source = source
        self.sink = sink
        self.initiator = initiator
        self.config = config
        self.console = console or ChatConsole(config)
        self.conversation = ConversationState.initial(config)
        self.state = SessionState.AWAITING_RECEIVE
        self.download_dir = Path(download_dir)
        self.transform = transform or RotationTransform(config.rotation_key)
        self.interpreter: Optional[CommandInterpreter] = None

    def is_usable(self) -> bool:
        return is_usable(self.source) and is_usable(self.sink)

    def run(self) -> bool:
        """Drive the conversation until ``/close``. Returns True on a clean close."""
        if not self.is_usable():
            logger.error("At least one of the streams is not valid")
            return False

        framer = MessageFramer(self.source, self.sink, self.transform, self.config)
        files = FileChannel(self.source, self.sink, self.transform, self.config)
        self.interpreter = CommandInterpreter(
            self.conversation, framer, files, self.console, self.config, self.download_dir
        )
        clean = False
        try:
            if self.initiator:
                self.interpreter.welcome()
            while not self.conversation.terminated:
                self._turn(framer)
            clean = True
        except ProtocolDesync as exc:
            logger.error("Conversation lost: %s", exc)
            self.console.error(f"Connection lost: {exc.message}")
        except OSError as exc:
            logger.error("Stream failure: %s", exc)
            self.console.error(f"Connection lost: {exc}")
        finally:
            self._set_state(SessionState.CLOSED)
            self._release()
        if clean:
            self.console.show(FAREWELL_LINE)
        return clean

    def _turn(self, framer: MessageFramer) -> None:
        assert self.interpreter is not None
        self._set_state(SessionState.AWAITING_RECEIVE)
        message = framer.receive_message()

        self._set_state(SessionState.DISPATCH_INBOUND)
        action = self.interpreter.dispatch_inbound(message)
        if action is not TurnAction.AWAIT_INPUT:
            return

        self._set_state(SessionState.AWAITING_SEND_INPUT)
        try:
            line = self.console.prompt(self.conversation.local)
        except EOFError:
            logger.info("Keyboard input closed, closing the chat")
            line = ChatCommand.CLOSE.value

        self._set_state(SessionState.DISPATCH_OUTBOUND)
        self.interpreter.dispatch_outbound(line)

    def _set_state(self, state: SessionState) -> None:
        logger.debug("Session %s -> %s", self.state.value, state.value)
        self.state = state

    def _release(self) -> None:
        for endpoint in (self.source, self.sink):
            if endpoint is None:
                continue
            try:
                endpoint.close()
            except OSError as exc:
                logger.debug("Error closing stream: %s", exc)


__all__ = ["ChatSession"]
