from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional

from shared.protocol.commands import (
    HELP_LINES,
    LIKE_GLYPH,
    SMILE_GLYPH,
    ChatCommand,
    parse_name,
    parse_status,
    received_filename,
)
from shared.protocol.constants import WELCOME_LINE
from shared.protocol.errors import CommandValidationError, IOFailure
from shared.protocol.file_channel import FileChannel
from shared.protocol.framing import MessageFramer
from shared.protocol.messages import DEFAULT_PROTOCOL, Message, ProtocolConfig

from .console import ChatConsole
from .router import CommandRouter
from .state import ConversationState, TurnAction

logger = logging.getLogger(__name__)


class CommandInterpreter:
    """Applies slash commands typed locally or received from the peer.

    Every outbound branch ends our turn on the wire. Every inbound branch hands
    the floor to an outbound step (keyboard input or an automatic reply),
    except ``/close``.
    """

    def __init__(
        self,
        state: ConversationState,
        framer: MessageFramer,
        files: FileChannel,
        console: ChatConsole,
        config: ProtocolConfig = DEFAULT_PROTOCOL,
        download_dir: Path = Path("."),
    ) -> None:
        self.state = state
        self.framer = framer
        self.files = files
        self.console = console
        self.config = config
        self.download_dir = Path(download_dir)

        self.inbound: CommandRouter[TurnAction] = CommandRouter(self._show_message)
        self.inbound.register(ChatCommand.HELP, self._reply_help)
        self.inbound.register(ChatCommand.CLOSE, self._remote_close)
        self.inbound.register(ChatCommand.NAME, self._remote_name)
        self.inbound.register(ChatCommand.STATUS, self._remote_status)
        self.inbound.register(ChatCommand.FILE, self._receive_file)

        self.outbound: CommandRouter[None] = CommandRouter(self._send_text)
        self.outbound.register(ChatCommand.CLOSE, self._close)
        self.outbound.register(ChatCommand.ECHO, self._echo)
        self.outbound.register(ChatCommand.SMILE, self._smile)
        self.outbound.register(ChatCommand.LIKE, self._like)
        self.outbound.register(ChatCommand.NAME, self._name)
        self.outbound.register(ChatCommand.STATUS, self._status)
        self.outbound.register(ChatCommand.FILE, self._send_file)

    def welcome(self) -> None:
        """Unsolicited opening message: greeting plus the command list, ending our turn."""
        self.framer.send_message([WELCOME_LINE], end_turn=False)
        self.framer.send_message(HELP_LINES, end_turn=True)

    def dispatch_inbound(self, message: Message) -> TurnAction:
        self.state.last_message = message
        command, handler, argument = self.inbound.resolve(message.head)
        logger.debug("Inbound %s (%d line(s))", command or "text", len(message.lines))
        return handler(argument, message.head)

    def dispatch_outbound(self, line: str) -> None:
        command, handler, argument = self.outbound.resolve(line)
        logger.debug("Outbound %s", command or "text")
        try:
            handler(argument, line)
        except CommandValidationError as exc:
            logger.warning("Rejected %s: %s", command or "input", exc)
            self.console.show_from(self.state.local, "local", exc.message)
            self.framer.send_message([self.config.error_marker])

    # -- inbound -----------------------------------------------------------

    def _show_message(self, argument: str, line: str) -> TurnAction:
        for text in self.state.last_message.lines:
            self.console.show_from(self.state.remote, "remote", text)
        return TurnAction.AWAIT_INPUT

    def _reply_help(self, argument: str, line: str) -> TurnAction:
        self.framer.send_message(HELP_LINES)
        return TurnAction.REPLIED

    def _remote_close(self, argument: str, line: str) -> TurnAction:
        self.state.terminate()
        return TurnAction.TERMINATE

    def _remote_name(self, argument: str, line: str) -> TurnAction:
        old_label = self.console.render_label(self.state.remote, "remote")
        self.state.remote.name = parse_name(argument, self.config.unknown_name)
        self.console.show(f"{old_label}changed its name in {self.state.remote.name}")
        return TurnAction.AWAIT_INPUT

    def _remote_status(self, argument: str, line: str) -> TurnAction:
        self.state.remote.status = parse_status(argument)
        self.console.show_from(self.state.remote, "remote", "changed its status")
        return TurnAction.AWAIT_INPUT

    def _receive_file(self, argument: str, line: str) -> TurnAction:
        remote = self.state.remote
        filename = received_filename(argument, self.config.fallback_filename)
        target = self.download_dir / filename
        if target.exists():
            fallback = self.config.fallback_filename
            self.console.show_from(remote, "remote", f'The file already exists: renaming it to "{fallback}"')
            target = self.download_dir / fallback

        out: Optional[BinaryIO] = None
        try:
            out = target.open("wb")
        except OSError as exc:
            logger.warning("Couldn't open %s: %s", target, exc)
            self.console.error(f"Couldn't open file {target}: {exc.strerror or exc}")
        try:
            size = self.files.receive_file(out)
        except IOFailure as exc:
            logger.warning("File transfer into %s abandoned: %s", target, exc)
            self.console.error(exc.message)
            return TurnAction.AWAIT_INPUT
        finally:
            if out is not None:
                out.close()
        if out is not None:
            logger.info("Stored %d byte(s) in %s", size, target)
            self.console.show_from(remote, "remote", f"{target.name} received")
        return TurnAction.AWAIT_INPUT

    # -- outbound ----------------------------------------------------------

    def _send_text(self, argument: str, line: str) -> None:
        self.framer.send_message([line])

    def _close(self, argument: str, line: str) -> None:
        self.framer.send_message([line])
        self.state.terminate()

    def _echo(self, argument: str, line: str) -> None:
        self.framer.send_message(self.state.last_message.lines)

    def _smile(self, argument: str, line: str) -> None:
        self.framer.send_message(SMILE_GLYPH)

    def _like(self, argument: str, line: str) -> None:
        self.framer.send_message(LIKE_GLYPH)

    def _name(self, argument: str, line: str) -> None:
        # local identity changes only once the peer has the line
        self.framer.send_message([line])
        self.state.local.name = parse_name(argument, self.config.unknown_name)

    def _status(self, argument: str, line: str) -> None:
        self.framer.send_message([line])
        self.state.local.status = parse_status(argument)

    def _send_file(self, argument: str, line: str) -> None:
        path_text = argument.strip()
        if not path_text:
            raise CommandValidationError(self.config.error_marker)
        path = Path(path_text)
        if not path.is_file():
            raise CommandValidationError("Can't Access File")
        try:
            source = path.open("rb")
        except OSError as exc:
            logger.warning("Couldn't open %s: %s", path, exc)
            raise CommandValidationError("Can't Access File") from exc

        with source:
            size = os.fstat(source.fileno()).st_size
            self.framer.send_message([line])
            try:
                self.files.send_file(source, size)
            except IOFailure as exc:
                logger.warning("Sending %s failed: %s", path, exc)
                self.console.error(exc.message)
                return
        logger.info("Sent %s (%d byte(s))", path, size)


__all__ = ["CommandInterpreter"]
