from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, List, Optional

from .constants import ENCODING_ERRORS, LINE_TERMINATOR
from .errors import CommandValidationError, ProtocolDesync
from .messages import DEFAULT_PROTOCOL, Message, ProtocolConfig
from .transform import RotationTransform, Transform

logger = logging.getLogger(__name__)


class MessageFramer:
    """Line framing over a byte stream: transformed lines closed by a sentinel line."""

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        transform: Optional[Transform] = None,
        config: ProtocolConfig = DEFAULT_PROTOCOL,
    ) -> None:
        self.source = source
        self.sink = sink
        self.config = config
        self.transform = transform or RotationTransform(config.rotation_key)

    def send_message(self, lines: Iterable[str], end_turn: bool = True) -> None:
        """Write every line, then the sentinel (and flush) when ``end_turn`` is set."""
        # encode everything up front so a bad line leaves nothing half-written
        frames = [self.encode_line(self.escape(line)) for line in lines]
        for frame in frames:
            self.sink.write(frame)
        logger.debug("Sent %d line(s), end_turn=%s", len(frames), end_turn)
        if end_turn:
            self.end_turn()

    def end_turn(self) -> None:
        self.sink.write(self.encode_line(self.config.sentinel))
        self.sink.flush()

    def receive_message(self) -> Message:
        """Block until the sentinel line arrives and return the lines before it."""
        lines: List[str] = []
        while True:
            raw = self.source.readline()
            if not raw:
                raise ProtocolDesync(f"Stream ended after {len(lines)} line(s) without an end-of-message sentinel")
            line = self.decode_line(raw)
            if line == self.config.sentinel:
                logger.debug("Received %d line(s)", len(lines))
                return Message(lines=lines)
            lines.append(self.unescape(line))

    def encode_line(self, line: str) -> bytes:
        data = self.transform.apply_line(line).encode(self.config.encoding, ENCODING_ERRORS)
        if LINE_TERMINATOR in data:
            raise CommandValidationError(f"Line cannot be framed: {line!r}")
        return data + LINE_TERMINATOR

    def decode_line(self, raw: bytes) -> str:
        if raw.endswith(LINE_TERMINATOR):
            raw = raw[: -len(LINE_TERMINATOR)]
        try:
            text = raw.decode(self.config.encoding, ENCODING_ERRORS)
        except UnicodeDecodeError as exc:
            raise ProtocolDesync(f"Undecodable line: {exc}") from exc
        return self.transform.invert_line(text)

    def escape(self, line: str) -> str:
        """Prefix one escape char to content that would read as the sentinel."""
        if self._looks_like_sentinel(line):
            return self.config.sentinel_escape + line
        return line

    def unescape(self, line: str) -> str:
        if line.startswith(self.config.sentinel_escape) and self._looks_like_sentinel(line):
            return line[1:]
        return line

    def _looks_like_sentinel(self, line: str) -> bool:
        return line.lstrip(self.config.sentinel_escape) == self.config.sentinel


__all__ = ["MessageFramer"]
