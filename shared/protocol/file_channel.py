from __future__ import annotations

import logging
import struct
from typing import BinaryIO, Optional

from .constants import LENGTH_PREFIX_FORMAT
from .errors import IOFailure
from .messages import DEFAULT_PROTOCOL, ProtocolConfig
from .transform import RotationTransform, Transform

logger = logging.getLogger(__name__)

LENGTH_PREFIX_SIZE = struct.calcsize(LENGTH_PREFIX_FORMAT)


class FileChannel:
    """Inline binary transfer: 8-byte big-endian length, then the transformed payload.

    Payload bytes are never scanned for a terminator; the receiver trusts the
    length prefix alone, because the rotation can turn any byte into any other.
    """

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        transform: Optional[Transform] = None,
        config: ProtocolConfig = DEFAULT_PROTOCOL,
    ) -> None:
        self.source = source
        self.sink = sink
        self.transform = transform or RotationTransform(config.rotation_key)
        self.chunk_size = config.file_chunk_size

    def send_file(self, source: BinaryIO, size: int) -> None:
        """Write the length prefix and exactly ``size`` payload bytes, whatever ``source`` does."""
        if size < 0:
            raise ValueError(f"negative file size: {size}")
        remaining = size
        read_error: Optional[OSError] = None
        try:
            self.sink.write(struct.pack(LENGTH_PREFIX_FORMAT, size))
            while remaining > 0:
                try:
                    chunk = source.read(min(self.chunk_size, remaining))
                except OSError as exc:
                    logger.warning("Couldn't read file being sent: %s", exc)
                    read_error = exc
                    break
                if not chunk:
                    break
                self.sink.write(self.transform.apply_bytes(chunk))
                remaining -= len(chunk)
            if remaining:
                # the peer is waiting for exactly `size` bytes
                logger.warning("Source stopped %d byte(s) early, padding", remaining)
                self._pad(remaining)
            self.sink.flush()
        except OSError as exc:
            raise IOFailure(f"Couldn't write on output stream: {exc}") from exc
        if read_error is not None:
            raise IOFailure(f"Couldn't read file, {remaining} byte(s) padded: {read_error}") from read_error
        if remaining:
            raise IOFailure(f"File shrank while sending, {remaining} byte(s) padded")
        logger.info("Sent file payload of %d byte(s)", size)

    def _pad(self, count: int) -> None:
        while count > 0:
            step = min(self.chunk_size, count)
            self.sink.write(self.transform.apply_bytes(bytes(step)))
            count -= step

    def receive_file(self, sink: Optional[BinaryIO]) -> int:
        """Read one payload into ``sink``; ``None`` drains it so the stream stays aligned."""
        size = struct.unpack(LENGTH_PREFIX_FORMAT, self._read_exactly(LENGTH_PREFIX_SIZE))[0]
        if size < 0:
            raise IOFailure(f"Invalid payload length: {size}")
        remaining = size
        write_error: Optional[OSError] = None
        while remaining > 0:
            chunk = self._read_exactly(min(self.chunk_size, remaining), expected=size)
            remaining -= len(chunk)
            if sink is None or write_error is not None:
                continue
            try:
                sink.write(self.transform.invert_bytes(chunk))
            except OSError as exc:
                # keep draining, the stream must end up past the payload
                logger.warning("Couldn't write received bytes: %s", exc)
                write_error = exc
        if write_error is not None:
            raise IOFailure(f"Couldn't write to file: {write_error}") from write_error
        logger.info("Received file payload of %d byte(s)", size)
        return size

    def _read_exactly(self, count: int, expected: Optional[int] = None) -> bytes:
        buf = bytearray()
        while len(buf) < count:
            try:
                chunk = self.source.read(count - len(buf))
            except OSError as exc:
                raise IOFailure(f"Couldn't read from input stream: {exc}") from exc
            if not chunk:
                what = f"{expected}-byte payload" if expected is not None else "length prefix"
                raise IOFailure(f"Stream ended in the middle of the {what}")
            buf.extend(chunk)
        return bytes(buf)


__all__ = ["FileChannel", "LENGTH_PREFIX_SIZE"]
