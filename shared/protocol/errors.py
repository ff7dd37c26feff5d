from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Domain specific error codes."""

    CONNECTION_UNAVAILABLE = 1001
    PROTOCOL_DESYNC = 1002
    IO_FAILURE = 1003
    INVALID_ARGUMENT = 1004
    INVALID_CONFIG = 1005


class ChatError(Exception):
    """Structured chat exception carrying code + message.

    ``fatal`` tells the turn loop whether the session can go on after the
    error has been reported.
    """

    code: ErrorCode = ErrorCode.IO_FAILURE
    fatal: bool = False

    def __init__(self, message: str = "", code: ErrorCode | None = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(f"{self.code.name} ({int(self.code)}): {message}")


class ConnectionUnavailable(ChatError):
    """The peer connection could not be established or an endpoint is unusable."""

    code = ErrorCode.CONNECTION_UNAVAILABLE
    fatal = True


class ProtocolDesync(ChatError):
    """The stream ended, or turned unreadable, before the end-of-message sentinel."""

    code = ErrorCode.PROTOCOL_DESYNC
    fatal = True


class IOFailure(ChatError):
    code = ErrorCode.IO_FAILURE


class CommandValidationError(ChatError):
    code = ErrorCode.INVALID_ARGUMENT


class ConfigError(ChatError):
    """Raised when configuration values are invalid."""

    code = ErrorCode.INVALID_CONFIG
    fatal = True


__all__ = [
    "ErrorCode",
    "ChatError",
    "ConnectionUnavailable",
    "ProtocolDesync",
    "IOFailure",
    "CommandValidationError",
    "ConfigError",
]
