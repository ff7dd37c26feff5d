"""
Shared protocol package: the wire transform, sentinel line framing, inline file
channel, command vocabulary and data models used by both peers.
"""

from .commands import ChatCommand, HELP_LINES, LIKE_GLYPH, SMILE_GLYPH, is_command, normalize_command, split_command
from .constants import END_SENTINEL, ENCODING, ROTATION_KEY
from .errors import (
    ChatError,
    CommandValidationError,
    ConfigError,
    ConnectionUnavailable,
    ErrorCode,
    IOFailure,
    ProtocolDesync,
)
from .file_channel import FileChannel
from .framing import MessageFramer
from .messages import DEFAULT_PROTOCOL, Identity, Message, ProtocolConfig, Status
from .transform import RotationTransform, Transform
from .validator import load_schema, validate_settings

__all__ = [
    "ChatCommand",
    "HELP_LINES",
    "LIKE_GLYPH",
    "SMILE_GLYPH",
    "is_command",
    "normalize_command",
    "split_command",
    "END_SENTINEL",
    "ENCODING",
    "ROTATION_KEY",
    "ChatError",
    "CommandValidationError",
    "ConfigError",
    "ConnectionUnavailable",
    "ErrorCode",
    "IOFailure",
    "ProtocolDesync",
    "FileChannel",
    "MessageFramer",
    "DEFAULT_PROTOCOL",
    "Identity",
    "Message",
    "ProtocolConfig",
    "Status",
    "RotationTransform",
    "Transform",
    "load_schema",
    "validate_settings",
]
