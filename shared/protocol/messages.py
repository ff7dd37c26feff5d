from __future__ import annotations

from enum import StrEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from . import constants
from .errors import ConfigError
from .transform import rotate


class Status(StrEnum):
    """Availability advertised by each side of the chat."""

    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"

    @classmethod
    def parse(cls, text: Optional[str]) -> "Status":
        """Anything but a case-insensitive ``busy`` means available."""
        if text is not None and text.strip().upper() == cls.BUSY.value:
            return cls.BUSY
        return cls.AVAILABLE


class Identity(BaseModel):
    """Name + status of one side. Local and remote copies are never shared."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = constants.UNKNOWN_NAME
    status: Status = Status.AVAILABLE

    @property
    def busy(self) -> bool:
        return self.status is Status.BUSY


class Message(BaseModel):
    """One logical message: the ordered lines received before a sentinel."""

    lines: List[str] = Field(default_factory=list)

    @property
    def head(self) -> str:
        return self.lines[0] if self.lines else ""


class ProtocolConfig(BaseModel):
    """Immutable bundle of the wire and display constants.

    One instance is handed to the transform, framer, interpreter and console so
    tests can swap in another sentinel or rotation key without touching globals.
    """

    model_config = ConfigDict(frozen=True)

    sentinel: str = constants.END_SENTINEL
    sentinel_escape: str = constants.SENTINEL_ESCAPE
    rotation_key: int = constants.ROTATION_KEY
    encoding: str = constants.ENCODING
    error_marker: str = constants.ERROR_MARKER
    fallback_filename: str = constants.FALLBACK_FILENAME
    unknown_name: str = constants.UNKNOWN_NAME
    local_name: str = constants.DEFAULT_LOCAL_NAME
    your_color: str = constants.YOUR_COLOR
    its_color: str = constants.ITS_COLOR
    reset_color: str = constants.RESET_COLOR
    busy_qualifier: str = constants.BUSY_QUALIFIER
    file_chunk_size: int = Field(default=constants.FILE_CHUNK_SIZE, gt=0)

    @field_validator("sentinel")
    @classmethod
    def _check_sentinel(cls, value: str) -> str:
        if not value or "\n" in value or "\r" in value:
            raise ValueError("sentinel must be a non-empty single line")
        return value

    @field_validator("sentinel_escape")
    @classmethod
    def _check_escape(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("sentinel escape must be exactly one character")
        return value

    @field_validator("fallback_filename")
    @classmethod
    def _check_fallback(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("fallback filename must be a bare file name")
        return value

    @model_validator(mode="after")
    def _check_sentinel_framing(self) -> "ProtocolConfig":
        if self.sentinel.startswith(self.sentinel_escape):
            raise ValueError("sentinel must not start with the escape character")
        for name in ("sentinel", "sentinel_escape"):
            if not self._frames_as_one_line(getattr(self, name)):
                raise ValueError(f"{name} cannot be sent as a single line with this rotation key and encoding")
        return self

    def _frames_as_one_line(self, text: str) -> bool:
        rotated = "".join(chr(rotate(ord(ch), self.rotation_key, constants.LINE_MODULUS)) for ch in text)
        try:
            data = rotated.encode(self.encoding, constants.ENCODING_ERRORS)
        except (LookupError, UnicodeError):
            return False
        return constants.LINE_TERMINATOR not in data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProtocolConfig":
        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigError(f"Protocol configuration rejected: {exc}") from exc


DEFAULT_PROTOCOL = ProtocolConfig()


__all__ = ["Status", "Identity", "Message", "ProtocolConfig", "DEFAULT_PROTOCOL"]
