"""
Reversible value rotation applied to every unit that crosses the wire.

This is an obfuscation placeholder, not cryptography: the key is fixed and
public. Anything honouring the ``Transform`` protocol below can replace it
without touching the framer or the file channel.
"""

from __future__ import annotations

from typing import Protocol

from .constants import BYTE_MODULUS, LINE_MODULUS, ROTATION_KEY


def rotate(value: int, shift: int, modulus: int) -> int:
    """Shift ``value`` by ``shift`` inside ``[0, modulus)``."""
    return (value + shift) % modulus


class Transform(Protocol):
    def apply_line(self, line: str) -> str: ...

    def invert_line(self, line: str) -> str: ...

    def apply_byte(self, value: int) -> int: ...

    def invert_byte(self, value: int) -> int: ...

    def apply_bytes(self, data: bytes) -> bytes: ...

    def invert_bytes(self, data: bytes) -> bytes: ...


class RotationTransform:
    """Caesar-style rotation by ``key`` over code points and over byte values."""

    def __init__(self, key: int = ROTATION_KEY) -> None:
        self.key = key
        self._apply_table = bytes(rotate(b, key, BYTE_MODULUS) for b in range(BYTE_MODULUS))
        self._invert_table = bytes(rotate(b, -key, BYTE_MODULUS) for b in range(BYTE_MODULUS))

    def apply_line(self, line: str) -> str:
        return "".join(chr(rotate(ord(ch), self.key, LINE_MODULUS)) for ch in line)

    def invert_line(self, line: str) -> str:
        return "".join(chr(rotate(ord(ch), -self.key, LINE_MODULUS)) for ch in line)

    def apply_byte(self, value: int) -> int:
        return rotate(_check_byte(value), self.key, BYTE_MODULUS)

    def invert_byte(self, value: int) -> int:
        return rotate(_check_byte(value), -self.key, BYTE_MODULUS)

    def apply_bytes(self, data: bytes) -> bytes:
        return bytes(data).translate(self._apply_table)

    def invert_bytes(self, data: bytes) -> bytes:
        return bytes(data).translate(self._invert_table)


def _check_byte(value: int) -> int:
    if not 0 <= value < BYTE_MODULUS:
        raise ValueError(f"byte value out of range: {value}")
    return value


__all__ = ["Transform", "RotationTransform", "rotate"]
