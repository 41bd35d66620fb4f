"""
Bounds-checked primitive reads over raw byte buffers.

All multi-byte integers in the game files are little-endian. Strings are
NUL-terminated and decoded as Latin-1, which maps every byte to exactly one
character so text can be re-encoded byte for byte.
"""

import struct

from ..errors import MalformedRecord

TEXT_ENCODING = "latin-1"

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


def _check(data: bytes, offset: int, size: int, name: str) -> None:
    if offset < 0 or offset + size > len(data):
        label = f"{name}: " if name else ""
        raise MalformedRecord(
            f"{label}read of {size} byte(s) at offset {offset} exceeds buffer of {len(data)}"
        )


def read_u8(data: bytes, offset: int, name: str = "") -> int:
    _check(data, offset, 1, name)
    return data[offset]


def read_u16(data: bytes, offset: int, name: str = "") -> int:
    _check(data, offset, 2, name)
    return _U16.unpack_from(data, offset)[0]


def read_u32(data: bytes, offset: int, name: str = "") -> int:
    _check(data, offset, 4, name)
    return _U32.unpack_from(data, offset)[0]


def read_bytes(data: bytes, offset: int, size: int, name: str = "") -> bytes:
    _check(data, offset, size, name)
    return bytes(data[offset:offset + size])


def read_cstring(data: bytes, offset: int, name: str = "") -> tuple[str, int]:
    """Read a NUL-terminated string.

    Returns:
        The decoded string and the offset just past its terminator
    """
    _check(data, offset, 0, name)
    end = data.find(b"\x00", offset)
    if end < 0:
        label = f"{name}: " if name else ""
        raise MalformedRecord(f"{label}unterminated string at offset {offset}")
    return data[offset:end].decode(TEXT_ENCODING), end + 1


def encode_cstring(text: str) -> bytes:
    return text.encode(TEXT_ENCODING) + b"\x00"


class ByteCursor:
    """Sequential reader that advances through a buffer."""

    def __init__(self, data: bytes, offset: int = 0, name: str = ""):
        self.data = data
        self.offset = offset
        self.name = name

    @property
    def remaining(self) -> int:
        return max(len(self.data) - self.offset, 0)

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    def seek(self, offset: int) -> None:
        _check(self.data, offset, 0, self.name)
        self.offset = offset

    def skip(self, count: int) -> None:
        self.seek(self.offset + count)

    def u8(self) -> int:
        value = read_u8(self.data, self.offset, self.name)
        self.offset += 1
        return value

    def u16(self) -> int:
        value = read_u16(self.data, self.offset, self.name)
        self.offset += 2
        return value

    def u32(self) -> int:
        value = read_u32(self.data, self.offset, self.name)
        self.offset += 4
        return value

    def bytes(self, size: int) -> bytes:
        value = read_bytes(self.data, self.offset, size, self.name)
        self.offset += size
        return value

    def cstring(self) -> str:
        value, self.offset = read_cstring(self.data, self.offset, self.name)
        return value

    def __repr__(self) -> str:
        return f"ByteCursor(name={self.name!r}, offset={self.offset}, size={len(self.data)})"
