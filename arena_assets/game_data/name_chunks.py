"""
NAMECHNK.DAT: lists of name fragments used by the name generator.

Each chunk is a little-endian 16-bit total chunk length (header included),
an 8-bit string count, then that many NUL-terminated strings. Chunks follow
each other until the end of the file and are addressed by position.
"""

import logging
from typing import List, Sequence

from ..errors import MalformedRecord
from .binary import ByteCursor, encode_cstring, read_u16, read_u8
from .models import NameChunkTable

logger = logging.getLogger(__name__)

CHUNK_HEADER_SIZE = 3
MAX_CHUNK_LENGTH = 0xFFFF
MAX_CHUNK_STRINGS = 0xFF


def decode_name_chunks(data: bytes, name: str = "NAMECHNK.DAT") -> NameChunkTable:
    """Decode every chunk in file order."""
    chunks: List[tuple[str, ...]] = []
    offset = 0

    while offset < len(data):
        chunk_length = read_u16(data, offset, name)
        string_count = read_u8(data, offset + 2, name)
        if chunk_length < CHUNK_HEADER_SIZE:
            raise MalformedRecord(
                f"{name}: chunk {len(chunks)} at offset {offset} has length {chunk_length}"
            )
        chunk_end = offset + chunk_length
        if chunk_end > len(data):
            raise MalformedRecord(
                f"{name}: chunk {len(chunks)} ends at {chunk_end}, past end of file ({len(data)})"
            )

        cursor = ByteCursor(data[offset:chunk_end], CHUNK_HEADER_SIZE, name)
        strings = tuple(cursor.cstring() for _ in range(string_count))
        chunks.append(strings)
        offset = chunk_end

    logger.debug(f"{name}: decoded {len(chunks)} chunk(s)")
    return tuple(chunks)


def encode_name_chunks(chunks: Sequence[Sequence[str]]) -> bytes:
    """Encode chunk lists into the layout read by decode_name_chunks."""
    out = bytearray()
    for index, strings in enumerate(chunks):
        if len(strings) > MAX_CHUNK_STRINGS:
            raise MalformedRecord(f"Chunk {index} has {len(strings)} strings (max {MAX_CHUNK_STRINGS})")
        body = b"".join(encode_cstring(s) for s in strings)
        length = CHUNK_HEADER_SIZE + len(body)
        if length > MAX_CHUNK_LENGTH:
            raise MalformedRecord(f"Chunk {index} is {length} bytes (max {MAX_CHUNK_LENGTH})")
        out += length.to_bytes(2, "little")
        out.append(len(strings))
        out += body
    return bytes(out)
