"""
Data models for the archive layer.

Lightweight records describing what an archive contains. No I/O here.
"""

from dataclasses import dataclass
from typing import Dict, TypeAlias

# Raw record layout of one GLOBAL.BSA footer entry: 12-byte NUL padded name,
# an unused 16-bit field, and the 32-bit payload size.
BSA_ENTRY_FORMAT = "<12sHI"
BSA_HEADER_SIZE = 2

NameIndex: TypeAlias = Dict[str, str]
"""Maps an upper-cased resource name to the name actually stored."""


@dataclass(frozen=True)
class BsaEntry:
    """One file stored inside a BSA container."""
    name: str
    offset: int
    size: int
    unused: int = 0

    @property
    def end(self) -> int:
        """Offset one past the last payload byte."""
        return self.offset + self.size
