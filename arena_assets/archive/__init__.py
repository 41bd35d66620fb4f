"""
Read-only access to the game's named resources.

Resolves resource names to bytes from loose files, the GLOBAL.BSA container,
or an in-memory store.
"""

from .loaders import (
    Archive,
    BsaArchive,
    DirectoryArchive,
    LayeredArchive,
    MemoryArchive,
    open_archive,
)
from .models import BsaEntry

__all__ = [
    "Archive",
    "BsaArchive",
    "BsaEntry",
    "DirectoryArchive",
    "LayeredArchive",
    "MemoryArchive",
    "open_archive",
]
