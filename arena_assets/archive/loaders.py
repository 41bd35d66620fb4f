"""
Read-only archive access.

An archive is a named-blob store: callers ask for a resource by name and get
a fresh byte stream back. The game ships most data inside GLOBAL.BSA, but a
few files (and any user overrides) live loose in the game directory, so the
usual entry point is a LayeredArchive that checks the directory first.
"""

import io
import logging
import struct
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Dict, List, Mapping, Optional, Sequence

from ..errors import MalformedRecord, ResourceNotFound
from .models import BSA_ENTRY_FORMAT, BSA_HEADER_SIZE, BsaEntry, NameIndex


class Archive(ABC):
    """Base class for read-only named resource stores."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def names(self) -> List[str]:
        """Return every resource name, as stored."""

    @abstractmethod
    def _read_exact(self, name: str) -> Optional[bytes]:
        """Return the bytes of an exactly named resource, or None."""

    def _index(self) -> NameIndex:
        return {name.upper(): name for name in self.names()}

    def _resolve_case_insensitive(self, name: str) -> Optional[str]:
        return self._index().get(name.upper())

    def exists(self, name: str, case_insensitive: bool = False) -> bool:
        """Check whether a resource is present."""
        if case_insensitive:
            return self._resolve_case_insensitive(name) is not None
        return name in self.names()

    def read(self, name: str, *, case_insensitive: bool = False) -> bytes:
        """Read a whole resource into memory.

        Raises:
            ResourceNotFound: If no resource matches the name
        """
        stored = name
        if case_insensitive:
            stored = self._resolve_case_insensitive(name) or name
        data = self._read_exact(stored)
        if data is None:
            raise ResourceNotFound(name, self.describe())
        self.logger.debug(f"Read {stored} ({len(data)} bytes)")
        return data

    def open(self, name: str) -> BinaryIO:
        """Open an exactly named resource as a byte stream."""
        return io.BytesIO(self.read(name))

    def open_case_insensitive(self, name: str) -> BinaryIO:
        """Open a resource ignoring the casing of its name."""
        return io.BytesIO(self.read(name, case_insensitive=True))

    def describe(self) -> str:
        """Short human readable description used in messages."""
        return self.__class__.__name__


class MemoryArchive(Archive):
    """Archive backed by an in-memory mapping of name to bytes."""

    def __init__(self, files: Mapping[str, bytes]):
        super().__init__()
        self._files: Dict[str, bytes] = {name: bytes(data) for name, data in files.items()}
        self._name_index = super()._index()

    def names(self) -> List[str]:
        return list(self._files)

    def _index(self) -> NameIndex:
        return self._name_index

    def _read_exact(self, name: str) -> Optional[bytes]:
        return self._files.get(name)


class DirectoryArchive(Archive):
    """Loose files in a single directory.

    The case-insensitive index is built from the directory listing the first
    time it is needed and reused afterwards.
    """

    def __init__(self, root: str | Path):
        super().__init__()
        self.root = Path(root)
        self._cached_index: Optional[NameIndex] = None
        if not self.root.is_dir():
            raise ResourceNotFound(str(self.root), "file system")
        self.logger.debug(f"DirectoryArchive rooted at {self.root}")

    def names(self) -> List[str]:
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def _index(self) -> NameIndex:
        if self._cached_index is None:
            self._cached_index = super()._index()
        return self._cached_index

    def exists(self, name: str, case_insensitive: bool = False) -> bool:
        if case_insensitive:
            return super().exists(name, case_insensitive=True)
        return (self.root / name).is_file()

    def _read_exact(self, name: str) -> Optional[bytes]:
        path = self.root / name
        if not path.is_file():
            return None
        return path.read_bytes()

    def describe(self) -> str:
        return str(self.root)


class BsaArchive(Archive):
    """The game's GLOBAL.BSA container.

    Layout: a little-endian 16-bit record count, the file payloads packed
    back to back from offset 2, then a footer of fixed-size entries at the
    very end of the file. Payload offsets are not stored; they are the
    running sum of the entry sizes.
    """

    def __init__(self, source: str | Path | bytes, label: str = "GLOBAL.BSA"):
        super().__init__()
        if isinstance(source, (bytes, bytearray)):
            self._data = bytes(source)
            self.label = label
        else:
            path = Path(source)
            if not path.is_file():
                raise ResourceNotFound(path.name, str(path.parent))
            self._data = path.read_bytes()
            self.label = str(path)

        self.entries: Dict[str, BsaEntry] = {}
        self._parse_footer()
        self._name_index = super()._index()
        self.logger.info(f"Opened {self.label} with {len(self.entries)} entries")

    def _parse_footer(self) -> None:
        data = self._data
        if len(data) < BSA_HEADER_SIZE:
            raise MalformedRecord(f"{self.label}: too short for a BSA header")

        (count,) = struct.unpack_from("<H", data, 0)
        entry_size = struct.calcsize(BSA_ENTRY_FORMAT)
        footer_start = len(data) - count * entry_size
        if footer_start < BSA_HEADER_SIZE:
            raise MalformedRecord(
                f"{self.label}: footer of {count} entries does not fit in {len(data)} bytes"
            )

        offset = BSA_HEADER_SIZE
        for raw_name, unused, size in struct.iter_unpack(
            BSA_ENTRY_FORMAT, data[footer_start:]
        ):
            name = raw_name.split(b"\x00", 1)[0].decode("latin-1")
            entry = BsaEntry(name=name, offset=offset, size=size, unused=unused)
            if entry.end > footer_start:
                raise MalformedRecord(
                    f"{self.label}: entry {name} overruns the footer "
                    f"(ends at {entry.end}, footer at {footer_start})"
                )
            # First occurrence wins if a name is repeated.
            self.entries.setdefault(name, entry)
            offset = entry.end

    def names(self) -> List[str]:
        return list(self.entries)

    def _index(self) -> NameIndex:
        return self._name_index

    def _read_exact(self, name: str) -> Optional[bytes]:
        entry = self.entries.get(name)
        if entry is None:
            return None
        return self._data[entry.offset:entry.end]

    def describe(self) -> str:
        return self.label


class LayeredArchive(Archive):
    """Consult several archives in order; the first match wins."""

    def __init__(self, layers: Sequence[Archive]):
        super().__init__()
        self.layers: List[Archive] = list(layers)

    def names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for layer in self.layers:
            for name in layer.names():
                seen.setdefault(name, None)
        return list(seen)

    def exists(self, name: str, case_insensitive: bool = False) -> bool:
        return any(layer.exists(name, case_insensitive) for layer in self.layers)

    def _read_exact(self, name: str) -> Optional[bytes]:
        for layer in self.layers:
            if layer.exists(name):
                return layer.read(name)
        return None

    def read(self, name: str, *, case_insensitive: bool = False) -> bytes:
        for layer in self.layers:
            if layer.exists(name, case_insensitive):
                return layer.read(name, case_insensitive=case_insensitive)
        raise ResourceNotFound(name, self.describe())

    def describe(self) -> str:
        return " + ".join(layer.describe() for layer in self.layers)


def open_archive(arena_path: str | Path, archive_name: str = "GLOBAL.BSA") -> Archive:
    """Build the standard archive for a game directory.

    Loose files in the directory take priority over the BSA container, which
    is only added when it exists.

    Args:
        arena_path: Game data directory
        archive_name: File name of the BSA container inside that directory

    Returns:
        LayeredArchive over the directory and (optionally) the BSA
    """
    logger = logging.getLogger(f"{__name__}.open_archive")
    directory = DirectoryArchive(arena_path)
    layers: List[Archive] = [directory]

    bsa_name = directory._resolve_case_insensitive(archive_name) if archive_name else None
    if bsa_name:
        layers.append(BsaArchive(directory.root / bsa_name))
    else:
        logger.warning(f"No {archive_name} in {directory.root}, using loose files only")

    return LayeredArchive(layers)
