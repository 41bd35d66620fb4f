"""Shared fixtures: a small but complete synthetic Arena data set."""

import struct
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence

import orjson
import pytest

from arena_assets.archive import MemoryArchive
from arena_assets.game_data import ExecutableSideData, reset_assets_for_tests
from arena_assets.game_data.world_map import MASK_DATA_OFFSET, MASK_RECTS, mask_byte_count
from arena_assets.settings import AppSettings

NAME_CHUNK_COUNT = 58


def class_flags(ordinal: int) -> int:
    """Flag byte for a class ordinal: mages cast, thieves steal, warriors crit."""
    if ordinal < 6:
        return ordinal | 0x20
    if ordinal < 12:
        return ordinal | 0x80
    return ordinal | 0x40


def build_name_chunks(chunks: Sequence[Sequence[str]]) -> bytes:
    out = bytearray()
    for strings in chunks:
        body = b"".join(s.encode("latin-1") + b"\x00" for s in strings)
        out += struct.pack("<HB", 3 + len(body), len(strings))
        out += body
    return bytes(out)


def build_bsa(files: Mapping[str, bytes]) -> bytes:
    """GLOBAL.BSA layout: count, payloads, then the footer entries."""
    payload = b"".join(files.values())
    footer = b"".join(
        struct.pack("<12sHI", name.encode("latin-1"), 0, len(data))
        for name, data in files.items()
    )
    return struct.pack("<H", len(files)) + payload + footer


def _strings(prefix: str, count: int) -> bytes:
    return b"".join(f"{prefix}{i}".encode("latin-1") + b"\x00" for i in range(count))


def _spell_record(index: int) -> bytes:
    params = b"".join(struct.pack("<HHH", index, index + 1, index + 2) for _ in range(6))
    name = f"Spell {index}".encode("latin-1").ljust(33, b"\x00")
    record = (
        params
        + bytes([1, 0, index % 6])
        + struct.pack("<H", 0x0102)
        + bytes([1, 2, 3, 4, 5, 6, 7, 8, 9])
        + struct.pack("<H", 10 * index)
        + name
    )
    assert len(record) == 85
    return record


def _world_map_masks() -> bytes:
    data = bytearray(MASK_DATA_OFFSET)
    for rect in MASK_RECTS:
        region = bytearray(mask_byte_count(rect))
        # Top-left pixel of every region is set.
        region[0] = 0x80
        data += region
    return bytes(data)


def _terrain() -> bytes:
    grid = bytearray([254]) * (320 * 200)
    # A 40x40 sea in the middle of the map.
    for y in range(80, 120):
        for x in range(140, 180):
            grid[x + y * 320] = 0
    return bytes(12) + bytes(grid)


@pytest.fixture
def exe_data_dict() -> Dict[str, Any]:
    return {
        "char_classes": {
            "class_names": [f"Class {i}" for i in range(18)],
            "preferred_attributes": [f"Attributes {i}" for i in range(18)],
            "allowed_armors": [i % 4 for i in range(18)],
            "allowed_shields_indices": [-1 if i % 3 == 0 else i % 3 - 1 for i in range(18)],
            "allowed_shields_lists": [[7, 8], [10]],
            "allowed_weapons_indices": [-1 if i % 2 == 0 else 0 for i in range(18)],
            "allowed_weapons_lists": [[0, 4, 17]],
            "class_numbers_to_ids": [class_flags(i) for i in range(18)],
            "initial_experience_caps": [900 + i for i in range(18)],
            "health_dice": [8 + i % 8 for i in range(18)],
            "lockpicking_divisors": [i + 1 for i in range(18)],
        }
    }


@pytest.fixture
def exe_data(exe_data_dict: Dict[str, Any]) -> ExecutableSideData:
    return ExecutableSideData.from_dict(exe_data_dict)


@pytest.fixture
def name_chunk_lists() -> List[List[str]]:
    return [[f"n{i}a", f"n{i}b", f"n{i}c"] for i in range(NAME_CHUNK_COUNT)]


@pytest.fixture
def arena_files(name_chunk_lists: List[List[str]]) -> Dict[str, bytes]:
    """Every file the asset table reads."""
    classes = bytes(class_flags(i) for i in range(18)) + bytes(
        v for i in range(66) for v in (i % 18, (i + 1) % 18, (i + 2) % 18)
    )
    return {
        "TEMPLATE.DAT": (
            b"#0000\nWelcome to Arena&\n"
            b"#KEY1\nLine one\nLine two&\n"
            b"#KEY1\nDUPLICATE\n"
            b"#DOS\r\nFirst\r\nSecond\r\n"
        ),
        "QUESTION.TXT": (
            b"1. You find a purse.\n"
            b"a) Study it for magic (5l)\n"
            b"b) Pocket it quietly (5c)\n"
            b"c) Guard it with your blade (5v)\n"
            b"2. A stranger insults you.\n"
            b"a) Strike (5v)\n"
            b"b) Pick his pocket (5c)\n"
            b"c) Curse him (5l)\n"
        ),
        "CLASSES.DAT": classes,
        "DUNGEON.TXT": (
            b"Fortress of Ice\r\nA cold place.\r\nVery cold.\r\n#\r\n"
            b"Hall of Ash\r\nHot.\r\n#\r\n"
        ),
        "ARTFACT1.DAT": _strings("first ", 16 * 5 * 3),
        "ARTFACT2.DAT": _strings("second ", 16 * 5 * 3),
        "EQUIP.DAT": _strings("equip ", 15 * 5 * 3),
        "MUGUILD.DAT": _strings("guild ", 15 * 5 * 3),
        "SELLING.DAT": _strings("selling ", 15 * 5 * 3),
        "TAVERN.DAT": _strings("tavern ", 15 * 5 * 3),
        "NAMECHNK.DAT": build_name_chunks(name_chunk_lists),
        # Lower case, as on some releases.
        "spellsg.65": b"".join(_spell_record(i) for i in range(128)),
        "SPELLMKR.TXT": b"#00\r\nCauses damage.\r\n#01\r\nHeals\r\nthe caster.\r\n#\r\nignored\r\n",
        "TAMRIEL.MNU": _world_map_masks(),
        "TERRAIN.IMG": _terrain(),
    }


@pytest.fixture
def memory_archive(arena_files: Dict[str, bytes]) -> MemoryArchive:
    return MemoryArchive(arena_files)


@pytest.fixture
def arena_dir(tmp_path: Path, arena_files: Dict[str, bytes], exe_data_dict: Dict[str, Any]) -> Path:
    """Game directory: text files loose, the rest packed in GLOBAL.BSA."""
    game_dir = tmp_path / "ARENA"
    game_dir.mkdir()
    packed = {}
    for name, data in arena_files.items():
        if name.endswith(".TXT"):
            (game_dir / name).write_bytes(data)
        else:
            packed[name] = data
    (game_dir / "GLOBAL.BSA").write_bytes(build_bsa(packed))
    (game_dir / "exe_data.json").write_bytes(orjson.dumps(exe_data_dict))
    return game_dir


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(profile="test", ini_path=tmp_path / "settings.ini")


@pytest.fixture
def make_bsa() -> Callable[[Mapping[str, bytes]], bytes]:
    return build_bsa


@pytest.fixture(autouse=True)
def _reset_assets():
    reset_assets_for_tests()
    yield
    reset_assets_for_tests()
