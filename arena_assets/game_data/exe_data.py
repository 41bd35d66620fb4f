"""
Per-class tables taken from the game executable.

Extracting these values from A.EXE is outside this package; they are
supplied as a JSON document and only validated and reshaped here. Layout:

    {
      "char_classes": {
        "class_names": [18 strings],
        "preferred_attributes": [18 strings],
        "allowed_armors": [18 ints 0..3],
        "allowed_shields_indices": [18 ints, -1 = all],
        "allowed_shields_lists": [[shield ids], ...],
        "allowed_weapons_indices": [18 ints, -1 = all],
        "allowed_weapons_lists": [[weapon ids], ...],
        "class_numbers_to_ids": [18 ints],
        "initial_experience_caps": [18 ints],
        "health_dice": [18 ints],
        "lockpicking_divisors": [18 ints]
      }
    }
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

import orjson

from ..errors import MalformedRecord, ResourceNotFound
from .models import CLASS_COUNT

logger = logging.getLogger(__name__)

CHAR_CLASSES_KEY = "char_classes"

_PER_CLASS_STRINGS = ("class_names", "preferred_attributes")
_PER_CLASS_INTS = (
    "allowed_armors",
    "allowed_shields_indices",
    "allowed_weapons_indices",
    "class_numbers_to_ids",
    "initial_experience_caps",
    "health_dice",
    "lockpicking_divisors",
)
_ID_LISTS = ("allowed_shields_lists", "allowed_weapons_lists")


@dataclass(frozen=True)
class CharacterClassTables:
    """Class tables, each indexed by class ordinal."""
    class_names: Tuple[str, ...]
    preferred_attributes: Tuple[str, ...]
    allowed_armors: Tuple[int, ...]
    allowed_shields_indices: Tuple[int, ...]
    allowed_shields_lists: Tuple[Tuple[int, ...], ...]
    allowed_weapons_indices: Tuple[int, ...]
    allowed_weapons_lists: Tuple[Tuple[int, ...], ...]
    class_numbers_to_ids: Tuple[int, ...]
    initial_experience_caps: Tuple[int, ...]
    health_dice: Tuple[int, ...]
    lockpicking_divisors: Tuple[int, ...]


@dataclass(frozen=True)
class ExecutableSideData:
    """Read-only data sourced from the executable."""
    classes: CharacterClassTables

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutableSideData":
        """Validate and convert a decoded JSON document.

        Raises:
            MalformedRecord: If a table is missing or has the wrong shape
        """
        raw = data.get(CHAR_CLASSES_KEY) if isinstance(data, dict) else None
        if not isinstance(raw, dict):
            raise MalformedRecord(f"Executable data: missing '{CHAR_CLASSES_KEY}' object")

        fields: Dict[str, Any] = {}
        for key in _PER_CLASS_STRINGS:
            fields[key] = tuple(str(v) for v in _per_class(raw, key))
        for key in _PER_CLASS_INTS:
            fields[key] = tuple(_as_int(v, key) for v in _per_class(raw, key))
        for key in _ID_LISTS:
            lists = raw.get(key)
            if not isinstance(lists, list):
                raise MalformedRecord(f"Executable data: '{key}' must be a list of lists")
            fields[key] = tuple(
                tuple(_as_int(v, key) for v in _as_list(item, key)) for item in lists
            )

        return cls(classes=CharacterClassTables(**fields))

    @classmethod
    def from_json_bytes(cls, payload: bytes) -> "ExecutableSideData":
        try:
            data = orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            raise MalformedRecord(f"Executable data: invalid JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "ExecutableSideData":
        path = Path(path)
        if not path.is_file():
            raise ResourceNotFound(path.name, str(path.parent))
        logger.info(f"Loading executable data from {path}")
        return cls.from_json_bytes(path.read_bytes())

    def to_json_bytes(self) -> bytes:
        """Serialize back to the JSON layout accepted by from_json_bytes."""
        classes = self.classes
        document = {
            CHAR_CLASSES_KEY: {
                key: getattr(classes, key)
                for key in (*_PER_CLASS_STRINGS, *_PER_CLASS_INTS, *_ID_LISTS)
            }
        }
        return orjson.dumps(document, option=orjson.OPT_INDENT_2)


def _per_class(raw: Dict[str, Any], key: str) -> list[Any]:
    values = _as_list(raw.get(key), key)
    if len(values) != CLASS_COUNT:
        raise MalformedRecord(
            f"Executable data: '{key}' has {len(values)} entries, expected {CLASS_COUNT}"
        )
    return values


def _as_list(value: Any, key: str) -> list[Any]:
    if not isinstance(value, list):
        raise MalformedRecord(f"Executable data: '{key}' must be a list")
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRecord(f"Executable data: non-integer {value!r} in '{key}'")
    return value
