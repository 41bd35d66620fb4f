"""
World map data: province click masks and the terrain grid.

TAMRIEL.MNU holds, at a fixed offset, one bit-packed mask per province plus
one for the "Exit" button. Each mask covers a known screen rectangle; rows
are packed eight pixels per byte, most significant bit first, padded to a
whole byte. TERRAIN.IMG is a 320x200 grid of terrain class bytes.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from PIL import Image

from ..errors import MalformedRecord
from .binary import read_bytes
from .models import ClimateType

logger = logging.getLogger(__name__)

MASK_DATA_OFFSET = 0x87D5


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom


MASK_RECTS: Tuple[Rect, ...] = (
    Rect(37, 32, 86, 57),
    Rect(47, 53, 90, 62),
    Rect(113, 29, 88, 53),
    Rect(190, 31, 102, 93),
    Rect(31, 131, 65, 52),
    Rect(100, 118, 61, 55),
    Rect(144, 119, 50, 57),
    Rect(204, 116, 67, 67),
    Rect(103, 72, 131, 84),
    Rect(279, 188, 37, 11),  # "Exit" button
)
EXIT_BUTTON_INDEX = len(MASK_RECTS) - 1


def padded_width(width: int) -> int:
    """Bytes per mask row: eight pixels per byte, rounded up."""
    return (width + 7) // 8


def mask_byte_count(rect: Rect) -> int:
    return padded_width(rect.width) * rect.height


# =============================================================================
# Masks
# =============================================================================

@dataclass(frozen=True)
class WorldMapMask:
    """Bit mask for one clickable world map region."""
    data: bytes
    rect: Rect
    is_exit_button: bool = False

    def __post_init__(self):
        expected = mask_byte_count(self.rect)
        if len(self.data) != expected:
            raise MalformedRecord(
                f"World map mask {self.rect}: expected {expected} bytes, got {len(self.data)}"
            )

    def get(self, x: int, y: int) -> bool:
        """Check whether the screen pixel (x, y) is set in this mask."""
        if not self.rect.contains(x, y):
            return False
        local_x = x - self.rect.x
        local_y = y - self.rect.y
        byte = self.data[local_y * padded_width(self.rect.width) + local_x // 8]
        return ((byte >> (7 - local_x % 8)) & 1) != 0

    def to_image(self) -> Image.Image:
        """Mode "1" image of the mask; set bits are white."""
        return Image.frombytes("1", (self.rect.width, self.rect.height), self.data)


def decode_world_map_masks(data: bytes, name: str = "TAMRIEL.MNU") -> Tuple[WorldMapMask, ...]:
    masks: List[WorldMapMask] = []
    offset = MASK_DATA_OFFSET

    for index, rect in enumerate(MASK_RECTS):
        byte_count = mask_byte_count(rect)
        masks.append(
            WorldMapMask(
                data=read_bytes(data, offset, byte_count, name),
                rect=rect,
                is_exit_button=index == EXIT_BUTTON_INDEX,
            )
        )
        offset += byte_count

    logger.debug(f"{name}: read {offset - MASK_DATA_OFFSET} mask bytes for {len(masks)} regions")
    return tuple(masks)


# =============================================================================
# Terrain
# =============================================================================

@dataclass(frozen=True)
class WorldMapTerrain:
    """Terrain class per world map pixel."""
    indices: bytes

    WIDTH = 320
    HEIGHT = 200
    HEADER_SIZE = 12

    SEA = 0
    TEMPERATE1 = 254
    TEMPERATE2 = 251
    MOUNTAIN1 = 249
    MOUNTAIN2 = 250
    DESERT1 = 253
    DESERT2 = 252

    # Searched pixels are shifted this far left to line up with the masks.
    FAIL_SAFE_SHIFT = 12
    FAIL_SAFE_DISTANCE = 200

    def __post_init__(self):
        expected = self.WIDTH * self.HEIGHT
        if len(self.indices) != expected:
            raise MalformedRecord(
                f"World map terrain: expected {expected} bytes, got {len(self.indices)}"
            )

    @classmethod
    def to_climate_type(cls, index: int) -> ClimateType:
        if index in (cls.TEMPERATE1, cls.TEMPERATE2):
            return ClimateType.TEMPERATE
        if index in (cls.MOUNTAIN1, cls.MOUNTAIN2):
            return ClimateType.MOUNTAIN
        if index in (cls.DESERT1, cls.DESERT2):
            return ClimateType.DESERT
        raise MalformedRecord(f"Bad terrain index {index}")

    @classmethod
    def get_normalized_index(cls, index: int) -> int:
        return index - cls.SEA

    def get_at(self, x: int, y: int) -> int:
        if not (0 <= x < self.WIDTH and 0 <= y < self.HEIGHT):
            raise IndexError(f"Terrain coordinates out of bounds: ({x}, {y})")
        return self.indices[x + y * self.WIDTH]

    def _shifted_at(self, x: int, y: int) -> int:
        pixel_count = self.WIDTH * self.HEIGHT
        index = (x + y * self.WIDTH - self.FAIL_SAFE_SHIFT) % pixel_count
        return self.indices[index]

    def get_fail_safe_at(self, x: int, y: int) -> int:
        """Terrain near (x, y), never SEA.

        Sea pixels are replaced by the nearest land found in a '+' pattern
        (below, above, right, left); temperate is the last resort.
        """
        pixel = self._shifted_at(x, y)
        if pixel != self.SEA:
            return pixel

        for dist in range(1, self.FAIL_SAFE_DISTANCE):
            for candidate in (
                self._shifted_at(x, y + dist),
                self._shifted_at(x, y - dist),
                self._shifted_at(x + dist, y),
                self._shifted_at(x - dist, y),
            ):
                if candidate != self.SEA:
                    return candidate

        return self.TEMPERATE1

    def to_image(self) -> Image.Image:
        """Mode "L" image with the raw terrain class as the grey level."""
        return Image.frombytes("L", (self.WIDTH, self.HEIGHT), self.indices)


def decode_world_map_terrain(data: bytes, name: str = "TERRAIN.IMG") -> WorldMapTerrain:
    size = WorldMapTerrain.WIDTH * WorldMapTerrain.HEIGHT
    return WorldMapTerrain(indices=read_bytes(data, WorldMapTerrain.HEADER_SIZE, size, name))
