"""Tests for world map masks and terrain."""

import pytest
from PIL import Image

from arena_assets.errors import MalformedRecord
from arena_assets.game_data.models import ClimateType
from arena_assets.game_data.world_map import (
    MASK_DATA_OFFSET,
    MASK_RECTS,
    Rect,
    WorldMapMask,
    WorldMapTerrain,
    decode_world_map_masks,
    decode_world_map_terrain,
    mask_byte_count,
    padded_width,
)


class TestMasks:
    """Test TAMRIEL.MNU mask regions."""

    def test_padded_width(self) -> None:
        assert padded_width(8) == 1
        assert padded_width(86) == 11
        assert padded_width(131) == 17

    def test_byte_counts_cover_consumed_data(self, arena_files) -> None:
        masks = decode_world_map_masks(arena_files["TAMRIEL.MNU"])
        assert len(masks) == 10
        for mask, rect in zip(masks, MASK_RECTS):
            assert mask.rect == rect
            assert len(mask.data) == padded_width(rect.width) * rect.height
        total = sum(mask_byte_count(rect) for rect in MASK_RECTS)
        assert len(arena_files["TAMRIEL.MNU"]) == MASK_DATA_OFFSET + total

    def test_only_last_region_is_exit_button(self, arena_files) -> None:
        masks = decode_world_map_masks(arena_files["TAMRIEL.MNU"])
        assert [m.is_exit_button for m in masks] == [False] * 9 + [True]

    def test_get_uses_screen_coordinates(self, arena_files) -> None:
        first = decode_world_map_masks(arena_files["TAMRIEL.MNU"])[0]
        assert first.get(37, 32)
        assert not first.get(38, 32)
        assert not first.get(0, 0)

    def test_bit_order(self) -> None:
        rect = Rect(10, 20, 12, 2)
        mask = WorldMapMask(data=bytes([0b01000000, 0b00010000, 0, 0]), rect=rect)
        assert mask.get(11, 20)
        assert mask.get(21, 20)
        assert not mask.get(10, 20)
        assert not mask.get(11, 21)

    def test_wrong_size(self) -> None:
        with pytest.raises(MalformedRecord):
            WorldMapMask(data=b"\x00", rect=Rect(0, 0, 16, 1))

    def test_truncated_file(self, arena_files) -> None:
        with pytest.raises(MalformedRecord):
            decode_world_map_masks(arena_files["TAMRIEL.MNU"][:-1])

    def test_to_image(self) -> None:
        mask = WorldMapMask(data=bytes([0x80, 0x00]), rect=Rect(0, 0, 9, 1))
        image = mask.to_image()
        assert isinstance(image, Image.Image)
        assert image.mode == "1"
        assert image.size == (9, 1)
        assert image.getpixel((0, 0)) == 255
        assert image.getpixel((1, 0)) == 0


class TestTerrain:
    """Test TERRAIN.IMG lookups."""

    @pytest.fixture
    def terrain(self, arena_files) -> WorldMapTerrain:
        return decode_world_map_terrain(arena_files["TERRAIN.IMG"])

    def test_header_skipped(self, terrain) -> None:
        assert terrain.get_at(0, 0) == WorldMapTerrain.TEMPERATE1
        assert terrain.get_at(150, 100) == WorldMapTerrain.SEA

    def test_get_at_bounds(self, terrain) -> None:
        with pytest.raises(IndexError):
            terrain.get_at(320, 0)

    def test_fail_safe_on_land(self, terrain) -> None:
        assert terrain.get_fail_safe_at(10, 10) == WorldMapTerrain.TEMPERATE1

    def test_fail_safe_finds_nearest_land(self) -> None:
        grid = bytearray(320 * 200)
        # Lookups are shifted 12 pixels left, so (x, y) reads pixel x - 12.
        grid[(50 - 12) + 55 * 320] = WorldMapTerrain.DESERT1
        grid[(50 - 12) + 45 * 320] = WorldMapTerrain.MOUNTAIN1
        terrain = WorldMapTerrain(bytes(grid))
        assert terrain.get_fail_safe_at(50, 50) == WorldMapTerrain.DESERT1

    def test_fail_safe_all_sea(self) -> None:
        terrain = WorldMapTerrain(bytes(320 * 200))
        assert terrain.get_fail_safe_at(100, 100) == WorldMapTerrain.TEMPERATE1

    def test_climate_types(self) -> None:
        assert WorldMapTerrain.to_climate_type(251) is ClimateType.TEMPERATE
        assert WorldMapTerrain.to_climate_type(250) is ClimateType.MOUNTAIN
        assert WorldMapTerrain.to_climate_type(253) is ClimateType.DESERT
        with pytest.raises(MalformedRecord):
            WorldMapTerrain.to_climate_type(0)

    def test_wrong_size(self) -> None:
        with pytest.raises(MalformedRecord):
            decode_world_map_terrain(bytes(100))

    def test_to_image(self, terrain) -> None:
        image = terrain.to_image()
        assert image.mode == "L"
        assert image.size == (320, 200)
        assert image.getpixel((150, 100)) == 0
