"""
Decoders for Arena's data files and the asset table built from them.

Low-level byte and text decoders live in their own modules; AssetTableLoader
runs them in a fixed order and exposes the result as an immutable
AssetTable.
"""

from .service import (
    AssetTable,
    AssetTableLoader,
    LoadState,
    get_assets,
    init_assets,
    load_asset_table,
    reset_assets_for_tests,
    set_assets,
)
from .exe_data import CharacterClassTables, ExecutableSideData
from .models import (
    ArmorMaterialType,
    ArtifactTavernText,
    CharacterClassCategory,
    ChoiceData,
    ClassDefinition,
    ClassGenerationData,
    ClassGenerationTable,
    ClimateType,
    DungeonEntry,
    QuestionChoice,
    QuestionRecord,
    ShieldType,
    SpellRecord,
    TradeText,
)
from .name_chunks import decode_name_chunks, encode_name_chunks
from .naming import ArenaRandom, NameGenerator, RandomSource
from .world_map import Rect, WorldMapMask, WorldMapTerrain

__all__ = [
    # Lifecycle
    "AssetTable",
    "AssetTableLoader",
    "LoadState",
    "load_asset_table",
    "init_assets",
    "get_assets",
    "set_assets",
    "reset_assets_for_tests",
    # Executable side-data
    "CharacterClassTables",
    "ExecutableSideData",
    # Records
    "ArmorMaterialType",
    "ArtifactTavernText",
    "CharacterClassCategory",
    "ChoiceData",
    "ClassDefinition",
    "ClassGenerationData",
    "ClassGenerationTable",
    "ClimateType",
    "DungeonEntry",
    "QuestionChoice",
    "QuestionRecord",
    "ShieldType",
    "SpellRecord",
    "TradeText",
    # Names
    "ArenaRandom",
    "NameGenerator",
    "RandomSource",
    "decode_name_chunks",
    "encode_name_chunks",
    # World map
    "Rect",
    "WorldMapMask",
    "WorldMapTerrain",
]
