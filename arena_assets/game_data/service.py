"""
Asset table: every decoded game table, built once and read-only afterwards.

AssetTableLoader runs the decoders in a fixed order against an archive and
the executable side-data. Loading is all-or-nothing: any failure leaves the
loader Uninitialized and no table is exposed. The finished AssetTable holds
only immutable containers, so it can be shared between threads without
locking.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Optional, Tuple

from ..archive import Archive, open_archive
from ..errors import AssetTableStateError, IndexOutOfRange, KeyNotFound
from ..settings.types import ConfigError
from .exe_data import ExecutableSideData
from .models import (
    ArtifactTavernText,
    ClassDefinition,
    ClassGenerationTable,
    DungeonEntry,
    KeyedTextTable,
    NameChunkTable,
    QuestionRecord,
    SpellRecord,
    TradeText,
)
from .name_chunks import decode_name_chunks
from .naming import NameGenerator, RandomSource
from .struct_decoders import (
    decode_artifact_text,
    decode_classes_dat,
    decode_standard_spells,
    decode_trade_text,
    synthesize_class_definitions,
)
from .text_parsers import (
    KEY_CHAR,
    decode_text,
    parse_dungeon_txt,
    parse_question_txt,
    parse_spell_maker_descriptions,
    parse_template_dat,
)
from .world_map import (
    WorldMapMask,
    WorldMapTerrain,
    decode_world_map_masks,
    decode_world_map_terrain,
)

if TYPE_CHECKING:
    from ..settings import AppSettings


class LoadState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class AssetTable:
    """All decoded game tables."""
    exe_data: ExecutableSideData
    template_text: KeyedTextTable
    questions: Tuple[QuestionRecord, ...]
    class_generation: ClassGenerationTable
    class_definitions: Tuple[ClassDefinition, ...]
    dungeons: Tuple[DungeonEntry, ...]
    artifact_text_1: Tuple[ArtifactTavernText, ...]
    artifact_text_2: Tuple[ArtifactTavernText, ...]
    trade_text: TradeText
    name_chunks: NameChunkTable
    standard_spells: Tuple[SpellRecord, ...]
    spell_maker_descriptions: Tuple[str, ...]
    world_map_masks: Tuple[WorldMapMask, ...]
    world_map_terrain: WorldMapTerrain
    name_generator: NameGenerator = field(repr=False, compare=False)

    def get_template_text(self, key: str) -> str:
        """Look up TEMPLATE.DAT text; the leading '#' is optional.

        Raises:
            KeyNotFound: If no template has this key
        """
        normalized = key.strip()
        if normalized.startswith(KEY_CHAR):
            normalized = normalized[1:].strip()
        try:
            return self.template_text[normalized]
        except KeyError:
            raise KeyNotFound(key) from None

    def has_template_text(self, key: str) -> bool:
        try:
            self.get_template_text(key)
        except KeyNotFound:
            return False
        return True

    def get_spell_maker_description(self, index: int) -> str:
        if not 0 <= index < len(self.spell_maker_descriptions):
            raise IndexOutOfRange(
                f"Spell maker description {index} outside 0..{len(self.spell_maker_descriptions) - 1}"
            )
        return self.spell_maker_descriptions[index]

    def generate_name(self, race_id: int, is_male: bool, random: RandomSource) -> str:
        return self.name_generator.generate_name(race_id, is_male, random)


class AssetTableLoader:
    """Builds the AssetTable from an archive.

    State goes Uninitialized -> Loading -> Ready. A failure while Loading
    goes back to Uninitialized and re-raises the original error.
    """

    TEMPLATE_FILE = "TEMPLATE.DAT"
    QUESTION_FILE = "QUESTION.TXT"
    CLASSES_FILE = "CLASSES.DAT"
    DUNGEON_FILE = "DUNGEON.TXT"
    ARTIFACT_FILES = ("ARTFACT1.DAT", "ARTFACT2.DAT")
    TRADE_FILES = {
        "equipment": "EQUIP.DAT",
        "mages_guild": "MUGUILD.DAT",
        "selling": "SELLING.DAT",
        "tavern": "TAVERN.DAT",
    }
    NAME_CHUNKS_FILE = "NAMECHNK.DAT"
    SPELLS_FILE = "SPELLSG.65"
    SPELL_MAKER_FILE = "SPELLMKR.TXT"
    WORLD_MAP_MASKS_FILE = "TAMRIEL.MNU"
    TERRAIN_FILE = "TERRAIN.IMG"

    def __init__(self, archive: Archive, exe_data: ExecutableSideData):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.archive = archive
        self.exe_data = exe_data
        self._state = LoadState.UNINITIALIZED
        self._table: Optional[AssetTable] = None

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def table(self) -> AssetTable:
        """The loaded table.

        Raises:
            AssetTableStateError: If load() has not completed
        """
        if self._state is not LoadState.READY or self._table is None:
            raise AssetTableStateError(f"Asset table is not ready (state: {self._state.value})")
        return self._table

    def load(self) -> AssetTable:
        """Decode every table, or fail without exposing a partial table."""
        if self._state is LoadState.READY and self._table is not None:
            return self._table
        if self._state is LoadState.LOADING:
            raise AssetTableStateError("Asset table is already loading")

        self._state = LoadState.LOADING
        self.logger.info(f"Loading asset table from {self.archive.describe()}")
        try:
            table = self._build()
        except Exception:
            self._state = LoadState.UNINITIALIZED
            self.logger.exception("Asset table loading failed")
            raise

        self._table = table
        self._state = LoadState.READY
        self.logger.info(
            f"Asset table ready: {len(table.template_text)} templates, "
            f"{len(table.questions)} questions, {len(table.dungeons)} dungeons, "
            f"{len(table.name_chunks)} name chunk lists"
        )
        return table

    # === DECODE STEPS ===

    def _read(self, name: str, case_insensitive: bool = False) -> bytes:
        data = self.archive.read(name, case_insensitive=case_insensitive)
        self.logger.debug(f"Decoding {name} ({len(data)} bytes)")
        return data

    def _read_text(self, name: str) -> str:
        return decode_text(self._read(name))

    def _build(self) -> AssetTable:
        template_text = parse_template_dat(self._read_text(self.TEMPLATE_FILE))

        questions = parse_question_txt(self._read_text(self.QUESTION_FILE))
        class_generation = decode_classes_dat(self._read(self.CLASSES_FILE))
        class_definitions = synthesize_class_definitions(self.exe_data)
        dungeons = parse_dungeon_txt(self._read_text(self.DUNGEON_FILE))

        artifact_1, artifact_2 = (
            decode_artifact_text(self._read(name), name) for name in self.ARTIFACT_FILES
        )
        trade_text = TradeText(
            **{
                attr: decode_trade_text(self._read(name), name)
                for attr, name in self.TRADE_FILES.items()
            }
        )

        name_chunks = decode_name_chunks(self._read(self.NAME_CHUNKS_FILE))
        # The spell file's casing differs between the floppy and CD releases.
        standard_spells = decode_standard_spells(self._read(self.SPELLS_FILE, case_insensitive=True))
        spell_maker_descriptions = parse_spell_maker_descriptions(
            self._read_text(self.SPELL_MAKER_FILE)
        )
        world_map_masks = decode_world_map_masks(self._read(self.WORLD_MAP_MASKS_FILE))
        world_map_terrain = decode_world_map_terrain(self._read(self.TERRAIN_FILE))

        return AssetTable(
            exe_data=self.exe_data,
            template_text=MappingProxyType(template_text),
            questions=tuple(questions),
            class_generation=class_generation,
            class_definitions=class_definitions,
            dungeons=tuple(dungeons),
            artifact_text_1=artifact_1,
            artifact_text_2=artifact_2,
            trade_text=trade_text,
            name_chunks=name_chunks,
            standard_spells=standard_spells,
            spell_maker_descriptions=spell_maker_descriptions,
            world_map_masks=world_map_masks,
            world_map_terrain=world_map_terrain,
            name_generator=NameGenerator(name_chunks),
        )


def load_asset_table(settings: "AppSettings") -> AssetTable:
    """Open the configured game directory and load the asset table.

    Raises:
        ConfigError: If the game directory is not configured
    """
    arena_path = settings.arena_path
    if arena_path is None:
        raise ConfigError("Arena path is not set")

    archive = open_archive(arena_path, settings.archive_name)
    exe_data_path = settings.exe_data_path
    if exe_data_path is None:
        raise ConfigError("Executable data path is not set")
    exe_data = ExecutableSideData.from_file(exe_data_path)
    return AssetTableLoader(archive, exe_data).load()


# =============================================================================
# Process-wide table
# =============================================================================

_ASSETS: Optional[AssetTable] = None


def init_assets(settings: "AppSettings") -> AssetTable:
    """Load the asset table once and cache it.

    Safe to call multiple times; later calls return the cached table.
    """
    global _ASSETS
    if _ASSETS is None:
        _ASSETS = load_asset_table(settings)
    return _ASSETS


def set_assets(table: AssetTable) -> None:
    """Install an already loaded table as the process-wide one."""
    global _ASSETS
    _ASSETS = table


def reset_assets_for_tests() -> None:
    global _ASSETS
    _ASSETS = None


def get_assets() -> AssetTable:
    if _ASSETS is None:
        raise AssetTableStateError("Assets not initialized. Call init_assets() at startup.")
    return _ASSETS
