"""
Data models for decoded game data.

Plain, immutable records produced by the decoders. No I/O and no parsing
logic lives here, only the shapes, the fixed table sizes, and small derived
properties.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple, TypeAlias

from .binary import TEXT_ENCODING


# =============================================================================
# Fixed table sizes
# =============================================================================

CLASS_COUNT = 18
CHOICE_COUNT = 66
CHOICE_SIZE = 3

SPELL_COUNT = 128
SPELL_RECORD_SIZE = 85
SPELL_NAME_OFFSET = 52
SPELL_NAME_SIZE = SPELL_RECORD_SIZE - SPELL_NAME_OFFSET
SPELL_PARAM_COUNT = 6

SPELL_MAKER_DESCRIPTION_COUNT = 43

ARTIFACT_BLOCK_COUNT = 16
ARTIFACT_VARIANT_COUNT = 3

TRADE_FUNCTION_COUNT = 15
TRADE_PERSONALITY_COUNT = 5
TRADE_VARIANT_COUNT = 3

# Bit layout shared by CLASSES.DAT flag bytes and the executable's
# class-number-to-id table.
CLASS_ID_MASK = 0x1F
SPELLCASTER_MASK = 0x20
CRITICAL_HIT_MASK = 0x40
THIEF_MASK = 0x80


# =============================================================================
# Type aliases
# =============================================================================

KeyedTextTable: TypeAlias = Mapping[str, str]
"""Template key (without the leading '#') to cleaned text."""

NameChunkTable: TypeAlias = Tuple[Tuple[str, ...], ...]
"""Positional list of name-fragment lists from NAMECHNK.DAT."""

StringTriple: TypeAlias = Tuple[str, str, str]

TradeFunctionArray: TypeAlias = Tuple[Tuple[Tuple[str, ...], ...], ...]
"""function -> personality -> random variant."""


# =============================================================================
# Enumerations
# =============================================================================

class CharacterClassCategory(Enum):
    """The three class archetypes."""
    MAGE = "Mage"
    THIEF = "Thief"
    WARRIOR = "Warrior"


class ArmorMaterialType(Enum):
    LEATHER = "Leather"
    CHAIN = "Chain"
    PLATE = "Plate"


class ShieldType(Enum):
    BUCKLER = "Buckler"
    ROUND = "Round"
    KITE = "Kite"
    TOWER = "Tower"


class ClimateType(Enum):
    TEMPERATE = "Temperate"
    MOUNTAIN = "Mountain"
    DESERT = "Desert"


# =============================================================================
# Character creation
# =============================================================================

@dataclass(frozen=True)
class QuestionChoice:
    text: str
    category: CharacterClassCategory


@dataclass(frozen=True)
class QuestionRecord:
    """One character creation question with its three answers."""
    description: str
    a: QuestionChoice
    b: QuestionChoice
    c: QuestionChoice

    @property
    def choices(self) -> Tuple[QuestionChoice, QuestionChoice, QuestionChoice]:
        return (self.a, self.b, self.c)


@dataclass(frozen=True)
class ClassGenerationData:
    """One decoded CLASSES.DAT flag byte."""
    id: int
    is_spellcaster: bool
    has_critical_hit: bool
    is_thief: bool

    @classmethod
    def from_flags(cls, value: int) -> "ClassGenerationData":
        return cls(
            id=value & CLASS_ID_MASK,
            is_spellcaster=(value & SPELLCASTER_MASK) != 0,
            has_critical_hit=(value & CRITICAL_HIT_MASK) != 0,
            is_thief=(value & THIEF_MASK) != 0,
        )


@dataclass(frozen=True)
class ChoiceData:
    """Answer-count combination mapped to a class index."""
    a: int
    b: int
    c: int


@dataclass(frozen=True)
class ClassGenerationTable:
    classes: Tuple[ClassGenerationData, ...]
    choices: Tuple[ChoiceData, ...]


@dataclass(frozen=True)
class ClassDefinition:
    """A playable character class, joined from CLASSES.DAT and executable data."""
    name: str
    preferred_attributes: str
    allowed_armors: Tuple[ArmorMaterialType, ...]
    allowed_shields: Tuple[ShieldType, ...]
    allowed_weapons: Tuple[int, ...]
    category: CharacterClassCategory
    lockpicking: float
    health_die: int
    initial_experience_cap: int
    class_id: int
    is_spellcaster: bool
    is_thief: bool
    has_critical_hit: bool


# =============================================================================
# Flavor text
# =============================================================================

@dataclass(frozen=True)
class DungeonEntry:
    title: str
    description: str


@dataclass(frozen=True)
class ArtifactTavernText:
    """Tavern dialogue for one artifact rumour block."""
    greetings: StringTriple
    barter_success: StringTriple
    offer_refused: StringTriple
    barter_failure: StringTriple
    counter_offer: StringTriple


@dataclass(frozen=True)
class TradeText:
    """Shopkeeper dialogue from the four trade text files."""
    equipment: TradeFunctionArray
    mages_guild: TradeFunctionArray
    selling: TradeFunctionArray
    tavern: TradeFunctionArray


# =============================================================================
# Spells
# =============================================================================

@dataclass(frozen=True)
class SpellRecord:
    """One fixed-size record from SPELLSG.65."""
    params: Tuple[Tuple[int, int, int], ...]
    target_type: int
    unknown: int
    element: int
    flags: int
    effects: Tuple[int, int, int]
    sub_effects: Tuple[int, int, int]
    affected_attributes: Tuple[int, int, int]
    cost: int
    name_bytes: bytes

    @property
    def name(self) -> str:
        """Spell name up to the first NUL in the name buffer."""
        return self.name_bytes.split(b"\x00", 1)[0].decode(TEXT_ENCODING)
