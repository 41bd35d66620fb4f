"""
Decoders for fixed-layout binary game files.

- CLASSES.DAT: class flag bytes and answer-count lookup triples
- SPELLSG.65: fixed 85-byte spell records
- ARTFACT1.DAT / ARTFACT2.DAT and the trade text files: NUL-terminated
  strings filling fixed-size nested arrays in a fixed order

Class definitions are synthesized here as well, by joining CLASSES.DAT with
the per-class tables taken from the game executable.
"""

import logging
from typing import List, Tuple

from ..errors import MalformedRecord
from .binary import ByteCursor, read_bytes, read_u16, read_u8
from .exe_data import ExecutableSideData
from .models import (
    ARTIFACT_BLOCK_COUNT,
    ARTIFACT_VARIANT_COUNT,
    CHOICE_COUNT,
    CHOICE_SIZE,
    CLASS_COUNT,
    SPELL_COUNT,
    SPELL_NAME_OFFSET,
    SPELL_NAME_SIZE,
    SPELL_PARAM_COUNT,
    SPELL_RECORD_SIZE,
    TRADE_FUNCTION_COUNT,
    TRADE_PERSONALITY_COUNT,
    TRADE_VARIANT_COUNT,
    ArmorMaterialType,
    ArtifactTavernText,
    CharacterClassCategory,
    ChoiceData,
    ClassDefinition,
    ClassGenerationData,
    ClassGenerationTable,
    ShieldType,
    SpellRecord,
    TradeFunctionArray,
)

logger = logging.getLogger(__name__)

NO_INDEX = -1

# Armor tier code -> allowed armor materials.
ALLOWED_ARMORS: Tuple[Tuple[ArmorMaterialType, ...], ...] = (
    (ArmorMaterialType.LEATHER, ArmorMaterialType.CHAIN, ArmorMaterialType.PLATE),
    (ArmorMaterialType.LEATHER, ArmorMaterialType.CHAIN),
    (ArmorMaterialType.LEATHER,),
    (),
)

# Shields share an item id space with armor; shield ids start at 7.
FIRST_SHIELD_ID = 7
SHIELD_ID_MAPPINGS: Tuple[ShieldType, ...] = (
    ShieldType.BUCKLER,
    ShieldType.ROUND,
    ShieldType.KITE,
    ShieldType.TOWER,
)

# Weapon ids as listed in the executable (staff, sword, ..., long bow).
WEAPON_IDS: Tuple[int, ...] = tuple(range(18))

CLASSES_DAT_SIZE = CLASS_COUNT + CHOICE_COUNT * CHOICE_SIZE
CLASSES_PER_CATEGORY = CLASS_COUNT // 3


# =============================================================================
# CLASSES.DAT
# =============================================================================

def decode_classes_dat(data: bytes) -> ClassGenerationTable:
    """Decode the class flag bytes and the answer lookup triples."""
    if len(data) < CLASSES_DAT_SIZE:
        raise MalformedRecord(
            f"CLASSES.DAT: expected at least {CLASSES_DAT_SIZE} bytes, got {len(data)}"
        )

    classes = tuple(
        ClassGenerationData.from_flags(read_u8(data, i, "CLASSES.DAT"))
        for i in range(CLASS_COUNT)
    )

    choices: List[ChoiceData] = []
    for i in range(CHOICE_COUNT):
        a, b, c = read_bytes(data, CLASS_COUNT + CHOICE_SIZE * i, CHOICE_SIZE, "CLASSES.DAT")
        choices.append(ChoiceData(a=a, b=b, c=c))

    return ClassGenerationTable(classes=classes, choices=tuple(choices))


def allowed_armors_for(code: int) -> Tuple[ArmorMaterialType, ...]:
    """Resolve a one-digit armor tier code (0 allows the most)."""
    if not 0 <= code < len(ALLOWED_ARMORS):
        raise MalformedRecord(f"Bad allowed armors value {code}")
    return ALLOWED_ARMORS[code]


def allowed_shields_for(index: int, shield_lists: Tuple[Tuple[int, ...], ...]) -> Tuple[ShieldType, ...]:
    """Resolve a shield list index; -1 allows every shield."""
    if index == NO_INDEX:
        return SHIELD_ID_MAPPINGS
    if not 0 <= index < len(shield_lists):
        raise MalformedRecord(f"Bad allowed shields index {index}")

    shields: List[ShieldType] = []
    for shield_id in shield_lists[index]:
        position = shield_id - FIRST_SHIELD_ID
        if not 0 <= position < len(SHIELD_ID_MAPPINGS):
            raise MalformedRecord(f"Bad shield id {shield_id} in list {index}")
        shields.append(SHIELD_ID_MAPPINGS[position])
    return tuple(shields)


def allowed_weapons_for(index: int, weapon_lists: Tuple[Tuple[int, ...], ...]) -> Tuple[int, ...]:
    """Resolve a weapon list index; -1 allows every weapon."""
    if index == NO_INDEX:
        return WEAPON_IDS
    if not 0 <= index < len(weapon_lists):
        raise MalformedRecord(f"Bad allowed weapons index {index}")

    weapons: List[int] = []
    for weapon in weapon_lists[index]:
        if not 0 <= weapon < len(WEAPON_IDS):
            raise MalformedRecord(f"Bad weapon id {weapon} in list {index}")
        weapons.append(WEAPON_IDS[weapon])
    return tuple(weapons)


def category_for_ordinal(ordinal: int) -> CharacterClassCategory:
    """Classes are stored as six mages, six thieves, then six warriors."""
    if ordinal < CLASSES_PER_CATEGORY:
        return CharacterClassCategory.MAGE
    if ordinal < CLASSES_PER_CATEGORY * 2:
        return CharacterClassCategory.THIEF
    return CharacterClassCategory.WARRIOR


def lockpicking_for(divisor: int) -> float:
    if divisor <= 0:
        raise MalformedRecord(f"Bad lockpicking divisor {divisor}")
    return (200 // divisor) / 100.0


def synthesize_class_definitions(exe_data: ExecutableSideData) -> Tuple[ClassDefinition, ...]:
    """Build the 18 class definitions from the executable's class tables."""
    classes = exe_data.classes
    definitions: List[ClassDefinition] = []

    for i in range(CLASS_COUNT):
        flags = ClassGenerationData.from_flags(classes.class_numbers_to_ids[i])
        definitions.append(
            ClassDefinition(
                name=classes.class_names[i],
                preferred_attributes=classes.preferred_attributes[i],
                allowed_armors=allowed_armors_for(classes.allowed_armors[i]),
                allowed_shields=allowed_shields_for(
                    classes.allowed_shields_indices[i], classes.allowed_shields_lists
                ),
                allowed_weapons=allowed_weapons_for(
                    classes.allowed_weapons_indices[i], classes.allowed_weapons_lists
                ),
                category=category_for_ordinal(i),
                lockpicking=lockpicking_for(classes.lockpicking_divisors[i]),
                health_die=classes.health_dice[i],
                initial_experience_cap=classes.initial_experience_caps[i],
                class_id=flags.id,
                is_spellcaster=flags.is_spellcaster,
                is_thief=flags.is_thief,
                has_critical_hit=flags.has_critical_hit,
            )
        )

    return tuple(definitions)


# =============================================================================
# SPELLSG.65
# =============================================================================

def _triple(values: bytes) -> Tuple[int, int, int]:
    return (values[0], values[1], values[2])


def decode_spell_record(data: bytes, offset: int = 0) -> SpellRecord:
    """Decode one 85-byte spell record starting at offset.

    Six parameter triples fill bytes 0-35; the single-byte fields start at 36.
    """
    record = read_bytes(data, offset, SPELL_RECORD_SIZE, "SPELLSG.65")

    params = tuple(
        (
            read_u16(record, 6 * i),
            read_u16(record, 6 * i + 2),
            read_u16(record, 6 * i + 4),
        )
        for i in range(SPELL_PARAM_COUNT)
    )

    return SpellRecord(
        params=params,
        target_type=record[36],
        unknown=record[37],
        element=record[38],
        flags=read_u16(record, 39),
        effects=_triple(record[41:44]),
        sub_effects=_triple(record[44:47]),
        affected_attributes=_triple(record[47:50]),
        cost=read_u16(record, 50),
        name_bytes=record[SPELL_NAME_OFFSET:SPELL_NAME_OFFSET + SPELL_NAME_SIZE],
    )


def decode_standard_spells(data: bytes) -> Tuple[SpellRecord, ...]:
    expected = SPELL_COUNT * SPELL_RECORD_SIZE
    if len(data) < expected:
        raise MalformedRecord(
            f"SPELLSG.65: expected {expected} bytes for {SPELL_COUNT} spells, got {len(data)}"
        )
    return tuple(
        decode_spell_record(data, i * SPELL_RECORD_SIZE) for i in range(SPELL_COUNT)
    )


# =============================================================================
# Sequential string blocks
# =============================================================================

def _read_strings(cursor: ByteCursor, count: int) -> Tuple[str, ...]:
    strings: List[str] = []
    for _ in range(count):
        if cursor.at_end:
            raise MalformedRecord(
                f"{cursor.name}: ran out of strings at offset {cursor.offset}"
            )
        strings.append(cursor.cstring())
    return tuple(strings)


def decode_artifact_text(data: bytes, name: str = "ARTFACT.DAT") -> Tuple[ArtifactTavernText, ...]:
    """Fill the 16 artifact tavern text blocks in file order."""
    cursor = ByteCursor(data, name=name)
    blocks: List[ArtifactTavernText] = []

    def triple() -> Tuple[str, str, str]:
        a, b, c = _read_strings(cursor, ARTIFACT_VARIANT_COUNT)
        return (a, b, c)

    for _ in range(ARTIFACT_BLOCK_COUNT):
        blocks.append(
            ArtifactTavernText(
                greetings=triple(),
                barter_success=triple(),
                offer_refused=triple(),
                barter_failure=triple(),
                counter_offer=triple(),
            )
        )

    logger.debug(f"{name}: {cursor.remaining} trailing byte(s) after artifact text")
    return tuple(blocks)


def decode_trade_text(data: bytes, name: str = "TRADE.DAT") -> TradeFunctionArray:
    """Fill a function x personality x variant string array in file order."""
    cursor = ByteCursor(data, name=name)
    return tuple(
        tuple(
            _read_strings(cursor, TRADE_VARIANT_COUNT)
            for _ in range(TRADE_PERSONALITY_COUNT)
        )
        for _ in range(TRADE_FUNCTION_COUNT)
    )
