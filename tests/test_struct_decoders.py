"""Tests for fixed-layout binary decoders and class synthesis."""

import struct

import pytest

from arena_assets.errors import MalformedRecord
from arena_assets.game_data.models import ArmorMaterialType, CharacterClassCategory, ShieldType
from arena_assets.game_data.struct_decoders import (
    allowed_armors_for,
    allowed_shields_for,
    allowed_weapons_for,
    category_for_ordinal,
    decode_artifact_text,
    decode_classes_dat,
    decode_spell_record,
    decode_standard_spells,
    decode_trade_text,
    lockpicking_for,
    synthesize_class_definitions,
)


class TestClassesDat:
    """Test CLASSES.DAT decoding."""

    def test_flags_and_choices(self, arena_files) -> None:
        table = decode_classes_dat(arena_files["CLASSES.DAT"])
        assert len(table.classes) == 18
        assert len(table.choices) == 66

        mage, thief, warrior = table.classes[0], table.classes[6], table.classes[12]
        assert mage.id == 0 and mage.is_spellcaster and not mage.is_thief
        assert thief.id == 6 and thief.is_thief and not thief.has_critical_hit
        assert warrior.id == 12 and warrior.has_critical_hit and not warrior.is_spellcaster

        assert (table.choices[1].a, table.choices[1].b, table.choices[1].c) == (1, 2, 3)

    def test_bit_masks(self) -> None:
        data = bytes([0xFF] + [0] * 17) + bytes(66 * 3)
        flags = decode_classes_dat(data).classes[0]
        assert flags.id == 0x1F
        assert flags.is_spellcaster and flags.has_critical_hit and flags.is_thief

    def test_too_short(self) -> None:
        with pytest.raises(MalformedRecord):
            decode_classes_dat(bytes(215))


class TestClassSynthesis:
    """Test joining CLASSES.DAT style flags with executable tables."""

    @pytest.mark.parametrize(
        "code, expected",
        [
            (0, (ArmorMaterialType.LEATHER, ArmorMaterialType.CHAIN, ArmorMaterialType.PLATE)),
            (1, (ArmorMaterialType.LEATHER, ArmorMaterialType.CHAIN)),
            (2, (ArmorMaterialType.LEATHER,)),
            (3, ()),
        ],
    )
    def test_allowed_armors(self, code, expected) -> None:
        assert allowed_armors_for(code) == expected

    @pytest.mark.parametrize("code", [-1, 4, 255])
    def test_bad_armor_code(self, code) -> None:
        with pytest.raises(MalformedRecord):
            allowed_armors_for(code)

    def test_allowed_shields(self) -> None:
        lists = ((7, 8), (10,))
        assert allowed_shields_for(-1, lists) == (
            ShieldType.BUCKLER,
            ShieldType.ROUND,
            ShieldType.KITE,
            ShieldType.TOWER,
        )
        assert allowed_shields_for(0, lists) == (ShieldType.BUCKLER, ShieldType.ROUND)
        assert allowed_shields_for(1, lists) == (ShieldType.TOWER,)
        with pytest.raises(MalformedRecord):
            allowed_shields_for(2, lists)
        with pytest.raises(MalformedRecord):
            allowed_shields_for(0, ((6,),))

    def test_allowed_weapons(self) -> None:
        assert allowed_weapons_for(-1, ()) == tuple(range(18))
        assert allowed_weapons_for(0, ((0, 4, 17),)) == (0, 4, 17)
        with pytest.raises(MalformedRecord):
            allowed_weapons_for(0, ((18,),))

    def test_category_by_ordinal(self) -> None:
        categories = [category_for_ordinal(i) for i in range(18)]
        assert categories[:6] == [CharacterClassCategory.MAGE] * 6
        assert categories[6:12] == [CharacterClassCategory.THIEF] * 6
        assert categories[12:] == [CharacterClassCategory.WARRIOR] * 6

    def test_lockpicking(self) -> None:
        assert lockpicking_for(1) == 2.0
        assert lockpicking_for(3) == 0.66
        assert lockpicking_for(7) == 0.28
        with pytest.raises(MalformedRecord):
            lockpicking_for(0)

    def test_synthesize(self, exe_data) -> None:
        definitions = synthesize_class_definitions(exe_data)
        assert len(definitions) == 18

        first = definitions[0]
        assert first.name == "Class 0"
        assert first.preferred_attributes == "Attributes 0"
        assert len(first.allowed_armors) == 3
        assert len(first.allowed_shields) == 4
        assert first.allowed_weapons == tuple(range(18))
        assert first.lockpicking == 2.0
        assert first.is_spellcaster and first.class_id == 0

        second = definitions[1]
        assert second.allowed_shields == (ShieldType.BUCKLER, ShieldType.ROUND)
        assert second.allowed_weapons == (0, 4, 17)
        assert definitions[2].allowed_shields == (ShieldType.TOWER,)
        assert definitions[3].allowed_armors == ()

        assert definitions[8].category is CharacterClassCategory.THIEF
        assert definitions[8].is_thief
        assert definitions[17].has_critical_hit
        assert definitions[17].initial_experience_cap == 917


class TestSpells:
    """Test SPELLSG.65 records."""

    def test_record_layout(self) -> None:
        record = (
            b"".join(struct.pack("<HHH", 10 * i, 10 * i + 1, 10 * i + 2) for i in range(6))
            + bytes([2, 9, 4])
            + struct.pack("<H", 0xBEEF)
            + bytes([11, 12, 13, 21, 22, 23, 31, 32, 33])
            + struct.pack("<H", 350)
            + b"Fireball\x00garbage".ljust(33, b"\x00")
        )
        spell = decode_spell_record(record)
        assert spell.params[0] == (0, 1, 2)
        assert spell.params[5] == (50, 51, 52)
        assert (spell.target_type, spell.unknown, spell.element) == (2, 9, 4)
        assert spell.flags == 0xBEEF
        assert spell.effects == (11, 12, 13)
        assert spell.sub_effects == (21, 22, 23)
        assert spell.affected_attributes == (31, 32, 33)
        assert spell.cost == 350
        assert spell.name == "Fireball"
        assert len(spell.name_bytes) == 33

    def test_standard_spells(self, arena_files) -> None:
        spells = decode_standard_spells(arena_files["spellsg.65"])
        assert len(spells) == 128
        assert spells[127].name == "Spell 127"
        assert spells[5].cost == 50

    def test_short_file(self) -> None:
        with pytest.raises(MalformedRecord):
            decode_standard_spells(bytes(85 * 127))


class TestStringBlocks:
    """Test sequential string table decoding."""

    def test_artifact_text_order(self, arena_files) -> None:
        blocks = decode_artifact_text(arena_files["ARTFACT1.DAT"], "ARTFACT1.DAT")
        assert len(blocks) == 16
        assert blocks[0].greetings == ("first 0", "first 1", "first 2")
        assert blocks[0].barter_success[0] == "first 3"
        assert blocks[0].counter_offer[2] == "first 14"
        assert blocks[15].counter_offer[2] == "first 239"

    def test_trade_text_shape(self, arena_files) -> None:
        text = decode_trade_text(arena_files["TAVERN.DAT"], "TAVERN.DAT")
        assert len(text) == 15
        assert all(len(personalities) == 5 for personalities in text)
        assert text[0][0] == ("tavern 0", "tavern 1", "tavern 2")
        assert text[1][0][0] == "tavern 15"
        assert text[14][4][2] == "tavern 224"

    def test_trailing_strings_ignored(self, arena_files) -> None:
        data = arena_files["EQUIP.DAT"] + b"extra\x00"
        assert decode_trade_text(data)[14][4][2] == "equip 224"

    def test_too_few_strings(self, arena_files) -> None:
        with pytest.raises(MalformedRecord, match="ARTFACT2.DAT"):
            decode_artifact_text(arena_files["ARTFACT2.DAT"][:-20], "ARTFACT2.DAT")
