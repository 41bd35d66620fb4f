"""
Procedural NPC name generation.

A name is built by folding a race/gender specific sequence of rules over the
NAMECHNK.DAT fragment lists, drawing from a seeded pseudo-random source. The
rule sequences and chance thresholds are the game's own constants, so the
same seed always yields the same name the game would produce.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, TypeAlias

from ..errors import MalformedRecord, UnrecognizedRule

logger = logging.getLogger(__name__)


# =============================================================================
# Random source
# =============================================================================

class RandomSource(Protocol):
    """Stateful generator of non-negative integers."""

    def next(self) -> int: ...


class ArenaRandom:
    """The game's 32-bit linear congruential generator.

    Not thread safe: every draw advances shared state, so concurrent name
    generation needs one instance per caller or external locking.
    """

    DEFAULT_SEED = 12345
    MULTIPLIER = 7143469

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed(seed)

    def seed(self, value: int) -> None:
        self.value = value & 0xFFFFFFFF

    def next(self) -> int:
        self.value = (self.value * self.MULTIPLIER + 1) & 0xFFFFFFFF
        return (self.value >> 16) & 0xFFFF


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class IndexRule:
    """Pick one fragment from a chunk list."""
    index: int


@dataclass(frozen=True)
class LiteralRule:
    """Append fixed text."""
    text: str


@dataclass(frozen=True)
class IndexChanceRule:
    """Pick one fragment, but only if the chance roll passes."""
    index: int
    chance: int


@dataclass(frozen=True)
class IndexLiteralChanceRule:
    """Pick one fragment followed by fixed text, if the chance roll passes."""
    index: int
    text: str
    chance: int


NameRule: TypeAlias = IndexRule | LiteralRule | IndexChanceRule | IndexLiteralChanceRule
RuleSequence: TypeAlias = Tuple[NameRule, ...]


def _standard(first: int, second: int, third: int, fourth: int) -> RuleSequence:
    return (IndexRule(first), IndexRule(second), LiteralRule(" "), IndexRule(third), IndexRule(fourth))


_RACES_8_TO_16: RuleSequence = (IndexRule(47), IndexChanceRule(48, 75), IndexRule(49))
_RACES_17_TO_20: RuleSequence = (IndexRule(50), IndexChanceRule(51, 75), IndexRule(52))

# Indexed by race_id * 2 + (0 if male else 1).
NAME_RULES: Tuple[RuleSequence, ...] = (
    # Race 0.
    _standard(0, 1, 4, 5),
    _standard(2, 3, 4, 5),
    # Race 1.
    (IndexRule(6), IndexRule(7), IndexRule(8), IndexChanceRule(9, 75)),
    (IndexRule(6), IndexRule(7), IndexRule(8), IndexChanceRule(9, 75), IndexRule(10)),
    # Race 2.
    _standard(11, 12, 15, 16) + (LiteralRule("sen"),),
    _standard(13, 14, 15, 16) + (LiteralRule("sen"),),
    # Race 3.
    _standard(17, 18, 21, 22),
    _standard(19, 20, 21, 22),
    # Race 4.
    _standard(23, 24, 27, 28),
    _standard(25, 26, 27, 28),
    # Race 5.
    _standard(29, 30, 33, 34),
    _standard(31, 32, 33, 34),
    # Race 6.
    _standard(35, 36, 39, 40),
    _standard(37, 38, 39, 40),
    # Race 7.
    _standard(41, 42, 45, 46),
    _standard(43, 44, 45, 46),
    # Races 8 to 16.
    *(_RACES_8_TO_16,) * 18,
    # Races 17 to 20.
    *(_RACES_17_TO_20,) * 8,
    # Race 21.
    (IndexRule(50), IndexRule(52), IndexRule(53)),
    (IndexRule(50), IndexRule(52), IndexRule(53)),
    # Race 22.
    (IndexLiteralChanceRule(54, " ", 25), IndexRule(55), IndexRule(56), IndexRule(57)),
    (IndexLiteralChanceRule(54, " ", 25), IndexRule(55), IndexRule(56), IndexRule(57)),
    # Race 23.
    (IndexRule(55), IndexRule(56), IndexRule(57)),
    (IndexRule(55), IndexRule(56), IndexRule(57)),
)

RACE_COUNT = len(NAME_RULES) // 2


def rule_slot(race_id: int, is_male: bool) -> int:
    return race_id * 2 + (0 if is_male else 1)


def referenced_indices(rules: Sequence[RuleSequence]) -> List[int]:
    """Every chunk index used by a rule table, in order of appearance."""
    indices: List[int] = []
    for sequence in rules:
        for rule in sequence:
            match rule:
                case IndexRule(index=index) | IndexChanceRule(index=index) | IndexLiteralChanceRule(index=index):
                    indices.append(index)
                case LiteralRule():
                    pass
                case _:
                    raise UnrecognizedRule(f"Bad rule {rule!r}")
    return indices


# =============================================================================
# Composition
# =============================================================================

def _pick(chunk_lists: Sequence[Sequence[str]], index: int, random: RandomSource) -> str:
    if not 0 <= index < len(chunk_lists):
        raise MalformedRecord(f"Name chunk index {index} outside 0..{len(chunk_lists) - 1}")
    chunk = chunk_lists[index]
    if not chunk:
        raise MalformedRecord(f"Name chunk {index} is empty")
    return chunk[random.next() % len(chunk)]


def _passes(chance: int, random: RandomSource) -> bool:
    # "<=" lets a roll of exactly `chance` through, as the game does.
    return random.next() % 100 <= chance


def compose_name(
    rules: Sequence[NameRule],
    chunk_lists: Sequence[Sequence[str]],
    random: RandomSource,
) -> str:
    """Apply one rule sequence left to right."""
    parts: List[str] = []
    for rule in rules:
        match rule:
            case IndexRule(index=index):
                parts.append(_pick(chunk_lists, index, random))
            case LiteralRule(text=text):
                parts.append(text)
            case IndexChanceRule(index=index, chance=chance):
                if _passes(chance, random):
                    parts.append(_pick(chunk_lists, index, random))
            case IndexLiteralChanceRule(index=index, text=text, chance=chance):
                if _passes(chance, random):
                    parts.append(_pick(chunk_lists, index, random) + text)
            case _:
                raise UnrecognizedRule(f"Bad rule {rule!r}")
    return "".join(parts)


class NameGenerator:
    """Generates NPC names from the decoded name chunk lists."""

    def __init__(
        self,
        chunk_lists: Sequence[Sequence[str]],
        rules: Optional[Sequence[RuleSequence]] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.chunk_lists = chunk_lists
        self.rules: Sequence[RuleSequence] = NAME_RULES if rules is None else rules

        for index in referenced_indices(self.rules):
            if not 0 <= index < len(chunk_lists):
                raise MalformedRecord(
                    f"Name rules reference chunk {index}, but only {len(chunk_lists)} chunk(s) exist"
                )
        self.logger.debug(
            f"NameGenerator ready: {len(self.rules)} rule sequence(s), {len(chunk_lists)} chunk list(s)"
        )

    def rules_for(self, race_id: int, is_male: bool) -> RuleSequence:
        slot = rule_slot(race_id, is_male)
        if race_id < 0 or not 0 <= slot < len(self.rules):
            raise UnrecognizedRule(
                f"No name rules for race {race_id} ({'male' if is_male else 'female'})"
            )
        return self.rules[slot]

    def generate_name(self, race_id: int, is_male: bool, random: RandomSource) -> str:
        """Generate a name; the result depends only on the inputs and the random sequence."""
        return compose_name(self.rules_for(race_id, is_male), self.chunk_lists, random)
