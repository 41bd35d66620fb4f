"""
Line-oriented parsers for the game's delimited text files.

Each file has its own small grammar, handled here by a dedicated state
machine:

- TEMPLATE.DAT: "#KEY" lines followed by free text (keyed templates)
- QUESTION.TXT: numbered questions with a/b/c answers (class quiz)
- DUNGEON.TXT: title line, description lines, "#" separator
- SPELLMKR.TXT: "#NN" indexed descriptions, bare "#" ends the file

Lines are split the way the game's own reader splits them: on '\\n' only,
keeping any '\\r', and without a trailing empty line after a final newline.
"""

import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..errors import IndexOutOfRange, MalformedRecord, UnrecognizedCategoryCode
from .binary import TEXT_ENCODING
from .models import (
    SPELL_MAKER_DESCRIPTION_COUNT,
    CharacterClassCategory,
    DungeonEntry,
    QuestionChoice,
    QuestionRecord,
)

logger = logging.getLogger(__name__)

KEY_CHAR = "#"
CONTINUATION_CHAR = "&"
CATEGORY_MARKER = "(5"

CATEGORY_CODES: Dict[str, CharacterClassCategory] = {
    "l": CharacterClassCategory.MAGE,
    "c": CharacterClassCategory.THIEF,
    "v": CharacterClassCategory.WARRIOR,
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def decode_text(data: bytes) -> str:
    return data.decode(TEXT_ENCODING)


def split_lines(text: str) -> List[str]:
    """Split on '\\n' only; carriage returns stay part of the line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


# =============================================================================
# TEMPLATE.DAT
# =============================================================================

def clean_template_value(value: str) -> str:
    """Normalize line endings, drop trailing newlines and one trailing '&'."""
    value = normalize_newlines(value).rstrip("\n")
    if value.endswith(CONTINUATION_CHAR):
        value = value[:-1]
    return value


def parse_template_dat(text: str) -> Dict[str, str]:
    """Parse keyed templates; the first occurrence of a key wins.

    Keys are stored without the leading '#'. Text before the first key and
    text under an empty key are discarded.
    """
    table: Dict[str, str] = {}
    key = ""
    value: List[str] = []

    def flush() -> None:
        if key and key not in table:
            table[key] = clean_template_value("".join(value))
        elif key:
            logger.debug(f"Skipping duplicate template key {key!r}")

    for line in split_lines(text):
        if line.startswith(KEY_CHAR):
            flush()
            key = line[1:].strip()
            value = []
        else:
            value.append(line + "\n")

    flush()
    return table


# =============================================================================
# QUESTION.TXT
# =============================================================================

class QuestionMode(Enum):
    DESCRIPTION = "description"
    A = "a"
    B = "b"
    C = "c"


_CHOICE_MODES = {
    "a": QuestionMode.A,
    "b": QuestionMode.B,
    "c": QuestionMode.C,
}


def category_from_choice(choice: str) -> CharacterClassCategory:
    """Read the class category code that follows the "(5" marker."""
    position = choice.find(CATEGORY_MARKER)
    code_position = position + len(CATEGORY_MARKER)
    if position < 0 or code_position >= len(choice):
        raise UnrecognizedCategoryCode(
            f"No category marker {CATEGORY_MARKER!r} in choice: {choice.strip()!r}"
        )

    code = choice[code_position]
    category = CATEGORY_CODES.get(code)
    if category is None:
        raise UnrecognizedCategoryCode(
            f"Unknown category code {code!r} in choice: {choice.strip()!r}"
        )
    return category


def _build_question(buffers: Dict[QuestionMode, List[str]]) -> QuestionRecord:
    def choice(mode: QuestionMode) -> QuestionChoice:
        text = "".join(buffers[mode])
        return QuestionChoice(text=text, category=category_from_choice(text))

    return QuestionRecord(
        description="".join(buffers[QuestionMode.DESCRIPTION]),
        a=choice(QuestionMode.A),
        b=choice(QuestionMode.B),
        c=choice(QuestionMode.C),
    )


def parse_question_txt(text: str) -> List[QuestionRecord]:
    """Parse the class selection quiz.

    A line starting with a digit begins a new question; 'a', 'b' and 'c'
    begin the matching answer. Every line, newline included, goes to the
    buffer of the current mode.
    """
    questions: List[QuestionRecord] = []
    buffers: Dict[QuestionMode, List[str]] = {mode: [] for mode in QuestionMode}
    mode = QuestionMode.DESCRIPTION

    for line in split_lines(text):
        first = line[:1]
        if first.isalpha():
            mode = _CHOICE_MODES.get(first, mode)
        elif first.isascii() and first.isdigit():
            if mode is not QuestionMode.DESCRIPTION:
                questions.append(_build_question(buffers))
                buffers = {m: [] for m in QuestionMode}
            mode = QuestionMode.DESCRIPTION

        buffers[mode].append(line + "\n")

    # The last question has no following number line to close it.
    if any(buffers.values()):
        questions.append(_build_question(buffers))

    return questions


# =============================================================================
# DUNGEON.TXT
# =============================================================================

def parse_dungeon_txt(text: str) -> List[DungeonEntry]:
    """Parse (title, description) pairs separated by '#' lines."""
    dungeons: List[DungeonEntry] = []
    title = ""
    description = ""

    for line in split_lines(text):
        if line.startswith(KEY_CHAR):
            if description.endswith("\n"):
                description = description[:-1]
            dungeons.append(DungeonEntry(title=title, description=description))
            title = ""
            description = ""
        elif not title:
            title = line.replace("\r", "", 1)
        else:
            description += normalize_newlines(line + "\n")

    return dungeons


# =============================================================================
# SPELLMKR.TXT
# =============================================================================

def parse_index(digits: str, source: str = "SPELLMKR.TXT") -> int:
    match = _LEADING_INT.match(digits)
    if match is None:
        raise MalformedRecord(f"{source}: bad index {digits!r}")
    return int(match.group(1))


def _store_description(
    slots: List[str], index: int, lines: List[str]
) -> None:
    if not 0 <= index < len(slots):
        raise IndexOutOfRange(
            f"SPELLMKR.TXT: index {index} outside 0..{len(slots) - 1}"
        )
    slots[index] = "".join(lines)


def parse_spell_maker_descriptions(
    text: str, count: int = SPELL_MAKER_DESCRIPTION_COUNT
) -> Tuple[str, ...]:
    """Parse "#NN"-indexed descriptions into a fixed-size table.

    An accumulated description is stored when the next '#' line is seen. A
    '#' line too short to hold an index ends parsing; anything after it is
    ignored.

    Lines are concatenated exactly as read, carriage returns included, so a
    CRLF file keeps its paragraph breaks as "\\r" characters.
    """
    slots = [""] * count
    index: Optional[int] = None
    lines: List[str] = []

    for line in split_lines(text):
        if not line:
            continue

        if line.startswith(KEY_CHAR):
            if index is not None:
                _store_description(slots, index, lines)
            index = None
            lines = []

            if len(line) < 3:
                break
            index = parse_index(line[1:3])
        else:
            if index is None:
                raise MalformedRecord(
                    f"SPELLMKR.TXT: text before the first index: {line.strip()!r}"
                )
            lines.append(line)

    return tuple(slots)
