"""
preserve.py - The characters-to-preserve list.

Some CK3 characters are referenced from the game's own script files and must
survive the purge. They are listed in a small text file:

    # comments run to the end of the line
    keep_as_is = { animation_test_1 12345 }
    after_bookmark_date = {
        67890
    }

Characters under keep_as_is are only pinned. Characters under
after_bookmark_date are pinned and also moved after the bookmark: born one
day after it, dead two days after it, with every dated history entry other
than birth and death dropped.

Module: ir_to_ck3.preserve
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TYPE_CHECKING

from .errors import ConversionError
from .game_date import GameDate

if TYPE_CHECKING:
    from .character_collection import CharacterCollection

logger = logging.getLogger(__name__)

KEEP_AS_IS = "keep_as_is"
AFTER_BOOKMARK_DATE = "after_bookmark_date"

TOKEN_RE = re.compile(r'[{}=]|[^\s{}=#]+')


@dataclass
class PreserveList:
    keep_as_is: List[str] = field(default_factory=list)
    after_bookmark_date: List[str] = field(default_factory=list)


def _tokens(text: str):
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.split('#', 1)[0]
        for token in TOKEN_RE.findall(line):
            yield line_number, token


def parse_preserve_list(text: str) -> PreserveList:
    """
    Parse a characters-to-preserve list.

    Blocks with other names are logged and skipped.

    Raises:
        ConversionError: If a block is malformed or never closed.
    """
    preserve_list = PreserveList()
    tokens = _tokens(text)
    for line_number, name in tokens:
        if name in ('{', '}', '='):
            raise ConversionError(f"Unexpected '{name}' on line {line_number} of characters to preserve")
        _, equals = next(tokens, (line_number, None))
        _, opening = next(tokens, (line_number, None))
        if equals != '=' or opening != '{':
            raise ConversionError(f"Expected '{name} = {{' on line {line_number} of characters to preserve")

        ids = []
        for _, token in tokens:
            if token == '}':
                break
            if token in ('{', '='):
                raise ConversionError(f"Unexpected '{token}' in block '{name}' of characters to preserve")
            ids.append(token)
        else:
            raise ConversionError(f"Block '{name}' from line {line_number} of characters to preserve is not closed")

        if name == KEEP_AS_IS:
            preserve_list.keep_as_is.extend(ids)
        elif name == AFTER_BOOKMARK_DATE:
            preserve_list.after_bookmark_date.extend(ids)
        else:
            logger.warning(f"Ignoring unknown block '{name}' in characters to preserve")
    return preserve_list


def read_preserve_list(path: Path) -> PreserveList:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Characters to preserve file not found: {path}")
    return parse_preserve_list(path.read_text(encoding='utf-8'))


def apply_preserve_list(characters: "CharacterCollection", preserve_list: PreserveList,
                        bookmark_date: GameDate) -> int:
    """
    Pin the listed characters; ids not in the store are skipped.

    Returns:
        int: Number of characters pinned.
    """
    pinned = 0
    for character_id in preserve_list.keep_as_is:
        character = characters.get(character_id)
        if character is None:
            continue
        character.is_non_removable = True
        pinned += 1

    for character_id in preserve_list.after_bookmark_date:
        character = characters.get(character_id)
        if character is None:
            continue
        character.is_non_removable = True
        character.birth_date = bookmark_date.change_by_days(1)
        character.death_date = bookmark_date.change_by_days(2)
        character.history.clear_dated_entries(keep=("birth", "death"))
        pinned += 1
    logger.debug(f"Pinned {pinned} characters to preserve.")
    return pinned
