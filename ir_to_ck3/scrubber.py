"""
scrubber.py - Remove references to deleted characters from effect scripts.

Effects such as "break_alliance = character:ID" are stored as free text in
the 'effects' history field. When characters are removed, those clauses are
cut out, blocks left empty by the cut ("{ }") are removed, and entries left
with no content are dropped.

Module: ir_to_ck3.scrubber
"""

from __future__ import annotations

import logging
import re
from typing import Collection, Iterable

from .character import Character
from .history import LiteralHistoryField

logger = logging.getLogger(__name__)

REFERENCE_COMMANDS = ("break_alliance", "make_concubine")

EMPTY_BLOCK_RE = re.compile(r'\{\s*\}')


def build_reference_regex(removed_ids: Collection[str], commands: Iterable[str] = REFERENCE_COMMANDS) -> re.Pattern:
    """
    Regex matching "<command> = character:<id>" for the given ids, with any
    whitespace before the clause.
    """
    ids_group = '|'.join(re.escape(character_id) for character_id in sorted(removed_ids, key=len, reverse=True))
    commands_group = '|'.join(re.escape(command) for command in commands)
    return re.compile(r'\s*\b(?:' + commands_group + r')\s*=\s*character:(?:' + ids_group + r')(?![\w:.-])')


def remove_empty_blocks(text: str) -> str:
    """
    Remove "{ }" blocks that are not the value of an assignment.

    "effect = { }" is left alone; a stray "{ }" (or one that is the whole
    text) is deleted together with the whitespace before it.
    """
    result = []
    position = 0
    for match in EMPTY_BLOCK_RE.finditer(text):
        preceding = text[:match.start()].rstrip()
        if preceding.endswith('='):
            continue
        result.append(text[position:len(preceding)] if len(preceding) >= position else '')
        position = match.end()
    result.append(text[position:])
    return ''.join(result)


def is_empty_entry(value) -> bool:
    if not isinstance(value, str):
        return False
    trimmed = value.strip()
    if not trimmed:
        return True
    if not (trimmed.startswith('{') and trimmed.endswith('}')):
        return False
    return trimmed[1:-1].strip() == ''


def _scrub_entry(value: str, reference_re: re.Pattern) -> str:
    scrubbed = reference_re.sub('', value)
    if scrubbed == value:
        return value
    return remove_empty_blocks(scrubbed)


def remove_character_references_from_history(characters: Iterable[Character], removed_ids: Collection[str]) -> int:
    """
    Scrub references to removed characters from the effects of the given characters.

    Args:
        characters: Surviving characters.
        removed_ids: Ids of removed characters.

    Returns:
        int: Number of effect entries changed or removed.
    """
    if not removed_ids:
        return 0
    reference_re = build_reference_regex(removed_ids)
    touched = 0
    for character in characters:
        effects_field = character.history.fields.get("effects")
        if effects_field is None:
            continue
        if not isinstance(effects_field, LiteralHistoryField):
            logger.warning(f"Effects history field for character {character.id} is not a literal field!")
            continue
        if effects_field.entries_count == 0:
            continue

        changed = effects_field.transform_all_entries(lambda value: _scrub_entry(value, reference_re))
        removed = effects_field.remove_all_entries(is_empty_entry)
        touched += changed + removed
    return touched

