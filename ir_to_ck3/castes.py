"""
castes.py - Hereditary caste traits for cultures with a caste system.

Characters are processed from oldest to youngest so parents get their caste
before their children. A child inherits the father's caste, else the
mother's; characters without a caste parent are given 'brahmin' when they
have a learning education and 'kshatriya' otherwise. Characters that already
have a caste trait keep it.

Module: ir_to_ck3.castes
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from .character import Character
from .cultures import CultureCollection
from .game_date import GameDate

logger = logging.getLogger(__name__)

CASTE_SYSTEM_TRADITION = "tradition_caste_system"
CASTE_TRAITS = ("brahmin", "kshatriya", "vaishya", "shudra")
LEARNING_EDUCATION_TRAITS = ("education_learning_1", "education_learning_2",
                             "education_learning_3", "education_learning_4")


def caste_trait_of(character: Optional[Character]) -> Optional[str]:
    if character is None:
        return None
    for trait in CASTE_TRAITS:
        if trait in character.base_traits:
            return trait
    return None


def set_character_castes(characters: Iterable[Character], cultures: CultureCollection, bookmark_date: GameDate,
                         is_from_source: Callable[[Character], bool]) -> int:
    """
    Give caste traits to imported characters of caste-system cultures.

    Args:
        characters: Characters to process.
        cultures: CK3 cultures.
        bookmark_date: Date at which culture is evaluated.
        is_from_source: Tells whether a character was imported.

    Returns:
        int: Number of characters given a caste.
    """
    caste_culture_ids = cultures.ids_with_tradition(CASTE_SYSTEM_TRADITION)
    if not caste_culture_ids:
        return 0

    def _birth_key(character: Character):
        return (character.birth_date is None, character.birth_date.days if character.birth_date else 0)

    count = 0
    for character in sorted(characters, key=_birth_key):
        if not is_from_source(character):
            continue
        if character.get_culture_id(bookmark_date) not in caste_culture_ids:
            continue
        if caste_trait_of(character) is not None:
            continue

        trait = caste_trait_of(character.father) or caste_trait_of(character.mother)
        if trait is None:
            has_learning = any(t in character.base_traits for t in LEARNING_EDUCATION_TRAITS)
            trait = "brahmin" if has_learning else "kshatriya"
        character.add_base_trait(trait)
        count += 1
    logger.info(f"Set castes for {count} characters.")
    return count
