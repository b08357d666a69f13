"""
purge.py - Remove characters the CK3 scenario does not need.

A character is kept when any keep rule applies to it. Rules are checked in
priority order and the first match is the reported reason:

    title_holder           holds a title at the bookmark date
    source_title_holder    imported from Imperator and held a title at some point
    protected_prefix       id starts with a protected prefix (e.g. 'animation_test_')
    non_removable          pinned by the characters-to-preserve list
    landed_dynasty_parent  imported, member of a landed dynasty, and someone's parent
    alive                  imported, and the Imperator counterpart is alive

Only the landed_dynasty_parent rule depends on the rest of the store: once
a childless character is removed, their parents may stop being parents. The
purge therefore repeats until a pass removes nobody.

Module: ir_to_ck3.purge
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Iterable, List, Optional, Set, TYPE_CHECKING

from .character import Character
from .config import ConversionConfig
from .game_date import GameDate

if TYPE_CHECKING:
    from .character_collection import CharacterCollection
    from .dynasties import DynastyCollection, HouseCollection
    from .titles import LandedTitles

logger = logging.getLogger(__name__)


@dataclass
class PurgeContext:
    """
    Facts the keep rules are evaluated against. None of them change while
    the purge runs.
    """
    bookmark_date: GameDate
    config: ConversionConfig
    current_holder_ids: Set[str] = field(default_factory=set)
    all_holder_ids: Set[str] = field(default_factory=set)
    landed_dynasty_ids: Set[str] = field(default_factory=set)
    is_from_source: Callable[[str], bool] = lambda character_id: False
    is_source_alive: Callable[[str], bool] = lambda character_id: False
    houses: Optional["HouseCollection"] = None


@dataclass
class PurgeResult:
    removed_ids: List[str]
    iterations: int

    @property
    def removed_count(self) -> int:
        return len(self.removed_ids)


def keep_reason(character: Character, context: PurgeContext,
                parent_ids: Optional[AbstractSet[str]] = None) -> Optional[str]:
    """
    Return the first keep rule that applies to character, or None if it can go.

    With parent_ids None the landed_dynasty_parent rule is not evaluated.
    """
    character_id = character.id
    from_source = context.is_from_source(character_id)

    if character_id in context.current_holder_ids:
        return "title_holder"
    if from_source and character_id in context.all_holder_ids:
        return "source_title_holder"
    if context.config.is_protected_id(character_id):
        return "protected_prefix"
    if character.is_non_removable:
        return "non_removable"
    if parent_ids is not None and from_source and character_id in parent_ids:
        dynasty_id = character.get_dynasty_id(context.bookmark_date, context.houses)
        if dynasty_id is not None and dynasty_id in context.landed_dynasty_ids:
            return "landed_dynasty_parent"
    if from_source and context.is_source_alive(character_id):
        return "alive"
    return None


def find_removable(candidates: Iterable[str], parent_ids: AbstractSet[str],
                   keep: Callable[[str, AbstractSet[str]], bool]) -> List[str]:
    """
    Return the candidates that keep(id, parent_ids) rejects, in candidate order.

    Every candidate is judged against the same parent_ids snapshot, so the
    result does not depend on the order of candidates.
    """
    return [candidate for candidate in candidates if not keep(candidate, parent_ids)]


def collect_parent_ids(characters: Iterable[Character]) -> Set[str]:
    parent_ids = set()
    for character in characters:
        if character.mother_id is not None:
            parent_ids.add(character.mother_id)
        if character.father_id is not None:
            parent_ids.add(character.father_id)
    return parent_ids


def build_purge_context(characters: "CharacterCollection", titles: "LandedTitles",
                        houses: Optional["HouseCollection"], bookmark_date: GameDate,
                        config: ConversionConfig) -> PurgeContext:
    """
    Gather holder sets and landed dynasties for a purge at bookmark_date.

    Landed dynasties are the dynasties of current title holders and of
    imported characters who ever held a title.
    """
    context = PurgeContext(bookmark_date=bookmark_date, config=config,
                           current_holder_ids=titles.get_holder_ids(bookmark_date),
                           all_holder_ids=titles.get_all_holder_ids(),
                           is_from_source=characters.is_from_source,
                           is_source_alive=characters.is_source_alive,
                           houses=houses)
    for character in characters:
        if character.id in context.current_holder_ids or (
                context.is_from_source(character.id) and character.id in context.all_holder_ids):
            dynasty_id = character.get_dynasty_id(bookmark_date, houses)
            if dynasty_id is not None:
                context.landed_dynasty_ids.add(dynasty_id)
    return context


def purge_unneeded_characters(characters: "CharacterCollection", titles: "LandedTitles",
                              dynasties: "DynastyCollection", houses: "HouseCollection",
                              bookmark_date: GameDate, config: ConversionConfig) -> PurgeResult:
    """
    Remove unneeded characters, then the houses and dynasties left without members.

    Args:
        characters: Store to purge; removals go through its cascading bulk_remove.
        titles: Holder history used by the keep rules.
        dynasties: Dynasties, purged and flattened afterwards.
        houses: Houses, purged afterwards.
        bookmark_date: Date at which holders and dynasties are evaluated.
        config: Run configuration (protected prefixes).

    Returns:
        PurgeResult: Removed ids in removal order and number of passes run.
    """
    logger.info("Purging unneeded characters...")
    context = build_purge_context(characters, titles, houses, bookmark_date, config)
    candidates = [character.id for character in characters if keep_reason(character, context) is None]

    def _keep(character_id: str, parent_ids: AbstractSet[str]) -> bool:
        return keep_reason(characters[character_id], context, parent_ids) is not None

    removed_ids: List[str] = []
    iteration = 0
    while True:
        iteration += 1
        logger.debug(f"Beginning iteration {iteration} of characters purge...")
        to_remove = find_removable(candidates, collect_parent_ids(characters), _keep)
        characters.bulk_remove(to_remove)
        logger.debug(f"\tPurged {len(to_remove)} unneeded characters in iteration {iteration}.")
        if not to_remove:
            break
        removed_set = set(to_remove)
        candidates = [candidate for candidate in candidates if candidate not in removed_set]
        removed_ids.extend(to_remove)

    logger.info(f"Purged {len(removed_ids)} unneeded characters in {iteration} iterations.")

    houses.purge_unneeded_houses(characters, bookmark_date)
    dynasties.purge_unneeded_dynasties(characters, houses, bookmark_date)
    dynasties.flatten_dynasties_with_no_founders(characters, houses, bookmark_date)
    return PurgeResult(removed_ids=removed_ids, iterations=iteration)
