"""
linker.py - Resolve relations between imported CK3 characters.

Runs once the import has finished for every character. Each pass scans the
store and translates one kind of Imperator relation (parents, spouses,
prisoners, friends, rivals, pregnancies) into links between CK3 characters.
A relation whose other side has no CK3 counterpart is logged and skipped.

Module: ir_to_ck3.linker
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from .character import Character, Pregnancy
from .config import ConversionConfig
from .counterparts import CounterpartMap
from .game_date import GameDate
from .source_character import SourceCharacter, SourceCharacterCollection

if TYPE_CHECKING:
    from .character_collection import CharacterCollection
    from .titles import LandedTitles

logger = logging.getLogger(__name__)

FRIEND_EFFECT = "{{ set_relation_friend={{ reason=friend_generic_history target=character:{target_id} }} }}"
RIVAL_EFFECT = "{{ set_relation_rival={{ reason=rival_historical target=character:{target_id} }} }}"


def _first_common_child_birth_date(husband: SourceCharacter, wife: SourceCharacter,
                                   source_characters: Optional[SourceCharacterCollection]) -> Optional[GameDate]:
    if source_characters is not None:
        common_ids = set(husband.children_ids) & set(wife.children_ids)
        births = [source_characters[child_id].birth_date for child_id in common_ids if child_id in source_characters]
        if births:
            return min(births)
    unborn_births = [unborn.birth_date for unborn in wife.unborns if unborn.father_id == husband.id]
    return min(unborn_births) if unborn_births else None


def _marriage_end_date(husband: SourceCharacter, wife: SourceCharacter) -> Optional[GameDate]:
    deaths = [date for date in (husband.death_date, wife.death_date) if date is not None]
    return min(deaths) if deaths else None


def estimate_marriage_date(husband: SourceCharacter, wife: SourceCharacter, conversion_date: GameDate,
                           gestation_days: int = 280,
                           source_characters: Optional[SourceCharacterCollection] = None) -> GameDate:
    """
    Estimate when two Imperator characters married; saves do not store it.

    The marriage is assumed to precede the conception of the first common
    child (or of the wife's pregnancy by the husband), and to end no later
    than the first death of the two:
        1. first common birth - gestation_days, moved to the day before the
           first death when that death comes earlier;
        2. else the day before the first death;
        3. else conversion_date.

    Args:
        husband: Imperator husband.
        wife: Imperator wife.
        conversion_date: Fallback date.
        gestation_days: Days between conception and birth.
        source_characters: Used to look up children's birth dates.
    """
    end_date = _marriage_end_date(husband, wife)
    first_birth = _first_common_child_birth_date(husband, wife, source_characters)
    if first_birth is not None:
        conception_date = first_birth.change_by_days(-gestation_days)
        if end_date is not None and end_date < conception_date:
            return end_date.change_by_days(-1)
        return conception_date

    if end_date is not None:
        return end_date.change_by_days(-1)
    return conversion_date


class RelationshipLinker:
    """
    Links imported characters using their Imperator counterparts.

    Attributes:
        characters (CharacterCollection): CK3 characters, already imported.
        source_characters (SourceCharacterCollection): Imperator characters.
        counterparts (CounterpartMap): Imperator id <-> CK3 id table.
        config (ConversionConfig): Run configuration.
        titles (Optional[LandedTitles]): Titles, needed to find jailors.
    """

    def __init__(self, characters: "CharacterCollection", source_characters: SourceCharacterCollection,
                 counterparts: CounterpartMap, config: ConversionConfig,
                 titles: Optional["LandedTitles"] = None):
        self.characters = characters
        self.source_characters = source_characters
        self.counterparts = counterparts
        self.config = config
        self.titles = titles

    @property
    def conversion_date(self) -> GameDate:
        return self.config.conversion_date

    def source_of(self, character: Character) -> Optional[SourceCharacter]:
        source_id = self.counterparts.source_id_for(character.id)
        if source_id is None:
            return None
        return self.source_characters.get(source_id)

    def target_of(self, source_id: Optional[str]) -> Optional[Character]:
        if source_id is None:
            return None
        target_id = self.counterparts.target_id_for(source_id)
        if target_id is None:
            return None
        return self.characters.get(target_id)

    def link_all(self) -> dict:
        """Run every pass in order; returns the count of each pass by name."""
        return {
            'parents': self.link_mothers_and_fathers(),
            'spouses': self.link_spouses(),
            'prisoners': self.link_prisoners(),
            'friendships': self.import_friendships(),
            'rivalries': self.import_rivalries(),
            'pregnancies': self.import_pregnancies(),
        }

    def link_mothers_and_fathers(self) -> int:
        mother_count = 0
        father_count = 0
        for character in self.characters:
            source = self.source_of(character)
            if source is None:
                continue

            if source.mother_id is not None:
                mother = self.target_of(source.mother_id)
                if mother is None:
                    logger.warning(f"Imperator mother {source.mother_id} has no CK3 character!")
                else:
                    character.mother = mother
                    mother_count += 1

            if source.father_id is not None:
                father = self.target_of(source.father_id)
                if father is None:
                    logger.warning(f"Imperator father {source.father_id} has no CK3 character!")
                else:
                    character.father = father
                    father_count += 1
        logger.info(f"{mother_count} mothers and {father_count} fathers linked in CK3.")
        return mother_count + father_count

    def link_spouses(self) -> int:
        """
        Marry CK3 characters whose Imperator counterparts are married.

        Only male characters are processed, so each union is recorded once.
        """
        spouse_count = 0
        for character in self.characters:
            if character.female:
                continue
            source = self.source_of(character)
            if source is None:
                continue

            for source_spouse_id in source.spouse_ids:
                spouse = self.target_of(source_spouse_id)
                source_spouse = self.source_characters.get(source_spouse_id)
                if spouse is None or source_spouse is None:
                    logger.warning(f"Imperator spouse {source_spouse_id} has no CK3 character!")
                    continue
                marriage_date = estimate_marriage_date(source, source_spouse, self.conversion_date,
                                                       self.config.gestation_days, self.source_characters)
                if character.add_spouse(marriage_date, spouse):
                    spouse_count += 1
        logger.info(f"{spouse_count} spouses linked in CK3.")
        return spouse_count

    def link_prisoners(self) -> int:
        """Imprison characters in the dungeon of the holder of their prison title."""
        prisoner_count = 0
        for character in self.characters:
            if self._link_jailor(character):
                prisoner_count += 1
        logger.info(f"{prisoner_count} prisoners linked with jailors in CK3.")
        return prisoner_count

    def _link_jailor(self, character: Character) -> bool:
        if character.prisoner_home_title_id is None:
            return False
        if self.titles is None:
            return False
        title = self.titles.get(character.prisoner_home_title_id)
        if title is None:
            logger.warning(f"Prison title {character.prisoner_home_title_id} of character {character.id} not found!")
            return False
        jailor_id = title.get_holder_id(self.conversion_date)
        jailor = self.characters.get(jailor_id) if jailor_id is not None else None
        if jailor is None or jailor is character:
            logger.warning(f"Character {character.id} has no jailor in {title.id}!")
            return False
        character.set_jailor(jailor, self.conversion_date)
        return True

    def import_friendships(self) -> int:
        logger.info("Importing friendships...")
        return self._import_relations("friend", lambda source: source.friend_ids, FRIEND_EFFECT)

    def import_rivalries(self) -> int:
        logger.info("Importing rivalries...")
        return self._import_relations("rival", lambda source: source.rival_ids, RIVAL_EFFECT)

    def _import_relations(self, relation: str, related_ids, effect_template: str) -> int:
        count = 0
        for source in self.source_characters:
            character = self.target_of(source.id)
            if character is None:
                logger.warning(f"Imperator character {source.id} has no CK3 character!")
                continue

            for other_id in related_ids(source):
                # Each relation is listed on both sides; add it from the lower id only.
                if source.id > other_id:
                    continue
                other = self.target_of(other_id)
                if other is None:
                    logger.warning(f"Imperator {relation} {other_id} has no CK3 character!")
                    continue
                character.history.add_field_value(self.conversion_date, "effects", "effect",
                                                  effect_template.format(target_id=other.id))
                count += 1
        return count

    def import_pregnancies(self) -> int:
        """
        Carry over recent Imperator pregnancies.

        CK3 runs history pregnancies at game start, so only pregnancies
        conceived at most max_pregnancy_years before the conversion date are
        imported.
        """
        logger.info("Importing pregnancies...")
        count = 0
        for female in self.characters:
            if not female.female:
                continue
            source = self.source_of(female)
            if source is None:
                continue

            for unborn in source.unborns:
                conception_date = unborn.estimated_conception_date(self.config.gestation_days)
                if self.conversion_date.diff_in_years(conception_date) > self.config.max_pregnancy_years:
                    continue
                father = self.target_of(unborn.father_id)
                if father is None:
                    logger.warning(f"Imperator father {unborn.father_id} of unborn child has no CK3 character!")
                    continue
                female.pregnancies.append(Pregnancy(father.id, female.id, unborn.birth_date, unborn.is_bastard))
                count += 1
        logger.info(f"{count} pregnancies imported.")
        return count
