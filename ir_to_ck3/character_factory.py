"""
character_factory.py - Build one CK3 character from one Imperator character.

CharacterFactory.create only reads shared state (mappers, localization,
titles, configuration) and writes to the character it creates and to the
concurrent unlocalized-names set, so it is safe to call from import workers.

Module: ir_to_ck3.character_factory
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from .character import Character
from .config import ConversionConfig
from .localization import LocDB
from .mappers import Mappers
from .source_character import SourceCharacter

if TYPE_CHECKING:
    from .importer import ConcurrentWarningSet
    from .titles import LandedTitles

logger = logging.getLogger(__name__)

DYNASTY_ID_PREFIX = "dynn_irtock3_"


class CharacterFactory:
    """
    Translates Imperator characters field by field.

    Attributes:
        mappers (Mappers): Identifier translation tables.
        loc_db (LocDB): Imperator localization, used to check names.
        config (ConversionConfig): Run configuration.
        titles (Optional[LandedTitles]): Titles, used to find prisoners' jailor titles.
    """

    def __init__(self, mappers: Mappers, loc_db: LocDB, config: ConversionConfig,
                 titles: Optional["LandedTitles"] = None):
        self.mappers = mappers
        self.loc_db = loc_db
        self.config = config
        self.titles = titles

    def character_id_for(self, source: SourceCharacter) -> str:
        return f"{self.config.character_id_prefix}{source.id}"

    def create(self, source: SourceCharacter, unlocalized_names: "ConcurrentWarningSet") -> Character:
        """
        Create the CK3 character for source.

        Unmapped cultures, religions, nicknames and death reasons are logged
        and left unset. Names with no localization are added to
        unlocalized_names.

        Raises:
            ValueError: If the source character cannot be converted at all.
        """
        if not source.id:
            raise ValueError("Imperator character has no id")
        if source.death_date is not None and source.death_date < source.birth_date:
            raise ValueError(f"Imperator character {source.id} died ({source.death_date}) "
                             f"before being born ({source.birth_date})")

        character = Character(self.character_id_for(source), female=source.female,
                              birth_date=source.birth_date, death_date=source.death_date)

        character.name = source.name
        if source.name and self.loc_db.get_loc(source.name) is None:
            unlocalized_names.add(source.name)

        self._set_culture_and_faith(character, source)

        for trait in self.mappers.trait.match_all(source.traits):
            character.add_base_trait(trait)

        if source.nickname:
            character.nickname = self._match(self.mappers.nickname, source.nickname, source, "nickname")

        if source.death_date is not None and source.death_reason:
            character.death_reason = self._match(self.mappers.death_reason, source.death_reason, source, "death reason")

        if source.family_id:
            character.history.add_field_value(None, "dynasty", "dynasty", f"{DYNASTY_ID_PREFIX}{source.family_id}")

        if source.wealth:
            character.gold = source.wealth * self.config.currency_rate

        if source.prisoner_home and self.titles is not None:
            home_title = self.titles.get_title_for_source_country(source.prisoner_home)
            if home_title is None:
                logger.warning(f"No CK3 title for prison country {source.prisoner_home} of Imperator character {source.id}")
            else:
                character.prisoner_home_title_id = home_title.id

        return character

    def _set_culture_and_faith(self, character: Character, source: SourceCharacter) -> None:
        faith = self._match(self.mappers.religion, source.religion, source, "religion")
        if faith is not None:
            character.history.add_field_value(None, "faith", "faith", faith)
        culture = self.mappers.culture.match(source.culture, context=faith) if source.culture else None
        if culture is None and source.culture:
            logger.warning(f"No CK3 culture for Imperator culture {source.culture} (character {source.id})")
        if culture is not None:
            character.history.add_field_value(None, "culture", "culture", culture)

    @staticmethod
    def _match(mapper, value: Optional[str], source: SourceCharacter, what: str) -> Optional[str]:
        if not value:
            return None
        match = mapper.match(value)
        if match is None:
            logger.warning(f"No CK3 {what} for Imperator {what} {value} (character {source.id})")
        return match
