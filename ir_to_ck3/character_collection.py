"""
character_collection.py - The store of CK3 characters.

CharacterCollection owns the characters and their Imperator counterparts
table. Characters are only ever deleted through bulk_remove, which detaches
every relation pointing at them and scrubs their ids from the effect scripts
of the survivors.

Module: ir_to_ck3.character_collection
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, TYPE_CHECKING, Union

from . import artifacts
from . import preserve
from . import purge
from .castes import set_character_castes
from .character import Character
from .counterparts import CounterpartMap
from .game_date import GameDate
from .id_collection import IdObjectCollection
from .importer import CharacterImporter
from .linker import RelationshipLinker
from .scrubber import remove_character_references_from_history
from .source_character import SourceCharacter, SourceCharacterCollection

if TYPE_CHECKING:
    from .app_hooks import AppHooks
    from .character_factory import CharacterFactory
    from .config import ConversionConfig
    from .cultures import CultureCollection
    from .dynasties import DynastyCollection, HouseCollection
    from .localization import LocDB
    from .mappers import ProvinceMapper
    from .titles import LandedTitles

logger = logging.getLogger(__name__)


class CharacterCollection(IdObjectCollection[Character]):
    """
    CK3 characters indexed by id, in insertion order.

    Attributes:
        counterparts (CounterpartMap): Imperator id <-> CK3 id for imported characters.
        source_characters (Optional[SourceCharacterCollection]): Imperator characters of the last import.
    """
    __slots__ = ['counterparts', 'source_characters']

    def __init__(self, characters: Optional[Iterable[Character]] = None):
        super().__init__(characters)
        self.counterparts = CounterpartMap()
        self.source_characters: Optional[SourceCharacterCollection] = None

    # ---------- Counterparts ----------

    def is_from_source(self, character_id: str) -> bool:
        return self.counterparts.is_from_source(character_id)

    def source_character_of(self, character_id: str) -> Optional[SourceCharacter]:
        source_id = self.counterparts.source_id_for(character_id)
        if source_id is None or self.source_characters is None:
            return None
        return self.source_characters.get(source_id)

    def is_source_alive(self, character_id: str) -> bool:
        source = self.source_character_of(character_id)
        return source is not None and not source.is_dead

    # ---------- Removal ----------

    def add_or_replace(self, item: Character) -> None:
        """Add a character; one already stored under its id is removed first, relations included."""
        existing = self.get(item.id)
        if existing is not None and existing is not item:
            self.bulk_remove([item.id])
        super().add_or_replace(item)

    def remove(self, key: str) -> None:
        self.bulk_remove([key])

    def bulk_remove(self, keys: Iterable[str]) -> int:
        """
        Remove characters together with every reference to them.

        For each removed character: marriages, children's parent links, its own
        parent links, prisoner/jailor links and its counterpart link are
        dropped; pregnancies naming it are dropped from the survivors, and
        'break_alliance'/'make_concubine' clauses naming it are cut from the
        survivors' effects.

        Returns:
            int: Number of characters removed.

        Raises:
            KeyError: If an id is not in the collection; nothing is removed then.
        """
        keys = list(dict.fromkeys(keys))
        if not keys:
            return 0
        missing = [key for key in keys if key not in self]
        if missing:
            raise KeyError(f"Characters not found: {', '.join(missing)}")

        for key in keys:
            character = self[key]
            character.remove_all_spouses()
            character.remove_all_children()
            character.remove_parent_links()
            character.remove_jail_links()
            self.counterparts.unlink_target(key)
            super().remove(key)

        removed = set(keys)
        for character in self:
            if character.pregnancies:
                character.pregnancies = [pregnancy for pregnancy in character.pregnancies
                                         if pregnancy.father_id not in removed and pregnancy.mother_id not in removed]
        remove_character_references_from_history(self, removed)
        return len(keys)

    # ---------- Conversion stages ----------

    def import_source_characters(self, source_characters: SourceCharacterCollection, factory: "CharacterFactory",
                                 config: "ConversionConfig", titles: Optional["LandedTitles"] = None,
                                 cultures: Optional["CultureCollection"] = None,
                                 app_hooks: Optional["AppHooks"] = None) -> int:
        """
        Import Imperator characters, link their relations and, when enabled,
        assign castes.

        Returns:
            int: Number of characters imported.
        """
        importer = CharacterImporter(factory, config.worker_count, app_hooks)
        imported = importer.import_characters(source_characters, self)
        self.source_characters = source_characters

        linker = RelationshipLinker(self, source_characters, self.counterparts, config, titles)
        linker.link_all()

        if config.caste_system_enabled and cultures is not None:
            self.set_character_castes(cultures, config.bookmark_date)
        return imported

    def set_character_castes(self, cultures: "CultureCollection", bookmark_date: GameDate) -> int:
        return set_character_castes(self, cultures, bookmark_date,
                                    lambda character: self.is_from_source(character.id))

    def load_characters_to_preserve(self, source: Union[Path, str, preserve.PreserveList],
                                    bookmark_date: GameDate) -> int:
        """Pin characters listed in a preserve file (path) or an already parsed list."""
        logger.debug("Loading IDs of CK3 characters to preserve...")
        if isinstance(source, preserve.PreserveList):
            preserve_list = source
        else:
            preserve_list = preserve.read_preserve_list(Path(source))
        return preserve.apply_preserve_list(self, preserve_list, bookmark_date)

    def purge_unneeded_characters(self, titles: "LandedTitles", dynasties: "DynastyCollection",
                                  houses: "HouseCollection", bookmark_date: GameDate,
                                  config: "ConversionConfig") -> purge.PurgeResult:
        return purge.purge_unneeded_characters(self, titles, dynasties, houses, bookmark_date, config)

    def remove_employer_id_from_landed_characters(self, titles: "LandedTitles", date: GameDate) -> int:
        """Landed characters are nobody's courtiers: drop their 'employer' history."""
        logger.info("Removing employer id from landed characters...")
        landed_ids = titles.get_holder_ids(date)
        count = 0
        for character in self:
            if character.id not in landed_ids:
                continue
            employer_field = character.history.fields.get("employer")
            if employer_field is not None and employer_field.remove_all_entries():
                count += 1
        return count

    def distribute_countries_gold(self, titles: "LandedTitles", config: "ConversionConfig") -> int:
        """
        Share the treasuries of Imperator countries among their rulers and vassals.

        Each landed vassal holder gets one share and the ruler two, plus
        whatever rounding leaves over.

        Returns:
            int: Number of countries whose gold was distributed.
        """
        logger.info("Distributing countries' gold...")
        bookmark_date = config.bookmark_date
        distributed = 0
        for country in titles.get_countries_imported_from_source():
            ruler_id = country.get_holder_id(bookmark_date)
            if ruler_id is None:
                logger.debug(f"Can't distribute gold in {country.id} because it has no holder.")
                continue
            ruler = self.get(ruler_id)
            if ruler is None:
                logger.warning(f"Character {ruler_id} not found!")
                continue

            gold = country.source_country_gold * config.currency_rate
            vassal_ids = {vassal.get_holder_id(bookmark_date)
                          for vassal in titles.get_de_facto_vassals(country, bookmark_date).values()
                          if not vassal.landless}
            vassal_ids.discard(None)

            vassals: List[Character] = []
            for vassal_id in sorted(vassal_ids):
                vassal = self.get(vassal_id)
                if vassal is None:
                    logger.warning(f"Character {vassal_id} not found!")
                    continue
                vassals.append(vassal)

            gold_per_vassal = gold / (len(vassals) + 2)
            for vassal in vassals:
                _add_gold(vassal, gold_per_vassal)
                gold -= gold_per_vassal
            _add_gold(ruler, gold)
            distributed += 1
        return distributed

    def import_artifacts(self, source_provinces: Iterable[artifacts.SourceProvince],
                         province_mapper: "ProvinceMapper", titles: "LandedTitles",
                         treasures: artifacts.TreasureCollection, loc_db: "LocDB", date: GameDate) -> int:
        return artifacts.import_artifacts(self, source_provinces, province_mapper, titles, treasures, loc_db, date)


def _add_gold(character: Character, gold: float) -> None:
    character.gold = gold if character.gold is None else character.gold + gold
