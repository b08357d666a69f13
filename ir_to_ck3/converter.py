"""
converter.py - Run the character conversion from Imperator to CK3.

This module defines CharacterConverter, which takes Imperator characters
and the CK3 world they go into (titles, dynasties, houses, cultures) and
runs the conversion stages in order:
    - Import characters in parallel and link their relations
    - Assign castes (when the caste system is enabled)
    - Pin the characters to preserve
    - Purge unneeded characters, houses and dynasties
    - Clean up landed characters and distribute country treasuries

Module: ir_to_ck3.converter
"""

import logging
from typing import Optional

from . import app_hooks as hooks
from .app_hooks import AppHooks
from .character_collection import CharacterCollection
from .character_factory import CharacterFactory
from .config import ConversionConfig
from .cultures import CultureCollection
from .dynasties import DynastyCollection, HouseCollection
from .errors import ConversionError
from .localization import LocDB
from .mappers import Mappers
from .purge import PurgeResult
from .source_character import SourceCharacterCollection
from .titles import LandedTitles

logger = logging.getLogger(__name__)


class CharacterConverter:
    """
    Converts Imperator characters into a purged CK3 character store.

    Attributes:
        config (ConversionConfig): Run configuration.
        mappers (Mappers): Identifier translation tables.
        loc_db (LocDB): Imperator localization.
        titles (LandedTitles): CK3 titles with holder history.
        dynasties (DynastyCollection): CK3 dynasties.
        houses (HouseCollection): CK3 dynasty houses.
        cultures (CultureCollection): CK3 cultures.
        characters (CharacterCollection): The store being built.
        purge_result (Optional[PurgeResult]): Outcome of the purge, once run.
        app_hooks (Optional[AppHooks]): Progress reporting and stop requests.
    """
    __slots__ = [
        'config',
        'mappers',
        'loc_db',
        'titles',
        'dynasties',
        'houses',
        'cultures',
        'characters',
        'purge_result',
        'app_hooks',
    ]

    def __init__(self, config: ConversionConfig, mappers: Mappers, loc_db: LocDB, titles: LandedTitles,
                 dynasties: Optional[DynastyCollection] = None, houses: Optional[HouseCollection] = None,
                 cultures: Optional[CultureCollection] = None,
                 characters: Optional[CharacterCollection] = None,
                 app_hooks: Optional[AppHooks] = None) -> None:
        self.config = config
        self.mappers = mappers
        self.loc_db = loc_db
        self.titles = titles
        self.dynasties = dynasties if dynasties is not None else DynastyCollection()
        self.houses = houses if houses is not None else HouseCollection()
        self.cultures = cultures if cultures is not None else CultureCollection()
        self.characters = characters if characters is not None else CharacterCollection()
        self.purge_result: Optional[PurgeResult] = None
        self.app_hooks = app_hooks

    def _check_stop(self) -> None:
        if hooks.stop_requested(self.app_hooks, logger):
            raise ConversionError("Conversion stopped by user")

    def convert(self, source_characters: SourceCharacterCollection) -> CharacterCollection:
        """
        Run every stage and return the resulting character store.

        Raises:
            ConversionError: If a stop was requested between stages.
            Exception: Whatever a failing character import raised; the store
                is left without any imported character in that case.
        """
        factory = CharacterFactory(self.mappers, self.loc_db, self.config, self.titles)
        self.characters.import_source_characters(source_characters, factory, self.config,
                                                 titles=self.titles, cultures=self.cultures,
                                                 app_hooks=self.app_hooks)
        self._check_stop()

        if self.config.characters_to_preserve_path is not None:
            hooks.report_step(self.app_hooks, logger, info="Loading characters to preserve")
            self.characters.load_characters_to_preserve(self.config.characters_to_preserve_path,
                                                        self.config.bookmark_date)
        self._check_stop()

        hooks.report_step(self.app_hooks, logger, info="Purging unneeded characters",
                          target=len(self.characters), reset_counter=True)
        self.purge_result = self.characters.purge_unneeded_characters(
            self.titles, self.dynasties, self.houses, self.config.bookmark_date, self.config)
        self._check_stop()

        self.characters.remove_employer_id_from_landed_characters(self.titles, self.config.conversion_date)
        self.characters.distribute_countries_gold(self.titles, self.config)
        logger.info(f"Character conversion finished with {len(self.characters)} characters.")
        return self.characters
