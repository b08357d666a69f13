"""
artifacts.py - Turn Imperator province treasures into CK3 artifacts.

A province's treasures go to the holder of the barony covering its first CK3
province, or to the county holder when the barony is unheld. Each treasure
becomes a create_artifact effect in the owner's history, with name and
description localizations copied from Imperator.

Module: ir_to_ck3.artifacts
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from .character import Character
from .game_date import GameDate
from .id_collection import IdObjectCollection
from .localization import LocDB
from .mappers import ProvinceMapper

if TYPE_CHECKING:
    from .character_collection import CharacterCollection
    from .titles import LandedTitles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Treasure:
    id: str
    key: str
    icon_name: Optional[str] = None


@dataclass
class SourceProvince:
    """Imperator province with the treasures (holy site artifacts) it holds."""
    id: str
    treasure_ids: List[str] = field(default_factory=list)


class TreasureCollection(IdObjectCollection[Treasure]):
    pass


def artifact_name(treasure: Treasure) -> str:
    return f"IRToCK3_artifact_{treasure.key}_{treasure.id}"


def create_artifact_effect(treasure: Treasure) -> str:
    name = artifact_name(treasure)
    return (
        "{ set_artifact_rarity_illustrious = yes "
        f"create_artifact = {{ name = {name} description = {name}_desc type = sculpture "
        "wealth = scope:wealth quality = scope:quality history = { type = created_before_history } "
        f"save_scope_as = newly_created_artifact_{treasure.id} decaying = yes }} }}"
    )


def find_province_owner_id(province: SourceProvince, province_mapper: ProvinceMapper,
                           titles: "LandedTitles", date: GameDate) -> Optional[str]:
    """
    Holder of the barony of the province's first CK3 province, else of its county.

    Failed lookups are logged at debug level and give None.
    """
    ck3_province_ids = province_mapper.get_ck3_province_ids(province.id)
    if not ck3_province_ids:
        return None
    primary_province_id = ck3_province_ids[0]

    barony = titles.get_barony_for_province(primary_province_id)
    if barony is None:
        logger.debug(f"Can't find barony for province {primary_province_id}!")
        return None
    owner_id = barony.get_holder_id(date)
    if owner_id is not None:
        return owner_id

    county = titles.get_county_for_province(primary_province_id)
    if county is None:
        logger.debug(f"Can't find county for province {primary_province_id}!")
        return None
    owner_id = county.get_holder_id(date)
    if owner_id is None:
        logger.debug(f"Can't find owner for province {primary_province_id}!")
    return owner_id


def _import_artifact(character: Character, treasure: Treasure, loc_db: LocDB, date: GameDate) -> None:
    name = artifact_name(treasure)
    name_loc = loc_db.get_loc(treasure.key)
    if name_loc is None:
        logger.warning(f"Can't find name loc for artifact {treasure.key}!")
    else:
        character.localizations[name] = name_loc

    description_loc = loc_db.get_loc(f"{treasure.key}_desc")
    if description_loc is None:
        logger.warning(f"Can't find description loc for artifact {treasure.key}!")
    else:
        character.localizations[f"{name}_desc"] = description_loc

    character.history.add_field_value(date, "effects", "effect", create_artifact_effect(treasure))


def import_artifacts(characters: "CharacterCollection", source_provinces: Iterable[SourceProvince],
                     province_mapper: ProvinceMapper, titles: "LandedTitles", treasures: TreasureCollection,
                     loc_db: LocDB, date: GameDate) -> int:
    """
    Give each imported province owner the treasures of their provinces.

    Only characters imported from Imperator receive artifacts.

    Returns:
        int: Number of artifacts created.
    """
    logger.info("Importing Imperator artifacts...")
    owner_to_treasure_ids: Dict[str, List[str]] = {}
    for province in source_provinces:
        if not province.treasure_ids:
            continue
        owner_id = find_province_owner_id(province, province_mapper, titles, date)
        if owner_id is None:
            continue
        owner_to_treasure_ids.setdefault(owner_id, []).extend(province.treasure_ids)

    count = 0
    for character in characters:
        if not characters.is_from_source(character.id):
            continue
        for treasure_id in owner_to_treasure_ids.get(character.id, []):
            treasure = treasures.get(treasure_id)
            if treasure is None:
                logger.warning(f"Treasure {treasure_id} not found!")
                continue
            _import_artifact(character, treasure, loc_db, date)
            count += 1
    logger.info(f"Imported {count} artifacts.")
    return count
