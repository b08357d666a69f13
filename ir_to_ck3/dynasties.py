"""
dynasties.py - CK3 dynasties and houses.

After characters are purged many dynasties and houses are left without
members. The collections here drop them and flatten dynasties whose founder
was removed, so the output never references a missing character, house or
dynasty.

Module: ir_to_ck3.dynasties
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Set

from .game_date import GameDate
from .id_collection import IdObjectCollection

if TYPE_CHECKING:
    from .character import Character

logger = logging.getLogger(__name__)


class Dynasty:
    """
    Attributes:
        id (str): Dynasty id.
        founder_id (Optional[str]): Founding character.
        name (Optional[str]): Name localization key.
    """
    __slots__ = ['id', 'founder_id', 'name']

    def __init__(self, dynasty_id: str, founder_id: Optional[str] = None, name: Optional[str] = None):
        self.id = dynasty_id
        self.founder_id = founder_id
        self.name = name

    def __repr__(self) -> str:
        return f"Dynasty(id={self.id}, founder={self.founder_id})"


class House:
    """
    Attributes:
        id (str): House id.
        dynasty_id (str): Dynasty the house belongs to.
        founder_id (Optional[str]): Founding character.
    """
    __slots__ = ['id', 'dynasty_id', 'founder_id']

    def __init__(self, house_id: str, dynasty_id: str, founder_id: Optional[str] = None):
        self.id = house_id
        self.dynasty_id = dynasty_id
        self.founder_id = founder_id

    def __repr__(self) -> str:
        return f"House(id={self.id}, dynasty={self.dynasty_id})"


def _referenced_values(characters: Iterable["Character"], field_id: str) -> Set[str]:
    """Every value a history field takes, at any date, across characters."""
    values = set()
    for character in characters:
        field = character.history.fields.get(field_id)
        if field is None:
            continue
        values.update(value for value in field.all_values() if value is not None)
    return values


class HouseCollection(IdObjectCollection[House]):

    def purge_unneeded_houses(self, characters: Iterable["Character"], date: GameDate) -> int:
        """
        Remove houses no character belongs to at any date.

        Returns:
            int: Number of houses removed.
        """
        logger.info("Purging unneeded dynasty houses...")
        house_ids_in_use = _referenced_values(characters, "dynasty_house")
        removed = 0
        for house in self:
            if house.id not in house_ids_in_use:
                self.remove(house.id)
                removed += 1
        logger.info(f"Purged {removed} unneeded houses.")
        return removed

    def houses_of_dynasty(self, dynasty_id: str):
        return [house for house in self if house.dynasty_id == dynasty_id]


class DynastyCollection(IdObjectCollection[Dynasty]):

    def purge_unneeded_dynasties(self, characters: Iterable["Character"], houses: HouseCollection,
                                 date: GameDate) -> int:
        """
        Remove dynasties with no houses left and no direct members.

        Returns:
            int: Number of dynasties removed.
        """
        logger.info("Purging unneeded dynasties...")
        dynasty_ids_in_use = _referenced_values(characters, "dynasty")
        dynasty_ids_in_use.update(house.dynasty_id for house in houses)
        removed = 0
        for dynasty in self:
            if dynasty.id not in dynasty_ids_in_use:
                self.remove(dynasty.id)
                removed += 1
        logger.info(f"Purged {removed} unneeded dynasties.")
        return removed

    def flatten_dynasties_with_no_founders(self, characters: Iterable["Character"], houses: HouseCollection,
                                           date: GameDate) -> int:
        """
        Collapse the houses of dynasties whose founder no longer exists.

        Members of such houses become direct members of the dynasty (their
        'dynasty_house' entries turn into 'dynasty' entries on the same dates),
        the houses are removed and the dynasty founder becomes the earliest
        born remaining member.

        Returns:
            int: Number of dynasties flattened.
        """
        characters = list(characters)
        character_ids = {character.id for character in characters}
        flattened = 0
        for dynasty in self:
            if dynasty.founder_id is None or dynasty.founder_id in character_ids:
                continue
            dynasty_houses = {house.id for house in houses.houses_of_dynasty(dynasty.id)}

            members = []
            for character in characters:
                if _move_house_entries_to_dynasty(character, dynasty_houses, dynasty.id):
                    members.append(character)
                elif dynasty.id in _referenced_values([character], "dynasty"):
                    members.append(character)
            for house_id in dynasty_houses:
                houses.remove(house_id)

            founder = min((c for c in members if c.birth_date is not None), key=lambda c: c.birth_date, default=None)
            logger.debug(f"Flattening dynasty {dynasty.id}: founder {dynasty.founder_id} is gone, "
                         f"{len(dynasty_houses)} houses merged, new founder {founder.id if founder else None}")
            dynasty.founder_id = founder.id if founder else None
            flattened += 1
        if flattened:
            logger.info(f"Flattened {flattened} dynasties with no founders.")
        return flattened


def _move_house_entries_to_dynasty(character: "Character", house_ids: Set[str], dynasty_id: str) -> bool:
    house_field = character.history.fields.get("dynasty_house")
    if house_field is None or not house_ids:
        return False
    dates = [None for _, value in house_field.initial_entries if value in house_ids]
    dates.extend(entry_date for entry_date, (_, value) in house_field.dated_entries() if value in house_ids)
    if not dates:
        return False
    for entry_date in dates:
        character.history.add_field_value(entry_date, "dynasty", "dynasty", dynasty_id)
    house_field.remove_all_entries(lambda value: value in house_ids)
    return True
