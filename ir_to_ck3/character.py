"""
character.py - CK3 character modeling for the converted world.

This module provides the Character class, the node of the target entity
graph. It supports:
    - Parent/child links kept consistent from both sides
    - Symmetric spouse links sharing one Marriage record
    - Prisoner/jailor links
    - Dated history (culture, dynasty, employer, effect scripts, ...)
    - Detaching every relation before the character is removed

Module: ir_to_ck3.character
"""

__all__ = ['Character', 'Pregnancy']

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

from .game_date import GameDate
from .history import History, LiteralHistoryField
from .marriage import Marriage

if TYPE_CHECKING:
    from .dynasties import HouseCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pregnancy:
    father_id: str
    mother_id: str
    birth_date: GameDate
    is_bastard: bool = False


class Character:
    """
    Represents a character in the CK3 world being built.

    Attributes:
        id (str): Unique character ID (never changes).
        name (Optional[str]): Name localization key or literal name.
        female (bool): True for female characters.
        birth_date (Optional[GameDate]): Birth date.
        death_date (Optional[GameDate]): Death date (None while alive).
        death_reason (Optional[str]): CK3 death reason.
        nickname (Optional[str]): CK3 nickname.
        gold (Optional[float]): Starting gold.
        mother (Optional[Character]): Mother (set by the relationship linker).
        father (Optional[Character]): Father (set by the relationship linker).
        children (Dict[str, Character]): Children indexed by ID.
        marriages (Dict[str, Marriage]): Marriages indexed by the spouse's ID.
        jailor (Optional[Character]): Character holding this one prisoner.
        prisoners (Dict[str, Character]): Prisoners held by this character.
        prisoner_home_title_id (Optional[str]): Title whose holder imprisons this character.
        pregnancies (List[Pregnancy]): Pregnancies carried at game start.
        history (History): Dated history fields; always has a literal 'effects' field.
        is_non_removable (bool): Pinned by configuration, never purged.
        base_traits (List[str]): Base trait IDs, without duplicates.
        localizations (Dict[str, str]): Localization blocks owned by the character.
    """
    __slots__ = ['id',
                 'name', 'female',
                 'birth_date', 'death_date', 'death_reason',
                 'nickname', 'gold',
                 '_mother', '_father', 'children',
                 'marriages',
                 'jailor', 'prisoners', 'prisoner_home_title_id',
                 'pregnancies',
                 'history',
                 'is_non_removable',
                 'base_traits',
                 'localizations']

    def __init__(self, character_id: str, female: bool = False,
                 birth_date: Optional[GameDate] = None, death_date: Optional[GameDate] = None):
        self.id : str = character_id

        self.name : Optional[str] = None
        self.female : bool = female

        self.birth_date : Optional[GameDate] = birth_date
        self.death_date : Optional[GameDate] = death_date
        self.death_reason : Optional[str] = None

        self.nickname : Optional[str] = None
        self.gold : Optional[float] = None

        self._mother : Optional[Character] = None
        self._father : Optional[Character] = None
        self.children : Dict[str, Character] = {}

        self.marriages : Dict[str, Marriage] = {}

        self.jailor : Optional[Character] = None
        self.prisoners : Dict[str, Character] = {}
        self.prisoner_home_title_id : Optional[str] = None

        self.pregnancies : List[Pregnancy] = []

        self.history : History = History([LiteralHistoryField("effects")])

        self.is_non_removable : bool = False
        self.base_traits : List[str] = []
        self.localizations : Dict[str, str] = {}

    def __str__(self) -> str:
        return f"Character(id={self.id}, name={self.name})"

    def __repr__(self) -> str:
        return f"[ {self.id} : {self.name} - {self.father_id} & {self.mother_id} ]"

    # ---------- Parents & children ----------

    @property
    def mother(self) -> Optional["Character"]:
        return self._mother

    @mother.setter
    def mother(self, value: Optional["Character"]) -> None:
        if self._mother is not None:
            self._mother.children.pop(self.id, None)
        self._mother = value
        if value is not None:
            value.children[self.id] = self

    @property
    def father(self) -> Optional["Character"]:
        return self._father

    @father.setter
    def father(self, value: Optional["Character"]) -> None:
        if self._father is not None:
            self._father.children.pop(self.id, None)
        self._father = value
        if value is not None:
            value.children[self.id] = self

    @property
    def mother_id(self) -> Optional[str]:
        return self._mother.id if self._mother is not None else None

    @property
    def father_id(self) -> Optional[str]:
        return self._father.id if self._father is not None else None

    def remove_all_children(self) -> None:
        """Unlink every child from this character."""
        for child in list(self.children.values()):
            if child.mother is self:
                child.mother = None
            if child.father is self:
                child.father = None
        self.children.clear()

    def remove_parent_links(self) -> None:
        self.mother = None
        self.father = None

    # ---------- Spouses ----------

    @property
    def spouses(self) -> Dict[str, "Character"]:
        """Spouses indexed by ID."""
        return {spouse_id: marriage.partner(self) for spouse_id, marriage in self.marriages.items()}

    def spouse_date(self, spouse_id: str) -> Optional[GameDate]:
        marriage = self.marriages.get(spouse_id)
        return marriage.date if marriage else None

    def add_spouse(self, date: GameDate, spouse: "Character") -> bool:
        """
        Marry this character to spouse at date.

        Both sides index the same Marriage; the union is written to this
        character's 'spouses' history field only.

        Returns:
            bool: False if the two were already married.
        """
        if spouse.id in self.marriages or spouse is self:
            return False
        marriage = Marriage([self, spouse], date)
        self.marriages[spouse.id] = marriage
        spouse.marriages[self.id] = marriage
        self.history.add_field_value(date, "spouses", "add_spouse", spouse.id)
        return True

    def remove_spouse(self, spouse_id: str) -> None:
        marriage = self.marriages.pop(spouse_id, None)
        if marriage is None:
            return
        spouse = marriage.partner(self)
        if spouse is not None:
            spouse.marriages.pop(self.id, None)
        primary = marriage.primary
        if primary is not None:
            other_id = spouse_id if primary is self else self.id
            spouses_field = primary.history.fields.get("spouses")
            if spouses_field is not None:
                spouses_field.remove_all_entries(lambda value: value == other_id)

    def remove_all_spouses(self) -> None:
        for spouse_id in list(self.marriages):
            self.remove_spouse(spouse_id)

    # ---------- Prisoners ----------

    def set_jailor(self, jailor: "Character", date: GameDate) -> None:
        """Imprison this character in jailor's dungeon from date."""
        if self.jailor is not None:
            self.jailor.prisoners.pop(self.id, None)
        self.jailor = jailor
        jailor.prisoners[self.id] = self
        jailor.history.add_field_value(date, "effects", "effect",
                                       f"{{ imprison={{ target=character:{self.id} type=dungeon }} }}")

    def remove_jail_links(self) -> None:
        if self.jailor is not None:
            self.jailor.prisoners.pop(self.id, None)
            self.jailor = None
        for prisoner in list(self.prisoners.values()):
            prisoner.jailor = None
        self.prisoners.clear()

    # ---------- Date-scoped state ----------

    @property
    def is_dead(self) -> bool:
        return self.death_date is not None

    def get_culture_id(self, date: Optional[GameDate] = None) -> Optional[str]:
        return self.history.get_field_value("culture", date)

    def get_faith_id(self, date: Optional[GameDate] = None) -> Optional[str]:
        return self.history.get_field_value("faith", date)

    def get_house_id(self, date: Optional[GameDate] = None) -> Optional[str]:
        return self.history.get_field_value("dynasty_house", date)

    def get_dynasty_id(self, date: Optional[GameDate] = None,
                       houses: Optional["HouseCollection"] = None) -> Optional[str]:
        """
        Return the dynasty at date: the 'dynasty' field, else the dynasty of
        the character's house when a house collection is given.
        """
        dynasty_id = self.history.get_field_value("dynasty", date)
        if dynasty_id is not None or houses is None:
            return dynasty_id
        house_id = self.get_house_id(date)
        if house_id is None:
            return None
        house = houses.get(house_id)
        return house.dynasty_id if house is not None else None

    def add_base_trait(self, trait_id: str) -> None:
        if trait_id not in self.base_traits:
            self.base_traits.append(trait_id)
