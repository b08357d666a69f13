"""
source_character.py - Read-only Imperator character records.

These are the inputs of the conversion, as produced by the save parser.
Relations are stored as ids; resolving them goes through the owning
SourceCharacterCollection, so dangling ids are simply missing lookups.

Module: ir_to_ck3.source_character
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .game_date import GameDate
from .id_collection import IdObjectCollection

GESTATION_DAYS = 280


@dataclass(frozen=True)
class Unborn:
    """A pregnancy recorded on the mother."""
    father_id: str
    birth_date: GameDate
    is_bastard: bool = False

    def estimated_conception_date(self, gestation_days: int = GESTATION_DAYS) -> GameDate:
        return self.birth_date.change_by_days(-gestation_days)


@dataclass
class SourceCharacter:
    """
    Imperator character as read from the save.

    Attributes:
        id (str): Imperator character id.
        female (bool): True for female characters.
        birth_date (GameDate): Birth date.
        death_date (Optional[GameDate]): Death date, None while alive.
        mother_id / father_id (Optional[str]): Parent ids.
        spouse_ids (List[str]): Spouse ids.
        children_ids (List[str]): Children ids.
        unborns (List[Unborn]): Pending pregnancies (female characters).
        friend_ids / rival_ids (List[str]): Social relations.
        name (Optional[str]): Name localization key.
        culture / religion (Optional[str]): Imperator culture and religion ids.
        traits (List[str]): Imperator trait ids.
        nickname (Optional[str]): Imperator nickname id.
        death_reason (Optional[str]): Imperator death reason id.
        family_id (Optional[str]): Imperator family, converted to a dynasty.
        wealth (Optional[float]): Personal wealth.
        prisoner_home (Optional[str]): Country id holding this character prisoner.
    """
    id: str
    female: bool = False
    birth_date: GameDate = field(default_factory=lambda: GameDate(1))
    death_date: Optional[GameDate] = None
    mother_id: Optional[str] = None
    father_id: Optional[str] = None
    spouse_ids: List[str] = field(default_factory=list)
    children_ids: List[str] = field(default_factory=list)
    unborns: List[Unborn] = field(default_factory=list)
    friend_ids: List[str] = field(default_factory=list)
    rival_ids: List[str] = field(default_factory=list)
    name: Optional[str] = None
    culture: Optional[str] = None
    religion: Optional[str] = None
    traits: List[str] = field(default_factory=list)
    nickname: Optional[str] = None
    death_reason: Optional[str] = None
    family_id: Optional[str] = None
    wealth: Optional[float] = None
    prisoner_home: Optional[str] = None

    @property
    def is_dead(self) -> bool:
        return self.death_date is not None


class SourceCharacterCollection(IdObjectCollection[SourceCharacter]):
    """Imperator characters indexed by id, in save order."""
