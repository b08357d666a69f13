"""
titles.py - CK3 landed titles as seen by the character conversion.

The conversion only queries titles: who holds what at a date, who ever held
anything, which titles came from Imperator countries, and which barony or
county covers a province.

Module: ir_to_ck3.titles
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from .game_date import GameDate
from .history import SimpleHistoryField
from .id_collection import IdObjectCollection


class Title:
    """
    A CK3 landed title.

    Attributes:
        id (str): Title id such as 'k_italy' or 'b_roma'.
        holders (SimpleHistoryField): Dated holder ids (None means unheld).
        lieges (SimpleHistoryField): Dated de facto liege title ids.
        de_jure_liege_id (Optional[str]): De jure liege (the county of a barony).
        province_id (Optional[str]): Province of a barony.
        landless (bool): Landless titles (e.g. mercenary companies).
        source_country_id (Optional[str]): Imperator country the title was created from.
        source_country_gold (float): Treasury of that country.
    """
    __slots__ = ['id', 'holders', 'lieges', 'de_jure_liege_id', 'province_id',
                 'landless', 'source_country_id', 'source_country_gold']

    def __init__(self, title_id: str, de_jure_liege_id: Optional[str] = None, province_id: Optional[str] = None,
                 landless: bool = False, source_country_id: Optional[str] = None, source_country_gold: float = 0.0):
        self.id: str = title_id
        self.holders = SimpleHistoryField("holder")
        self.lieges = SimpleHistoryField("liege")
        self.de_jure_liege_id = de_jure_liege_id
        self.province_id = str(province_id) if province_id is not None else None
        self.landless = landless
        self.source_country_id = source_country_id
        self.source_country_gold = source_country_gold

    def __repr__(self) -> str:
        return f"Title(id={self.id})"

    @property
    def rank(self) -> str:
        return self.id.split('_', 1)[0]

    def set_holder(self, holder_id: Optional[str], date: Optional[GameDate] = None) -> None:
        self.holders.add_entry(date, "holder", holder_id)

    def set_liege(self, liege_id: Optional[str], date: Optional[GameDate] = None) -> None:
        self.lieges.add_entry(date, "liege", liege_id)

    def get_holder_id(self, date: GameDate) -> Optional[str]:
        holder_id = self.holders.get_value(date)
        # "0" is the CK3 history notation for an unheld title.
        return None if holder_id in (None, "0") else holder_id

    def get_liege_id(self, date: GameDate) -> Optional[str]:
        return self.lieges.get_value(date)

    def all_holder_ids(self) -> Set[str]:
        return {holder for holder in self.holders.all_values() if holder not in (None, "0")}


class LandedTitles(IdObjectCollection[Title]):
    """All titles, with the lookups the character conversion needs."""

    def get_holder_ids(self, date: GameDate) -> Set[str]:
        """Ids of characters holding any title at date."""
        holder_ids = set()
        for title in self:
            holder_id = title.get_holder_id(date)
            if holder_id is not None:
                holder_ids.add(holder_id)
        return holder_ids

    def get_all_holder_ids(self) -> Set[str]:
        """Ids of characters that ever held any title."""
        holder_ids = set()
        for title in self:
            holder_ids |= title.all_holder_ids()
        return holder_ids

    def get_countries_imported_from_source(self) -> List[Title]:
        return [title for title in self if title.source_country_id is not None]

    def get_title_for_source_country(self, country_id: Optional[str]) -> Optional[Title]:
        if country_id is None:
            return None
        for title in self:
            if title.source_country_id == country_id:
                return title
        return None

    def get_barony_for_province(self, province_id: str) -> Optional[Title]:
        province_id = str(province_id)
        for title in self:
            if title.rank == 'b' and title.province_id == province_id:
                return title
        return None

    def get_county_for_province(self, province_id: str) -> Optional[Title]:
        barony = self.get_barony_for_province(province_id)
        if barony is None or barony.de_jure_liege_id is None:
            return None
        return self.get(barony.de_jure_liege_id)

    def get_de_facto_vassals(self, title: Title, date: GameDate) -> Dict[str, Title]:
        """All titles below title at date, direct and indirect."""
        vassals: Dict[str, Title] = {}
        pending: List[str] = [title.id]
        while pending:
            liege_id = pending.pop()
            for candidate in self:
                if candidate.id in vassals or candidate.id == title.id:
                    continue
                if candidate.get_liege_id(date) == liege_id:
                    vassals[candidate.id] = candidate
                    pending.append(candidate.id)
        return vassals
