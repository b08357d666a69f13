"""
cultures.py - CK3 cultures, as far as the character conversion needs them.

Module: ir_to_ck3.cultures
"""

from typing import Iterable, List, Optional, Set

from .id_collection import IdObjectCollection


class Culture:
    """
    Attributes:
        id (str): Culture id.
        tradition_ids (List[str]): Cultural traditions, e.g. 'tradition_caste_system'.
    """
    __slots__ = ['id', 'tradition_ids']

    def __init__(self, culture_id: str, tradition_ids: Optional[Iterable[str]] = None):
        self.id = culture_id
        self.tradition_ids: List[str] = list(tradition_ids or [])

    def __repr__(self) -> str:
        return f"Culture(id={self.id})"

    def has_tradition(self, tradition_id: str) -> bool:
        return tradition_id in self.tradition_ids


class CultureCollection(IdObjectCollection[Culture]):

    def ids_with_tradition(self, tradition_id: str) -> Set[str]:
        return {culture.id for culture in self if culture.has_tradition(tradition_id)}
