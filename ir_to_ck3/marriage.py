"""
marriage.py - Unions between CK3 characters.

Defines the Marriage class shared by both spouses of a union.

Module: ir_to_ck3.marriage
"""

from typing import List, TYPE_CHECKING

from .game_date import GameDate

if TYPE_CHECKING:
    from .character import Character


class Marriage:
    """Represents a union between two characters.

    The same Marriage object is indexed by both partners, so both always see
    the same date and the union is stored once.

    Attributes:
        people_list (List[Character]): The characters in the marriage, adding side first.
        date (GameDate): The (possibly estimated) date of the union.
    """

    __slots__ = ['people_list', 'date']

    def __init__(self, people_list: List["Character"] = None, date: GameDate = None):
        """Initializes a Marriage instance.

        Args:
            people_list (List["Character"], optional): Characters in the marriage. Defaults to empty list.
            date (GameDate, optional): Date of the union. Defaults to None.
        """
        self.people_list : List["Character"] = people_list if people_list is not None else []
        self.date : GameDate = date

    def __str__(self) -> str:
        """Returns a string representation of the marriage.

        Returns:
            str: String describing the marriage partners and date.
        """
        people_str = ', '.join([str(person) for person in self.people_list])
        return f"Marriage(people=[{people_str}], date={self.date})"

    def __repr__(self) -> str:
        people_repr = ', '.join([repr(person) for person in self.people_list])
        return f'Marriage(people=[{people_repr}], date={self.date!r})'

    @property
    def primary(self) -> "Character":
        """The character whose history records the union."""
        return self.people_list[0] if self.people_list else None

    def other_partners(self, person: "Character") -> List["Character"]:
        """Return a list of partners excluding the given character.

        Args:
            person (Character): The character to exclude.

        Returns:
            List[Character]: List of other partners in the marriage.
        """
        return [p for p in self.people_list if p is not person]

    def partner(self, person: "Character") -> "Character":
        """Return the first partner that is not the given character, or None."""
        others = self.other_partners(person)
        return others[0] if others else None
