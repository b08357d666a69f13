"""
history.py - Dated history records for CK3 characters.

A character's history is a set of named fields. Each field holds an optional
initial value plus entries keyed by date, each entry being a (setter, value)
pair in the order it was added. Two field kinds exist:
    - SimpleHistoryField: structured values (culture ids, dynasty ids, ...)
    - LiteralHistoryField: free-text script (the "effects" field)

Module: ir_to_ck3.history
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .game_date import GameDate


Entry = Tuple[str, Any]  # (setter, value)


class HistoryField:
    """
    Base for history fields.

    Attributes:
        id (str): Field name, e.g. 'culture' or 'effects'.
        initial_entries (List[Entry]): Undated entries.
        date_to_entries (Dict[GameDate, List[Entry]]): Dated entries.
    """
    __slots__ = ['id', 'initial_entries', 'date_to_entries']

    def __init__(self, field_id: str):
        self.id: str = field_id
        self.initial_entries: List[Entry] = []
        self.date_to_entries: Dict[GameDate, List[Entry]] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, entries={self.entries_count})"

    def add_entry(self, date: Optional[GameDate], setter: str, value: Any) -> None:
        """
        Add an entry at a date, or as an initial entry when date is None.
        """
        if date is None:
            self.initial_entries.append((setter, value))
        else:
            self.date_to_entries.setdefault(date, []).append((setter, value))

    @property
    def entries_count(self) -> int:
        return len(self.initial_entries) + sum(len(entries) for entries in self.date_to_entries.values())

    def dated_entries(self) -> Iterator[Tuple[GameDate, Entry]]:
        """Yield (date, entry) pairs sorted by date, keeping insertion order within a date."""
        for date in sorted(self.date_to_entries):
            for entry in self.date_to_entries[date]:
                yield date, entry

    def all_values(self) -> List[Any]:
        values = [value for _, value in self.initial_entries]
        values.extend(value for _, (_, value) in self.dated_entries())
        return values

    def get_value(self, date: Optional[GameDate] = None) -> Any:
        """
        Return the value in effect at the given date.

        The last entry dated on or before `date` wins; without such an entry
        the last initial entry is used. With date None, the last initial
        entry is returned.
        """
        value = self.initial_entries[-1][1] if self.initial_entries else None
        if date is None:
            return value
        for entry_date, (_, entry_value) in self.dated_entries():
            if entry_date > date:
                break
            value = entry_value
        return value

    def remove_all_entries(self, predicate: Optional[Callable[[Any], bool]] = None) -> int:
        """
        Remove entries whose value matches predicate (all entries if None).

        Returns:
            int: Number of entries removed.
        """
        def _keep(entry: Entry) -> bool:
            return predicate is not None and not predicate(entry[1])

        before = self.entries_count
        self.initial_entries = [entry for entry in self.initial_entries if _keep(entry)]
        for date in list(self.date_to_entries):
            kept = [entry for entry in self.date_to_entries[date] if _keep(entry)]
            if kept:
                self.date_to_entries[date] = kept
            else:
                del self.date_to_entries[date]
        return before - self.entries_count

    def clear_dated_entries(self) -> None:
        self.date_to_entries.clear()


class SimpleHistoryField(HistoryField):
    """History field with structured values."""
    __slots__ = []


class LiteralHistoryField(HistoryField):
    """
    History field whose values are free-text script blocks.

    Supports regex replacement across all entries, which is how references to
    removed characters are scrubbed from effect scripts.
    """
    __slots__ = []

    def transform_all_entries(self, func: Callable[[str], str]) -> int:
        """
        Replace every string entry with func(entry).

        Returns:
            int: Number of entries whose text changed.
        """
        changed = 0

        def _transform(entries: List[Entry]) -> List[Entry]:
            nonlocal changed
            result = []
            for setter, value in entries:
                if isinstance(value, str):
                    new_value = func(value)
                    if new_value != value:
                        changed += 1
                    value = new_value
                result.append((setter, value))
            return result

        self.initial_entries = _transform(self.initial_entries)
        for date, entries in self.date_to_entries.items():
            self.date_to_entries[date] = _transform(entries)
        return changed

    def regex_replace_all_entries(self, pattern: Union[str, re.Pattern], replacement: Union[str, Callable]) -> int:
        """Apply re.sub to every string entry; returns the number of entries changed."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return self.transform_all_entries(lambda value: regex.sub(replacement, value))


class History:
    """
    Collection of named history fields for one character.

    Attributes:
        fields (Dict[str, HistoryField]): Fields indexed by name.
    """
    __slots__ = ['fields']

    def __init__(self, fields: Optional[Iterable[HistoryField]] = None):
        self.fields: Dict[str, HistoryField] = {}
        for field in fields or []:
            self.fields[field.id] = field

    def __repr__(self) -> str:
        return f"History(fields={list(self.fields)})"

    def get_field(self, field_id: str) -> HistoryField:
        """Return the named field, creating a simple field if it does not exist."""
        field = self.fields.get(field_id)
        if field is None:
            field = SimpleHistoryField(field_id)
            self.fields[field_id] = field
        return field

    def add_field_value(self, date: Optional[GameDate], field_id: str, setter: str, value: Any) -> None:
        self.get_field(field_id).add_entry(date, setter, value)

    def get_field_value(self, field_id: str, date: Optional[GameDate] = None) -> Any:
        field = self.fields.get(field_id)
        if field is None:
            return None
        return field.get_value(date)

    def clear_dated_entries(self, keep: Iterable[str] = ()) -> None:
        """Clear dated entries of every field except those named in keep."""
        keep = set(keep)
        for field in self.fields.values():
            if field.id in keep:
                continue
            field.clear_dated_entries()
