"""
localization.py - Localization lookup used for character and artifact names.

Module: ir_to_ck3.localization
"""

from typing import Dict, Optional


class LocDB:
    """
    Localization key to text table.

    Attributes:
        entries (Dict[str, str]): Localized text indexed by key.
    """
    __slots__ = ['entries']

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self.entries: Dict[str, str] = dict(entries or {})

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get_loc(self, key: Optional[str]) -> Optional[str]:
        if key is None:
            return None
        return self.entries.get(key)

    def add_loc(self, key: str, text: str) -> None:
        self.entries[key] = text
