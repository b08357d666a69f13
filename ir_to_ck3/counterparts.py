"""
counterparts.py - Source/target character correspondence.

CounterpartMap records which CK3 character was created from which Imperator
character. Lookups return None when there is no counterpart, e.g. for
characters created by other mechanisms than import.

Module: ir_to_ck3.counterparts
"""

from typing import Dict, Optional


class CounterpartMap:
    """
    Bidirectional source-id <-> target-id table.

    Attributes:
        _source_to_target (Dict[str, str]): Source character id to CK3 character id.
        _target_to_source (Dict[str, str]): CK3 character id to source character id.
    """

    def __init__(self):
        self._source_to_target: Dict[str, str] = {}
        self._target_to_source: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._target_to_source)

    def __repr__(self) -> str:
        return f"CounterpartMap(links={len(self)})"

    def link(self, source_id: str, target_id: str) -> None:
        """Record that target_id was created from source_id, replacing older links of either side."""
        old_target = self._source_to_target.pop(source_id, None)
        if old_target is not None:
            self._target_to_source.pop(old_target, None)
        old_source = self._target_to_source.pop(target_id, None)
        if old_source is not None:
            self._source_to_target.pop(old_source, None)
        self._source_to_target[source_id] = target_id
        self._target_to_source[target_id] = source_id

    def target_id_for(self, source_id: str) -> Optional[str]:
        return self._source_to_target.get(source_id)

    def source_id_for(self, target_id: str) -> Optional[str]:
        return self._target_to_source.get(target_id)

    def is_from_source(self, target_id: str) -> bool:
        return target_id in self._target_to_source

    def unlink_target(self, target_id: str) -> None:
        source_id = self._target_to_source.pop(target_id, None)
        if source_id is not None:
            self._source_to_target.pop(source_id, None)
