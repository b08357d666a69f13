"""
mappers.py - Imperator to CK3 identifier translation tables.

Every mapper answers match(source, context) with a CK3 identifier or None
when the source concept is unmapped. Tables are plain YAML dictionaries:

    religions:
      roman_pantheon: hellenic_pagan
    cultures:
      roman:
        default: roman
        christianity: italian      # context-specific value

Module: ir_to_ck3.mappers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import yaml

logger = logging.getLogger(__name__)


class DictMapper:
    """
    Dictionary-backed mapper.

    A table value is either the CK3 id or a dict of context -> CK3 id with an
    optional 'default' entry.
    """
    __slots__ = ['name', 'table']

    def __init__(self, name: str, table: Optional[Dict[str, Any]] = None):
        self.name: str = name
        self.table: Dict[str, Any] = dict(table or {})

    def __repr__(self) -> str:
        return f"DictMapper(name={self.name}, entries={len(self.table)})"

    def match(self, source: Optional[str], context: Optional[str] = None) -> Optional[str]:
        if source is None:
            return None
        value = self.table.get(source)
        if isinstance(value, dict):
            if context is not None and context in value:
                return value[context]
            return value.get('default')
        return value


class TraitMapper(DictMapper):
    """Maps a list of Imperator traits; unmapped traits are dropped."""
    __slots__ = []

    def match_all(self, source_traits: Iterable[str]) -> List[str]:
        result = []
        for trait in source_traits:
            ck3_trait = self.match(trait)
            if ck3_trait is not None and ck3_trait not in result:
                result.append(ck3_trait)
        return result


class ProvinceMapper:
    """Maps an Imperator province id to its CK3 province ids (possibly none)."""
    __slots__ = ['table']

    def __init__(self, table: Optional[Dict[Any, Iterable[Any]]] = None):
        self.table: Dict[str, List[str]] = {
            str(source): [str(target) for target in targets] for source, targets in (table or {}).items()
        }

    def get_ck3_province_ids(self, source_province_id: str) -> List[str]:
        return list(self.table.get(str(source_province_id), []))


@dataclass
class Mappers:
    """Bundle of the translation tables used while importing characters."""
    religion: DictMapper = field(default_factory=lambda: DictMapper('religions'))
    culture: DictMapper = field(default_factory=lambda: DictMapper('cultures'))
    trait: TraitMapper = field(default_factory=lambda: TraitMapper('traits'))
    nickname: DictMapper = field(default_factory=lambda: DictMapper('nicknames'))
    death_reason: DictMapper = field(default_factory=lambda: DictMapper('death_reasons'))
    province: ProvinceMapper = field(default_factory=ProvinceMapper)

    @classmethod
    def from_dict(cls, tables: Dict[str, Any]) -> Mappers:
        return cls(
            religion=DictMapper('religions', tables.get('religions')),
            culture=DictMapper('cultures', tables.get('cultures')),
            trait=TraitMapper('traits', tables.get('traits')),
            nickname=DictMapper('nicknames', tables.get('nicknames')),
            death_reason=DictMapper('death_reasons', tables.get('death_reasons')),
            province=ProvinceMapper(tables.get('provinces')),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> Mappers:
        """
        Load all tables from one YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid YAML.
        """
        if not yaml_path or not Path(yaml_path).exists():
            raise FileNotFoundError(f"Mapping file not found: {yaml_path}")
        try:
            with open(yaml_path, 'r', encoding='utf-8') as f:
                tables = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing {yaml_path}: {e}")
        logger.info(f"Loaded mapping tables from {yaml_path}: {', '.join(sorted(tables))}")
        return cls.from_dict(tables)
