from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml

from .game_date import GameDate

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

_DATE_FIELDS = ('conversion_date', 'bookmark_date')


def _load_yaml(yaml_path: Path) -> Dict[str, Any]:
    if not yaml_path or not Path(yaml_path).exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")
    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing {yaml_path}: {e}")


@dataclass(frozen=True)
class ConversionConfig:
    """
    Run parameters of the character conversion.

    Defaults come from config.yaml next to this module; from_yaml and
    from_dict override individual keys. Instances are read-only.
    """
    conversion_date: GameDate
    bookmark_date: GameDate
    caste_system_enabled: bool
    max_workers: Optional[int]
    gestation_days: int
    max_pregnancy_years: float
    protected_id_prefixes: Tuple[str, ...]
    character_id_prefix: str
    currency_rate: float
    characters_to_preserve_path: Optional[Path]

    @classmethod
    def default(cls) -> ConversionConfig:
        return cls.from_dict({})

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> ConversionConfig:
        """
        Load configuration from a YAML file; keys it lacks keep their defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid YAML or holds invalid values.
        """
        config_dict = _load_yaml(yaml_path)
        logger.info(f"Loaded conversion config from {yaml_path}")
        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> ConversionConfig:
        """
        Create configuration from a dictionary merged over the packaged defaults.

        Raises:
            ValueError: If a required key is missing from both or a value is invalid.
        """
        merged = {**_load_yaml(DEFAULT_CONFIG_PATH), **config_dict}
        unknown = set(merged) - {f.name for f in fields(cls)}
        for key in sorted(unknown):
            logger.warning(f"Ignoring unknown configuration key '{key}'")

        kwargs = {}
        for f in fields(cls):
            if f.name not in merged:
                raise ValueError(f"Required configuration field '{f.name}' not found")
            kwargs[f.name] = merged[f.name]

        for key in _DATE_FIELDS:
            kwargs[key] = GameDate.parse(kwargs[key])
        kwargs['protected_id_prefixes'] = tuple(kwargs['protected_id_prefixes'] or ())
        path = kwargs['characters_to_preserve_path']
        kwargs['characters_to_preserve_path'] = Path(path) if path else None
        max_workers = kwargs['max_workers']
        if max_workers is not None and int(max_workers) < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        return cls(**kwargs)

    @property
    def worker_count(self) -> int:
        """Import worker threads: max_workers, or CPU count - 1 (at least 1)."""
        if self.max_workers is not None:
            return int(self.max_workers)
        return max(1, (os.cpu_count() or 2) - 1)

    def is_protected_id(self, character_id: str) -> bool:
        return any(character_id.startswith(prefix) for prefix in self.protected_id_prefixes)
