"""
importer.py - Parallel import of Imperator characters.

Each Imperator character is converted independently on a worker thread.
Workers only return the characters they build; the store is filled on the
calling thread after every worker has finished, so a failed import leaves
the store exactly as it was.

Module: ir_to_ck3.importer
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar, TYPE_CHECKING

from . import app_hooks as hooks
from .character_factory import CharacterFactory
from .source_character import SourceCharacter

if TYPE_CHECKING:
    from .app_hooks import AppHooks
    from .character_collection import CharacterCollection

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class ConcurrentWarningSet:
    """Set of warning subjects that several worker threads may add to."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items = set()

    def add(self, item: str) -> None:
        with self._lock:
            self._items.add(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0

    def sorted(self) -> List[str]:
        with self._lock:
            return sorted(self._items)


def run_parallel(items: Sequence[T], func: Callable[[T], R], max_workers: int) -> List[R]:
    """
    Apply func to every item on a thread pool and return results in input order.

    All submitted work is joined before returning. If any call fails, work
    not yet started is cancelled and the first failure (in input order) is
    re-raised once the pool has shut down.

    Raises:
        Exception: Whatever the first failing call raised.
    """
    if not items:
        return []
    results: List[Optional[R]] = [None] * len(items)
    errors = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {executor.submit(func, item): index for index, item in enumerate(items)}
        for future in concurrent.futures.as_completed(future_to_index):
            if future.cancelled():
                continue
            index = future_to_index[future]
            error = future.exception()
            if error is not None:
                errors[index] = error
                for pending in future_to_index:
                    pending.cancel()
                continue
            results[index] = future.result()

    if errors:
        first_index = min(errors)
        error = errors[first_index]
        logger.error(f"Worker failed on item {first_index}: {error}")
        logger.debug("Worker failure details", exc_info=error)
        raise error
    return results


class CharacterImporter:
    """
    Imports Imperator characters into a CharacterCollection.

    Attributes:
        factory (CharacterFactory): Builds one CK3 character per Imperator character.
        max_workers (int): Worker thread count.
        app_hooks (Optional[AppHooks]): Progress reporting.
    """

    def __init__(self, factory: CharacterFactory, max_workers: int, app_hooks: Optional["AppHooks"] = None):
        self.factory = factory
        self.max_workers = max_workers
        self.app_hooks = app_hooks

    def import_characters(self, source_characters: Iterable[SourceCharacter],
                          characters: "CharacterCollection") -> int:
        """
        Convert every Imperator character and add the results to characters.

        Characters are inserted in input order and linked to their Imperator
        counterparts. A character already in the store under the same id is
        replaced. Unlocalized names are reported once, as a sorted summary.

        Returns:
            int: Number of characters imported.

        Raises:
            Exception: The first worker failure; nothing is inserted in that case.
        """
        sources = list(source_characters)
        hooks.report_step(self.app_hooks, logger, info="Importing Imperator characters...",
                          target=len(sources), reset_counter=True)
        unlocalized_names = ConcurrentWarningSet()

        def _convert(source: SourceCharacter):
            return self.factory.create(source, unlocalized_names)

        converted = run_parallel(sources, _convert, self.max_workers)

        for source, character in zip(sources, converted):
            characters.add_or_replace(character)
            characters.counterparts.link(source.id, character.id)

        if unlocalized_names:
            logger.warning(f"Found unlocalized Imperator names: {', '.join(unlocalized_names.sorted())}")
        hooks.report_step(self.app_hooks, logger, plus_step=len(converted))
        logger.info(f"Imported {len(converted)} characters.")
        return len(converted)
