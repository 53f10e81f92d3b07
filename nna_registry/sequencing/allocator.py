"""SequenceAllocator: per-path monotonic sequential numbers.

Numbering is scoped to the full canonical path: ``S.POP.HPM`` and
``S.POP.DIV`` count independently, and ``S.POP.HPM`` reached through an
alias or numeric input shares the canonical path's counter.

Same-path callers are serialized by a per-path ``asyncio.Lock``; the store's
atomic increment is what makes numbering safe across processes.
"""

from __future__ import annotations

import asyncio
import logging
import weakref

from nna_registry.models.taxonomy import TaxonomyPath
from nna_registry.sequencing.stores import SequenceCounterStore
from nna_registry.taxonomy.codec import format_sequential
from nna_registry.taxonomy.errors import InvalidAddress, SequenceConflict
from nna_registry.taxonomy.validator import Validator

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3


class PathLocks:
    """Lazily created ``asyncio.Lock`` per path key, per running event loop."""

    def __init__(self) -> None:
        self._by_loop: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, dict[str, asyncio.Lock]
        ] = weakref.WeakKeyDictionary()

    def get(self, key: str) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        locks = self._by_loop.setdefault(loop, {})
        lock = locks.get(key)
        if lock is None:
            lock = locks[key] = asyncio.Lock()
        return lock


# Shared by every allocator in the process so per-request allocators
# still serialize on the same path.
_DEFAULT_LOCKS = PathLocks()


class SequenceAllocator:
    """Hands out the next sequential for a taxonomy path."""

    def __init__(
        self,
        store: SequenceCounterStore,
        validator: Validator,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        locks: PathLocks | None = None,
    ) -> None:
        if max_retries < 0:
            msg = f"max_retries must be >= 0, got {max_retries}."
            raise ValueError(msg)
        self._store = store
        self._validator = validator
        self._max_retries = max_retries
        self._locks = locks or _DEFAULT_LOCKS

    def canonical_path(self, layer: str, category: str, subcategory: str) -> TaxonomyPath:
        """Resolve any accepted input form to the canonical alpha path.

        Raises:
            InvalidAddress: If the path does not validate.
        """
        result = self._validator.validate(layer, category, subcategory)
        if not result.ok:
            raise InvalidAddress(result.message, result)
        return result.path

    async def next(self, layer: str, category: str, subcategory: str) -> str:
        """Reserve and return the next sequential ('001', '002', ...).

        Raises:
            InvalidAddress: If the path does not validate.
            SequenceConflict: If the store keeps losing the race after
                ``max_retries`` retries.
        """
        path = self.canonical_path(layer, category, subcategory)
        async with self._locks.get(path.key):
            value = await self._increment(path)
        sequential = format_sequential(value)
        logger.info("Allocated sequential %s for %s", sequential, path.key)
        return sequential

    async def _increment(self, path: TaxonomyPath) -> int:
        attempt = 0
        while True:
            try:
                return await self._store.increment(path)
            except SequenceConflict:
                if attempt >= self._max_retries:
                    logger.error(
                        "Sequence allocation for %s failed after %d retries",
                        path.key, attempt,
                    )
                    raise
                attempt += 1
                logger.warning(
                    "Sequence conflict on %s, retrying (%d/%d)",
                    path.key, attempt, self._max_retries,
                )

    async def peek(self, layer: str, category: str, subcategory: str) -> str:
        """The sequential ``next`` would return now, without reserving it."""
        path = self.canonical_path(layer, category, subcategory)
        return format_sequential(await self._store.current(path) + 1)

    async def clear(self, layer: str, category: str, subcategory: str) -> None:
        """Reset a path so numbering restarts at '001'. Administrative use only."""
        path = self.canonical_path(layer, category, subcategory)
        async with self._locks.get(path.key):
            await self._store.reset(path)
        logger.warning("Sequence counter for %s was reset", path.key)
