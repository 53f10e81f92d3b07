"""Counter store ABC and in-memory implementation for sequence allocation.

A store owns one integer per canonical taxonomy path. ``increment`` must be
atomic with respect to every other caller of the same store; a store that
detects a lost race raises ``SequenceConflict`` and the allocator retries.

The in-memory implementation is for tests and single-process use.
Production uses ``SequenceCounterRepository`` (PostgreSQL).
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from nna_registry.models.taxonomy import TaxonomyPath


class SequenceCounterStore(ABC):
    """ABC for per-path sequence counters."""

    @abstractmethod
    async def increment(self, path: TaxonomyPath) -> int:
        """Add one to the path's counter and return the new value (first call -> 1)."""

    @abstractmethod
    async def current(self, path: TaxonomyPath) -> int:
        """The last issued value for the path, 0 if none."""

    @abstractmethod
    async def reset(self, path: TaxonomyPath) -> None:
        """Forget the path's counter."""


class InMemorySequenceCounterStore(SequenceCounterStore):
    """In-memory implementation for tests.

    Production replaces with the PostgreSQL-backed repository.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def increment(self, path: TaxonomyPath) -> int:
        async with self._lock:
            value = self._counts.get(path.key, 0) + 1
            self._counts[path.key] = value
            return value

    async def current(self, path: TaxonomyPath) -> int:
        return self._counts.get(path.key, 0)

    async def reset(self, path: TaxonomyPath) -> None:
        self._counts.pop(path.key, None)
