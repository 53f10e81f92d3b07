"""Sequence counter repository (PostgreSQL-backed SequenceCounterStore)."""

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nna_registry.db.tables import SequenceCounterRow
from nna_registry.models.common import utc_now
from nna_registry.models.taxonomy import TaxonomyPath
from nna_registry.sequencing.stores import SequenceCounterStore
from nna_registry.taxonomy.errors import SequenceConflict


def _where_path(path: TaxonomyPath) -> tuple:
    return (
        SequenceCounterRow.layer == path.layer.value,
        SequenceCounterRow.category == path.category,
        SequenceCounterRow.subcategory == path.subcategory,
    )


class SequenceCounterRepository(SequenceCounterStore):
    """Atomic per-path counters in the ``sequence_counters`` table.

    ``increment`` is a single ``UPDATE ... SET count = count + 1 RETURNING
    count``; the first use of a path inserts the row inside a SAVEPOINT. Two
    sessions racing on that first insert hit the primary key, and the loser
    gets ``SequenceConflict`` so the allocator can retry as an update.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def increment(self, path: TaxonomyPath) -> int:
        stmt = (
            update(SequenceCounterRow)
            .where(*_where_path(path))
            .values(count=SequenceCounterRow.count + 1, updated_at=utc_now())
            .returning(SequenceCounterRow.count)
        )
        result = await self._session.execute(stmt)
        value = result.scalar_one_or_none()
        if value is not None:
            return value

        try:
            async with self._session.begin_nested():
                self._session.add(
                    SequenceCounterRow(
                        layer=path.layer.value,
                        category=path.category,
                        subcategory=path.subcategory,
                        count=1,
                        updated_at=utc_now(),
                    )
                )
        except IntegrityError as exc:
            msg = f"Counter for {path.key} was created concurrently."
            raise SequenceConflict(msg) from exc
        return 1

    async def current(self, path: TaxonomyPath) -> int:
        result = await self._session.execute(
            select(SequenceCounterRow.count).where(*_where_path(path))
        )
        return result.scalar_one_or_none() or 0

    async def reset(self, path: TaxonomyPath) -> None:
        await self._session.execute(
            delete(SequenceCounterRow).where(*_where_path(path))
        )

    async def list_all(self) -> list[SequenceCounterRow]:
        result = await self._session.execute(
            select(SequenceCounterRow).order_by(
                SequenceCounterRow.layer,
                SequenceCounterRow.category,
                SequenceCounterRow.subcategory,
            )
        )
        return list(result.scalars().all())
