"""FastAPI dependency injection factories.

The taxonomy engine is a process-wide snapshot; repositories take an
AsyncSession via Depends(get_async_session). API endpoints use these via
Depends().
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nna_registry.config.settings import Settings, get_settings
from nna_registry.db.session import get_async_session
from nna_registry.repositories.sequences import SequenceCounterRepository
from nna_registry.sequencing.allocator import SequenceAllocator
from nna_registry.taxonomy.engine import TaxonomyEngine, get_engine

# ---------------------------------------------------------------------------
# Sequencing
# ---------------------------------------------------------------------------


async def get_sequence_counter_repo(
    session: AsyncSession = Depends(get_async_session),
) -> SequenceCounterRepository:
    return SequenceCounterRepository(session)


async def get_sequence_allocator(
    repo: SequenceCounterRepository = Depends(get_sequence_counter_repo),
    engine: TaxonomyEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> SequenceAllocator:
    return SequenceAllocator(
        repo,
        engine.validator,
        max_retries=settings.SEQUENCE_MAX_RETRIES,
    )
