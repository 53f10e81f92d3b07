"""Fixtures for sequencing tests."""

import pytest

from nna_registry.sequencing.stores import InMemorySequenceCounterStore
from nna_registry.taxonomy.engine import TaxonomyEngine


@pytest.fixture
def store() -> InMemorySequenceCounterStore:
    return InMemorySequenceCounterStore()


@pytest.fixture
def validator(taxonomy_engine: TaxonomyEngine):
    return taxonomy_engine.validator
