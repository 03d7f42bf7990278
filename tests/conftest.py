"""Shared fixtures for similarity tests."""

import pytest

from similarity.equations import SimilarityParameters
from similarity.shooting import shoot


@pytest.fixture
def default_params():
    """Canonical case: M∞=1, T∞=300 K, η_max=10, N=50."""
    return SimilarityParameters()


@pytest.fixture(scope='session')
def canonical_result():
    """Shooting solution of the canonical case, solved once per session."""
    return shoot(SimilarityParameters())
