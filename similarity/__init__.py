"""Compressible laminar boundary-layer similarity solutions by shooting."""

from similarity.equations import SimilarityParameters, StateVector
from similarity.errors import (
    SimilarityError, NonPhysicalStateError, SingularJacobianError,
)
from similarity.gas import GasConstants
from similarity.shooting import ShootingStatus, SimilarityResult, shoot, solve

__all__ = [
    'GasConstants', 'NonPhysicalStateError', 'ShootingStatus',
    'SimilarityError', 'SimilarityParameters', 'SimilarityResult',
    'SingularJacobianError', 'StateVector', 'shoot', 'solve',
]
