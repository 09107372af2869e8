"""
Core components for dual-geometry vector algebra.

This module contains the fundamental building blocks including:
- Immutable vector value types (Euclidean and Poincaré ball)
- The shared capability interface for vector algebras
- Euclidean and Poincaré ball algebra implementations
- Batched tensor operations used by evaluation code
"""

from .base import SpaceType, VectorOperations
from .vectors import EuclideanVector, PoincareVector, DEFAULT_CURVATURE
from .euclidean import EuclideanOperations
from .hyperbolic import PoincareOperations, acosh, atanh
from .math_ops import (
    poincare_distance,
    pairwise_poincare_distances,
    pairwise_euclidean_distances,
    exponential_map_origin,
    logarithmic_map_origin,
    project_to_poincare_ball,
)

__all__ = [
    "SpaceType",
    "VectorOperations",
    "EuclideanVector",
    "PoincareVector",
    "DEFAULT_CURVATURE",
    "EuclideanOperations",
    "PoincareOperations",
    "acosh",
    "atanh",
    "poincare_distance",
    "pairwise_poincare_distances",
    "pairwise_euclidean_distances",
    "exponential_map_origin",
    "logarithmic_map_origin",
    "project_to_poincare_ball",
]
