"""
Vector operations in flat (Euclidean) space.
"""

import math

import numpy as np

from .base import SpaceType, VectorOperations
from .vectors import EuclideanVector, ZERO_NORM_EPS
from ..exceptions import DegenerateVectorError, DimensionMismatchError


class EuclideanOperations(VectorOperations[EuclideanVector]):
    """
    Euclidean vector algebra.

    Every binary operation requires operands of equal dimension and
    raises ``DimensionMismatchError`` otherwise.

    Example:
        >>> ops = EuclideanOperations()
        >>> ops.distance(EuclideanVector([0.0, 0.0]), EuclideanVector([3.0, 4.0]))
        5.0
    """

    space_type = SpaceType.EUCLIDEAN

    def distance(self, v1: EuclideanVector, v2: EuclideanVector) -> float:
        return math.sqrt(self.squared_distance(v1, v2))

    def squared_distance(self, v1: EuclideanVector, v2: EuclideanVector) -> float:
        """Squared L2 distance, for callers that only compare distances."""
        self._check_dimension(v1, v2)
        diff = v1.data - v2.data
        return float(np.dot(diff, diff))

    def inner_product(self, v1: EuclideanVector, v2: EuclideanVector) -> float:
        self._check_dimension(v1, v2)
        return float(np.dot(v1.data, v2.data))

    def add(self, v1: EuclideanVector, v2: EuclideanVector) -> EuclideanVector:
        self._check_dimension(v1, v2)
        return EuclideanVector(v1.data + v2.data)

    def subtract(self, v1: EuclideanVector, v2: EuclideanVector) -> EuclideanVector:
        """Componentwise ``v1 - v2``."""
        self._check_dimension(v1, v2)
        return EuclideanVector(v1.data - v2.data)

    def scale(self, vector: EuclideanVector, scalar: float) -> EuclideanVector:
        return EuclideanVector(vector.data * float(scalar))

    def normalize(self, vector: EuclideanVector) -> EuclideanVector:
        norm = vector.norm()
        if norm < ZERO_NORM_EPS:
            raise DegenerateVectorError("Cannot normalize a zero vector", {"norm": norm})
        return EuclideanVector(vector.data / norm)

    @staticmethod
    def _check_dimension(v1: EuclideanVector, v2: EuclideanVector) -> None:
        if v1.dimension != v2.dimension:
            raise DimensionMismatchError(v1.dimension, v2.dimension)
