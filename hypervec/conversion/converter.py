"""
Conversion of vectors between flat space and the Poincaré ball.

The single-vector mapping compresses a Euclidean vector radially with an
arctangent so any finite input lands strictly inside a ball of radius
``max_radius``; the inverse uses the matching tangent. The batch mapping
first rescales the whole batch by one shared factor so that relative
distances survive the conversion.
"""

import logging
import math
from typing import List, Optional, Sequence

from ..core.euclidean import EuclideanOperations
from ..core.vectors import DEFAULT_CURVATURE, EuclideanVector, PoincareVector, ZERO_NORM_EPS
from ..exceptions import InvalidRadiusError, OutOfBallError


logger = logging.getLogger(__name__)

BATCH_TARGET_FRACTION = 0.9
# Keeps 2/pi * atan(norm) strictly below 1 once atan rounds to pi/2
MAX_RADIAL_FRACTION = 1.0 - 1e-12


def validate_radius(max_radius: float) -> None:
    """Raise ``InvalidRadiusError`` unless 0 < max_radius < 1."""
    if not 0.0 < max_radius < 1.0:
        raise InvalidRadiusError(max_radius)


class VectorSpaceConverter:
    """
    Utility class for converting vectors between geometric spaces.

    Instances are stateless and may be shared.

    Example:
        >>> converter = VectorSpaceConverter()
        >>> p = converter.euclidean_to_poincare(EuclideanVector([2.0, 3.0, 4.0]), 0.9, -1.0)
        >>> p.norm() < 0.9
        True
    """

    def __init__(self, euclidean_ops: Optional[EuclideanOperations] = None):
        self.euclidean_ops = euclidean_ops or EuclideanOperations()

    def euclidean_to_poincare(
        self,
        vector: EuclideanVector,
        max_radius: float = 0.9,
        curvature: float = DEFAULT_CURVATURE
    ) -> PoincareVector:
        """
        Map a Euclidean vector into the ball, preserving its direction.

        Args:
            vector: The Euclidean vector to convert
            max_radius: Radius the output norm stays strictly below (0 < r < 1)
            curvature: Curvature tag of the resulting point

        Returns:
            The corresponding Poincaré vector
        """
        validate_radius(max_radius)

        norm = vector.norm()
        if norm < ZERO_NORM_EPS:
            return PoincareVector.zeros(vector.dimension, curvature)

        # atan maps [0, inf) onto [0, pi/2)
        fraction = min((2.0 / math.pi) * math.atan(norm), MAX_RADIAL_FRACTION)
        scale = max_radius * fraction / norm
        return PoincareVector(vector.data * scale, curvature)

    def poincare_to_euclidean(self, vector: PoincareVector, max_radius: float = 0.9) -> EuclideanVector:
        """
        Invert ``euclidean_to_poincare`` for the same ``max_radius``.

        Raises:
            InvalidRadiusError: if max_radius is not in (0, 1)
            OutOfBallError: if the point lies outside the ball of radius max_radius
        """
        validate_radius(max_radius)

        norm = vector.norm()
        if norm < ZERO_NORM_EPS:
            return EuclideanVector.zeros(vector.dimension)
        if norm >= max_radius:
            raise OutOfBallError(
                norm, f"Vector norm {norm} is not below the conversion radius {max_radius}"
            )

        scale = math.tan(math.pi * norm / (2.0 * max_radius)) / norm
        return EuclideanVector(vector.data * scale)

    def batch_convert_euclidean_to_poincare(
        self,
        vectors: Sequence[EuclideanVector],
        max_radius: float = 0.9,
        curvature: float = DEFAULT_CURVATURE
    ) -> List[PoincareVector]:
        """
        Convert a batch while preserving relative distance ratios.

        The largest pairwise Euclidean distance in the batch is mapped to
        ``0.9 * max_radius`` by one uniform scale factor that is applied to
        every vector before the per-vector conversion.
        """
        validate_radius(max_radius)
        if not vectors:
            return []

        max_distance = 0.0
        for i in range(len(vectors)):
            for j in range(i + 1, len(vectors)):
                max_distance = max(max_distance, self.euclidean_ops.distance(vectors[i], vectors[j]))

        scale_factor = 1.0
        if max_distance > 0.0:
            scale_factor = (max_radius * BATCH_TARGET_FRACTION) / max_distance

        logger.debug(
            f"Batch converting {len(vectors)} vectors "
            f"(max pairwise distance {max_distance:.4f}, scale {scale_factor:.4f})"
        )

        return [
            self.euclidean_to_poincare(self.euclidean_ops.scale(vector, scale_factor), max_radius, curvature)
            for vector in vectors
        ]

    def batch_convert_poincare_to_euclidean(
        self,
        vectors: Sequence[PoincareVector],
        max_radius: float = 0.9
    ) -> List[EuclideanVector]:
        """Elementwise ``poincare_to_euclidean``."""
        return [self.poincare_to_euclidean(vector, max_radius) for vector in vectors]
