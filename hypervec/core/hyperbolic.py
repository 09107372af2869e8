"""
Vector operations in the Poincaré ball model of hyperbolic space.

The formulas here work on single points in double precision. Distances
use the closed form

    d(x, y) = (2/√c) · acosh(1 + 2‖x - y‖² / ((1 - ‖x‖²)(1 - ‖y‖²)))

with c = |curvature|, and "addition" is Möbius addition, which is not
commutative. The inverse hyperbolic functions are domain-checked and
raise ``HyperbolicDomainError`` rather than returning NaN.
"""

import math
from typing import Optional

import numpy as np

from .base import SpaceType, VectorOperations
from .euclidean import EuclideanOperations
from .vectors import DEFAULT_CURVATURE, EuclideanVector, PoincareVector, ZERO_NORM_EPS
from ..exceptions import (
    CurvatureMismatchError,
    DegenerateVectorError,
    DimensionMismatchError,
    HyperbolicDomainError,
)


NORMALIZED_NORM = 0.5
BOUNDARY_RESCALE = 0.99
# Largest radius the exponential map returns; tanh rounds to 1.0 past norm ~19
MAX_EXP_MAP_RADIUS = 1.0 - 1e-12


def acosh(x: float) -> float:
    """Inverse hyperbolic cosine, defined for x >= 1."""
    if not x >= 1.0:
        raise HyperbolicDomainError("acosh", x)
    return math.log(x + math.sqrt(x * x - 1.0))


def atanh(x: float) -> float:
    """Inverse hyperbolic tangent, defined for -1 < x < 1."""
    if not -1.0 < x < 1.0:
        raise HyperbolicDomainError("atanh", x)
    return 0.5 * math.log((1.0 + x) / (1.0 - x))


class PoincareOperations(VectorOperations[PoincareVector]):
    """
    Poincaré ball vector algebra.

    All binary operations require equal dimension and equal curvature on
    both operands. Intermediate sums and products are delegated to a
    ``EuclideanOperations`` instance over the raw coordinates.

    Example:
        >>> ops = PoincareOperations()
        >>> x = PoincareVector([0.3, 0.4, 0.0])
        >>> ops.mobius_addition(x, ops.mobius_negation(x)).norm() < 1e-12
        True
    """

    space_type = SpaceType.POINCARE_BALL

    def __init__(self, euclidean_ops: Optional[EuclideanOperations] = None):
        self.euclidean_ops = euclidean_ops or EuclideanOperations()

    def distance(self, v1: PoincareVector, v2: PoincareVector) -> float:
        self._check_operands(v1, v2)
        c = abs(v1.curvature)

        e1 = v1.to_euclidean()
        e2 = v2.to_euclidean()
        x_norm_sq = e1.squared_norm()
        y_norm_sq = e2.squared_norm()
        squared_dist = self.euclidean_ops.squared_distance(e1, e2)

        fraction = 1.0 + 2.0 * squared_dist / ((1.0 - x_norm_sq) * (1.0 - y_norm_sq))
        return (2.0 / math.sqrt(c)) * acosh(fraction)

    def inner_product(self, v1: PoincareVector, v2: PoincareVector) -> float:
        """Euclidean inner product weighted by both conformal factors."""
        self._check_operands(v1, v2)

        e1 = v1.to_euclidean()
        e2 = v2.to_euclidean()
        conformal = 4.0 / ((1.0 - e1.squared_norm()) * (1.0 - e2.squared_norm()))
        return conformal * self.euclidean_ops.inner_product(e1, e2)

    def add(self, v1: PoincareVector, v2: PoincareVector) -> PoincareVector:
        return self.mobius_addition(v1, v2)

    def mobius_addition(self, x: PoincareVector, y: PoincareVector) -> PoincareVector:
        """
        Möbius addition ``x ⊕ y``.

        Operand order matters: ``x ⊕ y`` and ``y ⊕ x`` generally differ.
        """
        self._check_operands(x, y)

        ex = x.to_euclidean()
        ey = y.to_euclidean()
        x_norm_sq = ex.squared_norm()
        y_norm_sq = ey.squared_norm()
        dot = self.euclidean_ops.inner_product(ex, ey)

        denom = 1.0 + 2.0 * dot + x_norm_sq * y_norm_sq
        numerator = (1.0 + 2.0 * dot + y_norm_sq) * x.data + (1.0 - x_norm_sq) * y.data
        return PoincareVector(numerator / denom, x.curvature)

    def mobius_negation(self, x: PoincareVector) -> PoincareVector:
        """Additive inverse under Möbius addition."""
        return PoincareVector(-x.data, x.curvature)

    def mobius_subtraction(self, x: PoincareVector, y: PoincareVector) -> PoincareVector:
        """``x ⊕ (-y)``."""
        return self.mobius_addition(x, self.mobius_negation(y))

    def scale(self, vector: PoincareVector, scalar: float) -> PoincareVector:
        """
        Hyperbolic scaling of ``vector`` by ``scalar``.

        The zero vector is returned unchanged and a zero scalar yields the
        origin. Results that land on or beyond the boundary are pulled
        back to 0.99 of the unit radius.
        """
        norm = vector.norm()
        if norm < ZERO_NORM_EPS:
            return vector

        tanh_term = math.tanh(float(scalar) * atanh(norm))
        if tanh_term == 0.0:
            return PoincareVector.zeros(vector.dimension, vector.curvature)

        factor = (1.0 / tanh_term) / norm
        scaled = vector.data * factor

        scaled_norm_sq = float(np.dot(scaled, scaled))
        if scaled_norm_sq >= 1.0:
            scaled = scaled * (BOUNDARY_RESCALE / math.sqrt(scaled_norm_sq))

        return PoincareVector(scaled, vector.curvature)

    def normalize(self, vector: PoincareVector) -> PoincareVector:
        """Rescale to a fixed norm of 0.5, keeping the direction."""
        norm = vector.norm()
        if norm < ZERO_NORM_EPS:
            raise DegenerateVectorError("Cannot normalize a zero vector", {"norm": norm})
        return PoincareVector(vector.data * (NORMALIZED_NORM / norm), vector.curvature)

    def exponential_map(self, v: EuclideanVector, curvature: float = DEFAULT_CURVATURE) -> PoincareVector:
        """
        Map a tangent vector at the origin into the ball.

        The output radius is ``tanh(‖v‖)`` capped at ``MAX_EXP_MAP_RADIUS``,
        so very long tangent vectors land just inside the boundary.
        """
        norm = v.norm()
        if norm < ZERO_NORM_EPS:
            return PoincareVector.zeros(v.dimension, curvature)
        radius = min(math.tanh(norm), MAX_EXP_MAP_RADIUS)
        return PoincareVector(v.data * (radius / norm), curvature)

    def logarithmic_map(self, x: PoincareVector) -> EuclideanVector:
        """Map a ball point back to the tangent space at the origin."""
        norm = x.norm()
        if norm < ZERO_NORM_EPS:
            return EuclideanVector.zeros(x.dimension)
        return EuclideanVector(x.data * (atanh(norm) / norm))

    @staticmethod
    def _check_operands(v1: PoincareVector, v2: PoincareVector) -> None:
        if v1.dimension != v2.dimension:
            raise DimensionMismatchError(v1.dimension, v2.dimension)
        if v1.curvature != v2.curvature:
            raise CurvatureMismatchError(v1.curvature, v2.curvature)
