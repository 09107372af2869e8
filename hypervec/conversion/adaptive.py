"""
Space conversion at a learned curvature.
"""

import logging
from typing import Any, Dict, Optional

from .converter import VectorSpaceConverter, validate_radius
from ..core.euclidean import EuclideanOperations
from ..core.vectors import EuclideanVector, PoincareVector
from ..exceptions import InvalidInputError
from ..learning.base import CurvatureLearner, Hierarchy
from ..learning.grid_search import GridSearchCurvatureLearner


logger = logging.getLogger(__name__)


class AdaptiveCurvatureConverter(VectorSpaceConverter):
    """
    Converter that tags its output with a curvature taken from a learner.

    The converter starts at the learner's default curvature and only
    moves when told to: ``update_curvature`` copies the learner's last
    learned value, ``set_curvature`` overrides it directly.

    Args:
        learner: Curvature learner to follow; a grid-search learner if omitted
        euclidean_ops: Euclidean algebra used for batch scaling
        max_radius: Default conversion radius for adaptive conversions

    Example:
        >>> converter = AdaptiveCurvatureConverter()
        >>> converter.learn_curvature({"b": ["a"]})
        -1.0
        >>> converter.euclidean_to_poincare_adaptive(EuclideanVector([1.0, 0.0])).curvature
        -1.0
    """

    def __init__(
        self,
        learner: Optional[CurvatureLearner] = None,
        euclidean_ops: Optional[EuclideanOperations] = None,
        max_radius: float = 0.9
    ):
        super().__init__(euclidean_ops)
        validate_radius(max_radius)
        self.max_radius = max_radius
        self.curvature_learner = learner or GridSearchCurvatureLearner()
        self._current_curvature = self.curvature_learner.default_curvature

    @property
    def current_curvature(self) -> float:
        return self._current_curvature

    def euclidean_to_poincare_adaptive(
        self,
        vector: EuclideanVector,
        max_radius: Optional[float] = None
    ) -> PoincareVector:
        """Convert ``vector`` using the current curvature and, unless given, ``self.max_radius``."""
        if max_radius is None:
            max_radius = self.max_radius
        return self.euclidean_to_poincare(vector, max_radius, self._current_curvature)

    def update_curvature(self) -> float:
        """Adopt the learner's last learned curvature and return it."""
        self._current_curvature = self.curvature_learner.last_learned_curvature
        logger.debug(f"Converter curvature updated to {self._current_curvature}")
        return self._current_curvature

    def set_curvature(self, curvature: float) -> None:
        curvature = float(curvature)
        if not curvature < 0.0:
            raise InvalidInputError(
                f"Curvature must be negative, got {curvature}", {"curvature": curvature}
            )
        self._current_curvature = curvature

    def learn_curvature(self, hierarchy: Hierarchy, options: Optional[Dict[str, Any]] = None) -> float:
        """Run the learner on ``hierarchy`` and adopt the result."""
        self.curvature_learner.learn_optimal_curvature(hierarchy, options)
        return self.update_curvature()
