"""
Structural-heuristic curvature learner.

Despite the name this learner does not evaluate candidate curvatures.
It reads the depth and branching of the hierarchy and maps them to a
curvature: deep hierarchies get a strongly negative value, wide ones a
moderately negative value, and everything else the default.
"""

import logging
from typing import Any, Dict, Optional

from .base import CurvatureLearner, Hierarchy, clamp
from .hierarchy import HierarchyGraph


logger = logging.getLogger(__name__)

DEPTH_THRESHOLD = 5
BRANCHING_THRESHOLD = 3.0


class GridSearchCurvatureLearner(CurvatureLearner):
    """
    Curvature learner driven by hierarchy depth and branching factor.

    Options:
        min_curvature: Lower clamp bound (default -5.0)
        max_curvature: Upper clamp bound (default -0.1)
    """

    MIN_CURVATURE = -5.0
    MAX_CURVATURE = -0.1

    def learn_optimal_curvature(self, hierarchy: Hierarchy, options: Optional[Dict[str, Any]] = None) -> float:
        min_curvature = float(self._option(options, "min_curvature", self.MIN_CURVATURE))
        max_curvature = float(self._option(options, "max_curvature", self.MAX_CURVATURE))

        graph = HierarchyGraph.coerce(hierarchy)
        num_nodes = len(graph)
        max_depth = graph.max_depth()
        branching_factor = graph.average_branching_factor()

        logger.info(
            f"Hierarchy has {num_nodes} nodes, max depth {max_depth}, "
            f"avg branching factor {branching_factor:.2f}"
        )

        curvature = self.estimate(max_depth, branching_factor)
        curvature = clamp(curvature, min_curvature, max_curvature)

        logger.info(f"Learned optimal curvature: {curvature}")
        self._last_learned_curvature = curvature
        return curvature

    def estimate(self, max_depth: int, branching_factor: float) -> float:
        """Unclamped curvature for the given structural statistics."""
        if max_depth > DEPTH_THRESHOLD:
            return -2.0 - (max_depth - DEPTH_THRESHOLD) * 0.1
        if branching_factor > BRANCHING_THRESHOLD:
            return -1.0 - (branching_factor - BRANCHING_THRESHOLD) * 0.2
        return self.DEFAULT_CURVATURE
