"""
Gradient-descent curvature learner.

The learner fixes a set of small random Euclidean embeddings for the
hierarchy's nodes and then tunes only the curvature: at each step the
embeddings are mapped into the Poincaré ball at the current curvature
and compared with the hierarchy's hop distances. The derivative of the
mean-squared error with respect to curvature is estimated by symmetric
finite differences.
"""

import logging
import sys
from typing import Any, Dict, List, Optional

from .base import CurvatureLearner, Hierarchy, clamp
from .hierarchy import HierarchyGraph
from ..conversion.converter import VectorSpaceConverter
from ..core.hyperbolic import PoincareOperations
from ..core.vectors import EuclideanVector, PoincareVector
from ..exceptions import HyperbolicDomainError
from ..utils.initialization import random_euclidean_embeddings


logger = logging.getLogger(__name__)

NO_PAIRS_LOSS = sys.float_info.max


class GradientDescentCurvatureLearner(CurvatureLearner):
    """
    Curvature learner that minimises distance distortion.

    Args:
        converter: Converter used to place embeddings in the ball
        poincare_ops: Algebra used to measure hyperbolic distances
        seed: Default seed for the random initial embeddings
        default_options: Options used when a call does not supply them

    Options:
        learning_rate: Step size (default 0.01)
        max_iterations: Iteration cap (default 100)
        threshold: Convergence threshold on the loss change (default 1e-4)
        dimensions: Embedding dimension (default 3)
        max_radius: Conversion radius (default 0.9)
        min_curvature / max_curvature: Clamp bounds (default -5.0 / -0.1)
        distance_scale: Divisor applied to hop counts (default 5.0)
        epsilon: Finite-difference step (default 0.001)
        seed: Overrides the constructor seed

    Example:
        >>> learner = GradientDescentCurvatureLearner(seed=7)
        >>> c = learner.learn_optimal_curvature({"b": ["a"], "c": ["a"]}, {"max_iterations": 5})
        >>> -5.0 <= c <= -0.1
        True
    """

    LEARNING_RATE = 0.01
    MAX_ITERATIONS = 100
    CONVERGENCE_THRESHOLD = 1e-4
    MIN_CURVATURE = -5.0
    MAX_CURVATURE = -0.1
    DISTANCE_SCALE = 5.0
    EPSILON = 0.001

    def __init__(
        self,
        converter: Optional[VectorSpaceConverter] = None,
        poincare_ops: Optional[PoincareOperations] = None,
        seed: int = 42,
        default_options: Optional[Dict[str, Any]] = None
    ):
        super().__init__(default_options)
        self.converter = converter or VectorSpaceConverter()
        self.poincare_ops = poincare_ops or PoincareOperations()
        self.seed = seed

    def learn_optimal_curvature(self, hierarchy: Hierarchy, options: Optional[Dict[str, Any]] = None) -> float:
        learning_rate = float(self._option(options, "learning_rate", self.LEARNING_RATE))
        max_iterations = int(self._option(options, "max_iterations", self.MAX_ITERATIONS))
        threshold = float(self._option(options, "threshold", self.CONVERGENCE_THRESHOLD))
        dimensions = int(self._option(options, "dimensions", 3))
        max_radius = float(self._option(options, "max_radius", 0.9))
        min_curvature = float(self._option(options, "min_curvature", self.MIN_CURVATURE))
        max_curvature = float(self._option(options, "max_curvature", self.MAX_CURVATURE))
        distance_scale = float(self._option(options, "distance_scale", self.DISTANCE_SCALE))
        epsilon = float(self._option(options, "epsilon", self.EPSILON))
        seed = self._option(options, "seed", self.seed)

        graph = HierarchyGraph.coerce(hierarchy)
        logger.info(f"Starting curvature learning with gradient descent on {len(graph)} nodes")

        embeddings = random_euclidean_embeddings(graph.nodes(), dimensions, seed=seed)
        hop_distances = graph.hop_distances()

        def loss_at(curvature: float) -> float:
            hyperbolic = self._to_poincare(embeddings, max_radius, curvature)
            return self.compute_loss(hop_distances, hyperbolic, distance_scale)

        curvature = clamp(self.DEFAULT_CURVATURE, min_curvature, max_curvature)
        prev_loss = NO_PAIRS_LOSS

        for iteration in range(max_iterations):
            loss = loss_at(curvature)

            curvature_plus = clamp(curvature + epsilon, min_curvature, max_curvature)
            curvature_minus = clamp(curvature - epsilon, min_curvature, max_curvature)
            gradient = (loss_at(curvature_plus) - loss_at(curvature_minus)) / (2.0 * epsilon)

            curvature = clamp(curvature - learning_rate * gradient, min_curvature, max_curvature)

            if abs(prev_loss - loss) < threshold:
                logger.info(f"Converged at iteration {iteration}")
                break

            prev_loss = loss

            if iteration % 10 == 0:
                logger.debug(f"Iteration {iteration}: curvature = {curvature:.4f}, loss = {loss:.4f}")

        logger.info(f"Finished learning. Optimal curvature: {curvature}")
        self._last_learned_curvature = curvature
        return curvature

    def _to_poincare(
        self,
        embeddings: Dict[str, EuclideanVector],
        max_radius: float,
        curvature: float
    ) -> Dict[str, PoincareVector]:
        return {
            node: self.converter.euclidean_to_poincare(vector, max_radius, curvature)
            for node, vector in embeddings.items()
        }

    def compute_loss(
        self,
        hop_distances: Dict[str, Dict[str, float]],
        embeddings: Dict[str, PoincareVector],
        distance_scale: float = DISTANCE_SCALE
    ) -> float:
        """
        Mean-squared error between hyperbolic distances and scaled hop counts.

        Every ordered pair with a known hop distance contributes once.
        Pairs whose distance cannot be computed are skipped; if no pair is
        left the loss is the largest float.
        """
        total = 0.0
        count = 0
        skipped: List[str] = []

        for source, targets in hop_distances.items():
            source_embedding = embeddings.get(source)
            if source_embedding is None:
                continue

            for target, hops in targets.items():
                if target == source or target not in embeddings:
                    continue
                try:
                    distance = self.poincare_ops.distance(source_embedding, embeddings[target])
                except (HyperbolicDomainError, ArithmeticError) as e:
                    skipped.append(f"{source}->{target}")
                    logger.debug(f"Skipping pair {source}->{target}: {e}")
                    continue

                error = distance - hops / distance_scale
                total += error * error
                count += 1

        if skipped:
            logger.debug(f"Skipped {len(skipped)} pairs while computing loss")

        return total / count if count > 0 else NO_PAIRS_LOSS
