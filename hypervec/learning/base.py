"""
Base class for curvature learners.

A curvature learner inspects a hierarchy and proposes the (negative)
curvature of the Poincaré ball that should embed it. Learners keep one
piece of mutable state, the last value they learned, which is written
only by their own ``learn_optimal_curvature`` call.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .hierarchy import HierarchyGraph


logger = logging.getLogger(__name__)

Hierarchy = Union[HierarchyGraph, Mapping[str, Sequence[str]]]


class CurvatureLearner(ABC):
    """
    Abstract base class for curvature learning strategies.

    Concurrent calls to ``learn_optimal_curvature`` on one instance are
    not supported; callers sharing a learner must serialize them.

    Args:
        default_options: Options used when a call does not supply them

    Example:
        >>> class FixedLearner(CurvatureLearner):
        ...     def learn_optimal_curvature(self, hierarchy, options=None):
        ...         self._last_learned_curvature = -2.0
        ...         return -2.0
    """

    DEFAULT_CURVATURE = -1.0

    def __init__(self, default_options: Optional[Dict[str, Any]] = None):
        self.default_options: Dict[str, Any] = dict(default_options or {})
        self._last_learned_curvature = self.DEFAULT_CURVATURE

    @abstractmethod
    def learn_optimal_curvature(self, hierarchy: Hierarchy, options: Optional[Dict[str, Any]] = None) -> float:
        """
        Learn the curvature best suited to ``hierarchy``.

        Args:
            hierarchy: Mapping from node id to parent ids, or a HierarchyGraph
            options: Strategy-specific options; missing keys take defaults

        Returns:
            The learned curvature (always negative)
        """
        pass

    @property
    def last_learned_curvature(self) -> float:
        """Most recently learned curvature, or the default before any run."""
        return self._last_learned_curvature

    @property
    def default_curvature(self) -> float:
        return self.DEFAULT_CURVATURE

    def _option(self, options: Optional[Dict[str, Any]], key: str, default: Any) -> Any:
        """Look up ``key`` in the call options, then in ``default_options``."""
        for source in (options, self.default_options):
            if source and source.get(key) is not None:
                return source[key]
        return default

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(last_learned_curvature={self._last_learned_curvature})"


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
