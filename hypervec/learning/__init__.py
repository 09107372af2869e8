"""
Curvature learning for hierarchical data.

This module contains:
- HierarchyGraph, a parent-list view of a hierarchy with structural statistics
- The CurvatureLearner interface
- A structural-heuristic learner and a gradient-descent learner
"""

from .hierarchy import HierarchyGraph, build_tree
from .base import CurvatureLearner
from .grid_search import GridSearchCurvatureLearner
from .gradient_descent import GradientDescentCurvatureLearner

__all__ = [
    "HierarchyGraph",
    "build_tree",
    "CurvatureLearner",
    "GridSearchCurvatureLearner",
    "GradientDescentCurvatureLearner",
]
