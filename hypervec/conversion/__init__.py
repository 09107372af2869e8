"""
Conversion between Euclidean space and the Poincaré ball.

This module provides the arctangent-based single-vector and batch
converters, and a converter that follows a curvature learner.
"""

from .converter import VectorSpaceConverter, validate_radius
from .adaptive import AdaptiveCurvatureConverter

__all__ = [
    "VectorSpaceConverter",
    "AdaptiveCurvatureConverter",
    "validate_radius",
]
