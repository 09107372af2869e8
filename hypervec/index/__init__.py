"""
Similarity search over stored vectors.

This module contains:
- Metadata filter expressions and their builders
- Search result and index statistics types
- The VectorIndex interface and the exact FlatVectorIndex
"""

from .filters import (
    FilterExpression,
    ComparisonOperator,
    And,
    Or,
    Not,
    Compare,
    eq,
    ne,
    gt,
    lt,
    contains,
    in_,
)
from .results import IndexType, IndexStats, SearchResult
from .base import VectorIndex
from .flat import FlatVectorIndex

__all__ = [
    "FilterExpression",
    "ComparisonOperator",
    "And",
    "Or",
    "Not",
    "Compare",
    "eq",
    "ne",
    "gt",
    "lt",
    "contains",
    "in_",
    "IndexType",
    "IndexStats",
    "SearchResult",
    "VectorIndex",
    "FlatVectorIndex",
]
