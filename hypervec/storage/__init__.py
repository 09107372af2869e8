"""
Vector storage: record types, the record-source interface and an
in-memory implementation.
"""

from .records import (
    VectorType,
    StorageFormat,
    CollectionConfig,
    VectorRecord,
    CollectionStats,
    human_readable_bytes,
)
from .base import VectorStorage
from .memory import InMemoryVectorStorage

__all__ = [
    "VectorType",
    "StorageFormat",
    "CollectionConfig",
    "VectorRecord",
    "CollectionStats",
    "human_readable_bytes",
    "VectorStorage",
    "InMemoryVectorStorage",
]
