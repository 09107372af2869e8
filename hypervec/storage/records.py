"""
Record and collection metadata types for vector storage.

Vectors are held at rest as 32-bit floats; consumers that compute with
them convert to float64 first (see ``VectorRecord.as_euclidean`` and
``VectorRecord.as_poincare``).
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Union

import numpy as np

from ..core.vectors import DEFAULT_CURVATURE, EuclideanVector, PoincareVector
from ..exceptions import InvalidInputError


class VectorType(Enum):
    """Geometry a stored vector belongs to."""
    EUCLIDEAN = "euclidean"
    HYPERBOLIC_POINCARE = "hyperbolic_poincare"
    HYPERBOLIC_LORENTZ = "hyperbolic_lorentz"


class StorageFormat(Enum):
    """On-disk component encodings and their sizes."""
    FLOAT32 = "float32"
    FLOAT16 = "float16"
    INT8 = "int8"
    NF4 = "nf4"

    def vector_size_in_bytes(self, dimension: int) -> int:
        """Bytes needed for one vector of ``dimension`` components."""
        if self is StorageFormat.FLOAT32:
            return dimension * 4
        if self is StorageFormat.FLOAT16:
            return dimension * 2
        if self is StorageFormat.INT8:
            return dimension
        # Two components per byte, rounded up
        return (dimension + 1) // 2


def human_readable_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024.0:.2f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024.0 * 1024.0):.2f} MB"
    return f"{size / (1024.0 * 1024.0 * 1024.0):.2f} GB"


@dataclass(frozen=True)
class CollectionConfig:
    """
    Static configuration of a collection.

    Args:
        dimension: Number of components per vector (must be positive)
        vector_type: Geometry of the vectors in the collection
        storage_format: Component encoding at rest
        compression_enabled: Whether compression is requested
        additional_config: Free-form settings (e.g. ``curvature``)
    """
    dimension: int
    vector_type: VectorType = VectorType.EUCLIDEAN
    storage_format: StorageFormat = StorageFormat.FLOAT32
    compression_enabled: bool = False
    additional_config: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.dimension <= 0:
            raise InvalidInputError("Dimension must be positive", {"dimension": self.dimension})
        object.__setattr__(self, "additional_config", dict(self.additional_config))

    @classmethod
    def create_euclidean(
        cls,
        dimension: int,
        storage_format: StorageFormat = StorageFormat.FLOAT32
    ) -> "CollectionConfig":
        return cls(dimension, VectorType.EUCLIDEAN, storage_format)

    @classmethod
    def create_poincare(
        cls,
        dimension: int,
        storage_format: StorageFormat = StorageFormat.FLOAT32,
        curvature: float = DEFAULT_CURVATURE
    ) -> "CollectionConfig":
        return cls(
            dimension,
            VectorType.HYPERBOLIC_POINCARE,
            storage_format,
            additional_config={"curvature": curvature},
        )

    def get_config_param(self, key: str, default: Any = None) -> Any:
        return self.additional_config.get(key, default)

    @property
    def curvature(self) -> float:
        """Curvature used to score Poincaré vectors of this collection."""
        return float(self.additional_config.get("curvature", DEFAULT_CURVATURE))

    @property
    def vector_size_in_bytes(self) -> int:
        return self.storage_format.vector_size_in_bytes(self.dimension)


class VectorRecord:
    """
    A stored vector with its id, metadata and timestamps.

    The vector is copied into a float32 array and metadata is copied on
    the way in and on the way out, so callers cannot mutate a stored
    record behind the storage's back. Timestamps are milliseconds since
    the epoch.

    Example:
        >>> record = VectorRecord.create_euclidean([1.0, 2.0], {"tag": "a"})
        >>> record.dimension
        2
    """

    def __init__(
        self,
        id: str,
        vector: Union[np.ndarray, Iterable[float]],
        metadata: Optional[Dict[str, Any]] = None,
        vector_type: VectorType = VectorType.EUCLIDEAN
    ):
        self.id = id
        self._vector = np.array(vector, dtype=np.float32)
        self._metadata = dict(metadata) if metadata else {}
        self.vector_type = vector_type
        self.creation_time = int(time.time() * 1000)
        self.update_time = self.creation_time

    @classmethod
    def create_euclidean(cls, vector, metadata: Optional[Dict[str, Any]] = None) -> "VectorRecord":
        return cls(str(uuid.uuid4()), vector, metadata, VectorType.EUCLIDEAN)

    @classmethod
    def create_poincare(cls, vector, metadata: Optional[Dict[str, Any]] = None) -> "VectorRecord":
        return cls(str(uuid.uuid4()), vector, metadata, VectorType.HYPERBOLIC_POINCARE)

    @property
    def vector(self) -> np.ndarray:
        """Copy of the stored float32 components."""
        return self._vector.copy()

    @property
    def metadata(self) -> Dict[str, Any]:
        """Copy of the metadata."""
        return dict(self._metadata)

    def get_metadata_value(self, key: str, default: Any = None) -> Any:
        return self._metadata.get(key, default)

    def has_metadata(self, key: str) -> bool:
        return key in self._metadata

    @property
    def dimension(self) -> int:
        return int(self._vector.shape[0])

    def update_metadata(self, metadata: Optional[Dict[str, Any]]) -> None:
        self._metadata = dict(metadata) if metadata else {}
        self._touch()

    def update_vector(self, vector: Union[np.ndarray, Iterable[float]]) -> None:
        self._vector = np.array(vector, dtype=np.float32)
        self._touch()

    def _touch(self) -> None:
        # Keep update_time monotonic even within one millisecond
        self.update_time = max(int(time.time() * 1000), self.update_time)

    def as_euclidean(self) -> EuclideanVector:
        return EuclideanVector(self._vector.astype(np.float64))

    def as_poincare(self, curvature: float = DEFAULT_CURVATURE) -> PoincareVector:
        return PoincareVector(self._vector.astype(np.float64), curvature)

    def __repr__(self) -> str:
        return (
            f"VectorRecord(id='{self.id}', dimension={self.dimension}, "
            f"type={self.vector_type.name}, metadata_keys={sorted(self._metadata)})"
        )


@dataclass
class CollectionStats:
    """Point-in-time statistics of one collection."""
    collection_name: str
    vector_count: int
    total_size_bytes: int
    dimension: int
    vector_type: VectorType
    additional_stats: Dict[str, Any] = field(default_factory=dict)

    def get_stat(self, key: str, default: Any = None) -> Any:
        return self.additional_stats.get(key, default)

    @property
    def average_bytes_per_vector(self) -> float:
        return self.total_size_bytes / self.vector_count if self.vector_count > 0 else 0.0

    @property
    def human_readable_size(self) -> str:
        return human_readable_bytes(self.total_size_bytes)
