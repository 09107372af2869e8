"""
Result and statistics types returned by vector indexes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from ..core.base import SpaceType
from ..storage.records import VectorRecord, human_readable_bytes


class IndexType(Enum):
    """Index structures known to the package; only FLAT is implemented."""
    FLAT = "flat"
    HNSW_EUCLIDEAN = "hnsw_euclidean"
    HNSW_HYPERBOLIC = "hnsw_hyperbolic"
    IVF = "ivf"


@dataclass(frozen=True, eq=False)
class SearchResult:
    """
    One scored hit of a similarity search.

    Results order by ascending distance. ``score`` maps the distance into
    (0, 1] so that higher is better.
    """
    id: str
    vector: np.ndarray
    distance: float
    record: Optional[VectorRecord] = None

    @property
    def score(self) -> float:
        return 1.0 / (1.0 + self.distance)

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.record.metadata if self.record is not None else {}

    def __lt__(self, other: "SearchResult") -> bool:
        return self.distance < other.distance

    def __repr__(self) -> str:
        return f"SearchResult(id='{self.id}', distance={self.distance}, score={self.score})"


@dataclass(frozen=True)
class IndexStats:
    """Bookkeeping recorded when an index is built or updated."""
    collection_name: str
    index_type: IndexType
    space_type: SpaceType
    vector_count: int
    dimension: int
    index_size_bytes: int = 0
    build_time_ms: int = 0
    parameters: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def get_parameter(self, key: str, default: Any = None) -> Any:
        return self.parameters.get(key, default)

    def get_metric(self, key: str, default: Any = None) -> Any:
        return self.metrics.get(key, default)

    @property
    def human_readable_size(self) -> str:
        return human_readable_bytes(self.index_size_bytes)

    @property
    def human_readable_build_time(self) -> str:
        if self.build_time_ms < 1000:
            return f"{self.build_time_ms} ms"
        if self.build_time_ms < 60 * 1000:
            return f"{self.build_time_ms / 1000.0:.2f} sec"
        return f"{self.build_time_ms / (60 * 1000.0):.2f} min"
