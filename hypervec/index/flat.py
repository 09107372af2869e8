"""
Exact (brute-force) k-nearest-neighbour search.

``FlatVectorIndex`` keeps no secondary structure. Every query takes a
snapshot of the collection from the record source, filters it, scores
each record with the algebra of the requested geometry and keeps the
``k`` closest. Building or updating the index only maintains
statistics.
"""

import logging
import threading
import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from .base import VectorIndex
from .filters import FilterExpression
from .results import IndexStats, IndexType, SearchResult
from ..core.base import SpaceType
from ..core.euclidean import EuclideanOperations
from ..core.hyperbolic import PoincareOperations
from ..core.vectors import DEFAULT_CURVATURE, EuclideanVector, PoincareVector
from ..exceptions import (
    DimensionMismatchError,
    InvalidKError,
    NoSuchCollectionError,
    StorageNotSetError,
    UnsupportedSpaceError,
)
from ..storage.base import VectorStorage
from ..storage.records import VectorRecord, VectorType


logger = logging.getLogger(__name__)


class FlatVectorIndex(VectorIndex):
    """
    Exact similarity search over a ``VectorStorage``.

    Ties in distance keep the order in which the record source returned
    the records.

    Args:
        storage: Record source; may also be attached later
        euclidean_ops: Algebra for Euclidean scoring
        poincare_ops: Algebra for Poincaré ball scoring
        default_k: Result count used when ``search`` is called without ``k``

    Example:
        >>> storage = InMemoryVectorStorage()
        >>> storage.create_collection("docs", CollectionConfig.create_euclidean(3))
        True
        >>> index = FlatVectorIndex(storage)
        >>> results = index.search("docs", [0.5, 1.0, 1.5], k=3)
    """

    def __init__(
        self,
        storage: Optional[VectorStorage] = None,
        euclidean_ops: Optional[EuclideanOperations] = None,
        poincare_ops: Optional[PoincareOperations] = None,
        default_k: int = 10
    ):
        if default_k <= 0:
            raise InvalidKError(default_k)
        self.storage = storage
        self.default_k = default_k
        self.euclidean_ops = euclidean_ops or EuclideanOperations()
        self.poincare_ops = poincare_ops or PoincareOperations(self.euclidean_ops)
        self._index_stats: Dict[str, IndexStats] = {}
        self._stats_lock = threading.Lock()

    def set_vector_storage(self, storage: VectorStorage) -> None:
        self.storage = storage

    def build_index(
        self,
        collection: str,
        index_type: IndexType = IndexType.FLAT,
        parameters: Optional[Dict[str, Any]] = None
    ) -> IndexStats:
        if index_type is not IndexType.FLAT:
            raise UnsupportedSpaceError(
                "FlatVectorIndex only supports FLAT index type", {"index_type": index_type.name}
            )
        storage = self._require_collection(collection)

        start = time.perf_counter()
        records = storage.get_all_records(collection)
        build_time_ms = int((time.perf_counter() - start) * 1000)

        space_type = SpaceType.EUCLIDEAN
        if records and records[0].vector_type is VectorType.HYPERBOLIC_POINCARE:
            space_type = SpaceType.POINCARE_BALL

        stats = IndexStats(
            collection_name=collection,
            index_type=index_type,
            space_type=space_type,
            vector_count=len(records),
            dimension=records[0].dimension if records else 0,
            index_size_bytes=0,
            build_time_ms=build_time_ms,
            parameters=dict(parameters or {}),
            metrics={"exact_search": True},
        )
        with self._stats_lock:
            self._index_stats[collection] = stats

        logger.info(f"Built flat index for collection {collection}: {len(records)} vectors")
        return stats

    def search(
        self,
        collection: str,
        query_vector: Sequence[float],
        k: Optional[int] = None,
        space_type: Union[SpaceType, str] = SpaceType.EUCLIDEAN,
        filter: Optional[FilterExpression] = None
    ) -> List[SearchResult]:
        storage = self._require_collection(collection)
        if k is None:
            k = self.default_k
        if k <= 0:
            raise InvalidKError(k)

        try:
            space_type = SpaceType(space_type)
        except ValueError as e:
            raise UnsupportedSpaceError(f"Unsupported space type: {space_type}") from e
        query = np.asarray(query_vector, dtype=np.float64)
        config = storage.get_collection_config(collection)
        if config is not None and query.shape[0] != config.dimension:
            raise DimensionMismatchError(config.dimension, query.shape[0])

        curvature = config.curvature if config is not None else DEFAULT_CURVATURE
        score = self._scorer(query, space_type, curvature)

        records = storage.get_all_records(collection)
        if filter is not None:
            records = [record for record in records if filter.evaluate(record)]
        if not records:
            return []

        results = [
            SearchResult(record.id, record.vector, score(record), record)
            for record in records
        ]
        # list.sort is stable, so equal distances keep scan order
        results.sort(key=lambda result: result.distance)

        logger.debug(
            f"Searched {len(records)} records in {collection} ({space_type.value}), "
            f"returning {min(k, len(results))}"
        )
        return results[:k]

    def _scorer(self, query: np.ndarray, space_type: SpaceType, curvature: float) -> Callable[[VectorRecord], float]:
        if space_type is SpaceType.EUCLIDEAN:
            query_e = EuclideanVector(query)
            return lambda record: self.euclidean_ops.distance(query_e, record.as_euclidean())
        if space_type is SpaceType.POINCARE_BALL:
            query_p = PoincareVector(query, curvature)
            return lambda record: self.poincare_ops.distance(query_p, record.as_poincare(curvature))
        raise UnsupportedSpaceError(f"Unsupported space type: {space_type.name}", {"space_type": space_type.value})

    def add_to_index(self, collection: str, ids: Sequence[str]) -> None:
        self._adjust_count(collection, len(ids))

    def remove_from_index(self, collection: str, ids: Sequence[str]) -> None:
        self._adjust_count(collection, -len(ids))

    def _adjust_count(self, collection: str, delta: int) -> None:
        with self._stats_lock:
            stats = self._index_stats.get(collection)
            if stats is None:
                return
            self._index_stats[collection] = replace(stats, vector_count=max(0, stats.vector_count + delta))

    def get_index_stats(self, collection: str) -> Optional[IndexStats]:
        return self._index_stats.get(collection)

    def index_exists(self, collection: str) -> bool:
        return collection in self._index_stats

    def delete_index(self, collection: str) -> bool:
        with self._stats_lock:
            return self._index_stats.pop(collection, None) is not None

    def _require_collection(self, collection: str) -> VectorStorage:
        if self.storage is None:
            raise StorageNotSetError()
        if not self.storage.collection_exists(collection):
            raise NoSuchCollectionError(collection)
        return self.storage
