"""
In-memory implementation of ``VectorStorage``.

Collections live in plain dictionaries guarded by one lock each; a
separate registry lock protects creation and deletion of collections.
"""

import logging
import threading
import uuid
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .base import VectorStorage
from .records import CollectionConfig, CollectionStats, StorageFormat, VectorRecord, VectorType
from ..exceptions import OutOfBallError, StorageError


logger = logging.getLogger(__name__)

DEFAULT_DIMENSION = 128


class _Collection:
    __slots__ = ("config", "records", "lock")

    def __init__(self, config: CollectionConfig):
        self.config = config
        self.records: Dict[str, VectorRecord] = {}
        self.lock = threading.RLock()


class InMemoryVectorStorage(VectorStorage):
    """
    Thread-safe, process-local vector storage.

    Storing into a collection that does not exist creates it with a
    default configuration (128-dimensional Euclidean, FLOAT32).

    Example:
        >>> storage = InMemoryVectorStorage()
        >>> storage.create_collection("docs", CollectionConfig.create_euclidean(3))
        True
        >>> vid = storage.store_vector("docs", [0.1, 0.2, 0.3], {"tag": "a"})
        >>> storage.get_vector("docs", vid).get_metadata_value("tag")
        'a'
    """

    def __init__(self):
        self._collections: Dict[str, _Collection] = {}
        self._registry_lock = threading.Lock()

    # Collection management

    def create_collection(self, collection: str, config: CollectionConfig) -> bool:
        with self._registry_lock:
            if collection in self._collections:
                logger.warning(f"Collection {collection} already exists")
                return False
            self._collections[collection] = _Collection(config)

        logger.info(f"Created collection {collection}: {config}")
        return True

    def delete_collection(self, collection: str) -> bool:
        with self._registry_lock:
            if self._collections.pop(collection, None) is None:
                logger.warning(f"Collection {collection} does not exist")
                return False

        logger.info(f"Deleted collection {collection}")
        return True

    def collection_exists(self, collection: str) -> bool:
        return collection in self._collections

    def list_collections(self) -> List[str]:
        with self._registry_lock:
            return list(self._collections)

    def get_collection_config(self, collection: str) -> Optional[CollectionConfig]:
        entry = self._collections.get(collection)
        return entry.config if entry is not None else None

    def get_collection_stats(self, collection: str) -> Optional[CollectionStats]:
        entry = self._lookup(collection)
        if entry is None:
            return None

        with entry.lock:
            vector_count = len(entry.records)

        config = entry.config
        return CollectionStats(
            collection_name=collection,
            vector_count=vector_count,
            total_size_bytes=vector_count * config.vector_size_in_bytes,
            dimension=config.dimension,
            vector_type=config.vector_type,
            additional_stats={
                "storage_format": config.storage_format,
                "compression_enabled": config.compression_enabled,
            },
        )

    # Writes

    def store_vector(self, collection: str, vector: Sequence[float], metadata: Optional[Dict[str, Any]] = None) -> str:
        entry = self._ensure_collection(collection)
        self._validate_dimension(vector, entry.config)

        record = VectorRecord.create_euclidean(vector, metadata)
        with entry.lock:
            entry.records[record.id] = record

        logger.debug(f"Stored vector {record.id} in collection {collection}")
        return record.id

    def store_batch(
        self,
        collection: str,
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[Optional[Dict[str, Any]]]
    ) -> List[str]:
        if len(vectors) != len(metadata):
            raise StorageError(
                "Vectors and metadata lists must have the same size",
                {"vectors": len(vectors), "metadata": len(metadata)},
            )

        entry = self._ensure_collection(collection)
        for vector in vectors:
            self._validate_dimension(vector, entry.config)

        records = [VectorRecord.create_euclidean(v, m) for v, m in zip(vectors, metadata)]
        with entry.lock:
            for record in records:
                entry.records[record.id] = record

        logger.debug(f"Stored {len(records)} vectors in collection {collection}")
        return [record.id for record in records]

    def store_hyperbolic_vector(
        self,
        collection: str,
        vector: Sequence[float],
        is_poincare_ball: bool = True,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        entry = self._ensure_collection(collection)
        self._validate_dimension(vector, entry.config)

        if is_poincare_ball:
            self._validate_in_ball(vector)
            vector_type = VectorType.HYPERBOLIC_POINCARE
        else:
            vector_type = VectorType.HYPERBOLIC_LORENTZ

        record = VectorRecord(str(uuid.uuid4()), vector, metadata, vector_type)
        with entry.lock:
            entry.records[record.id] = record

        logger.debug(f"Stored hyperbolic vector {record.id} in collection {collection}")
        return record.id

    def delete_vector(self, collection: str, id: str) -> bool:
        entry = self._lookup(collection)
        if entry is None:
            return False
        with entry.lock:
            return entry.records.pop(id, None) is not None

    def update_metadata(self, collection: str, id: str, metadata: Dict[str, Any]) -> bool:
        entry = self._lookup(collection)
        if entry is None:
            return False

        with entry.lock:
            record = entry.records.get(id)
            if record is None:
                logger.warning(f"Vector {id} not found in collection {collection}")
                return False
            record.update_metadata(metadata)
        return True

    # Reads

    def get_vector(self, collection: str, id: str) -> Optional[VectorRecord]:
        entry = self._lookup(collection)
        if entry is None:
            return None

        with entry.lock:
            record = entry.records.get(id)
        if record is None:
            logger.warning(f"Vector {id} not found in collection {collection}")
        return record

    def get_vectors(self, collection: str, ids: Sequence[str]) -> List[VectorRecord]:
        entry = self._lookup(collection)
        if entry is None:
            return []

        with entry.lock:
            return [entry.records[i] for i in ids if i in entry.records]

    def get_all_records(self, collection: str) -> List[VectorRecord]:
        entry = self._lookup(collection)
        if entry is None:
            return []

        with entry.lock:
            return list(entry.records.values())

    def search_by_metadata(self, collection: str, criteria: Dict[str, Any]) -> List[VectorRecord]:
        """Records whose metadata equals ``criteria`` on every key it names."""
        missing = object()
        return [
            record for record in self.get_all_records(collection)
            if all(record.get_metadata_value(k, missing) == v for k, v in criteria.items())
        ]

    def close(self) -> None:
        logger.info("Closed in-memory vector storage")

    # Helpers

    def _lookup(self, collection: str) -> Optional[_Collection]:
        entry = self._collections.get(collection)
        if entry is None:
            logger.warning(f"Collection {collection} does not exist")
        return entry

    def _ensure_collection(self, collection: str) -> _Collection:
        entry = self._collections.get(collection)
        if entry is None:
            self.create_collection(
                collection, CollectionConfig.create_euclidean(DEFAULT_DIMENSION, StorageFormat.FLOAT32)
            )
            entry = self._collections[collection]
        return entry

    @staticmethod
    def _validate_dimension(vector: Sequence[float], config: CollectionConfig) -> None:
        if len(vector) != config.dimension:
            raise StorageError(
                f"Vector dimension mismatch. Expected: {config.dimension}, Got: {len(vector)}",
                {"expected": config.dimension, "actual": len(vector)},
            )

    @staticmethod
    def _validate_in_ball(vector: Sequence[float]) -> None:
        components = np.asarray(vector, dtype=np.float32).astype(np.float64)
        squared_norm = float(np.dot(components, components))
        if squared_norm >= 1.0:
            raise OutOfBallError(
                float(np.sqrt(squared_norm)),
                f"Vector lies outside the Poincaré ball (norm = {np.sqrt(squared_norm)} >= 1)",
            )
