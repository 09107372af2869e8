"""
Abstract record source consumed by the search engine.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .records import CollectionConfig, CollectionStats, VectorRecord


class VectorStorage(ABC):
    """
    Interface for collections of vector records.

    Each collection is an independent unit of concurrency: implementations
    must make reads, inserts and deletes on one collection safe to call
    from several threads, but need no locking across collections.
    Lookups on a missing collection or record return ``None``, ``False``
    or an empty list rather than raising.
    """

    @abstractmethod
    def store_vector(self, collection: str, vector: Sequence[float], metadata: Optional[Dict[str, Any]] = None) -> str:
        """Store a Euclidean vector and return its generated id."""
        pass

    @abstractmethod
    def store_batch(
        self,
        collection: str,
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[Optional[Dict[str, Any]]]
    ) -> List[str]:
        """Store several Euclidean vectors; ``metadata`` must match ``vectors`` in length."""
        pass

    @abstractmethod
    def store_hyperbolic_vector(
        self,
        collection: str,
        vector: Sequence[float],
        is_poincare_ball: bool = True,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """Store a hyperbolic vector (Poincaré ball or Lorentz tagged) and return its id."""
        pass

    @abstractmethod
    def get_vector(self, collection: str, id: str) -> Optional[VectorRecord]:
        pass

    @abstractmethod
    def get_vectors(self, collection: str, ids: Sequence[str]) -> List[VectorRecord]:
        """Records for the ids that exist, in the order requested."""
        pass

    @abstractmethod
    def delete_vector(self, collection: str, id: str) -> bool:
        pass

    @abstractmethod
    def create_collection(self, collection: str, config: CollectionConfig) -> bool:
        """Create a collection; returns False if it already exists."""
        pass

    @abstractmethod
    def delete_collection(self, collection: str) -> bool:
        pass

    @abstractmethod
    def collection_exists(self, collection: str) -> bool:
        pass

    @abstractmethod
    def get_collection_stats(self, collection: str) -> Optional[CollectionStats]:
        pass

    @abstractmethod
    def list_collections(self) -> List[str]:
        pass

    @abstractmethod
    def update_metadata(self, collection: str, id: str, metadata: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    def get_all_records(self, collection: str) -> List[VectorRecord]:
        """Snapshot of every record in ``collection`` (not a live view)."""
        pass

    @abstractmethod
    def get_collection_config(self, collection: str) -> Optional[CollectionConfig]:
        pass

    def close(self) -> None:
        """Release any resources held by the storage."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
