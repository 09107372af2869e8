"""
Interface for similarity-search indexes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union

from .filters import FilterExpression
from .results import IndexStats, IndexType, SearchResult
from ..core.base import SpaceType
from ..storage.base import VectorStorage


class VectorIndex(ABC):
    """
    Abstract base class for indexes over a ``VectorStorage``.

    An index is attached to its record source with ``set_vector_storage``
    and answers k-nearest-neighbour queries in one of the supported
    geometries.
    """

    @abstractmethod
    def build_index(
        self,
        collection: str,
        index_type: IndexType = IndexType.FLAT,
        parameters: Optional[Dict[str, Any]] = None
    ) -> IndexStats:
        pass

    @abstractmethod
    def search(
        self,
        collection: str,
        query_vector: Sequence[float],
        k: Optional[int] = None,
        space_type: Union[SpaceType, str] = SpaceType.EUCLIDEAN,
        filter: Optional[FilterExpression] = None
    ) -> List[SearchResult]:
        """
        Return the ``k`` records nearest to ``query_vector``.

        Args:
            collection: Collection to search
            query_vector: Query components
            k: Number of results (must be positive); the index default if omitted
            space_type: Geometry used to measure distance
            filter: Optional metadata filter applied before scoring

        Returns:
            Results sorted by ascending distance, at most ``k`` of them
        """
        pass

    @abstractmethod
    def add_to_index(self, collection: str, ids: Sequence[str]) -> None:
        pass

    @abstractmethod
    def remove_from_index(self, collection: str, ids: Sequence[str]) -> None:
        pass

    @abstractmethod
    def get_index_stats(self, collection: str) -> Optional[IndexStats]:
        pass

    @abstractmethod
    def index_exists(self, collection: str) -> bool:
        pass

    @abstractmethod
    def delete_index(self, collection: str) -> bool:
        pass

    @abstractmethod
    def set_vector_storage(self, storage: VectorStorage) -> None:
        pass
