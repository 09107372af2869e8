"""
Capability interface shared by the flat and hyperbolic vector algebras.

Defines the operations every geometry must provide (distance, inner
product, addition, scaling and normalisation) and the enum used to name
a geometry throughout the package.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar


T = TypeVar("T")


class SpaceType(Enum):
    """Geometry a vector, collection or query lives in."""
    EUCLIDEAN = "euclidean"
    POINCARE_BALL = "poincare_ball"
    LORENTZ = "lorentz"


class VectorOperations(ABC, Generic[T]):
    """
    Abstract base class for vector algebras.

    Implementations are stateless; a single instance may be shared across
    threads and reused for any number of calls.
    """

    space_type: SpaceType

    @abstractmethod
    def distance(self, v1: T, v2: T) -> float:
        """Distance between two vectors under the geometry's metric."""
        pass

    @abstractmethod
    def normalize(self, vector: T) -> T:
        """Normalise the vector according to the rules of the space."""
        pass

    @abstractmethod
    def inner_product(self, v1: T, v2: T) -> float:
        """Inner product of two vectors."""
        pass

    @abstractmethod
    def add(self, v1: T, v2: T) -> T:
        """Add two vectors."""
        pass

    @abstractmethod
    def scale(self, vector: T, scalar: float) -> T:
        """Scale a vector by a scalar value."""
        pass
