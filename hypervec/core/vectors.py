"""
Immutable vector value types for flat and hyperbolic space.

Both types keep their components as a read-only float64 numpy array so
that every computation runs in double precision regardless of how the
values were stored at rest. The two types share no base class and the
algebras in this package never accept one in place of the other.
"""

import math
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np

from ..exceptions import InvalidInputError, OutOfBallError


DEFAULT_CURVATURE = -1.0
ZERO_NORM_EPS = 1e-10

ArrayLike = Union[np.ndarray, Iterable[float]]


def _as_components(data: ArrayLike) -> np.ndarray:
    """Copy ``data`` into a frozen 1-D float64 array."""
    components = np.array(data, dtype=np.float64, copy=True)
    if components.ndim != 1:
        raise InvalidInputError(
            f"Vector components must be one-dimensional, got shape {components.shape}"
        )
    components.setflags(write=False)
    return components


class EuclideanVector:
    """
    A vector in flat (Euclidean) space.

    No geometric constraint applies to the components.

    Example:
        >>> v = EuclideanVector([3.0, 4.0])
        >>> v.norm()
        5.0
    """

    __slots__ = ("_data",)

    def __init__(self, data: ArrayLike):
        self._data = _as_components(data)

    @classmethod
    def zeros(cls, dimension: int) -> "EuclideanVector":
        """Create a zero vector of the specified dimension."""
        return cls(np.zeros(dimension))

    @classmethod
    def random(cls, dimension: int, rng: Optional[np.random.Generator] = None) -> "EuclideanVector":
        """Create a vector with components drawn uniformly from [0, 1)."""
        rng = rng if rng is not None else np.random.default_rng()
        return cls(rng.random(dimension))

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the components."""
        return self._data

    @property
    def dimension(self) -> int:
        return self._data.shape[0]

    def squared_norm(self) -> float:
        return float(np.dot(self._data, self._data))

    def norm(self) -> float:
        return math.sqrt(self.squared_norm())

    def to_list(self) -> List[float]:
        return self._data.tolist()

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __len__(self) -> int:
        return self.dimension

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EuclideanVector):
            return NotImplemented
        return np.array_equal(self._data, other._data)

    def __hash__(self) -> int:
        return hash(self._data.tobytes())

    def __repr__(self) -> str:
        return f"EuclideanVector({self._data.tolist()})"


class PoincareVector:
    """
    A point in the Poincaré ball model of hyperbolic space.

    The components must lie strictly inside the open unit ball; the
    curvature is a negative real whose magnitude sets the scale of the
    space. Two points are only mutually operable when their dimension
    and curvature match exactly.

    Args:
        data: Vector components
        curvature: Curvature of the hyperbolic space (negative, default -1.0)

    Raises:
        OutOfBallError: if the squared norm of ``data`` is >= 1
        InvalidInputError: if the curvature is not negative
    """

    __slots__ = ("_data", "_curvature")

    def __init__(self, data: ArrayLike, curvature: float = DEFAULT_CURVATURE):
        components = _as_components(data)
        curvature = float(curvature)
        if not curvature < 0.0:
            raise InvalidInputError(
                f"Curvature must be negative, got {curvature}", {"curvature": curvature}
            )

        squared_norm = float(np.dot(components, components))
        if not squared_norm < 1.0:
            raise OutOfBallError(math.sqrt(squared_norm))

        self._data = components
        self._curvature = curvature

    @classmethod
    def zeros(cls, dimension: int, curvature: float = DEFAULT_CURVATURE) -> "PoincareVector":
        """Create the origin of the ball."""
        return cls(np.zeros(dimension), curvature)

    @classmethod
    def random(
        cls,
        dimension: int,
        curvature: float = DEFAULT_CURVATURE,
        max_norm: float = 0.9,
        rng: Optional[np.random.Generator] = None
    ) -> "PoincareVector":
        """
        Create a random point with norm strictly below ``max_norm``.

        Args:
            dimension: The vector dimension
            curvature: The curvature of the hyperbolic space
            max_norm: Upper bound of the generated norm (must be < 1)
            rng: Generator to draw from; a fresh unseeded one if omitted
        """
        if not 0.0 < max_norm < 1.0:
            raise InvalidInputError("max_norm must be between 0 and 1", {"max_norm": max_norm})

        rng = rng if rng is not None else np.random.default_rng()
        direction = rng.uniform(-1.0, 1.0, dimension)
        norm = np.linalg.norm(direction)
        if norm < ZERO_NORM_EPS:
            return cls.zeros(dimension, curvature)

        return cls(direction * (rng.random() * max_norm / norm), curvature)

    @classmethod
    def from_euclidean(cls, vector: EuclideanVector, curvature: float = DEFAULT_CURVATURE) -> "PoincareVector":
        """
        Clip-scale a Euclidean vector into the ball.

        Vectors with norm above 0.9 are shrunk onto the sphere of radius
        0.9; shorter ones are shrunk by the same 0.9 factor. This is a
        plain rescaling, see ``VectorSpaceConverter`` for the
        distance-aware mappings.
        """
        norm = vector.norm()
        if norm < ZERO_NORM_EPS:
            return cls(vector.data, curvature)

        scale = min(0.9, 0.9 / norm)
        return cls(vector.data * scale, curvature)

    def to_euclidean(self) -> EuclideanVector:
        """View the same coordinates as a Euclidean vector."""
        return EuclideanVector(self._data)

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the components."""
        return self._data

    @property
    def curvature(self) -> float:
        return self._curvature

    @property
    def dimension(self) -> int:
        return self._data.shape[0]

    def squared_norm(self) -> float:
        return float(np.dot(self._data, self._data))

    def norm(self) -> float:
        return math.sqrt(self.squared_norm())

    def to_list(self) -> List[float]:
        return self._data.tolist()

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __len__(self) -> int:
        return self.dimension

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PoincareVector):
            return NotImplemented
        return self._curvature == other._curvature and np.array_equal(self._data, other._data)

    def __hash__(self) -> int:
        return hash((self._data.tobytes(), self._curvature))

    def __repr__(self) -> str:
        return f"PoincareVector(data={self._data.tolist()}, curvature={self._curvature})"
