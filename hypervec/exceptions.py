"""
Exception classes for HyperVec.

This module defines custom exception classes for the different kinds of
failure that can occur in vector algebra, space conversion, curvature
learning, storage and similarity search.
"""

from typing import Optional


class HyperVecError(Exception):
    """Base exception for all HyperVec errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(HyperVecError):
    """Raised when there's an error in configuration."""
    pass


class InvalidInputError(HyperVecError, ValueError):
    """Raised when input validation fails."""
    pass


class GeometryError(HyperVecError, ValueError):
    """Base class for local, non-retryable geometric validation failures."""
    pass


class DimensionMismatchError(GeometryError):
    """Raised when two operands have different component counts."""

    def __init__(self, expected: int, actual: int, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        if message is None:
            message = f"Vector dimensions don't match: {expected} vs {actual}"
        super().__init__(message, {"expected": expected, "actual": actual})


class CurvatureMismatchError(GeometryError):
    """Raised when two hyperbolic operands live in spaces of different curvature."""

    def __init__(self, expected: float, actual: float):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Vector curvatures don't match: {expected} vs {actual}",
            {"expected": expected, "actual": actual}
        )


class HyperbolicDomainError(GeometryError):
    """Raised when acosh/atanh receive an argument outside their domain."""

    def __init__(self, function: str, value: float):
        self.function = function
        self.value = value
        domain = "x >= 1" if function == "acosh" else "-1 < x < 1"
        super().__init__(f"{function} requires {domain}, got {value}", {"function": function})


class OutOfBallError(GeometryError):
    """Raised when a point would lie on or outside the Poincaré ball boundary."""

    def __init__(self, norm: float, message: Optional[str] = None):
        self.norm = norm
        if message is None:
            message = f"Vector lies outside the Poincaré ball (norm = {norm} >= 1)"
        super().__init__(message, {"norm": norm})


class DegenerateVectorError(GeometryError):
    """Raised when normalising (or otherwise rescaling) a near-zero vector."""
    pass


class InvalidRadiusError(GeometryError):
    """Raised when a conversion radius is not strictly between 0 and 1."""

    def __init__(self, max_radius: float):
        self.max_radius = max_radius
        super().__init__("maxRadius must be between 0 and 1", {"max_radius": max_radius})


class SearchError(HyperVecError):
    """Base class for similarity search failures."""
    pass


class InvalidKError(SearchError, ValueError):
    """Raised when the requested neighbour count is not positive."""

    def __init__(self, k: int):
        self.k = k
        super().__init__("k must be positive", {"k": k})


class NoSuchCollectionError(SearchError, KeyError):
    """Raised when the record source has no collection of the given name."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Collection does not exist: {collection}", {"collection": collection})

    def __str__(self) -> str:
        # KeyError would otherwise quote the message
        return HyperVecError.__str__(self)


class UnsupportedSpaceError(SearchError, ValueError):
    """Raised when a search or index targets a geometry/index type that is not supported."""
    pass


class StorageNotSetError(SearchError):
    """Raised when an index is used before a record source was attached."""

    def __init__(self):
        super().__init__("Vector storage not set")


class StorageError(HyperVecError, ValueError):
    """Raised when a record or collection fails storage-level validation."""
    pass


def handle_error(error: Exception, context: str = "") -> HyperVecError:
    """
    Convert generic exceptions to HyperVec exceptions.

    Args:
        error: The original exception
        context: Additional context about where the error occurred

    Returns:
        An appropriate HyperVecError subclass
    """
    if isinstance(error, HyperVecError):
        return error

    error_type = type(error).__name__
    message = f"{context}: {error_type}: {str(error)}" if context else f"{error_type}: {str(error)}"

    if isinstance(error, (ValueError, TypeError)):
        return InvalidInputError(message)
    elif isinstance(error, ArithmeticError):
        return GeometryError(message)
    elif isinstance(error, (KeyError, OSError)):
        return StorageError(message)
    else:
        return HyperVecError(message)


class ErrorHandler:
    """Context manager for handling errors in a consistent way."""

    def __init__(self, context: str, reraise: bool = True):
        self.context = context
        self.reraise = reraise
        self.error: Optional[HyperVecError] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.error = handle_error(exc_val, self.context)
            if self.reraise:
                if self.error is exc_val:
                    return False
                raise self.error from exc_val
            return True  # Suppress the exception
        return False

    def has_error(self) -> bool:
        """Check if an error occurred."""
        return self.error is not None
