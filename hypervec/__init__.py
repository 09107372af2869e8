"""
HyperVec - dual-geometry vector algebra and exact similarity search

This package provides vector algebra in flat (Euclidean) space and in
the Poincaré ball model of hyperbolic space, conversion between the two,
curvature estimation for hierarchical data, and an exact k-nearest-
neighbour search engine with metadata filters.

Main components:
- Euclidean and Poincaré ball vector types and algebras
- Arctangent-based space conversion (single vector and batch)
- Curvature learners (structural heuristic and gradient descent)
- Filter expressions and the exact FlatVectorIndex
- An in-memory record source
- Configuration, factories and evaluation metrics

Example usage:
    from hypervec import (
        InMemoryVectorStorage, CollectionConfig, FlatVectorIndex, SpaceType, eq
    )

    storage = InMemoryVectorStorage()
    storage.create_collection("docs", CollectionConfig.create_euclidean(3))
    storage.store_vector("docs", [0.1, 0.2, 0.3], {"category": 1})

    index = FlatVectorIndex(storage)
    results = index.search("docs", [0.5, 1.0, 1.5], k=3,
                           space_type=SpaceType.EUCLIDEAN, filter=eq("category", 1))
"""

import logging

# Version information
__version__ = "1.0.0"
__author__ = "HyperVec Team"

# Core algebra
from .core import (
    SpaceType,
    VectorOperations,
    EuclideanVector,
    PoincareVector,
    DEFAULT_CURVATURE,
    EuclideanOperations,
    PoincareOperations,
)

# Conversion
from .conversion import VectorSpaceConverter, AdaptiveCurvatureConverter

# Curvature learning
from .learning import (
    HierarchyGraph,
    CurvatureLearner,
    GridSearchCurvatureLearner,
    GradientDescentCurvatureLearner,
)

# Storage
from .storage import (
    VectorType,
    StorageFormat,
    CollectionConfig,
    VectorRecord,
    CollectionStats,
    VectorStorage,
    InMemoryVectorStorage,
)

# Search
from .index import (
    FilterExpression,
    ComparisonOperator,
    eq,
    ne,
    gt,
    lt,
    contains,
    in_,
    IndexType,
    IndexStats,
    SearchResult,
    VectorIndex,
    FlatVectorIndex,
)

# Configuration
from .config import (
    HyperVecConfig,
    ConversionConfig,
    CurvatureLearningConfig,
    SearchConfig,
    LoggingConfig,
    LogLevel,
    get_default_config,
    load_config,
)

# Factories
from .factories import (
    LearnerType,
    CurvatureLearnerFactory,
    OperationsFactory,
    ConfigurationFactory,
    create_components,
    create_collection_config,
)

# Exception system
from .exceptions import (
    HyperVecError,
    ConfigurationError,
    InvalidInputError,
    GeometryError,
    DimensionMismatchError,
    CurvatureMismatchError,
    HyperbolicDomainError,
    OutOfBallError,
    DegenerateVectorError,
    InvalidRadiusError,
    SearchError,
    InvalidKError,
    NoSuchCollectionError,
    UnsupportedSpaceError,
    StorageNotSetError,
    StorageError,
    ErrorHandler,
    handle_error,
)

# Evaluation
from .utils.metrics import hierarchical_fidelity, HierarchyMetrics


__all__ = [
    # Version info
    "__version__",
    "__author__",

    # Core algebra
    "SpaceType",
    "VectorOperations",
    "EuclideanVector",
    "PoincareVector",
    "DEFAULT_CURVATURE",
    "EuclideanOperations",
    "PoincareOperations",

    # Conversion
    "VectorSpaceConverter",
    "AdaptiveCurvatureConverter",

    # Curvature learning
    "HierarchyGraph",
    "CurvatureLearner",
    "GridSearchCurvatureLearner",
    "GradientDescentCurvatureLearner",

    # Storage
    "VectorType",
    "StorageFormat",
    "CollectionConfig",
    "VectorRecord",
    "CollectionStats",
    "VectorStorage",
    "InMemoryVectorStorage",

    # Search
    "FilterExpression",
    "ComparisonOperator",
    "eq",
    "ne",
    "gt",
    "lt",
    "contains",
    "in_",
    "IndexType",
    "IndexStats",
    "SearchResult",
    "VectorIndex",
    "FlatVectorIndex",

    # Configuration
    "HyperVecConfig",
    "ConversionConfig",
    "CurvatureLearningConfig",
    "SearchConfig",
    "LoggingConfig",
    "LogLevel",
    "get_default_config",
    "load_config",

    # Factories
    "LearnerType",
    "CurvatureLearnerFactory",
    "OperationsFactory",
    "ConfigurationFactory",
    "create_components",
    "create_collection_config",

    # Exceptions
    "HyperVecError",
    "ConfigurationError",
    "InvalidInputError",
    "GeometryError",
    "DimensionMismatchError",
    "CurvatureMismatchError",
    "HyperbolicDomainError",
    "OutOfBallError",
    "DegenerateVectorError",
    "InvalidRadiusError",
    "SearchError",
    "InvalidKError",
    "NoSuchCollectionError",
    "UnsupportedSpaceError",
    "StorageNotSetError",
    "StorageError",
    "ErrorHandler",
    "handle_error",

    # Evaluation
    "hierarchical_fidelity",
    "HierarchyMetrics",
]


# Create package logger
logger = logging.getLogger(__name__)

# Add null handler to prevent logging errors if no handlers are configured
logger.addHandler(logging.NullHandler())

logger.debug(f"HyperVec v{__version__} initialized")
