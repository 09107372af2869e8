"""
HyperVec Test Suite

This package contains unit tests for all components of the HyperVec system.
The tests are organized by module and include:

- Unit tests for the vector algebras and value types
- Conversion and curvature learning tests
- Filter, storage and search engine tests
- Configuration, factory and exception tests
"""

import sys
import os
import tempfile
import shutil
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

# Add the parent directory to the path for importing hypervec
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from hypervec.storage import CollectionConfig, InMemoryVectorStorage, StorageFormat


# Test utilities and fixtures
class TestFixtures:
    """Common test fixtures and utilities."""

    @staticmethod
    def create_temp_dir() -> Path:
        """Create a temporary directory for test files."""
        return Path(tempfile.mkdtemp())

    @staticmethod
    def cleanup_temp_dir(temp_dir: Path) -> None:
        """Clean up temporary directory."""
        if temp_dir.exists():
            shutil.rmtree(temp_dir)

    @staticmethod
    def create_linear_vectors(count: int = 10, step=(0.1, 0.2, 0.3)) -> List[List[float]]:
        """Vectors ``[i*step[0], i*step[1], ...]`` for i in range(count)."""
        return [[i * s for s in step] for i in range(count)]

    @staticmethod
    def create_populated_storage(
        collection: str = "test_collection",
        count: int = 10,
        metadata: Optional[List[Dict]] = None
    ) -> InMemoryVectorStorage:
        """Storage with one 3-d Euclidean collection of linear vectors tagged with ``index``."""
        storage = InMemoryVectorStorage()
        storage.create_collection(collection, CollectionConfig.create_euclidean(3, StorageFormat.FLOAT32))
        vectors = TestFixtures.create_linear_vectors(count)
        if metadata is None:
            metadata = [{"index": i} for i in range(count)]
        storage.store_batch(collection, vectors, metadata)
        return storage

    @staticmethod
    def create_simple_hierarchy() -> Dict[str, List[str]]:
        """A root with two children, each with two leaves."""
        return {
            "animal": [],
            "mammal": ["animal"],
            "bird": ["animal"],
            "dog": ["mammal"],
            "cat": ["mammal"],
            "eagle": ["bird"],
            "sparrow": ["bird"],
        }

    @staticmethod
    def create_chain_hierarchy(length: int) -> Dict[str, List[str]]:
        """A single path ``n0 <- n1 <- ... <- n{length-1}``."""
        hierarchy = {"n0": []}
        for i in range(1, length):
            hierarchy[f"n{i}"] = [f"n{i - 1}"]
        return hierarchy

    @staticmethod
    def random_ball_points(count: int, dimension: int, max_norm: float = 0.8, seed: int = 0) -> np.ndarray:
        """Points drawn uniformly in direction with norms below ``max_norm``."""
        rng = np.random.default_rng(seed)
        directions = rng.normal(size=(count, dimension))
        directions /= np.linalg.norm(directions, axis=1, keepdims=True)
        radii = rng.uniform(0.0, max_norm, size=(count, 1))
        return directions * radii


# Test constants
TEST_COLLECTION = "test_collection"
TEST_DIMENSION = 3
TOLERANCE = 1e-9
