"""
Initialization utilities for synthetic embeddings.

This module provides seeded random initialisation of node embeddings,
both as vector value types (used by curvature learning) and as torch
tensors projected into the Poincaré ball (used by evaluation code).
Randomness is always drawn from an explicitly passed seed or generator.
"""

import logging
from typing import Dict, Iterable, Optional, Union

import numpy as np
import torch

from ..core.math_ops import project_to_poincare_ball
from ..core.vectors import DEFAULT_CURVATURE, EuclideanVector, PoincareVector


logger = logging.getLogger(__name__)

SeedLike = Union[int, np.random.Generator, None]


def make_rng(seed: SeedLike = None) -> np.random.Generator:
    """Return ``seed`` if it is already a generator, else a new one seeded with it."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def random_euclidean_embeddings(
    node_ids: Iterable[str],
    dimensions: int = 3,
    scale: float = 0.1,
    seed: SeedLike = None
) -> Dict[str, EuclideanVector]:
    """
    Draw a small Gaussian embedding for every node.

    Components are standard normal samples multiplied by ``scale``. Nodes
    are sampled in iteration order, so equal seeds and equal node orders
    give identical embeddings.

    Args:
        node_ids: Node identifiers, in the order they are sampled
        dimensions: Embedding dimension
        scale: Standard deviation of each component
        seed: Integer seed or numpy Generator

    Returns:
        Mapping from node id to its embedding

    Example:
        >>> emb = random_euclidean_embeddings(["a", "b"], dimensions=3, seed=42)
        >>> emb["a"].dimension
        3
    """
    rng = make_rng(seed)
    embeddings = {}
    for node_id in node_ids:
        embeddings[node_id] = EuclideanVector(rng.standard_normal(dimensions) * scale)

    logger.debug(f"Generated {len(embeddings)} random embeddings of dimension {dimensions}")
    return embeddings


def random_poincare_embeddings(
    node_ids: Iterable[str],
    dimensions: int = 3,
    curvature: float = DEFAULT_CURVATURE,
    max_norm: float = 0.9,
    seed: SeedLike = None
) -> Dict[str, PoincareVector]:
    """Uniformly sampled Poincaré points (see ``PoincareVector.random``) for every node."""
    rng = make_rng(seed)
    return {
        node_id: PoincareVector.random(dimensions, curvature, max_norm, rng)
        for node_id in node_ids
    }


def init_poincare_embedding_tensor(
    num_embeddings: int,
    dimensions: int,
    scale: float = 1e-3,
    seed: Optional[int] = None,
    dtype: torch.dtype = torch.float64
) -> torch.Tensor:
    """
    Initialize an embedding matrix inside the Poincaré ball.

    Args:
        num_embeddings: Number of rows
        dimensions: Embedding dimension
        scale: Standard deviation of the initial normal samples
        seed: Seed for a private torch generator
        dtype: Tensor dtype

    Returns:
        Tensor of shape (num_embeddings, dimensions)
    """
    generator = torch.Generator()
    if seed is not None:
        generator.manual_seed(seed)

    with torch.no_grad():
        weight = torch.randn(num_embeddings, dimensions, generator=generator, dtype=dtype) * scale
        weight = project_to_poincare_ball(weight)

    logger.debug(f"Initialized embedding tensor with {num_embeddings} embeddings")
    return weight
