"""
Utility functions for embedding initialisation and evaluation.
"""

from .initialization import (
    make_rng,
    random_euclidean_embeddings,
    random_poincare_embeddings,
    init_poincare_embedding_tensor,
)
from .metrics import (
    hierarchical_fidelity,
    hop_distance_matrix,
    embedding_matrix,
    HierarchyMetrics,
)

__all__ = [
    "make_rng",
    "random_euclidean_embeddings",
    "random_poincare_embeddings",
    "init_poincare_embedding_tensor",
    "hierarchical_fidelity",
    "hop_distance_matrix",
    "embedding_matrix",
    "HierarchyMetrics",
]
