"""
Metrics for evaluating hierarchy embeddings.

This module provides hierarchical fidelity (how many of a node's nearest
neighbours are its relatives in the hierarchy) for vectors of either
geometry, plus batched tensor metrics for whole embedding matrices:
pairwise distances, embedding statistics and distortion against hop
distances.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

import numpy as np
import torch

from ..core.math_ops import as_tensor, pairwise_euclidean_distances, pairwise_poincare_distances
from ..core.vectors import DEFAULT_CURVATURE
from ..exceptions import InvalidInputError
from ..learning.hierarchy import HierarchyGraph


logger = logging.getLogger(__name__)

V = TypeVar("V")
Hierarchy = Union[HierarchyGraph, Mapping[str, Sequence[str]]]

EUCLIDEAN = "euclidean"
POINCARE = "poincare"


def hierarchical_fidelity(
    embeddings: Mapping[str, V],
    hierarchy: Hierarchy,
    k: int,
    distance_fn: Callable[[V, V], float]
) -> float:
    """
    Mean fraction of each node's k nearest neighbours that are relatives.

    Relatives are ancestors, descendants, siblings and nodes sharing a
    grandparent. Each node contributes ``related / k`` even when fewer
    than k other nodes exist.

    Args:
        embeddings: Node id to vector, for the nodes to evaluate
        hierarchy: Reference hierarchy
        k: Neighbourhood size
        distance_fn: Distance between two embeddings, e.g. ``ops.distance``

    Returns:
        Fidelity in [0, 1]; 0.0 for an empty embedding set

    Example:
        >>> emb = {"a": EuclideanVector([0.0]), "b": EuclideanVector([1.0]), "c": EuclideanVector([5.0])}
        >>> hierarchical_fidelity(emb, {"b": ["a"], "c": ["a"]}, 1, EuclideanOperations().distance)
        1.0
    """
    if k <= 0:
        raise InvalidInputError("k must be positive", {"k": k})

    graph = HierarchyGraph.coerce(hierarchy)
    nodes = list(embeddings)
    if not nodes:
        return 0.0

    total = 0.0
    for node in nodes:
        neighbours = sorted(
            (other for other in nodes if other != node),
            key=lambda other: distance_fn(embeddings[node], embeddings[other]),
        )[:k]
        related = sum(1 for other in neighbours if graph.is_related(node, other))
        total += related / k

    return total / len(nodes)


def hop_distance_matrix(hierarchy: Hierarchy, node_ids: Sequence[str]) -> torch.Tensor:
    """
    Hop counts between ``node_ids`` as an (N, N) float64 tensor.

    Unreachable pairs are ``inf``.
    """
    graph = HierarchyGraph.coerce(hierarchy)
    index = {node: i for i, node in enumerate(node_ids)}
    matrix = torch.full((len(node_ids), len(node_ids)), float("inf"), dtype=torch.float64)

    for source in node_ids:
        for target, hops in graph.hop_distances_from(source).items():
            if target in index:
                matrix[index[source], index[target]] = hops
    return matrix


class HierarchyMetrics:
    """
    Batched evaluation metrics for embedding matrices.

    Args:
        curvature: Curvature used for Poincaré distances (negative)

    Example:
        >>> metrics = HierarchyMetrics(curvature=-1.0)
        >>> embeddings = torch.rand(20, 3, dtype=torch.float64) * 0.1
        >>> distances = metrics.pairwise_distances(embeddings)
        >>> stats = metrics.embedding_statistics(embeddings)
    """

    def __init__(self, curvature: float = DEFAULT_CURVATURE):
        if not curvature < 0:
            raise InvalidInputError("Curvature must be negative", {"curvature": curvature})
        self.curvature = curvature

        logger.debug(f"Initialized HierarchyMetrics with curvature={curvature}")

    def pairwise_distances(
        self,
        embeddings: Union[torch.Tensor, np.ndarray],
        space: str = POINCARE
    ) -> torch.Tensor:
        """
        Pairwise distance matrix in the requested geometry.

        Args:
            embeddings: Embeddings, shape (N, dim)
            space: ``"poincare"`` or ``"euclidean"``

        Returns:
            Distance matrix, shape (N, N)
        """
        embeddings = as_tensor(embeddings)
        if space == POINCARE:
            return pairwise_poincare_distances(embeddings, self.curvature)
        if space == EUCLIDEAN:
            return pairwise_euclidean_distances(embeddings)
        raise InvalidInputError(f"Unknown space: {space}", {"space": space})

    def embedding_statistics(self, embeddings: Union[torch.Tensor, np.ndarray]) -> Dict[str, float]:
        """
        Norm and distance statistics of Poincaré embeddings.

        Args:
            embeddings: Embeddings inside the ball, shape (N, dim) with N >= 2

        Returns:
            Dictionary of statistics
        """
        embeddings = as_tensor(embeddings)
        with torch.no_grad():
            norms = torch.norm(embeddings, dim=-1)
            origin = torch.zeros_like(embeddings)
            from_origin = pairwise_poincare_distances(
                torch.cat([origin[:1], embeddings]), self.curvature
            )[0, 1:]

            pairwise = self.pairwise_distances(embeddings)
            mask = ~torch.eye(pairwise.size(0), dtype=torch.bool)
            off_diagonal = pairwise[mask]

            stats = {
                'num_embeddings': embeddings.size(0),
                'embedding_dim': embeddings.size(1),
                'mean_norm': norms.mean().item(),
                'std_norm': norms.std().item(),
                'max_norm': norms.max().item(),
                'min_norm': norms.min().item(),
                'mean_distance_from_origin': from_origin.mean().item(),
                'max_distance_from_origin': from_origin.max().item(),
                'mean_pairwise_distance': off_diagonal.mean().item(),
                'max_pairwise_distance': off_diagonal.max().item(),
                'min_pairwise_distance': off_diagonal.min().item(),
            }

        return stats

    def hierarchical_distortion(
        self,
        embeddings: Union[torch.Tensor, np.ndarray],
        true_distances: torch.Tensor,
        space: str = POINCARE,
        distance_scale: float = 1.0
    ) -> Dict[str, float]:
        """
        Compare embedding distances with reference (e.g. hop) distances.

        Off-diagonal pairs with a finite reference distance are compared
        against ``true_distances / distance_scale``.

        Args:
            embeddings: Embeddings, shape (N, dim)
            true_distances: Reference distances, shape (N, N)
            space: Geometry of the embeddings
            distance_scale: Divisor applied to the reference distances

        Returns:
            Dictionary with mae, mse, rmse and relative_error
        """
        predicted = self.pairwise_distances(embeddings, space)
        true_distances = as_tensor(true_distances) / distance_scale

        n = predicted.size(0)
        mask = ~torch.eye(n, dtype=torch.bool) & torch.isfinite(true_distances)
        predicted_flat = predicted[mask]
        true_flat = true_distances[mask]

        if predicted_flat.numel() == 0:
            raise InvalidInputError("No comparable pairs for distortion")

        with torch.no_grad():
            error = predicted_flat - true_flat
            mae = torch.abs(error).mean().item()
            mse = torch.pow(error, 2).mean().item()
            relative_error = (torch.abs(error) / (true_flat + 1e-8)).mean().item()

        return {
            'mae': mae,
            'mse': mse,
            'rmse': float(np.sqrt(mse)),
            'relative_error': relative_error,
        }

    def fidelity(
        self,
        embeddings: Union[torch.Tensor, np.ndarray],
        node_ids: Sequence[str],
        hierarchy: Hierarchy,
        k: int = 10,
        space: str = POINCARE
    ) -> float:
        """
        Hierarchical fidelity computed from one batched distance matrix.

        Row ``i`` of ``embeddings`` belongs to ``node_ids[i]``. Equivalent
        to ``hierarchical_fidelity`` with the algebra of ``space``.
        """
        if k <= 0:
            raise InvalidInputError("k must be positive", {"k": k})
        n = len(node_ids)
        if n == 0:
            return 0.0

        graph = HierarchyGraph.coerce(hierarchy)
        distances = self.pairwise_distances(embeddings, space).clone()
        distances.fill_diagonal_(float("inf"))
        order = torch.sort(distances, dim=1, stable=True).indices[:, :min(k, n - 1)]

        total = 0.0
        for i, node in enumerate(node_ids):
            related = sum(1 for j in order[i].tolist() if graph.is_related(node, node_ids[j]))
            total += related / k
        return total / n

    def compare_geometries(
        self,
        euclidean_embeddings: Union[torch.Tensor, np.ndarray],
        poincare_embeddings: Union[torch.Tensor, np.ndarray],
        node_ids: Sequence[str],
        hierarchy: Hierarchy,
        k: int = 10
    ) -> Dict[str, float]:
        """Fidelity of both embeddings of the same nodes and the hyperbolic improvement."""
        euclidean = self.fidelity(euclidean_embeddings, node_ids, hierarchy, k, EUCLIDEAN)
        hyperbolic = self.fidelity(poincare_embeddings, node_ids, hierarchy, k, POINCARE)

        logger.info(f"Fidelity at k={k}: euclidean={euclidean:.4f}, hyperbolic={hyperbolic:.4f}")
        return {
            'euclidean_fidelity': euclidean,
            'hyperbolic_fidelity': hyperbolic,
            'improvement': hyperbolic - euclidean,
        }


def embedding_matrix(embeddings: Mapping[str, V], node_ids: Optional[List[str]] = None) -> torch.Tensor:
    """Stack vector value types (anything with ``.data``) into an (N, dim) float64 tensor."""
    node_ids = list(embeddings) if node_ids is None else node_ids
    return torch.as_tensor(np.stack([embeddings[node].data for node in node_ids]), dtype=torch.float64)
