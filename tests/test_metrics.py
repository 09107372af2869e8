"""
Unit tests for evaluation metrics and embedding initialisation.
"""

import math

import numpy as np
import pytest
import torch

from hypervec.core import EuclideanOperations, EuclideanVector, PoincareOperations, PoincareVector
from hypervec.exceptions import InvalidInputError
from hypervec.utils import (
    HierarchyMetrics,
    embedding_matrix,
    hierarchical_fidelity,
    hop_distance_matrix,
    init_poincare_embedding_tensor,
    make_rng,
    random_euclidean_embeddings,
    random_poincare_embeddings,
)
from tests import TestFixtures


class TestHierarchicalFidelity:
    """Test fidelity over vector value types."""

    def test_perfect_neighbourhoods(self):
        embeddings = {
            "a": EuclideanVector([0.0]),
            "b": EuclideanVector([1.0]),
            "c": EuclideanVector([5.0]),
        }
        fidelity = hierarchical_fidelity(
            embeddings, {"b": ["a"], "c": ["a"]}, 1, EuclideanOperations().distance
        )
        assert fidelity == 1.0

    def test_unrelated_nodes(self):
        embeddings = {"a": EuclideanVector([0.0]), "b": EuclideanVector([1.0])}
        assert hierarchical_fidelity(embeddings, {"a": [], "b": []}, 1, EuclideanOperations().distance) == 0.0

    def test_divides_by_k(self):
        embeddings = {"a": EuclideanVector([0.0]), "b": EuclideanVector([1.0])}
        fidelity = hierarchical_fidelity(embeddings, {"b": ["a"]}, 3, EuclideanOperations().distance)
        assert fidelity == pytest.approx(1.0 / 3.0)

    def test_empty_embeddings(self):
        assert hierarchical_fidelity({}, {"b": ["a"]}, 2, EuclideanOperations().distance) == 0.0

    def test_invalid_k(self):
        with pytest.raises(InvalidInputError):
            hierarchical_fidelity({}, {}, 0, EuclideanOperations().distance)

    def test_poincare_embeddings(self):
        hierarchy = TestFixtures.create_simple_hierarchy()
        nodes = list(hierarchy)
        points = TestFixtures.random_ball_points(len(nodes), 3, seed=11)
        embeddings = {node: PoincareVector(point) for node, point in zip(nodes, points)}

        fidelity = hierarchical_fidelity(embeddings, hierarchy, 2, PoincareOperations().distance)
        assert 0.0 <= fidelity <= 1.0


class TestHopDistanceMatrix:
    """Test hop-distance matrices."""

    def test_simple_hierarchy(self):
        matrix = hop_distance_matrix(TestFixtures.create_simple_hierarchy(), ["dog", "cat", "eagle"])
        expected = torch.tensor([[0.0, 2.0, 4.0], [2.0, 0.0, 4.0], [4.0, 4.0, 0.0]], dtype=torch.float64)
        torch.testing.assert_close(matrix, expected)

    def test_unreachable_is_inf(self):
        matrix = hop_distance_matrix({"a": [], "b": []}, ["a", "b"])
        assert matrix[0, 0].item() == 0.0
        assert math.isinf(matrix[0, 1].item())


class TestHierarchyMetrics:
    """Test batched metrics."""

    def setup_method(self):
        self.metrics = HierarchyMetrics(curvature=-1.0)
        self.embeddings = torch.tensor([[0.0, 0.0], [0.5, 0.0]], dtype=torch.float64)

    def test_rejects_non_negative_curvature(self):
        with pytest.raises(InvalidInputError):
            HierarchyMetrics(curvature=0.0)

    def test_pairwise_distances(self):
        poincare = self.metrics.pairwise_distances(self.embeddings)
        assert poincare[0, 1].item() == pytest.approx(2.0 * math.log(3.0))

        euclidean = self.metrics.pairwise_distances(self.embeddings, "euclidean")
        assert euclidean[0, 1].item() == pytest.approx(0.5)

    def test_pairwise_distances_accepts_numpy(self):
        distances = self.metrics.pairwise_distances(np.array([[0.0, 0.0], [0.5, 0.0]]))
        assert distances.dtype == torch.float64

    def test_unknown_space(self):
        with pytest.raises(InvalidInputError):
            self.metrics.pairwise_distances(self.embeddings, "spherical")

    def test_embedding_statistics(self):
        stats = self.metrics.embedding_statistics(self.embeddings)

        assert stats["num_embeddings"] == 2
        assert stats["embedding_dim"] == 2
        assert stats["mean_norm"] == pytest.approx(0.25)
        assert stats["max_norm"] == pytest.approx(0.5)
        assert stats["min_norm"] == 0.0
        assert stats["max_distance_from_origin"] == pytest.approx(2.0 * math.log(3.0))
        assert stats["mean_pairwise_distance"] == pytest.approx(2.0 * math.log(3.0))

    def test_hierarchical_distortion(self):
        true_distances = torch.tensor([[0.0, 1.0], [1.0, 0.0]], dtype=torch.float64)
        result = self.metrics.hierarchical_distortion(self.embeddings, true_distances)

        error = 2.0 * math.log(3.0) - 1.0
        assert result["mae"] == pytest.approx(error)
        assert result["mse"] == pytest.approx(error ** 2)
        assert result["rmse"] == pytest.approx(error)
        assert result["relative_error"] == pytest.approx(error, rel=1e-6)

    def test_distortion_exact_euclidean(self):
        embeddings = torch.tensor([[0.0, 0.0], [3.0, 4.0]], dtype=torch.float64)
        true_distances = torch.tensor([[0.0, 10.0], [10.0, 0.0]], dtype=torch.float64)
        result = self.metrics.hierarchical_distortion(embeddings, true_distances, "euclidean", distance_scale=2.0)
        assert result["mae"] == pytest.approx(0.0)

    def test_distortion_without_pairs(self):
        true_distances = torch.full((2, 2), float("inf"), dtype=torch.float64)
        with pytest.raises(InvalidInputError):
            self.metrics.hierarchical_distortion(self.embeddings, true_distances)

    def test_fidelity_matches_scalar_version(self):
        hierarchy = TestFixtures.create_simple_hierarchy()
        nodes = list(hierarchy)
        points = TestFixtures.random_ball_points(len(nodes), 3, seed=12)
        embeddings = {node: PoincareVector(point) for node, point in zip(nodes, points)}

        expected = hierarchical_fidelity(embeddings, hierarchy, 2, PoincareOperations().distance)
        batched = self.metrics.fidelity(embedding_matrix(embeddings, nodes), nodes, hierarchy, k=2)
        assert batched == pytest.approx(expected)

    def test_fidelity_invalid_k(self):
        with pytest.raises(InvalidInputError):
            self.metrics.fidelity(self.embeddings, ["a", "b"], {"b": ["a"]}, k=0)

    def test_compare_geometries(self):
        hierarchy = {"b": ["a"], "c": ["a"]}
        nodes = ["a", "b", "c"]
        euclidean = torch.tensor([[0.0, 0.0], [5.0, 0.0], [0.1, 0.0]], dtype=torch.float64)
        poincare = torch.tensor([[0.0, 0.0], [0.1, 0.0], [0.0, 0.1]], dtype=torch.float64)

        result = self.metrics.compare_geometries(euclidean, poincare, nodes, hierarchy, k=1)
        assert result["hyperbolic_fidelity"] == 1.0
        assert result["improvement"] == pytest.approx(
            result["hyperbolic_fidelity"] - result["euclidean_fidelity"]
        )


class TestInitialization:
    """Test seeded embedding initialisation."""

    def test_make_rng(self):
        rng = np.random.default_rng(1)
        assert make_rng(rng) is rng
        assert make_rng(5).random() == np.random.default_rng(5).random()

    def test_random_euclidean_embeddings(self):
        first = random_euclidean_embeddings(["a", "b", "c"], dimensions=4, seed=42)
        second = random_euclidean_embeddings(["a", "b", "c"], dimensions=4, seed=42)

        assert list(first) == ["a", "b", "c"]
        assert all(first[n] == second[n] for n in first)
        assert first["a"].dimension == 4
        assert first["a"] != first["b"]

    def test_random_poincare_embeddings(self):
        embeddings = random_poincare_embeddings(["a", "b"], dimensions=3, curvature=-2.0, max_norm=0.5, seed=1)
        for vector in embeddings.values():
            assert vector.norm() < 0.5
            assert vector.curvature == -2.0

    def test_init_poincare_embedding_tensor(self):
        first = init_poincare_embedding_tensor(10, 4, seed=3)
        second = init_poincare_embedding_tensor(10, 4, seed=3)

        assert first.shape == (10, 4)
        assert first.dtype == torch.float64
        torch.testing.assert_close(first, second)
        assert torch.all(torch.norm(first, dim=1) < 1.0)

    def test_embedding_matrix(self):
        embeddings = {"a": EuclideanVector([1.0, 2.0]), "b": EuclideanVector([3.0, 4.0])}
        matrix = embedding_matrix(embeddings, ["b", "a"])
        torch.testing.assert_close(matrix, torch.tensor([[3.0, 4.0], [1.0, 2.0]], dtype=torch.float64))
