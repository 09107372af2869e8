"""
Batched tensor operations for hyperbolic geometry.

These mirror the single-vector formulas of ``PoincareOperations`` but
work on whole embedding matrices at once, which is what evaluation code
needs when it compares every node of a hierarchy with every other node.
Curvature follows the package convention (a negative real); only its
magnitude enters the formulas.

All operations accept tensors of shape (..., dim) and compute in the
dtype of their inputs; callers pass float64 tensors when they need
results that agree with the scalar algebra to full precision.
"""

import math
from typing import Union

import numpy as np
import torch


def as_tensor(x: Union[np.ndarray, torch.Tensor], dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """Convert an array-like into a tensor of the given dtype."""
    if isinstance(x, torch.Tensor):
        return x.to(dtype)
    return torch.as_tensor(np.asarray(x), dtype=dtype)


def poincare_distance(x: torch.Tensor, y: torch.Tensor, curvature: float = -1.0) -> torch.Tensor:
    """
    Compute hyperbolic distance between points in the Poincaré ball.

    The distance formula is:
    d(x,y) = (2/√c) * acosh(1 + 2||x - y||² / ((1 - ||x||²)(1 - ||y||²)))

    Args:
        x, y: Points in the Poincaré ball, broadcastable shapes (..., dim)
        curvature: Curvature of the space (negative)

    Returns:
        Distances with the broadcast batch shape of x and y
    """
    c = abs(curvature)
    x_norm_sq = torch.sum(x * x, dim=-1)
    y_norm_sq = torch.sum(y * y, dim=-1)
    diff = x - y
    squared_dist = torch.sum(diff * diff, dim=-1)

    fraction = 1.0 + 2.0 * squared_dist / ((1.0 - x_norm_sq) * (1.0 - y_norm_sq))
    # Rounding can push identical points a hair below 1
    fraction = torch.clamp(fraction, min=1.0)

    return (2.0 / math.sqrt(c)) * torch.acosh(fraction)


def pairwise_poincare_distances(embeddings: torch.Tensor, curvature: float = -1.0) -> torch.Tensor:
    """
    Pairwise hyperbolic distances between the rows of ``embeddings``.

    Args:
        embeddings: Tensor of points, shape (N, dim)
        curvature: Curvature of the space (negative)

    Returns:
        Distance matrix, shape (N, N)
    """
    return poincare_distance(embeddings.unsqueeze(1), embeddings.unsqueeze(0), curvature)


def pairwise_euclidean_distances(embeddings: torch.Tensor) -> torch.Tensor:
    """
    Pairwise L2 distances between the rows of ``embeddings``.

    Args:
        embeddings: Tensor of vectors, shape (N, dim)

    Returns:
        Distance matrix, shape (N, N)
    """
    diff = embeddings.unsqueeze(1) - embeddings.unsqueeze(0)
    return torch.sqrt(torch.sum(diff * diff, dim=-1))


def exponential_map_origin(v: torch.Tensor, eps: float = 1e-10) -> torch.Tensor:
    """
    Exponential map from the tangent space at the origin into the ball.

    Rows with norm below ``eps`` map to the origin.

    Args:
        v: Tangent vectors, shape (..., dim)
        eps: Norm below which a vector is treated as zero

    Returns:
        Points in the Poincaré ball, same shape as v
    """
    norm = torch.norm(v, dim=-1, keepdim=True)
    zero_mask = norm < eps
    safe_norm = torch.where(zero_mask, torch.ones_like(norm), norm)
    factor = torch.where(zero_mask, torch.zeros_like(norm), torch.tanh(safe_norm) / safe_norm)
    return factor * v


def logarithmic_map_origin(x: torch.Tensor, eps: float = 1e-10) -> torch.Tensor:
    """
    Logarithmic map from the ball to the tangent space at the origin.

    Args:
        x: Points in the Poincaré ball, shape (..., dim)
        eps: Norm below which a point is treated as the origin

    Returns:
        Tangent vectors, same shape as x
    """
    norm = torch.norm(x, dim=-1, keepdim=True)
    zero_mask = norm < eps
    safe_norm = torch.where(zero_mask, torch.ones_like(norm) * 0.5, norm)
    factor = torch.where(zero_mask, torch.zeros_like(norm), torch.atanh(safe_norm) / safe_norm)
    return factor * x


def project_to_poincare_ball(x: torch.Tensor, max_norm: float = 1.0 - 1e-3, eps: float = 1e-15) -> torch.Tensor:
    """
    Project points to the Poincaré ball.

    Rows whose norm is at least ``max_norm`` are pulled onto the sphere of
    radius ``max_norm``; the rest pass through unchanged.

    Args:
        x: Input tensor of points
        max_norm: Largest norm a row may keep
        eps: Small constant for numerical stability

    Returns:
        Points projected onto the Poincaré ball
    """
    norms = torch.norm(x, dim=-1, keepdim=True)
    mask = norms >= max_norm

    projected = torch.where(
        mask,
        x * (max_norm - eps) / (norms + eps),
        x
    )

    return projected
