"""
Local-geometry methods: LLE, NPE, LTSA, LLTSA and Hessian LLE.

All of them read pairwise values through the kernel callback. Neighborhoods
are found with the kernel-induced distance, a sparse-in-spirit alignment
matrix is accumulated over neighborhoods, and the embedding comes from its
bottom eigenvectors. The linear variants (NPE, LLTSA) solve the same problem
restricted to linear maps of the feature vectors.
"""

import logging

import numpy as np
from scipy import linalg
from tqdm import tqdm

from .context import EmbeddingContext
from .eigen import eigendecomposition, generalized_eigendecomposition
from .neighbors import find_neighbors
from .projection import EmbeddingResult, EmptyProjection, LinearProjection

logger = logging.getLogger('reduction.local')

# Relative regularization of local Gram matrices
LOCAL_REGULARIZATION = 1e-3


def _kernel_neighbors(ctx: EmbeddingContext) -> np.ndarray:
    params = ctx.parameters
    with ctx.log.timed("Neighbors computation"):
        return find_neighbors(params.neighbors_method, ctx.indices, ctx.kernel_distance,
                              params.num_neighbors, params.check_connectivity, ctx)


def _local_kernel(ctx: EmbeddingContext, positions: np.ndarray) -> np.ndarray:
    ids = [ctx.indices[p] for p in positions]
    m = len(ids)
    local = np.empty((m, m))
    for a in range(m):
        for b in range(a, m):
            local[a, b] = local[b, a] = ctx.kernel(ids[a], ids[b])
    return local


def _progress(ctx: EmbeddingContext, n: int, desc: str):
    return tqdm(range(n), desc=desc, disable=not ctx.log.show_progress, leave=False)


def linear_reconstruction_weights(ctx: EmbeddingContext, neighbors: np.ndarray) -> np.ndarray:
    """
    Weight matrix ``W`` reconstructing each sample from its neighbors.

    Returns:
        Dense (n, n) matrix with rows summing to one
    """
    n, k = neighbors.shape
    weights = np.zeros((n, n))
    ones = np.ones(k)
    for a in _progress(ctx, n, "Reconstruction weights"):
        ctx.check_cancelled()
        local = _local_kernel(ctx, np.concatenate(([a], neighbors[a])))
        # Gram matrix of neighbor differences x_a - x_p, expressed through the kernel
        gram = local[0, 0] - local[0, 1:][:, None] - local[0, 1:][None, :] + local[1:, 1:]
        trace = np.trace(gram)
        gram[np.diag_indices(k)] += LOCAL_REGULARIZATION * (trace if trace > 0 else 1.0)
        w = linalg.solve(gram, ones, assume_a='pos')
        weights[a, neighbors[a]] = w / w.sum()
    return weights


def tangent_alignment_matrix(ctx: EmbeddingContext, neighbors: np.ndarray) -> np.ndarray:
    """Alignment matrix summing local tangent-space projectors over neighborhoods."""
    n, k = neighbors.shape
    d = ctx.parameters.target_dimension
    m = k + 1
    if d > m - 1:
        raise ValueError(f"Target dimension ({d}) should be less than neighborhood size ({m})")

    alignment = np.zeros((n, n))
    centering = np.eye(m) - np.full((m, m), 1.0 / m)
    for a in _progress(ctx, n, "Tangent spaces"):
        ctx.check_cancelled()
        positions = np.concatenate(([a], neighbors[a]))
        gram = centering @ _local_kernel(ctx, positions) @ centering
        _, vectors = linalg.eigh(gram)
        basis = np.column_stack([np.full(m, 1.0 / np.sqrt(m)), vectors[:, ::-1][:, :d]])
        alignment[np.ix_(positions, positions)] += np.eye(m) - basis @ basis.T
    return alignment


def hessian_estimator_matrix(ctx: EmbeddingContext, neighbors: np.ndarray) -> np.ndarray:
    """Sum of local Hessian estimator outer products."""
    n, k = neighbors.shape
    d = ctx.parameters.target_dimension
    dp = d * (d + 1) // 2
    m = k + 1
    if m < 1 + d + dp:
        raise ValueError(f"Hessian LLE with target dimension {d} needs at least "
                         f"{d * (d + 3) // 2} neighbors, got {k}")

    hessian = np.zeros((n, n))
    centering = np.eye(m) - np.full((m, m), 1.0 / m)
    for a in _progress(ctx, n, "Hessian estimators"):
        ctx.check_cancelled()
        positions = np.concatenate(([a], neighbors[a]))
        gram = centering @ _local_kernel(ctx, positions) @ centering
        _, vectors = linalg.eigh(gram)
        tangent = vectors[:, ::-1][:, :d]

        columns = [np.ones(m), *tangent.T]
        for i in range(d):
            for j in range(i, d):
                columns.append(tangent[:, i] * tangent[:, j])
        q, _ = linalg.qr(np.column_stack(columns), mode='economic')

        estimator = q[:, d + 1:]
        sums = estimator.sum(axis=0)
        sums[np.abs(sums) < 1e-4] = 1.0
        estimator = estimator / sums
        hessian[np.ix_(positions, positions)] += estimator @ estimator.T
    return hessian


def _bottom_embedding(ctx: EmbeddingContext, matrix: np.ndarray) -> EmbeddingResult:
    params = ctx.parameters
    with ctx.log.timed("Embedding computation"):
        _, vectors = eigendecomposition(params.eigen_method, matrix, params.target_dimension,
                                        largest=False, skip=1, shift=params.nullspace_shift,
                                        rng=ctx.rng)
    return vectors.T.copy(), EmptyProjection()


def _linear_embedding(ctx: EmbeddingContext, matrix: np.ndarray) -> EmbeddingResult:
    params = ctx.parameters
    features = ctx.feature_matrix()
    dimension = features.shape[0]
    if params.target_dimension > dimension:
        raise ValueError(f"Target dimension ({params.target_dimension}) should not exceed "
                         f"feature dimension ({dimension}) for linear methods")

    mean = features.mean(axis=1)
    centered = features - mean[:, np.newaxis]
    lhs = centered @ matrix @ centered.T
    rhs = centered @ centered.T + params.nullspace_shift * np.eye(dimension)
    with ctx.log.timed("Embedding computation"):
        _, projection = generalized_eigendecomposition(params.eigen_method, lhs, rhs,
                                                       params.target_dimension, largest=False,
                                                       shift=params.nullspace_shift, rng=ctx.rng)
    return projection.T @ centered, LinearProjection(projection, mean)


def _weights_to_cost(weights: np.ndarray) -> np.ndarray:
    residual = np.eye(weights.shape[0]) - weights
    return residual.T @ residual


def locally_linear_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    neighbors = _kernel_neighbors(ctx)
    with ctx.log.timed("Weight matrix computation"):
        cost = _weights_to_cost(linear_reconstruction_weights(ctx, neighbors))
    return _bottom_embedding(ctx, cost)


def neighborhood_preserving_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    neighbors = _kernel_neighbors(ctx)
    with ctx.log.timed("Weight matrix computation"):
        cost = _weights_to_cost(linear_reconstruction_weights(ctx, neighbors))
    return _linear_embedding(ctx, cost)


def local_tangent_space_alignment(ctx: EmbeddingContext) -> EmbeddingResult:
    neighbors = _kernel_neighbors(ctx)
    with ctx.log.timed("Alignment matrix computation"):
        alignment = tangent_alignment_matrix(ctx, neighbors)
    return _bottom_embedding(ctx, alignment)


def linear_local_tangent_space_alignment(ctx: EmbeddingContext) -> EmbeddingResult:
    neighbors = _kernel_neighbors(ctx)
    with ctx.log.timed("Alignment matrix computation"):
        alignment = tangent_alignment_matrix(ctx, neighbors)
    return _linear_embedding(ctx, alignment)


def hessian_locally_linear_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    neighbors = _kernel_neighbors(ctx)
    with ctx.log.timed("Hessian matrix computation"):
        hessian = hessian_estimator_matrix(ctx, neighbors)
    return _bottom_embedding(ctx, hessian)
