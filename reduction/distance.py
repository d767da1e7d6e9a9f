"""
Distance-preserving methods: classical MDS, landmark MDS, Isomap and
landmark Isomap.
"""

import logging

import numpy as np
from scipy.sparse.csgraph import shortest_path

from .context import EmbeddingContext
from .eigen import eigendecomposition
from .methods import EigenMethod
from .neighbors import find_neighbors, neighbors_graph
from .projection import EmbeddingResult, EmptyProjection

logger = logging.getLogger('reduction.distance')

# Smallest edge weight kept in neighbor graphs, so coincident samples stay connected
MIN_EDGE_WEIGHT = 1e-12


def select_landmarks(n: int, ratio: float, target_dimension: int,
                     rng: np.random.Generator) -> np.ndarray:
    """Random landmark positions, sorted; at least ``target_dimension + 1`` of them."""
    count = max(int(n * ratio), target_dimension + 1, 3)
    count = min(count, n)
    return np.sort(rng.choice(n, size=count, replace=False))


def classical_mds(distances: np.ndarray, target_dimension: int, eigen_method: EigenMethod,
                  shift: float, rng: np.random.Generator) -> np.ndarray:
    """Classical scaling of a full distance matrix, returns (target_dimension, n)."""
    n = distances.shape[0]
    centering = np.eye(n) - np.full((n, n), 1.0 / n)
    gram = -0.5 * centering @ (distances ** 2) @ centering
    values, vectors = eigendecomposition(eigen_method, gram, target_dimension, largest=True,
                                         shift=shift, rng=rng)
    coordinates = vectors * np.sqrt(np.clip(values, 0.0, None))
    return coordinates.T.copy()


def landmark_mds(landmark_distances: np.ndarray, sample_distances: np.ndarray,
                 target_dimension: int, eigen_method: EigenMethod, shift: float,
                 rng: np.random.Generator) -> np.ndarray:
    """
    Landmark MDS triangulation.

    Args:
        landmark_distances: (m, m) distances between landmarks
        sample_distances: (m, n) distances from each landmark to every sample
        target_dimension: Output dimensionality
        eigen_method: Solver for the landmark problem
        shift: Solver shift
        rng: Random source for the randomized solver

    Returns:
        Coordinates of shape (target_dimension, n)
    """
    m = landmark_distances.shape[0]
    squared = landmark_distances ** 2
    centering = np.eye(m) - np.full((m, m), 1.0 / m)
    gram = -0.5 * centering @ squared @ centering
    values, vectors = eigendecomposition(eigen_method, gram, target_dimension, largest=True,
                                         shift=shift, rng=rng)

    positive = values > 0
    pseudo_inverse = np.zeros_like(vectors)
    pseudo_inverse[:, positive] = vectors[:, positive] / np.sqrt(values[positive])

    mean_squared = squared.mean(axis=1)
    return -0.5 * pseudo_inverse.T @ (sample_distances ** 2 - mean_squared[:, np.newaxis])


def _neighbor_distance_graph(ctx: EmbeddingContext):
    params = ctx.parameters
    with ctx.log.timed("Neighbors computation"):
        neighbors = find_neighbors(params.neighbors_method, ctx.indices, ctx.distance,
                                   params.num_neighbors, params.check_connectivity, ctx)
    n, k = neighbors.shape
    weights = np.empty((n, k))
    for a in range(n):
        for j, b in enumerate(neighbors[a]):
            weights[a, j] = max(ctx.distance(ctx.indices[a], ctx.indices[b]), MIN_EDGE_WEIGHT)
    return neighbors_graph(neighbors, weights)


def _check_finite(geodesics: np.ndarray):
    if not np.all(np.isfinite(geodesics)):
        raise ValueError("Neighborhood graph is disconnected, geodesic distances are infinite; "
                         "consider increasing the number of neighbors")


def multidimensional_scaling(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    distances = ctx.distance_matrix()
    with ctx.log.timed("Embedding computation"):
        coordinates = classical_mds(distances, params.target_dimension, params.eigen_method,
                                    params.nullspace_shift, ctx.rng)
    return coordinates, EmptyProjection()


def landmark_multidimensional_scaling(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    landmarks = select_landmarks(ctx.n_samples, params.landmark_ratio,
                                 params.target_dimension, ctx.rng)
    logger.info(f"Using {len(landmarks)} landmarks")

    with ctx.log.timed("Landmark distances computation"):
        sample_distances = np.empty((len(landmarks), ctx.n_samples))
        for row, landmark in enumerate(landmarks):
            ctx.check_cancelled()
            for b in range(ctx.n_samples):
                sample_distances[row, b] = ctx.distance(ctx.indices[landmark], ctx.indices[b])
    with ctx.log.timed("Embedding computation"):
        coordinates = landmark_mds(sample_distances[:, landmarks], sample_distances,
                                   params.target_dimension, params.eigen_method,
                                   params.nullspace_shift, ctx.rng)
    return coordinates, EmptyProjection()


def isomap(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    graph = _neighbor_distance_graph(ctx)
    with ctx.log.timed("Geodesic distances computation"):
        geodesics = shortest_path(graph, method='D', directed=False)
    _check_finite(geodesics)
    with ctx.log.timed("Embedding computation"):
        coordinates = classical_mds(geodesics, params.target_dimension, params.eigen_method,
                                    params.nullspace_shift, ctx.rng)
    return coordinates, EmptyProjection()


def landmark_isomap(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    graph = _neighbor_distance_graph(ctx)
    landmarks = select_landmarks(ctx.n_samples, params.landmark_ratio,
                                 params.target_dimension, ctx.rng)
    logger.info(f"Using {len(landmarks)} landmarks")

    with ctx.log.timed("Geodesic distances computation"):
        geodesics = shortest_path(graph, method='D', directed=False, indices=landmarks)
    _check_finite(geodesics)
    with ctx.log.timed("Embedding computation"):
        coordinates = landmark_mds(geodesics[:, landmarks], geodesics, params.target_dimension,
                                   params.eigen_method, params.nullspace_shift, ctx.rng)
    return coordinates, EmptyProjection()
