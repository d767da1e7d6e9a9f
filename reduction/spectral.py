"""
Graph and kernel spectral methods: Laplacian eigenmaps, locality preserving
projections, diffusion map and kernel PCA.
"""

import logging

import numpy as np
from sklearn.decomposition import KernelPCA

from .context import EmbeddingContext
from .eigen import eigendecomposition, generalized_eigendecomposition, sklearn_eigen_solver
from .neighbors import find_neighbors
from .projection import EmbeddingResult, EmptyProjection, LinearProjection

logger = logging.getLogger('reduction.spectral')


def _check_width(width: float):
    if width <= 0:
        raise ValueError(f"Gaussian kernel width should be positive, got {width}")


def heat_kernel_graph(ctx: EmbeddingContext) -> np.ndarray:
    """Symmetric neighborhood graph weighted by ``exp(-d^2 / width)``."""
    params = ctx.parameters
    _check_width(params.gaussian_kernel_width)
    with ctx.log.timed("Neighbors computation"):
        neighbors = find_neighbors(params.neighbors_method, ctx.indices, ctx.distance,
                                   params.num_neighbors, params.check_connectivity, ctx)

    n = ctx.n_samples
    weights = np.zeros((n, n))
    for a in range(n):
        for b in neighbors[a]:
            d = ctx.distance(ctx.indices[a], ctx.indices[b])
            weights[a, b] = np.exp(-d * d / params.gaussian_kernel_width)
    return np.maximum(weights, weights.T)


def laplacian_eigenmaps(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    with ctx.log.timed("Laplacian computation"):
        weights = heat_kernel_graph(ctx)
        degree = np.diag(weights.sum(axis=1))
        laplacian = degree - weights
    with ctx.log.timed("Embedding computation"):
        _, vectors = generalized_eigendecomposition(params.eigen_method, laplacian, degree,
                                                    params.target_dimension, largest=False,
                                                    skip=1, shift=params.nullspace_shift,
                                                    rng=ctx.rng)
    return vectors.T.copy(), EmptyProjection()


def locality_preserving_projections(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    with ctx.log.timed("Laplacian computation"):
        weights = heat_kernel_graph(ctx)
        degree = np.diag(weights.sum(axis=1))
        laplacian = degree - weights

    features = ctx.feature_matrix()
    dimension = features.shape[0]
    if params.target_dimension > dimension:
        raise ValueError(f"Target dimension ({params.target_dimension}) should not exceed "
                         f"feature dimension ({dimension}) for linear methods")
    mean = features.mean(axis=1)
    centered = features - mean[:, np.newaxis]
    lhs = centered @ laplacian @ centered.T
    rhs = centered @ degree @ centered.T + params.nullspace_shift * np.eye(dimension)
    with ctx.log.timed("Embedding computation"):
        _, projection = generalized_eigendecomposition(params.eigen_method, lhs, rhs,
                                                       params.target_dimension, largest=False,
                                                       shift=params.nullspace_shift, rng=ctx.rng)
    return projection.T @ centered, LinearProjection(projection, mean)


def diffusion_map(ctx: EmbeddingContext) -> EmbeddingResult:
    """
    Diffusion map with ``diffusion_map_timesteps`` steps.

    The heat kernel over all pairs is normalized twice (density, then the
    symmetric Markov normalization); the leading eigenvector is constant
    after rescaling and is dropped.
    """
    params = ctx.parameters
    _check_width(params.gaussian_kernel_width)
    with ctx.log.timed("Diffusion kernel computation"):
        distances = ctx.distance_matrix()
        kernel = np.exp(-distances ** 2 / params.gaussian_kernel_width)
        density = kernel.sum(axis=0)
        kernel /= np.outer(density, density)
        scale = np.sqrt(kernel.sum(axis=0))
        kernel /= np.outer(scale, scale)

    with ctx.log.timed("Embedding computation"):
        values, vectors = eigendecomposition(params.eigen_method, kernel,
                                             params.target_dimension + 1, largest=True,
                                             shift=params.nullspace_shift, rng=ctx.rng)
    coordinates = vectors[:, 1:] / vectors[:, [0]]
    coordinates *= values[1:] ** params.diffusion_map_timesteps
    return coordinates.T.copy(), EmptyProjection()


def kernel_pca(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    with ctx.log.timed("Kernel matrix computation"):
        kernel = ctx.kernel_matrix()

    solver = sklearn_eigen_solver(params.eigen_method, params.target_dimension,
                                  kernel.shape[0], dense_name='dense')
    model = KernelPCA(n_components=params.target_dimension, kernel='precomputed',
                      eigen_solver=solver, random_state=int(ctx.rng.integers(2**31 - 1)))
    with ctx.log.timed("Embedding computation"):
        coordinates = model.fit_transform(kernel)
    return coordinates.T.copy(), EmptyProjection()
