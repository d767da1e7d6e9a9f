"""Feature-space linear methods: PCA, random projection and factor analysis."""

import logging

import numpy as np
from sklearn.decomposition import PCA, FactorAnalysis
from sklearn.random_projection import GaussianRandomProjection

from .context import EmbeddingContext
from .eigen import sklearn_eigen_solver
from .parameters import ParameterBag
from .projection import EmbeddingResult, EmptyProjection, LinearProjection

logger = logging.getLogger('reduction.linear')


def _check_target_dimension(params: ParameterBag, dimension: int):
    if params.target_dimension > dimension:
        raise ValueError(f"Target dimension ({params.target_dimension}) should not exceed "
                         f"feature dimension ({dimension}) for linear methods")


def _seed(ctx: EmbeddingContext) -> int:
    return int(ctx.rng.integers(2**31 - 1))


def principal_component_analysis(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    features = ctx.feature_matrix()
    _check_target_dimension(params, features.shape[0])

    solver = sklearn_eigen_solver(params.eigen_method, params.target_dimension,
                                  min(features.shape), dense_name='full')
    model = PCA(n_components=params.target_dimension, svd_solver=solver, random_state=_seed(ctx))
    with ctx.log.timed("Embedding computation"):
        coordinates = model.fit_transform(features.T)
    return coordinates.T.copy(), LinearProjection(model.components_.T.copy(), model.mean_.copy())


def random_projection(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    features = ctx.feature_matrix()
    _check_target_dimension(params, features.shape[0])
    mean = features.mean(axis=1)
    centered = features - mean[:, np.newaxis]
    projector = GaussianRandomProjection(n_components=params.target_dimension,
                                         random_state=_seed(ctx))
    projector.fit(centered.T)
    projection = np.asarray(projector.components_).T
    return projection.T @ centered, LinearProjection(projection, mean)


def factor_analysis(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    features = ctx.feature_matrix()
    model = FactorAnalysis(n_components=params.target_dimension, tol=params.fa_epsilon,
                           max_iter=params.max_iteration,
                           random_state=_seed(ctx))
    with ctx.log.timed("Factor analysis"):
        coordinates = model.fit_transform(features.T)
    logger.debug(f"Factor analysis converged after {model.n_iter_} iterations")
    return coordinates.T.copy(), EmptyProjection()
