"""Entry point of the reduction collection."""

import logging
from typing import Callable, Dict, Optional, Sequence

import numpy as np

from . import distance, linear, local, spectral, stochastic
from .context import (
    DistanceCallback,
    EmbeddingContext,
    FeatureVectorCallback,
    KernelCallback,
    never_cancel,
)
from .logging_utils import LoggingConfig
from .methods import DimensionReductionMethod, method_is_linear
from .parameters import ParameterBag
from .projection import EmbeddingResult, EmptyProjection, LinearProjection

logger = logging.getLogger('reduction.dispatch')

M = DimensionReductionMethod

IMPLEMENTATIONS: Dict[DimensionReductionMethod, Callable[[EmbeddingContext], EmbeddingResult]] = {
    M.LOCALLY_LINEAR_EMBEDDING: local.locally_linear_embedding,
    M.NEIGHBORHOOD_PRESERVING_EMBEDDING: local.neighborhood_preserving_embedding,
    M.LOCAL_TANGENT_SPACE_ALIGNMENT: local.local_tangent_space_alignment,
    M.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT: local.linear_local_tangent_space_alignment,
    M.HESSIAN_LOCALLY_LINEAR_EMBEDDING: local.hessian_locally_linear_embedding,
    M.LAPLACIAN_EIGENMAPS: spectral.laplacian_eigenmaps,
    M.LOCALITY_PRESERVING_PROJECTIONS: spectral.locality_preserving_projections,
    M.DIFFUSION_MAP: spectral.diffusion_map,
    M.ISOMAP: distance.isomap,
    M.LANDMARK_ISOMAP: distance.landmark_isomap,
    M.MULTIDIMENSIONAL_SCALING: distance.multidimensional_scaling,
    M.LANDMARK_MULTIDIMENSIONAL_SCALING: distance.landmark_multidimensional_scaling,
    M.STOCHASTIC_PROXIMITY_EMBEDDING: stochastic.stochastic_proximity_embedding,
    M.KERNEL_PCA: spectral.kernel_pca,
    M.PCA: linear.principal_component_analysis,
    M.RANDOM_PROJECTION: linear.random_projection,
    M.FACTOR_ANALYSIS: linear.factor_analysis,
    M.T_SNE: stochastic.t_distributed_stochastic_neighbor_embedding,
}


def embed(indices: Sequence[int], kernel: KernelCallback, distance: DistanceCallback,
          vector: FeatureVectorCallback, parameters: ParameterBag,
          rng: Optional[np.random.Generator] = None,
          cancel: Callable[[], bool] = never_cancel,
          log: Optional[LoggingConfig] = None) -> EmbeddingResult:
    """
    Embed the samples named by ``indices`` into ``parameters.target_dimension`` dimensions.

    Args:
        indices: Sample indices understood by the callbacks
        kernel: Pairwise kernel callback
        distance: Pairwise distance callback
        vector: Feature vector callback
        parameters: Method selection and method parameters
        rng: Random source for stochastic methods and landmark selection
        cancel: Predicate polled during long computations
        log: Logging handle; a quiet one is created when omitted

    Returns:
        Tuple of (coordinates of shape (target_dimension, n), projection artifact).
        The artifact is a ``LinearProjection`` exactly for linear methods.
    """
    context = EmbeddingContext(
        indices=list(indices),
        kernel=kernel,
        distance=distance,
        vector=vector,
        parameters=parameters,
        rng=rng if rng is not None else np.random.default_rng(),
        cancel=cancel,
        log=log if log is not None else LoggingConfig(),
    )
    method = parameters.method
    if method not in IMPLEMENTATIONS:
        raise ValueError(f"Unsupported method: {method}")
    if context.n_samples == 0:
        raise ValueError("Nothing to embed: no samples given")

    logger.info(f"Using the {method.value.replace('_', ' ')} method")
    if parameters.target_dimension == 0:
        logger.warning("Target dimension is 0, the embedding is empty")
        return _empty_result(context)

    with context.log.timed(f"Embedding with {method.value}"):
        return IMPLEMENTATIONS[method](context)


def _empty_result(context: EmbeddingContext) -> EmbeddingResult:
    coordinates = np.zeros((0, context.n_samples))
    if not method_is_linear(context.parameters.method):
        return coordinates, EmptyProjection()
    features = context.feature_matrix()
    return coordinates, LinearProjection(np.zeros((features.shape[0], 0)), features.mean(axis=1))
