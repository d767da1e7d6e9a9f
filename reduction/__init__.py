"""
Dimensionality reduction methods driven by pairwise callbacks.

Every method is reached through :func:`embed`, which takes sample indices,
a kernel callback, a distance callback, a feature vector callback and a
:class:`ParameterBag`.
"""

from .context import CancelledError, EmbeddingContext, matrix_from_callback, never_cancel
from .dispatch import embed
from .logging_utils import LoggingConfig
from .methods import (
    DimensionReductionMethod,
    EigenMethod,
    NeighborsMethod,
    get_available_methods,
    method_is_linear,
    method_needs_distance,
    method_needs_kernel,
    parse_eigen_method,
    parse_neighbors_method,
    parse_reduction_method,
)
from .parameters import ParameterBag
from .projection import EmbeddingResult, EmptyProjection, LinearProjection, ProjectionArtifact

needs_distance = method_needs_distance
needs_kernel = method_needs_kernel
is_linear = method_is_linear

__all__ = [
    "embed",
    "needs_distance",
    "needs_kernel",
    "is_linear",
    "matrix_from_callback",
    "never_cancel",
    "CancelledError",
    "EmbeddingContext",
    "LoggingConfig",
    "ParameterBag",
    "DimensionReductionMethod",
    "NeighborsMethod",
    "EigenMethod",
    "parse_reduction_method",
    "parse_neighbors_method",
    "parse_eigen_method",
    "get_available_methods",
    "method_needs_distance",
    "method_needs_kernel",
    "method_is_linear",
    "EmbeddingResult",
    "EmptyProjection",
    "LinearProjection",
    "ProjectionArtifact",
]
