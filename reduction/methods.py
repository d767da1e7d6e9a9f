"""
Method identifiers for the reduction collection.

Each enumeration maps a canonical CLI name (and its documented abbreviation)
onto a member. Lookup is case-sensitive and exact; anything else raises
``ValueError`` so callers can classify the failure.
"""

from enum import Enum
from typing import Dict, List


class DimensionReductionMethod(Enum):
    """Closed set of supported reduction methods."""

    LOCALLY_LINEAR_EMBEDDING = "locally_linear_embedding"
    NEIGHBORHOOD_PRESERVING_EMBEDDING = "neighborhood_preserving_embedding"
    LOCAL_TANGENT_SPACE_ALIGNMENT = "local_tangent_space_alignment"
    LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT = "linear_local_tangent_space_alignment"
    HESSIAN_LOCALLY_LINEAR_EMBEDDING = "hessian_locally_linear_embedding"
    LAPLACIAN_EIGENMAPS = "laplacian_eigenmaps"
    LOCALITY_PRESERVING_PROJECTIONS = "locality_preserving_projections"
    DIFFUSION_MAP = "diffusion_map"
    ISOMAP = "isomap"
    LANDMARK_ISOMAP = "landmark_isomap"
    MULTIDIMENSIONAL_SCALING = "multidimensional_scaling"
    LANDMARK_MULTIDIMENSIONAL_SCALING = "landmark_multidimensional_scaling"
    STOCHASTIC_PROXIMITY_EMBEDDING = "stochastic_proximity_embedding"
    KERNEL_PCA = "kernel_pca"
    PCA = "pca"
    RANDOM_PROJECTION = "random_projection"
    FACTOR_ANALYSIS = "factor_analysis"
    T_SNE = "t-stochastic_neighborhood_embedding"


class NeighborsMethod(Enum):
    """Nearest-neighbor search strategies."""

    BRUTE = "brute"
    COVER_TREE = "covertree"


class EigenMethod(Enum):
    """Eigendecomposition back ends."""

    ARPACK = "arpack"
    RANDOMIZED = "randomized"
    DENSE = "dense"


M = DimensionReductionMethod

METHOD_ALIASES: Dict[str, DimensionReductionMethod] = {
    "lle": M.LOCALLY_LINEAR_EMBEDDING,
    "npe": M.NEIGHBORHOOD_PRESERVING_EMBEDDING,
    "ltsa": M.LOCAL_TANGENT_SPACE_ALIGNMENT,
    "lltsa": M.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
    "hlle": M.HESSIAN_LOCALLY_LINEAR_EMBEDDING,
    "la": M.LAPLACIAN_EIGENMAPS,
    "lpp": M.LOCALITY_PRESERVING_PROJECTIONS,
    "dm": M.DIFFUSION_MAP,
    "l-isomap": M.LANDMARK_ISOMAP,
    "mds": M.MULTIDIMENSIONAL_SCALING,
    "l-mds": M.LANDMARK_MULTIDIMENSIONAL_SCALING,
    "spe": M.STOCHASTIC_PROXIMITY_EMBEDDING,
    "kpca": M.KERNEL_PCA,
    "ra": M.RANDOM_PROJECTION,
    "fa": M.FACTOR_ANALYSIS,
    "t-sne": M.T_SNE,
}

# Methods that read pairwise values through the kernel callback
_KERNEL_METHODS = frozenset([
    M.LOCALLY_LINEAR_EMBEDDING,
    M.NEIGHBORHOOD_PRESERVING_EMBEDDING,
    M.LOCAL_TANGENT_SPACE_ALIGNMENT,
    M.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
    M.HESSIAN_LOCALLY_LINEAR_EMBEDDING,
    M.KERNEL_PCA,
])

# Methods that read pairwise values through the distance callback
_DISTANCE_METHODS = frozenset([
    M.LAPLACIAN_EIGENMAPS,
    M.LOCALITY_PRESERVING_PROJECTIONS,
    M.DIFFUSION_MAP,
    M.ISOMAP,
    M.LANDMARK_ISOMAP,
    M.MULTIDIMENSIONAL_SCALING,
    M.LANDMARK_MULTIDIMENSIONAL_SCALING,
    M.STOCHASTIC_PROXIMITY_EMBEDDING,
])

# Methods whose result carries a matrix projection
_LINEAR_METHODS = frozenset([
    M.NEIGHBORHOOD_PRESERVING_EMBEDDING,
    M.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
    M.LOCALITY_PRESERVING_PROJECTIONS,
    M.PCA,
    M.RANDOM_PROJECTION,
])


def _tree_neighbors_available() -> bool:
    try:
        from sklearn.neighbors import BallTree  # noqa: F401
    except ImportError:
        return False
    return True


def _arpack_available() -> bool:
    try:
        from scipy.sparse.linalg import eigsh  # noqa: F401
    except ImportError:
        return False
    return True


COVER_TREE_AVAILABLE = _tree_neighbors_available()
ARPACK_AVAILABLE = _arpack_available()


def parse_reduction_method(name: str) -> DimensionReductionMethod:
    """Resolve a canonical method name or its abbreviation."""
    if name in METHOD_ALIASES:
        return METHOD_ALIASES[name]
    try:
        return DimensionReductionMethod(name)
    except ValueError:
        raise ValueError(f"Unknown method {name}") from None


def parse_neighbors_method(name: str) -> NeighborsMethod:
    """Resolve a neighbors method name; the tree search only when available."""
    if name == NeighborsMethod.BRUTE.value:
        return NeighborsMethod.BRUTE
    if name == NeighborsMethod.COVER_TREE.value and COVER_TREE_AVAILABLE:
        return NeighborsMethod.COVER_TREE
    raise ValueError(f"Unknown neighbors method {name}")


def parse_eigen_method(name: str) -> EigenMethod:
    """Resolve an eigendecomposition method name; ARPACK only when available."""
    if name == EigenMethod.ARPACK.value and ARPACK_AVAILABLE:
        return EigenMethod.ARPACK
    if name == EigenMethod.RANDOMIZED.value:
        return EigenMethod.RANDOMIZED
    if name == EigenMethod.DENSE.value:
        return EigenMethod.DENSE
    raise ValueError(f"Unknown eigendecomposition method {name}")


def default_neighbors_method() -> NeighborsMethod:
    return NeighborsMethod.COVER_TREE if COVER_TREE_AVAILABLE else NeighborsMethod.BRUTE


def default_eigen_method() -> EigenMethod:
    return EigenMethod.ARPACK if ARPACK_AVAILABLE else EigenMethod.DENSE


def method_needs_kernel(method: DimensionReductionMethod) -> bool:
    return method in _KERNEL_METHODS


def method_needs_distance(method: DimensionReductionMethod) -> bool:
    return method in _DISTANCE_METHODS


def method_is_linear(method: DimensionReductionMethod) -> bool:
    return method in _LINEAR_METHODS


def get_available_methods() -> Dict[str, List[str]]:
    """List the accepted names for every selector, aliases included."""
    methods = []
    for member in DimensionReductionMethod:
        aliases = [alias for alias, target in METHOD_ALIASES.items() if target is member]
        methods.append(f"{member.value} ({aliases[0]})" if aliases else member.value)

    neighbors = [NeighborsMethod.BRUTE.value]
    if COVER_TREE_AVAILABLE:
        neighbors.append(NeighborsMethod.COVER_TREE.value)

    eigen = [EigenMethod.RANDOMIZED.value, EigenMethod.DENSE.value]
    if ARPACK_AVAILABLE:
        eigen.insert(0, EigenMethod.ARPACK.value)

    return {
        'method': methods,
        'neighbors_method': neighbors,
        'eigen_method': eigen,
    }
