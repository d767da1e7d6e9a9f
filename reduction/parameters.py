"""Parameter container consumed by the reduction methods."""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict

from .methods import (
    DimensionReductionMethod,
    EigenMethod,
    NeighborsMethod,
    default_eigen_method,
    default_neighbors_method,
)


@dataclass
class ParameterBag:
    """
    Fully-defaulted set of values for one embedding run.

    Every field carries a default so a bag built from partial input is still
    complete. Range validation of user input happens before the bag is built;
    the bag itself stores whatever it is given.

    Attributes:
        method: Reduction method to run
        eigen_method: Eigendecomposition back end for spectral methods
        neighbors_method: Nearest-neighbor search strategy
        num_neighbors: Neighborhood size for local methods
        target_dimension: Number of output coordinates per sample
        diffusion_map_timesteps: Diffusion steps for the diffusion map
        gaussian_kernel_width: Width of the heat kernel
        max_iteration: Iteration cap for iterative methods
        spe_global_strategy: Global (True) or local (False) SPE updates
        spe_num_updates: Pair updates per SPE cycle
        spe_tolerance: Denominator guard for SPE updates
        landmark_ratio: Fraction of samples used as landmarks
        nullspace_shift: Diagonal shift used by the eigensolvers
        check_connectivity: Warn when the neighbor graph is disconnected
        fa_epsilon: Convergence tolerance for factor analysis
        sne_perplexity: t-SNE perplexity
        sne_theta: t-SNE Barnes-Hut angle
    """
    method: DimensionReductionMethod = DimensionReductionMethod.LOCALLY_LINEAR_EMBEDDING
    eigen_method: EigenMethod = field(default_factory=default_eigen_method)
    neighbors_method: NeighborsMethod = field(default_factory=default_neighbors_method)
    num_neighbors: int = 10
    target_dimension: int = 2
    diffusion_map_timesteps: int = 1
    gaussian_kernel_width: float = 1.0
    max_iteration: int = 1000
    spe_global_strategy: bool = True
    spe_num_updates: int = 100
    spe_tolerance: float = 1e-5
    landmark_ratio: float = 0.2
    nullspace_shift: float = 1e-9
    check_connectivity: bool = True
    fa_epsilon: float = 1e-5
    sne_perplexity: float = 30.0
    sne_theta: float = 0.5

    def __getitem__(self, name: str) -> Any:
        if name not in self.__dataclass_fields__:
            raise KeyError(name)
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
