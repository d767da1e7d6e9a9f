"""
Configuration resolution for the embedding CLI.

Turns the parsed argparse namespace into a validated :class:`ParameterBag`
plus the run-level :class:`PipelineConfig`. Every failure is raised as a
subclass of :class:`ConfigurationError` so the pipeline can tell handled
configuration problems apart from algorithm failures.
"""

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from reduction import (
    ParameterBag,
    parse_eigen_method,
    parse_neighbors_method,
    parse_reduction_method,
)


class ConfigurationError(ValueError):
    """Base class for user configuration problems."""


class UnknownMethodError(ConfigurationError):
    pass


class UnknownNeighborsMethodError(ConfigurationError):
    pass


class UnknownEigenMethodError(ConfigurationError):
    pass


class OutOfRangeParameterError(ConfigurationError):
    pass


class MissingInputFileError(ConfigurationError):
    pass


# Smallest neighborhood accepted for neighbor-based methods
MIN_NUM_NEIGHBORS = 3

CALLBACK_STRATEGIES = ("lazy", "precomputed")


@dataclass
class PipelineConfig:
    """
    Run-level settings that are not algorithm parameters.

    Attributes:
        input_file: Dataset to embed (None when the flag was omitted)
        output_file: Destination for coordinates; None means standard output
        projection_matrix_file: Destination for the projection matrix
        projection_mean_file: Destination for the projection mean
        transpose: Transpose the loaded matrix before embedding
        callback_strategy: 'lazy' or 'precomputed'
        seed: Seed for the run's random source; None draws fresh entropy
    """
    input_file: Optional[Path] = None
    output_file: Optional[Path] = None
    projection_matrix_file: Optional[Path] = None
    projection_mean_file: Optional[Path] = None
    transpose: bool = False
    callback_strategy: str = "lazy"
    seed: Optional[int] = None

    def __post_init__(self):
        for name in ('input_file', 'output_file', 'projection_matrix_file', 'projection_mean_file'):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, Path(value))

    @property
    def output_projection(self) -> bool:
        """Projection output is enabled only when both destinations are given."""
        return self.projection_matrix_file is not None and self.projection_mean_file is not None


class ConfigurationResolver:
    """Validates CLI values and builds the run configuration."""

    def __init__(self):
        self.logger = logging.getLogger('embedding.config')

    def resolve_parameters(self, args: argparse.Namespace) -> ParameterBag:
        """Build a :class:`ParameterBag` from parsed arguments, validating ranges."""
        try:
            method = parse_reduction_method(args.method)
        except ValueError:
            raise UnknownMethodError(f"Unknown method {args.method}") from None

        try:
            neighbors_method = parse_neighbors_method(args.neighbors_method)
        except ValueError:
            raise UnknownNeighborsMethodError(f"Unknown neighbors method {args.neighbors_method}") from None

        try:
            eigen_method = parse_eigen_method(args.eigen_method)
        except ValueError:
            raise UnknownEigenMethodError(f"Unknown eigendecomposition method {args.eigen_method}") from None

        if args.target_dimension < 0:
            raise OutOfRangeParameterError(
                "Negative target dimensionality is not possible in current circumstances. "
                "Please visit other universe")

        if args.num_neighbors < MIN_NUM_NEIGHBORS:
            # The enforced bound is MIN_NUM_NEIGHBORS; the message recommends more
            raise OutOfRangeParameterError(
                "The provided number of neighbors is too small, consider at least 10.")

        if args.gaussian_width < 0.0:
            raise OutOfRangeParameterError("Width of the gaussian kernel is negative.")

        if args.timesteps < 0:
            raise OutOfRangeParameterError("Number of timesteps is negative.")

        parameters = ParameterBag(
            method=method,
            eigen_method=eigen_method,
            neighbors_method=neighbors_method,
            num_neighbors=args.num_neighbors,
            target_dimension=args.target_dimension,
            diffusion_map_timesteps=args.timesteps,
            gaussian_kernel_width=args.gaussian_width,
            max_iteration=args.max_iters,
            spe_global_strategy=not args.spe_local,
            spe_num_updates=args.spe_num_updates,
            spe_tolerance=args.spe_tolerance,
            landmark_ratio=args.landmark_ratio,
            nullspace_shift=args.eigenshift,
            check_connectivity=True,
            fa_epsilon=args.fa_epsilon,
            sne_perplexity=args.sne_perplexity,
            sne_theta=args.sne_theta,
        )
        self.logger.debug(f"Resolved parameters: {parameters.to_dict()}")
        return parameters

    def resolve_pipeline(self, args: argparse.Namespace) -> PipelineConfig:
        """Resolve file destinations; a missing input is an error, a missing output is not."""
        if args.input_file is None:
            raise MissingInputFileError("No input file specified. Please use -h flag if stuck")
        if args.output_file is None:
            self.logger.warning("No output file specified, using standard output")

        if args.callback_strategy not in CALLBACK_STRATEGIES:
            raise ConfigurationError(f"Unknown callback strategy {args.callback_strategy}")

        return PipelineConfig(
            input_file=args.input_file,
            output_file=args.output_file,
            projection_matrix_file=args.output_projection_matrix_file,
            projection_mean_file=args.output_projection_mean_file,
            transpose=args.transpose,
            callback_strategy=args.callback_strategy,
            seed=args.seed,
        )
