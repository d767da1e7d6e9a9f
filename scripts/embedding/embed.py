#!/usr/bin/env python3
"""
Dense Matrix Embedding Command-Line Tool

Reduces the dimensionality of a dense numeric matrix stored as text and
writes the embedded coordinates (and, for linear methods, the projection
matrix and mean) back as text.

Usage Examples:

    # Locally linear embedding with 10 neighbors, one sample per input line
    python -m scripts.embedding.embed -i input.dat -o output.dat \
        --transpose --method lle -k 10

    # PCA with the projection saved next to the embedding
    python -m scripts.embedding.embed -i input.dat -o output.dat --transpose \
        --method pca --target-dimension 3 \
        --output-projection-matrix-file proj.dat \
        --output-projection-mean-file mean.dat

    # Isomap over precomputed distances, with stage timings
    python -m scripts.embedding.embed -i input.dat -o output.dat --transpose \
        --method isomap --callback-strategy precomputed --benchmark

Exit status is 0 for every handled outcome, including configuration errors,
which are reported through the log instead.
"""

import argparse
import datetime
import logging
import sys
from pathlib import Path
from typing import IO, Callable, List, Optional

import numpy as np

from reduction import LoggingConfig, get_available_methods, never_cancel
from reduction.methods import default_eigen_method, default_neighbors_method

from .callbacks import create_callback_strategy
from .config import (
    CALLBACK_STRATEGIES,
    ConfigurationError,
    ConfigurationResolver,
)
from .data_io import DataLoader
from .invoker import EmbeddingInvoker
from .writer import ResultWriter


class EmbeddingPipeline:
    """Main embedding pipeline orchestrator."""

    def __init__(self, args: argparse.Namespace, log: LoggingConfig,
                 stdout: Optional[IO[str]] = None,
                 cancel: Callable[[], bool] = never_cancel):
        self.args = args
        self.log = log
        self.stdout = stdout
        self.cancel = cancel
        self.resolver = ConfigurationResolver()
        self.logger = logging.getLogger('embedding.pipeline')

    def run(self) -> bool:
        """
        Execute the complete embedding pipeline.

        Returns:
            True when an embedding was written, False when the run stopped on
            a configuration problem. Algorithm failures propagate.
        """
        start_time = datetime.datetime.now()
        try:
            parameters = self.resolver.resolve_parameters(self.args)
            config = self.resolver.resolve_pipeline(self.args)
            data = DataLoader(config.input_file, transpose=config.transpose).load()
        except ConfigurationError as e:
            self.logger.error(str(e))
            return False

        rng = np.random.default_rng(config.seed)
        strategy = create_callback_strategy(config.callback_strategy, self.log)
        self.logger.info(f"Using {strategy.get_strategy_name()} callbacks")
        with self.log.timed("Callbacks preparation", root='embedding'):
            callbacks = strategy.build(parameters.method, data)

        invoker = EmbeddingInvoker(self.log, rng=rng, cancel=self.cancel)
        with self.log.timed("Embedding", root='embedding'):
            result = invoker.invoke(data.shape[1], callbacks, parameters)

        writer = ResultWriter(config.output_file, config.projection_matrix_file,
                              config.projection_mean_file, stdout=self.stdout)
        writer.write(result)
        result[1].clear()

        self.logger.info(f"Total duration: {datetime.datetime.now() - start_time}")
        return True


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure command-line argument parser."""
    available = get_available_methods()
    parser = argparse.ArgumentParser(
        prog="dense-embed",
        description="Reduce dimensionality of dense matrices",
        epilog="Example: dense-embed -i input.dat -o output.dat --method lle "
               "--eigen-method arpack -k 10",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Files
    parser.add_argument("-i", "--input-file", type=Path, default=None,
                        help="Input file")
    parser.add_argument("--transpose", action="store_true",
                        help="Transpose input file if set")
    parser.add_argument("-o", "--output-file", type=Path, default=None,
                        help="Output file (standard output when omitted)")
    parser.add_argument("-opmat", "--output-projection-matrix-file", type=Path, default=None,
                        help="Output file for projection matrix")
    parser.add_argument("-opmean", "--output-projection-mean-file", type=Path, default=None,
                        help="Output file for mean of data")

    # Logging
    parser.add_argument("--benchmark", action="store_true",
                        help="Output benchmark information")
    parser.add_argument("--verbose", action="store_true",
                        help="Output more information")
    parser.add_argument("--debug", action="store_true",
                        help="Output debug information")

    # Methods
    parser.add_argument("-m", "--method", type=str, default="locally_linear_embedding",
                        help="Dimension reduction method. One of the following: "
                             + ", ".join(available['method']))
    parser.add_argument("-nm", "--neighbors-method", type=str,
                        default=default_neighbors_method().value,
                        help="Neighbors search method. One of the following: "
                             + ", ".join(available['neighbors_method']))
    parser.add_argument("-em", "--eigen-method", type=str,
                        default=default_eigen_method().value,
                        help="Eigendecomposition method. One of the following: "
                             + ", ".join(available['eigen_method']))
    parser.add_argument("--callback-strategy", type=str, default="lazy",
                        choices=CALLBACK_STRATEGIES,
                        help="Compute pairwise values on demand or precompute them")

    # Method parameters
    parser.add_argument("-td", "--target-dimension", type=int, default=2,
                        help="Target dimension")
    parser.add_argument("-k", "--num-neighbors", type=int, default=10,
                        help="Number of neighbors")
    parser.add_argument("-gw", "--gaussian-width", type=float, default=1.0,
                        help="Width of gaussian kernel")
    parser.add_argument("--timesteps", type=int, default=1,
                        help="Number of timesteps for diffusion map")
    parser.add_argument("--spe-local", action="store_true",
                        help="Local strategy in SPE (global when not set)")
    parser.add_argument("--eigenshift", type=float, default=1e-9,
                        help="Regularization diagonal shift for weight matrix")
    parser.add_argument("--landmark-ratio", type=float, default=0.2,
                        help="Ratio of landmarks. Should be in (0,1) range")
    parser.add_argument("--spe-tolerance", type=float, default=1e-5,
                        help="Tolerance for SPE")
    parser.add_argument("--spe-num-updates", type=int, default=100,
                        help="Number of SPE updates")
    parser.add_argument("--max-iters", type=int, default=1000,
                        help="Maximum number of iterations")
    parser.add_argument("--fa-epsilon", type=float, default=1e-5,
                        help="FA convergence criterion")
    parser.add_argument("--sne-perplexity", type=float, default=30.0,
                        help="Perplexity for the t-SNE algorithm")
    parser.add_argument("--sne-theta", type=float, default=0.5,
                        help="Theta for the t-SNE algorithm")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (fresh entropy when omitted)")

    return parser


def main(argv: Optional[List[str]] = None, stdout: Optional[IO[str]] = None) -> int:
    """Main entry point; always returns 0."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    log = LoggingConfig().configure()
    logger = logging.getLogger('embedding')
    log.enable(info=args.verbose)
    if args.debug:
        log.enable(debug=True)
        logger.info("Debug messages enabled")
    if args.benchmark:
        log.enable(benchmark=True)
        logger.info("Benchmarking enabled")

    try:
        EmbeddingPipeline(args, log, stdout=stdout).run()
    except Exception as e:
        print(f"Some error occurred: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
