"""
Callback strategies supplying pairwise values to the reduction methods.

A :class:`CallbackSet` always exposes the same three callables. The lazy
strategy computes every value from the data matrix when asked; the
precomputed strategy materializes the full distance and/or kernel matrices
up front, limited to the ones the selected method actually reads.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from reduction import (
    DimensionReductionMethod,
    LoggingConfig,
    matrix_from_callback,
    method_needs_distance,
    method_needs_kernel,
)


class KernelCallback:
    """Linear kernel between two columns of the data matrix."""

    def __init__(self, data: np.ndarray):
        self.data = data

    def __call__(self, i: int, j: int) -> float:
        return float(np.dot(self.data[:, i], self.data[:, j]))


class DistanceCallback:
    """Euclidean distance between two columns of the data matrix."""

    def __init__(self, data: np.ndarray):
        self.data = data

    def __call__(self, i: int, j: int) -> float:
        return float(np.linalg.norm(self.data[:, i] - self.data[:, j]))


class FeatureVectorCallback:
    """Read-only view of one column of the data matrix."""

    def __init__(self, data: np.ndarray):
        self.data = data

    def __call__(self, i: int) -> np.ndarray:
        column = self.data[:, i]
        column.flags.writeable = False
        return column


class PrecomputedCallback:
    """Lookup into a materialized pairwise matrix."""

    def __init__(self, matrix: Optional[np.ndarray], name: str):
        self.matrix = matrix
        self.name = name

    def __call__(self, i: int, j: int) -> float:
        if self.matrix is None:
            raise RuntimeError(f"The {self.name} matrix was not precomputed for this method")
        return float(self.matrix[i, j])


@dataclass(frozen=True)
class CallbackSet:
    kernel: Callable[[int, int], float]
    distance: Callable[[int, int], float]
    vector: Callable[[int], np.ndarray]


class CallbackStrategy(ABC):
    """Builds the callbacks handed to the embedding invoker."""

    def __init__(self, log: Optional[LoggingConfig] = None):
        self.log = log if log is not None else LoggingConfig()
        self.logger = logging.getLogger('embedding.callbacks')

    @abstractmethod
    def build(self, method: DimensionReductionMethod, data: np.ndarray) -> CallbackSet:
        """Create callbacks over ``data`` suitable for ``method``."""
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        pass


class LazyCallbackStrategy(CallbackStrategy):
    """Computes every pairwise value on demand."""

    def build(self, method: DimensionReductionMethod, data: np.ndarray) -> CallbackSet:
        return CallbackSet(
            kernel=KernelCallback(data),
            distance=DistanceCallback(data),
            vector=FeatureVectorCallback(data),
        )

    def get_strategy_name(self) -> str:
        return "lazy"


class PrecomputedCallbackStrategy(CallbackStrategy):
    """
    Materializes the pairwise matrices the method needs before embedding.

    The materialized matrices are kept on the strategy as ``distance_matrix``
    and ``kernel_matrix``; a matrix the method does not need stays ``None``.
    """

    def __init__(self, log: Optional[LoggingConfig] = None):
        super().__init__(log)
        self.distance_matrix: Optional[np.ndarray] = None
        self.kernel_matrix: Optional[np.ndarray] = None

    def build(self, method: DimensionReductionMethod, data: np.ndarray) -> CallbackSet:
        indices = range(data.shape[1])
        self.distance_matrix = None
        self.kernel_matrix = None

        if method_needs_distance(method):
            self.logger.info("Precomputing distance matrix")
            with self.log.timed("Distance matrix computation", root='embedding'):
                self.distance_matrix = matrix_from_callback(indices, DistanceCallback(data))
        if method_needs_kernel(method):
            self.logger.info("Precomputing kernel matrix")
            with self.log.timed("Kernel matrix computation", root='embedding'):
                self.kernel_matrix = matrix_from_callback(indices, KernelCallback(data))

        return CallbackSet(
            kernel=PrecomputedCallback(self.kernel_matrix, "kernel"),
            distance=PrecomputedCallback(self.distance_matrix, "distance"),
            vector=FeatureVectorCallback(data),
        )

    def get_strategy_name(self) -> str:
        return "precomputed"


STRATEGIES: Dict[str, type] = {
    "lazy": LazyCallbackStrategy,
    "precomputed": PrecomputedCallbackStrategy,
}


def create_callback_strategy(name: str, log: Optional[LoggingConfig] = None) -> CallbackStrategy:
    if name not in STRATEGIES:
        raise ValueError(f"Unknown callback strategy: {name}. Available: {list(STRATEGIES.keys())}")
    return STRATEGIES[name](log)
