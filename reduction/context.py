"""
Run context handed to every reduction method.

Methods never see the raw dataset: they receive the sample indices and the
three callbacks, and build whatever dense structures they need from those.
"""

from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np
from tqdm import tqdm

from .logging_utils import LoggingConfig
from .parameters import ParameterBag

KernelCallback = Callable[[int, int], float]
DistanceCallback = Callable[[int, int], float]
FeatureVectorCallback = Callable[[int], np.ndarray]


class CancelledError(RuntimeError):
    """Raised when the cancellation predicate asks a method to stop."""


def never_cancel() -> bool:
    return False


@dataclass
class EmbeddingContext:
    indices: Sequence[int]
    kernel: KernelCallback
    distance: DistanceCallback
    vector: FeatureVectorCallback
    parameters: ParameterBag
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    cancel: Callable[[], bool] = never_cancel
    log: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def n_samples(self) -> int:
        return len(self.indices)

    def check_cancelled(self):
        if self.cancel():
            raise CancelledError("Embedding was cancelled")

    def feature_matrix(self) -> np.ndarray:
        """Stack feature vectors as columns, shape (dimension, n_samples)."""
        return np.column_stack([np.asarray(self.vector(i), dtype=float) for i in self.indices])

    def distance_matrix(self) -> np.ndarray:
        return matrix_from_callback(self.indices, self.distance, self)

    def kernel_matrix(self) -> np.ndarray:
        return matrix_from_callback(self.indices, self.kernel, self)

    def kernel_distance(self, i: int, j: int) -> float:
        """Distance induced by the kernel, sqrt(k(i,i) + k(j,j) - 2k(i,j))."""
        value = self.kernel(i, i) + self.kernel(j, j) - 2.0 * self.kernel(i, j)
        return float(np.sqrt(max(value, 0.0)))


def matrix_from_callback(indices: Sequence[int], callback: Callable[[int, int], float],
                         context: "EmbeddingContext" = None) -> np.ndarray:
    """
    Evaluate a symmetric pairwise callback over all index pairs.

    Only the upper triangle is evaluated; the lower one is mirrored.

    Args:
        indices: Sample indices, in output order
        callback: Symmetric pairwise function of two indices
        context: Optional run context for cancellation and progress display

    Returns:
        Dense (n, n) matrix with ``result[a, b] == callback(indices[a], indices[b])``
    """
    n = len(indices)
    result = np.empty((n, n), dtype=float)
    show_progress = context is not None and context.log.show_progress
    for a in tqdm(range(n), desc="Pairwise values", disable=not show_progress, leave=False):
        if context is not None:
            context.check_cancelled()
        ia = indices[a]
        for b in range(a, n):
            value = callback(ia, indices[b])
            result[a, b] = value
            result[b, a] = value
    return result
