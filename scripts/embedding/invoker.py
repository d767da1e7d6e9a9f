"""Invocation of the reduction collection."""

import logging
from typing import Callable, Optional

import numpy as np

import reduction
from reduction import EmbeddingResult, LoggingConfig, ParameterBag, never_cancel

from .callbacks import CallbackSet


class EmbeddingInvoker:
    """
    Calls :func:`reduction.embed` with the run's callbacks and parameters.

    The invoker only knows the :class:`CallbackSet` contract, never which
    strategy produced it, and checks nothing about the result besides its
    shape.
    """

    def __init__(self, log: Optional[LoggingConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 cancel: Callable[[], bool] = never_cancel):
        self.log = log if log is not None else LoggingConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cancel = cancel
        self.logger = logging.getLogger('embedding.invoker')

    def invoke(self, n_samples: int, callbacks: CallbackSet, parameters: ParameterBag) -> EmbeddingResult:
        indices = list(range(n_samples))
        coordinates, projection = reduction.embed(
            indices,
            callbacks.kernel,
            callbacks.distance,
            callbacks.vector,
            parameters,
            rng=self.rng,
            cancel=self.cancel,
            log=self.log,
        )

        expected = (parameters.target_dimension, n_samples)
        if coordinates.shape != expected:
            raise ValueError(f"Embedding has shape {coordinates.shape}, expected {expected}")
        self.logger.debug(f"Embedding computed with shape {coordinates.shape}")
        return coordinates, projection
