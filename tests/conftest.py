"""Pytest configuration and shared fixtures."""

import logging
import sys
from pathlib import Path

import numpy as np
import pytest
from sklearn.datasets import make_s_curve

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from reduction import ParameterBag, EigenMethod, NeighborsMethod  # noqa: E402
from reduction.logging_utils import LOGGER_NAMES  # noqa: E402


@pytest.fixture(autouse=True)
def reset_loggers():
    """Drop handlers and levels installed by LoggingConfig.configure()."""
    yield
    for name in LOGGER_NAMES:
        for logger in (logging.getLogger(name), logging.getLogger(f"{name}.benchmark")):
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)


@pytest.fixture
def rng():
    """Seeded random source for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def s_curve():
    """S-curve samples as a (features, samples) matrix."""
    points, _ = make_s_curve(n_samples=100, noise=0.01, random_state=0)
    return points.T.copy()


@pytest.fixture
def callbacks(s_curve):
    """Plain callbacks over the S-curve columns."""
    data = s_curve

    def kernel(i, j):
        return float(data[:, i] @ data[:, j])

    def distance(i, j):
        return float(np.linalg.norm(data[:, i] - data[:, j]))

    def vector(i):
        return data[:, i]

    return kernel, distance, vector


@pytest.fixture
def dense_parameters():
    """Parameters using the dense solver and brute-force neighbors."""
    return ParameterBag(
        eigen_method=EigenMethod.DENSE,
        neighbors_method=NeighborsMethod.BRUTE,
        num_neighbors=10,
        target_dimension=2,
    )
