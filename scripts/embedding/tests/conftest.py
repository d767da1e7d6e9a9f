"""
Pytest configuration and shared fixtures for embedding CLI tests.
"""
import logging
import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest
from sklearn.datasets import make_swiss_roll

from reduction.logging_utils import LOGGER_NAMES
from scripts.embedding.embed import create_argument_parser


@pytest.fixture(autouse=True)
def reset_loggers():
    """Undo the handler and level changes made by the CLI entry point."""
    yield
    for name in LOGGER_NAMES:
        for logger in (logging.getLogger(name), logging.getLogger(f"{name}.benchmark")):
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def swiss_roll():
    """Swiss roll samples with one sample per row."""
    points, _ = make_swiss_roll(n_samples=60, noise=0.05, random_state=0)
    return points


@pytest.fixture
def input_file(temp_dir, swiss_roll):
    """Text file with one sample per line, as used with --transpose."""
    path = temp_dir / "input.dat"
    np.savetxt(path, swiss_roll)
    return path


@pytest.fixture
def parse_args():
    """Parse a CLI argument list with the real parser."""
    parser = create_argument_parser()
    return parser.parse_args
