"""Reading dense matrices from text files and writing them back."""

import logging
from pathlib import Path
from typing import IO, Union

import numpy as np

from .config import MissingInputFileError

# Precision used for every written matrix
MATRIX_FORMAT = '%.18e'


class DataLoader:
    """
    Loads a whitespace-delimited numeric matrix.

    Every line of the file is one matrix row. The loaded matrix is used with
    columns as samples, so files with one sample per line need ``transpose``.
    """

    def __init__(self, input_path: Union[str, Path], transpose: bool = False):
        self.input_path = Path(input_path)
        self.transpose = transpose
        self.logger = logging.getLogger('embedding.data')

    def load(self) -> np.ndarray:
        """Load the matrix with shape (features, samples)."""
        try:
            with open(self.input_path, 'r') as handle:
                data = read_matrix(handle)
        except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
            raise MissingInputFileError(f"Cannot open input file {self.input_path}: {e}") from e

        if self.transpose:
            data = np.ascontiguousarray(data.T)

        self.logger.info(f"Data contains {data.shape[1]} feature vectors with dimension of {data.shape[0]}")
        return data


def read_matrix(stream: IO[str]) -> np.ndarray:
    """Parse a text matrix; the row count is the line count, columns the tokens per line."""
    data = np.loadtxt(stream, dtype=float, ndmin=2)
    if data.size == 0:
        raise ValueError("Input contains no data")
    return data


def write_matrix(stream: IO[str], matrix: np.ndarray):
    """Write a matrix one row per line; vectors are written one value per line."""
    np.savetxt(stream, np.asarray(matrix, dtype=float), fmt=MATRIX_FORMAT, delimiter=' ')
