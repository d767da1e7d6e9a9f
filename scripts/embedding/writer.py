"""Serialization of embedding results."""

import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import IO, Optional

import numpy as np

from reduction import EmbeddingResult, EmptyProjection, LinearProjection, ProjectionArtifact

from .data_io import write_matrix


class ResultWriter:
    """
    Writes coordinates and, when requested, the projection artifact.

    Coordinates are written with one sample per line. Projection output is
    enabled only when both the matrix and the mean destination are given;
    both files are then created even if the method has no projection, in
    which case they stay empty.
    """

    def __init__(self, output_file: Optional[Path] = None,
                 projection_matrix_file: Optional[Path] = None,
                 projection_mean_file: Optional[Path] = None,
                 stdout: Optional[IO[str]] = None):
        self.output_file = output_file
        self.projection_matrix_file = projection_matrix_file
        self.projection_mean_file = projection_mean_file
        self.stdout = stdout
        self.logger = logging.getLogger('embedding.writer')

    @property
    def output_projection(self) -> bool:
        return self.projection_matrix_file is not None and self.projection_mean_file is not None

    def write(self, result: EmbeddingResult):
        coordinates, projection = result
        self.write_coordinates(coordinates)
        if self.output_projection:
            self.write_projection(projection)

    def write_coordinates(self, coordinates: np.ndarray):
        if self.output_file is None:
            stream = self.stdout if self.stdout is not None else sys.stdout
            write_matrix(stream, coordinates.T)
            stream.flush()
            return
        with open(self.output_file, 'w') as handle:
            write_matrix(handle, coordinates.T)
        self.logger.info(f"Embedding saved to {self.output_file}")

    def write_projection(self, projection: ProjectionArtifact):
        with ExitStack() as stack:
            matrix_handle = stack.enter_context(open(self.projection_matrix_file, 'w'))
            mean_handle = stack.enter_context(open(self.projection_mean_file, 'w'))

            if isinstance(projection, LinearProjection):
                write_matrix(matrix_handle, projection.matrix)
                write_matrix(mean_handle, projection.mean)
                self.logger.info(f"Projection saved to {self.projection_matrix_file} "
                                 f"and {self.projection_mean_file}")
            elif isinstance(projection, EmptyProjection):
                self.logger.info("Method provides no projection, projection files left empty")
            else:
                raise TypeError(f"Unexpected projection artifact: {type(projection).__name__}")
