"""
Projection artifacts returned next to an embedding.

Linear methods describe how to map new samples into the embedding space with
a projection matrix and the mean subtracted before projecting. Every other
method returns ``EmptyProjection``. Consumers match on the concrete type.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np


class EmptyProjection:
    """Marker for methods without an explicit projection."""

    def clear(self):
        pass

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other) -> bool:
        return isinstance(other, EmptyProjection)

    def __hash__(self) -> int:
        return hash(EmptyProjection)

    def __repr__(self) -> str:
        return "EmptyProjection()"


@dataclass(eq=False)
class LinearProjection:
    """
    Matrix projection ``y = matrix.T @ (x - mean)``.

    Attributes:
        matrix: Projection matrix of shape (dimension, target_dimension)
        mean: Mean vector of shape (dimension,)
    """
    matrix: Optional[np.ndarray]
    mean: Optional[np.ndarray]

    def project(self, vectors: np.ndarray) -> np.ndarray:
        """Project column vectors of shape (dimension, n) or a single vector."""
        if self.matrix is None:
            raise ValueError("Projection has been cleared")
        vectors = np.asarray(vectors, dtype=float)
        if vectors.ndim == 1:
            return self.matrix.T @ (vectors - self.mean)
        return self.matrix.T @ (vectors - self.mean[:, np.newaxis])

    def clear(self):
        """Release the stored arrays."""
        self.matrix = None
        self.mean = None

    def __bool__(self) -> bool:
        return self.matrix is not None


ProjectionArtifact = Union[EmptyProjection, LinearProjection]
EmbeddingResult = Tuple[np.ndarray, ProjectionArtifact]
