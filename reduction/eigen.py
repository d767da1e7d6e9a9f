"""
Eigendecomposition back ends for symmetric problems.

All solvers return ``(values, vectors)`` with ``vectors[:, i]`` belonging to
``values[i]``. Smallest problems are sorted ascending, largest problems
descending; ``skip`` drops that many leading eigenpairs (e.g. the constant
vector of a Laplacian).
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import linalg
from scipy.sparse.linalg import ArpackNoConvergence, eigsh
from sklearn.utils.extmath import randomized_range_finder

from .methods import EigenMethod

logger = logging.getLogger('reduction.eigen')

RANDOMIZED_OVERSAMPLING = 10
RANDOMIZED_POWER_ITERATIONS = 7


def eigendecomposition(method: EigenMethod, matrix: np.ndarray, target_dimension: int,
                       largest: bool = True, skip: int = 0, shift: float = 1e-9,
                       rng: Optional[np.random.Generator] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute ``target_dimension`` eigenpairs of a symmetric matrix.

    Args:
        method: Solver to use
        matrix: Symmetric (n, n) matrix
        target_dimension: Number of eigenpairs to return
        largest: Largest eigenvalues when True, smallest otherwise
        skip: Leading eigenpairs to discard
        shift: Shift used for shift-invert mode when seeking smallest eigenvalues
        rng: Random source for the randomized solver

    Returns:
        Tuple of (eigenvalues, eigenvectors)
    """
    matrix = _symmetrize(matrix)
    n = matrix.shape[0]
    k = target_dimension + skip
    if k > n:
        raise ValueError(f"Cannot compute {k} eigenvectors of a {n}x{n} matrix")

    solution = None
    if method is EigenMethod.ARPACK and k < n and target_dimension > 0:
        if largest:
            solution = _arpack(matrix, k=k, which='LA')
        else:
            solution = _arpack(matrix, k=k, sigma=-shift, which='LM')
    elif method is EigenMethod.RANDOMIZED and target_dimension > 0:
        solution = _randomized(matrix, k, largest, rng)
    elif method is EigenMethod.ARPACK:
        logger.debug(f"ARPACK needs fewer than {n} eigenpairs, using dense solver")
    values, vectors = solution if solution is not None else linalg.eigh(matrix)

    return _select(values, vectors, target_dimension, largest, skip)


def generalized_eigendecomposition(method: EigenMethod, lhs: np.ndarray, rhs: np.ndarray,
                                   target_dimension: int, largest: bool = False, skip: int = 0,
                                   shift: float = 1e-9,
                                   rng: Optional[np.random.Generator] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Solve ``lhs @ v = value * rhs @ v`` for symmetric ``lhs`` and positive definite ``rhs``."""
    lhs = _symmetrize(lhs)
    rhs = _symmetrize(rhs)
    n = lhs.shape[0]
    k = target_dimension + skip
    if k > n:
        raise ValueError(f"Cannot compute {k} eigenvectors of a {n}x{n} matrix")

    solution = None
    if method is EigenMethod.ARPACK and k < n and target_dimension > 0:
        if largest:
            solution = _arpack(lhs, k=k, M=rhs, which='LA')
        else:
            solution = _arpack(lhs, k=k, M=rhs, sigma=-shift, which='LM')
    elif method is EigenMethod.RANDOMIZED and target_dimension > 0:
        factor = linalg.cholesky(rhs, lower=True)
        half = linalg.solve_triangular(factor, lhs, lower=True)
        reduced = linalg.solve_triangular(factor, half.T, lower=True)
        values, vectors = _randomized(_symmetrize(reduced), k, largest, rng)
        solution = values, linalg.solve_triangular(factor.T, vectors, lower=False)
    values, vectors = solution if solution is not None else linalg.eigh(lhs, rhs)

    return _select(values, vectors, target_dimension, largest, skip)


def _arpack(matrix: np.ndarray, **kwargs) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """Run ``eigsh``; None when it does not converge so the caller uses the dense solver."""
    try:
        return eigsh(matrix, **kwargs)
    except ArpackNoConvergence as e:
        logger.warning(f"ARPACK did not converge ({e}), using dense solver")
        return None


def sklearn_eigen_solver(method: EigenMethod, n_components: int, max_components: int,
                         dense_name: str) -> str:
    """
    Name of the scikit-learn solver matching ``method``.

    ARPACK needs fewer components than ``max_components``; the dense solver
    (``dense_name``, which differs between estimators) is used otherwise.
    """
    if method is EigenMethod.RANDOMIZED:
        return 'randomized'
    if method is EigenMethod.ARPACK and n_components < max_components:
        return 'arpack'
    if method is EigenMethod.ARPACK:
        logger.debug(f"ARPACK needs fewer than {max_components} components, using dense solver")
    return dense_name


def _randomized(matrix: np.ndarray, k: int, largest: bool,
                rng: Optional[np.random.Generator]) -> Tuple[np.ndarray, np.ndarray]:
    """Randomized range finder followed by a small dense problem."""
    n = matrix.shape[0]
    seed = int((rng or np.random.default_rng()).integers(2**31 - 1))

    bound = 0.0
    target = matrix
    if not largest:
        # Largest eigenpairs of (bound * I - A) are the smallest ones of A
        bound = float(np.max(np.sum(np.abs(matrix), axis=1)))
        target = bound * np.eye(n) - matrix

    basis = randomized_range_finder(target, size=min(n, k + RANDOMIZED_OVERSAMPLING),
                                    n_iter=RANDOMIZED_POWER_ITERATIONS, random_state=seed)
    values, small_vectors = linalg.eigh(basis.T @ target @ basis)
    vectors = basis @ small_vectors
    if not largest:
        values = bound - values
    return values, vectors


def _select(values: np.ndarray, vectors: np.ndarray, target_dimension: int,
            largest: bool, skip: int) -> Tuple[np.ndarray, np.ndarray]:
    order = np.argsort(values)
    if largest:
        order = order[::-1]
    order = order[skip:skip + target_dimension]
    return values[order], vectors[:, order]


def _symmetrize(matrix: np.ndarray) -> np.ndarray:
    matrix = np.asarray(matrix, dtype=float)
    return 0.5 * (matrix + matrix.T)
