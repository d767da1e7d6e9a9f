"""Nearest-neighbor search over a pairwise distance callback."""

import logging
from typing import Callable, Optional, Sequence

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components
from sklearn.neighbors import NearestNeighbors
from tqdm import tqdm

from .methods import NeighborsMethod

logger = logging.getLogger('reduction.neighbors')


def find_neighbors(method: NeighborsMethod, indices: Sequence[int],
                   distance: Callable[[int, int], float], k: int,
                   check_connectivity: bool = True, context=None) -> np.ndarray:
    """
    Find the ``k`` nearest neighbors of every sample.

    Args:
        method: Search strategy
        indices: Sample indices the callback understands
        distance: Pairwise distance callback
        k: Number of neighbors, excluding the sample itself
        check_connectivity: Warn if the resulting graph has several components
        context: Optional run context for cancellation and progress display

    Returns:
        Integer array of shape (n, k) holding positions into ``indices``,
        nearest first
    """
    n = len(indices)
    if k >= n:
        raise ValueError(f"Number of neighbors ({k}) should be less than number of samples ({n})")

    if method is NeighborsMethod.BRUTE:
        neighbors = _brute_force(indices, distance, k, context)
    elif method is NeighborsMethod.COVER_TREE:
        neighbors = _tree_search(indices, distance, k)
    else:
        raise ValueError(f"Unsupported neighbors method: {method}")

    if check_connectivity:
        n_components = count_components(neighbors)
        if n_components > 1:
            logger.warning(f"Neighborhood graph is not connected ({n_components} components), "
                           f"consider increasing the number of neighbors")
    return neighbors


def _brute_force(indices: Sequence[int], distance: Callable[[int, int], float], k: int,
                 context=None) -> np.ndarray:
    n = len(indices)
    neighbors = np.empty((n, k), dtype=int)
    show_progress = context is not None and context.log.show_progress
    for a in tqdm(range(n), desc="Neighbors", disable=not show_progress, leave=False):
        if context is not None:
            context.check_cancelled()
        row = np.array([distance(indices[a], indices[b]) for b in range(n)], dtype=float)
        row[a] = np.inf
        order = np.argsort(row, kind='stable')
        neighbors[a] = order[:k]
    return neighbors


def _tree_search(indices: Sequence[int], distance: Callable[[int, int], float], k: int) -> np.ndarray:
    """Ball-tree search where points are positions and the metric is the callback."""
    positions = np.arange(len(indices), dtype=float).reshape(-1, 1)

    def metric(a: np.ndarray, b: np.ndarray) -> float:
        # Node centroids are averaged positions; truncating maps them onto a real
        # sample, and node radii are measured from that same sample, so the
        # triangle-inequality bounds still hold for any true metric callback.
        return distance(indices[int(a[0])], indices[int(b[0])])

    tree = NearestNeighbors(n_neighbors=k + 1, algorithm='ball_tree', metric=metric)
    tree.fit(positions)
    _, found = tree.kneighbors(positions)

    neighbors = np.empty((len(indices), k), dtype=int)
    for a, row in enumerate(found):
        row = [int(b) for b in row if b != a]
        neighbors[a] = row[:k]
    return neighbors


def count_components(neighbors: np.ndarray) -> int:
    """Number of connected components of the symmetrized neighbor graph."""
    n, k = neighbors.shape
    rows = np.repeat(np.arange(n), k)
    graph = csr_matrix((np.ones(n * k), (rows, neighbors.ravel())), shape=(n, n))
    n_components, _ = connected_components(graph, directed=False)
    return n_components


def neighbors_graph(neighbors: np.ndarray, distances: Optional[np.ndarray] = None) -> csr_matrix:
    """Sparse (n, n) graph with an edge from every sample to each of its neighbors."""
    n, k = neighbors.shape
    rows = np.repeat(np.arange(n), k)
    values = np.ones(n * k) if distances is None else distances.ravel()
    return csr_matrix((values, (rows, neighbors.ravel())), shape=(n, n))
