"""Stochastic methods: stochastic proximity embedding and t-SNE."""

import logging

import numpy as np
from sklearn.manifold import TSNE

from .context import EmbeddingContext
from .neighbors import find_neighbors
from .projection import EmbeddingResult, EmptyProjection

logger = logging.getLogger('reduction.stochastic')

# Barnes-Hut t-SNE only supports embeddings with fewer than four dimensions
BARNES_HUT_MAX_DIMENSION = 3


def stochastic_proximity_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    """
    Stochastic proximity embedding.

    Each cycle draws ``spe_num_updates`` pairs and moves both points so their
    embedded distance approaches the (max-normalized) input distance. Pairs
    are drawn from all samples with the global strategy and from each sample's
    neighborhood with the local one. The learning rate starts at one and
    decays by ``1 / max_iteration`` per cycle.
    """
    params = ctx.parameters
    n = ctx.n_samples
    with ctx.log.timed("Distance matrix computation"):
        distances = ctx.distance_matrix()
    largest = distances.max()
    if largest > 0:
        distances = distances / largest

    neighbors = None
    if not params.spe_global_strategy:
        with ctx.log.timed("Neighbors computation"):
            neighbors = find_neighbors(params.neighbors_method, ctx.indices, ctx.distance,
                                       params.num_neighbors, params.check_connectivity, ctx)

    coordinates = ctx.rng.uniform(size=(n, params.target_dimension))
    learning_rate = 1.0
    with ctx.log.timed("SPE updates"):
        for _ in range(params.max_iteration):
            ctx.check_cancelled()
            first = ctx.rng.integers(n, size=params.spe_num_updates)
            if neighbors is None:
                second = ctx.rng.integers(n, size=params.spe_num_updates)
            else:
                picks = ctx.rng.integers(neighbors.shape[1], size=params.spe_num_updates)
                second = neighbors[first, picks]

            difference = coordinates[first] - coordinates[second]
            embedded = np.linalg.norm(difference, axis=1)
            step = 0.5 * learning_rate * (distances[first, second] - embedded) / (embedded + params.spe_tolerance)
            update = step[:, np.newaxis] * difference
            np.add.at(coordinates, first, update)
            np.add.at(coordinates, second, -update)

            learning_rate -= learning_rate / params.max_iteration

    return coordinates.T.copy(), EmptyProjection()


def t_distributed_stochastic_neighbor_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    params = ctx.parameters
    features = ctx.feature_matrix()
    method = 'barnes_hut' if params.target_dimension <= BARNES_HUT_MAX_DIMENSION else 'exact'
    logger.debug(f"t-SNE: perplexity={params.sne_perplexity}, theta={params.sne_theta}, method={method}")

    tsne = TSNE(
        n_components=params.target_dimension,
        perplexity=params.sne_perplexity,
        angle=params.sne_theta,
        max_iter=params.max_iteration,
        method=method,
        init='random',
        random_state=int(ctx.rng.integers(2**31 - 1)),
    )
    ctx.check_cancelled()
    with ctx.log.timed("t-SNE optimization"):
        coordinates = tsne.fit_transform(features.T)
    return coordinates.T.copy(), EmptyProjection()
