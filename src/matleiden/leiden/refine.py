"""
Refinement phase.

Each community of the local-move partition is re-split on its own induced
subgraph S, starting from singletons. In one sequential pass every node that
is still a singleton may join a community X of S when

    E(X, S - X) >= gamma * |X| * |S - X|      (X well connected in S)

and its quality delta for X is non-negative. The target is drawn with
probability proportional to exp(delta / theta), or taken as the best delta
when `select_best` is set. Refined sub-communities never cross the boundary
of the community they came from.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from matleiden.leiden.local_move import move_node
from matleiden.quality.base import current_community
from matleiden.quality.registry import QualityFunction, get_quality_function


def community_members(partition: np.ndarray, community: int) -> np.ndarray:
    return np.flatnonzero(partition[:, community] > 0)


def well_connected_mask(subset_adjacency: np.ndarray, partition: np.ndarray, resolution: float) -> np.ndarray:
    """Boolean per community of `partition`: non-empty and gamma-connected to the rest of the subset."""
    subset_size = partition.shape[0]
    sizes = partition.sum(axis=0)

    community_to_nodes = partition.T @ subset_adjacency
    to_subset = community_to_nodes.sum(axis=1)
    internal = (community_to_nodes * partition.T).sum(axis=1)
    external = to_subset - internal

    thresholds = resolution * sizes * (subset_size - sizes)
    return (external >= thresholds) & (sizes > 0)


def boltzmann_choice(gains: np.ndarray, candidates: np.ndarray, theta: float, rng: np.random.Generator) -> int:
    """Sample one of `candidates` with weight exp(gain / theta)."""
    scaled = gains[candidates] / theta
    weights = np.exp(scaled - scaled.max())
    probabilities = weights / weights.sum()
    return int(rng.choice(candidates, p=probabilities))


def select_target(
    gains: np.ndarray,
    eligible: np.ndarray,
    theta: float,
    rng: np.random.Generator,
    select_best: bool = False,
) -> Optional[int]:
    candidates = np.flatnonzero(eligible & (gains >= 0))
    if candidates.size == 0:
        return None
    if select_best:
        return int(candidates[np.argmax(gains[candidates])])
    return boltzmann_choice(gains, candidates, theta, rng)


def refine_subset(
    subset_adjacency: np.ndarray,
    quality: QualityFunction,
    resolution: float,
    theta: float,
    rng: np.random.Generator,
    select_best: bool = False,
) -> np.ndarray:
    """One refinement round on an induced subgraph; returns an (s, s) partition."""
    n = subset_adjacency.shape[0]
    partition = np.eye(n, dtype=np.float64)
    if n == 1:
        return partition

    total_edge_weight = float(subset_adjacency.sum() / 2.0)

    for node in range(n):
        own = current_community(partition, node)
        if partition[:, own].sum() != 1:
            continue

        eligible = well_connected_mask(subset_adjacency, partition, resolution)
        gains = quality.delta_gains(subset_adjacency, node, partition, total_edge_weight, resolution)

        target = select_target(gains, eligible, theta, rng, select_best=select_best)
        if target is not None and target != own:
            move_node(partition, node, target)

    return partition


def drop_empty_communities(partition: np.ndarray) -> np.ndarray:
    non_empty = partition.sum(axis=0) > 0
    if non_empty.all():
        return partition
    return partition[:, non_empty]


def refine_partition(
    adjacency_matrix: np.ndarray,
    partition_matrix: np.ndarray,
    quality_function: str = "modularity",
    resolution: float = 1.0,
    theta: float = 0.01,
    rng: Optional[np.random.Generator] = None,
    select_best: bool = False,
) -> np.ndarray:
    """
    Split every community of `partition_matrix` into well-connected parts.

    Returns an (n, k) partition matrix with no empty columns; node rows keep
    their original positions and refined communities are numbered in the
    order of the coarse communities they came from.
    """
    if rng is None:
        rng = np.random.default_rng()
    quality = get_quality_function(quality_function)

    n_nodes, n_communities = partition_matrix.shape
    pieces: List[Tuple[np.ndarray, np.ndarray]] = []

    for community in range(n_communities):
        members = community_members(partition_matrix, community)
        if members.size == 0:
            continue
        if members.size == 1:
            pieces.append((members, np.ones((1, 1), dtype=np.float64)))
            continue

        subset_adjacency = adjacency_matrix[np.ix_(members, members)]
        local = refine_subset(subset_adjacency, quality, resolution, theta, rng, select_best=select_best)
        pieces.append((members, drop_empty_communities(local)))

    total = sum(local.shape[1] for _, local in pieces)
    refined = np.zeros((n_nodes, total), dtype=np.float64)

    offset = 0
    for members, local in pieces:
        local_ids = np.argmax(local, axis=1)
        refined[members, offset + local_ids] = 1.0
        offset += local.shape[1]

    refined = drop_empty_communities(refined)
    assert np.all(refined.sum(axis=1) == 1), "refined partition must assign every node exactly once"
    return refined
