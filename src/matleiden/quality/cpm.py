"""
Constant Potts Model move deltas.

    dH = (e_D - e_C) - gamma * [ (n_D + 1) - (n_C - 1) ]

n_X is the node count of X; the penalty uses sizes after the hypothetical move.
No halving of the penalty; the refinement connectivity test uses the same
unscaled gamma. Total edge weight does not enter the formula.
"""
from __future__ import annotations

from typing import Tuple

import numpy as np

from matleiden.quality.base import current_community, pick_best


def delta_gains(
    adjacency_matrix: np.ndarray,
    node_index: int,
    partition_matrix: np.ndarray,
    total_edge_weight: float,
    resolution: float,
) -> np.ndarray:
    current = current_community(partition_matrix, node_index)

    edges_to_communities = adjacency_matrix[node_index] @ partition_matrix
    sizes = partition_matrix.sum(axis=0)

    penalty = resolution * ((sizes + 1.0) - (sizes[current] - 1.0))
    deltas = np.asarray(edges_to_communities - edges_to_communities[current] - penalty, dtype=np.float64)
    deltas[current] = 0.0
    return deltas


def best_move(
    adjacency_matrix: np.ndarray,
    node_index: int,
    partition_matrix: np.ndarray,
    total_edge_weight: float,
    resolution: float,
) -> Tuple[int, float]:
    if total_edge_weight == 0:
        return current_community(partition_matrix, node_index), 0.0

    deltas = delta_gains(adjacency_matrix, node_index, partition_matrix, total_edge_weight, resolution)
    return pick_best(deltas)
