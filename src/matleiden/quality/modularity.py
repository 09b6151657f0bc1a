"""
Modularity move deltas.

For node i (degree k_i) leaving its community C for a target D:

    dQ = 1/2m * [ (e_D - e_C) - gamma * k_i * (K_D - (K_C - k_i) + k_i) / 2m ]

e_X: weight from i into X; K_X: total degree of X before the move; m: total
edge weight. Evaluated for every community at once; the self-move is 0.
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
    n_communities = partition_matrix.shape[1]
    if total_edge_weight == 0:
        return np.zeros(n_communities, dtype=np.float64)

    current = current_community(partition_matrix, node_index)
    two_m = 2.0 * float(total_edge_weight)

    node_row = adjacency_matrix[node_index]
    k_i = float(node_row.sum())

    edges_to_communities = node_row @ partition_matrix
    community_degrees = adjacency_matrix.sum(axis=1) @ partition_matrix

    actual = edges_to_communities - edges_to_communities[current]

    k_current_without_node = community_degrees[current] - k_i
    expected = (community_degrees + k_i - k_current_without_node) * (k_i * resolution) / two_m

    deltas = np.asarray((actual - expected) / two_m, dtype=np.float64)
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
