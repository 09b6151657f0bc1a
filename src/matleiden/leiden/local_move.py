"""
Fast local moving.

Nodes are visited from a FIFO queue (shuffled at start). A node moves to the
community with the best quality delta when that delta is strictly positive;
its neighbours that now share the new community are pushed back onto the
queue. The queue may hold the same node more than once.
"""
from __future__ import annotations

from collections import deque
from typing import Optional

import numpy as np

from matleiden.core.types import Source
from matleiden.quality.base import current_community
from matleiden.quality.registry import get_quality_function

# deltas at or below MIN_GAIN times the delta scale are rounding noise around zero
MIN_GAIN = 1e-12


def move_node(partition: np.ndarray, node_index: int, target: int) -> None:
    """Flip the node's row from its current community column to `target` (in place)."""
    current = current_community(partition, node_index)
    partition[node_index, current] = 0.0
    partition[node_index, target] = 1.0


def gain_tolerance(adjacency: np.ndarray, quality_function: str, resolution: float) -> float:
    """CPM deltas scale with edge weights and gamma; modularity deltas are normalised by 2m."""
    if quality_function == "cpm":
        scale = max(float(adjacency.max(initial=0.0)), float(resolution))
        return MIN_GAIN * scale
    return MIN_GAIN


def neighbours_in_community(adjacency: np.ndarray, node_index: int, partition: np.ndarray, community: int) -> np.ndarray:
    mask = (adjacency[node_index] > 0) & (partition[:, community] > 0)
    mask[node_index] = False
    return np.flatnonzero(mask)


def local_move(
    source: Source,
    quality_function: str = "modularity",
    resolution: float = 1.0,
    rng: Optional[np.random.Generator] = None,
    initial_partition: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Returns an (n, n) partition matrix; columns of communities that end up
    empty are kept.

    `initial_partition` (default: identity) is copied, not modified.
    """
    if rng is None:
        rng = np.random.default_rng()
    quality = get_quality_function(quality_function)

    matrix = source.adjacency_matrix
    n = matrix.shape[0]
    total_edge_weight = float(matrix.sum() / 2.0)
    tolerance = gain_tolerance(matrix, quality_function, resolution)

    if initial_partition is None:
        partition = np.eye(n, dtype=np.float64)
    else:
        partition = np.array(initial_partition, dtype=np.float64, copy=True)

    order = np.arange(n)
    rng.shuffle(order)
    queue = deque(order.tolist())

    while queue:
        node = queue.popleft()
        best_community, delta = quality.best_move(matrix, node, partition, total_edge_weight, resolution)
        if delta <= tolerance:
            continue

        move_node(partition, node, best_community)
        queue.extend(neighbours_in_community(matrix, node, partition, best_community).tolist())

    return partition
