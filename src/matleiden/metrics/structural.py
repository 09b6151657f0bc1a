from __future__ import annotations

import numpy as np
import pandas as pd


def community_sizes(partition: np.ndarray) -> np.ndarray:
    return partition.sum(axis=0)


def is_singleton_partition(partition: np.ndarray) -> bool:
    """True when every non-empty community has exactly one member."""
    sizes = community_sizes(partition)
    return bool(np.all(sizes[sizes > 0] == 1))


def partition_quality(
    adjacency: np.ndarray,
    partition: np.ndarray,
    quality_function: str = "modularity",
    resolution: float = 1.0,
) -> float:
    """
    Absolute score of a partition:
    - modularity: sum_c [ 2 e_c / 2m - gamma * (K_c / 2m)^2 ]
    - cpm:        sum_c [ e_c - gamma * n_c (n_c - 1) / 2 ]
    with e_c the internal weight, K_c the total degree and n_c the size of c.
    """
    block = partition.T @ adjacency @ partition
    internal = np.diagonal(block) / 2.0

    if quality_function == "modularity":
        two_m = float(adjacency.sum())
        if two_m == 0:
            return 0.0
        degrees = adjacency.sum(axis=1) @ partition
        return float(np.sum(2.0 * internal / two_m - resolution * (degrees / two_m) ** 2))

    if quality_function == "cpm":
        sizes = community_sizes(partition)
        return float(np.sum(internal - resolution * sizes * (sizes - 1.0) / 2.0))

    raise ValueError(f"Unknown quality function: {quality_function!r}")


def community_structure_table(adjacency: np.ndarray, partition: np.ndarray) -> pd.DataFrame:
    """
    Per-community structural metrics on the given level:
    - size, internal_weight, cut_weight
    - intra_density: internal weight over possible pairs (NaN for singletons)
    - conductance: cut / min(vol, total_vol - vol) (NaN when undefined)
    """
    non_empty = community_sizes(partition) > 0
    community_ids = np.flatnonzero(non_empty)
    partition = partition[:, non_empty]

    block = partition.T @ adjacency @ partition
    sizes = community_sizes(partition)
    internal = np.diagonal(block) / 2.0
    volume = adjacency.sum(axis=1) @ partition
    cut = volume - 2.0 * internal
    total_volume = float(adjacency.sum())

    possible = sizes * (sizes - 1.0) / 2.0
    with np.errstate(divide="ignore", invalid="ignore"):
        density = np.where(possible > 0, internal / possible, np.nan)
        denom = np.minimum(volume, total_volume - volume)
        conductance = np.where(denom > 0, cut / denom, np.nan)

    return pd.DataFrame({
        "community_id": community_ids,
        "size": sizes.astype(int),
        "internal_weight": internal,
        "cut_weight": cut,
        "intra_density": density,
        "conductance": conductance,
    })
