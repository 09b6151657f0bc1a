from __future__ import annotations

import numpy as np

from matleiden.core.types import Source
from matleiden.graph.source import build_source_from_matrix


def aggregate_matrix(adjacency_matrix: np.ndarray, partition_matrix: np.ndarray) -> np.ndarray:
    """
    P^T A P with the diagonal zeroed: entry (i, j) is the total weight between
    communities i and j; weight inside a community is dropped.
    """
    aggregate = partition_matrix.T @ adjacency_matrix @ partition_matrix
    np.fill_diagonal(aggregate, 0.0)
    # symmetric up to rounding; make it exact for the validator
    return (aggregate + aggregate.T) / 2.0


def aggregate(adjacency_matrix: np.ndarray, partition_matrix: np.ndarray) -> Source:
    """
    Collapse each community into one node. The result goes through the same
    validation and orphan removal as user input, so a community without any
    inter-community weight becomes an orphan of the next level and rows are
    labelled with community indices.
    """
    return build_source_from_matrix(aggregate_matrix(adjacency_matrix, partition_matrix))
