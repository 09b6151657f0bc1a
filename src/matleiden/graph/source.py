"""
Build a validated `Source` from the supported graph inputs.

Supported inputs:
- dense matrix: numpy array or nested list
- edge list: [(u, v)] or [(u, v, weight)]
- (vertices, edges) pair; edges naming unknown vertices are ignored
- pandas DataFrame with columns u, v and optional weight
- undirected networkx.Graph (edge attribute "weight", default 1)

Orphans (zero total weight) are dropped from the matrix and listed separately.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

import networkx as nx
import numpy as np
import pandas as pd

from matleiden.core.types import Source
from matleiden.graph.edges import (
    drop_self_loops,
    edge_table_from_tuples,
    edges_to_matrix,
    normalize_edge_table,
    sorted_vertex_ids,
    vertices_from_edges,
)


class InvalidAdjacencyMatrixError(ValueError):
    pass


def _check_adjacency_matrix(matrix: np.ndarray) -> None:
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise InvalidAdjacencyMatrixError(f"Adjacency matrix must be square, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise InvalidAdjacencyMatrixError("Adjacency matrix contains infinite or NaN entries")
    if np.any(np.diagonal(matrix) != 0):
        raise InvalidAdjacencyMatrixError("Adjacency matrix must have a zero diagonal")
    if np.any(matrix < 0):
        raise InvalidAdjacencyMatrixError("Adjacency matrix must not contain negative weights")
    if not np.allclose(matrix, matrix.T):
        raise InvalidAdjacencyMatrixError("Adjacency matrix must be symmetric")


def build_source_from_matrix(matrix: Any, vertices: Optional[Sequence[Any]] = None) -> Source:
    """
    Validate `matrix` and strip orphans. Row i is labelled `vertices[i]`
    (default: i) in `degree_sequence` / `orphan_communities`.
    """
    try:
        arr = np.array(matrix, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidAdjacencyMatrixError(f"Adjacency matrix is not a numeric 2-D array: {e}") from e

    if arr.ndim == 1 and arr.size == 0:
        arr = arr.reshape(0, 0)
    _check_adjacency_matrix(arr)

    n = arr.shape[0]
    labels = list(range(n)) if vertices is None else list(vertices)
    if len(labels) != n:
        raise ValueError(f"Got {len(labels)} vertex labels for a {n}x{n} matrix")

    is_orphan = arr.sum(axis=0) == 0
    kept = np.flatnonzero(~is_orphan)
    orphans = np.flatnonzero(is_orphan)

    return Source(
        adjacency_matrix=arr[np.ix_(kept, kept)],
        orphan_communities=[labels[i] for i in orphans.tolist()],
        degree_sequence=[labels[i] for i in kept.tolist()],
    )


def build_source_from_edges(edges: pd.DataFrame, vertices: Optional[Sequence[Any]] = None) -> Source:
    edges = drop_self_loops(normalize_edge_table(edges))
    if vertices is not None and len(set(vertices)) != len(vertices):
        raise ValueError("Vertex list contains duplicates")
    labels = vertices_from_edges(edges, vertices)
    return build_source_from_matrix(edges_to_matrix(edges, labels), vertices=labels)


def build_source_from_networkx(graph: nx.Graph) -> Source:
    if graph.is_directed():
        raise ValueError("Only undirected graphs are supported; convert with graph.to_undirected()")
    if graph.is_multigraph():
        graph = nx.Graph(graph)
    rows = [(u, v, float(w)) for u, v, w in graph.edges(data="weight", default=1.0)]
    edges = pd.DataFrame(rows, columns=["u", "v", "weight"])
    return build_source_from_edges(edges, vertices=sorted_vertex_ids(graph.nodes()))


def _is_vertices_edges_pair(data: Any) -> bool:
    return (
        isinstance(data, tuple)
        and len(data) == 2
        and isinstance(data[0], (list, tuple))
        and isinstance(data[1], (list, tuple))
        and all(isinstance(e, (list, tuple)) for e in data[1])
    )


def _looks_like_matrix(data: List[Any]) -> bool:
    first = data[0]
    return isinstance(first, (list, np.ndarray))


def build_source(data: Any) -> Source:
    if isinstance(data, Source):
        return data
    if isinstance(data, nx.Graph):
        return build_source_from_networkx(data)
    if isinstance(data, pd.DataFrame):
        return build_source_from_edges(data)
    if isinstance(data, np.ndarray):
        return build_source_from_matrix(data)
    if _is_vertices_edges_pair(data):
        vertices, edges = data
        table = edge_table_from_tuples(list(edges))
        if len(vertices) == 0:
            return build_source_from_edges(table)
        return build_source_from_edges(table, vertices=list(vertices))
    if isinstance(data, list):
        if len(data) == 0:
            return build_source_from_matrix(np.zeros((0, 0)))
        if _looks_like_matrix(data):
            return build_source_from_matrix(data)
        if isinstance(data[0], tuple):
            return build_source_from_edges(edge_table_from_tuples(data))
    raise TypeError(f"Unsupported graph input of type {type(data).__name__}")
