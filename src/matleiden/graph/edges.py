from __future__ import annotations

from numbers import Real
from typing import Any, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd


def sorted_vertex_ids(ids: Iterable[Any]) -> List[Any]:
    unique = set(ids)
    try:
        return sorted(unique)
    except TypeError:
        # mixed identifier types, e.g. ints and strings
        return sorted(unique, key=lambda x: (type(x).__name__, str(x)))


def edge_table_from_tuples(edges: Sequence[tuple]) -> pd.DataFrame:
    """
    [(u, v)] or [(u, v, w)] -> DataFrame(u, v, weight). Unweighted edges get weight 1.
    """
    us, vs, ws = [], [], []
    for i, e in enumerate(edges):
        if not isinstance(e, (tuple, list)) or len(e) not in (2, 3):
            raise ValueError(f"Edge #{i} must be (u, v) or (u, v, weight), got {e!r}")
        if len(e) == 3:
            w = e[2]
            if not isinstance(w, Real) or isinstance(w, bool):
                raise ValueError(f"Edge #{i} has a non-numeric weight: {w!r}")
        else:
            w = 1.0
        us.append(e[0])
        vs.append(e[1])
        ws.append(float(w))
    return pd.DataFrame({"u": us, "v": vs, "weight": np.asarray(ws, dtype=np.float64)})


def normalize_edge_table(edges: pd.DataFrame) -> pd.DataFrame:
    """Check columns u, v (weight optional) and return a copy with a float weight column."""
    missing = [c for c in ("u", "v") if c not in edges.columns]
    if missing:
        raise ValueError(f"Edge table is missing columns: {missing}")
    out = edges[["u", "v"]].copy()
    if "weight" in edges.columns:
        out["weight"] = pd.to_numeric(edges["weight"], errors="raise").astype(np.float64)
    else:
        out["weight"] = 1.0
    return out.reset_index(drop=True)


def drop_self_loops(edges: pd.DataFrame) -> pd.DataFrame:
    return edges[edges["u"] != edges["v"]].reset_index(drop=True)


def edges_to_matrix(edges: pd.DataFrame, vertices: Sequence[Any]) -> np.ndarray:
    """
    Dense symmetric adjacency over `vertices` (row order = list order).

    Duplicate edges add up; edges touching a vertex outside `vertices` are ignored.
    """
    n = len(vertices)
    matrix = np.zeros((n, n), dtype=np.float64)
    if n == 0 or len(edges) == 0:
        return matrix

    index = pd.Index(list(vertices))
    u_idx = index.get_indexer(edges["u"].tolist())
    v_idx = index.get_indexer(edges["v"].tolist())
    w = edges["weight"].to_numpy(dtype=np.float64)

    keep = (u_idx >= 0) & (v_idx >= 0) & (u_idx != v_idx)
    u_idx, v_idx, w = u_idx[keep], v_idx[keep], w[keep]

    np.add.at(matrix, (u_idx, v_idx), w)
    np.add.at(matrix, (v_idx, u_idx), w)
    return matrix


def vertices_from_edges(edges: pd.DataFrame, vertices: Optional[Sequence[Any]] = None) -> List[Any]:
    if vertices is not None:
        return list(vertices)
    return sorted_vertex_ids(pd.concat([edges["u"], edges["v"]]).tolist())
