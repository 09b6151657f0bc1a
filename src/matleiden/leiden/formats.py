from __future__ import annotations

from typing import Any, Dict, Sequence

import networkx as nx
import numpy as np
import pandas as pd

from matleiden.core.types import LevelResult


def to_graphs(results: Dict[int, LevelResult]) -> Dict[int, nx.Graph]:
    """One graph per level: a node per community (attribute `children`), an edge per bridge."""
    graphs = {}
    for level, result in results.items():
        g = nx.Graph(level=level)
        for c in result.communities:
            g.add_node(c.id, children=list(c.children))
        for b in result.bridges:
            g.add_edge(b.source, b.target, weight=b.weight)
        graphs[level] = g
    return graphs


def to_frames(results: Dict[int, LevelResult]) -> Dict[str, pd.DataFrame]:
    comm_rows = []
    bridge_rows = []
    for level, result in sorted(results.items()):
        for c in result.communities:
            for child in c.children:
                comm_rows.append({"level": level, "community_id": c.id, "child": child})
        for b in result.bridges:
            bridge_rows.append({"level": level, "source": b.source, "target": b.target, "weight": b.weight})

    return {
        "communities": pd.DataFrame(comm_rows, columns=["level", "community_id", "child"]),
        "bridges": pd.DataFrame(bridge_rows, columns=["level", "source", "target", "weight"]),
    }


def format_results(results: Dict[int, LevelResult], fmt: str) -> Any:
    if fmt == "communities_and_bridges":
        return results
    if fmt == "graph":
        return to_graphs(results)
    if fmt == "dataframe":
        return to_frames(results)
    raise ValueError(f"Unknown result format: {fmt!r}")


def partition_from_communities(result: LevelResult, labels: Sequence[Any]) -> np.ndarray:
    """Rebuild a level's partition matrix over rows labelled by `labels`."""
    row_of = {label: i for i, label in enumerate(labels)}
    partition = np.zeros((len(labels), len(result.communities)), dtype=np.float64)
    for c in result.communities:
        for child in c.children:
            if child not in row_of:
                raise ValueError(f"Community {c.id} lists child {child!r}, which is not among the {len(labels)} row labels")
            partition[row_of[child], c.id] = 1.0
    return partition
