from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

import numpy as np

QualityName = Literal["modularity", "cpm"]
FormatName = Literal["communities_and_bridges", "graph", "dataframe"]

QUALITY_NAMES = ("modularity", "cpm")
FORMAT_NAMES = ("communities_and_bridges", "graph", "dataframe")


@dataclass(frozen=True)
class Source:
    """
    One hierarchy level of the graph.

    adjacency_matrix: dense (n, n) float64, symmetric, zero diagonal, orphans removed.
    degree_sequence: identifiers of the rows/columns of adjacency_matrix, in row order.
    orphan_communities: identifiers whose total edge weight was zero.
    """
    adjacency_matrix: np.ndarray
    orphan_communities: List[Any] = field(default_factory=list)
    degree_sequence: List[Any] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return int(self.adjacency_matrix.shape[0])

    @property
    def total_edge_weight(self) -> float:
        return float(self.adjacency_matrix.sum() / 2.0)


@dataclass(frozen=True)
class LeidenOptions:
    resolution: float = 1.0
    quality_function: QualityName = "modularity"
    max_level: int = 5
    community_size_threshold: Optional[int] = None
    theta: float = 0.01
    format: FormatName = "communities_and_bridges"
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resolution": self.resolution,
            "quality_function": self.quality_function,
            "max_level": self.max_level,
            "community_size_threshold": self.community_size_threshold,
            "theta": self.theta,
            "format": self.format,
            "seed": self.seed,
        }


@dataclass(frozen=True)
class Community:
    id: int
    children: List[Any]


@dataclass(frozen=True)
class Bridge:
    source: int
    target: int
    weight: float


@dataclass(frozen=True)
class LevelResult:
    communities: List[Community]
    bridges: List[Bridge]
