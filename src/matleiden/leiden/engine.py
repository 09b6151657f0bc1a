"""
Level loop: local move -> refine -> aggregate, until a stopping rule fires.

Stopping rules, checked in this order before each level:
1. community_size_threshold: the level has at most that many vertices
2. max_level: the level number exceeds it
3. the local-move phase leaves every community a singleton
Only levels that got past all three are recorded (numbered from 1).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from matleiden.core.types import Bridge, Community, LeidenOptions, LevelResult, Source
from matleiden.leiden.aggregate import aggregate
from matleiden.leiden.local_move import local_move
from matleiden.leiden.refine import refine_partition
from matleiden.metrics.structural import is_singleton_partition, partition_quality


@dataclass
class EngineState:
    level: int
    source: Source
    results: Dict[int, LevelResult]


def community_records(partition: np.ndarray, labels: Sequence[Any]) -> List[Community]:
    """One record per column; children are row labels in ascending row order."""
    records = []
    for column in range(partition.shape[1]):
        rows = np.flatnonzero(partition[:, column] > 0)
        records.append(Community(id=column, children=[labels[r] for r in rows.tolist()]))
    return records


def extract_bridges(source: Source) -> List[Bridge]:
    """Strict upper triangle of the aggregated matrix, in community ids."""
    matrix = source.adjacency_matrix
    labels = source.degree_sequence
    rows, cols = np.triu_indices(matrix.shape[0], k=1)
    weights = matrix[rows, cols]
    keep = weights > 0
    return [
        Bridge(source=int(labels[i]), target=int(labels[j]), weight=float(w))
        for i, j, w in zip(rows[keep].tolist(), cols[keep].tolist(), weights[keep].tolist())
    ]


def _should_stop(state: EngineState, options: LeidenOptions, logger=None) -> bool:
    threshold = options.community_size_threshold
    if threshold is not None and state.source.vertex_count <= threshold:
        if logger:
            logger.info(f"[L{state.level}] stop: {state.source.vertex_count} vertices <= community_size_threshold={threshold}")
        return True
    if state.level > options.max_level:
        if logger:
            logger.info(f"[L{state.level}] stop: max_level={options.max_level} reached")
        return True
    return False


def run_leiden(
    source: Source,
    options: Optional[LeidenOptions] = None,
    rng: Optional[np.random.Generator] = None,
    logger=None,
    select_best: bool = False,
) -> Dict[int, LevelResult]:
    """
    Run the hierarchical Leiden loop on a validated `source`.

    Returns {level: LevelResult}; an empty dict when no level made progress.
    `select_best` makes refinement deterministic (always the best candidate).
    """
    if options is None:
        options = LeidenOptions()
    if rng is None:
        rng = np.random.default_rng(options.seed)

    state = EngineState(level=1, source=source, results={})

    while not _should_stop(state, options, logger=logger):
        matrix = state.source.adjacency_matrix

        if logger:
            logger.info(f"[L{state.level}] local move on {state.source.vertex_count} vertices ...")
        moved = local_move(state.source, options.quality_function, options.resolution, rng=rng)

        if is_singleton_partition(moved):
            if logger:
                logger.info(f"[L{state.level}] stop: local move found no beneficial merge")
            break

        refined = refine_partition(
            matrix,
            moved,
            quality_function=options.quality_function,
            resolution=options.resolution,
            theta=options.theta,
            rng=rng,
            select_best=select_best,
        )
        communities = community_records(refined, state.source.degree_sequence)

        next_source = aggregate(matrix, refined)
        bridges = extract_bridges(next_source)

        state.results[state.level] = LevelResult(communities=communities, bridges=bridges)
        if logger:
            score = partition_quality(matrix, refined, options.quality_function, options.resolution)
            logger.info(
                f"[L{state.level}] communities={len(communities)} bridges={len(bridges)} "
                f"orphans={len(next_source.orphan_communities)} {options.quality_function}={score:.6f}"
            )

        state.level += 1
        state.source = next_source

    return state.results
