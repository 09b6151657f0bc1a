from __future__ import annotations

from typing import Any, Mapping, Optional

from matleiden.core.options import validate_options
from matleiden.graph.source import build_source
from matleiden.leiden.engine import run_leiden
from matleiden.leiden.formats import format_results


def call(data: Any, options: Optional[Mapping[str, Any]] = None, logger=None) -> Any:
    """
    Detect hierarchical communities in `data` (any input accepted by
    `build_source`).

    Raises InvalidOptionsError before touching the graph when an option is
    invalid, and InvalidAdjacencyMatrixError for a malformed matrix. The
    return shape follows the `format` option.
    """
    opts = validate_options(options)
    source = build_source(data)
    if logger:
        logger.info(
            f"[SRC] vertices={source.vertex_count} orphans={len(source.orphan_communities)} "
            f"total_weight={source.total_edge_weight:g}"
        )
    results = run_leiden(source, opts, logger=logger)
    return format_results(results, opts.format)
