from __future__ import annotations

import argparse
from pathlib import Path

from matleiden.core.config import leiden_opts_from_cfg, load_config, find_repo_root
from matleiden.core.logging import attach_file_handler, setup_logging
from matleiden.core.options import InvalidOptionsError, validate_options
from matleiden.core.run_manager import create_run_context
from matleiden.graph.source import build_source_from_edges
from matleiden.io.artifacts import load_df, make_artifact_paths, save_df, save_json
from matleiden.leiden.engine import run_leiden
from matleiden.leiden.formats import partition_from_communities, to_frames
from matleiden.metrics.structural import community_structure_table, partition_quality


def _apply_overrides(opts: dict, args) -> dict:
    overrides = {
        "resolution": args.resolution,
        "quality_function": args.quality_function,
        "max_level": args.max_level,
        "community_size_threshold": args.community_size_threshold,
        "theta": args.theta,
        "seed": args.seed,
    }
    for k, v in overrides.items():
        if v is not None:
            opts[k] = v
    return opts


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Hierarchical Leiden community detection on an edge table.")
    ap.add_argument("--input", type=str, required=True, help="Edge table (.csv/.tsv/.parquet) with columns u, v[, weight]")
    ap.add_argument("--config", type=str, default=None, help="Path to configs/default.yaml (optional)")
    ap.add_argument("--resolution", type=float, default=None)
    ap.add_argument("--quality-function", type=str, default=None, choices=["modularity", "cpm"])
    ap.add_argument("--max-level", type=int, default=None)
    ap.add_argument("--community-size-threshold", type=int, default=None)
    ap.add_argument("--theta", type=float, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--run-id", type=str, default=None, help="Run directory name (default: timestamp)")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)

    project_root = find_repo_root()
    cfg = load_config(Path(args.config) if args.config else None, project_root=project_root)
    logger = setup_logging(cfg.get("run", {}).get("log_level", "INFO"))

    raw_opts = _apply_overrides(leiden_opts_from_cfg(cfg), args)
    try:
        opts = validate_options(raw_opts)
    except InvalidOptionsError as e:
        for key, reason in sorted(e.errors.items()):
            logger.error(f"[OPT] {key}: {reason}")
        return 2
    cfg["leiden"] = opts.to_dict()

    ctx = create_run_context(cfg, run_id=args.run_id)
    attach_file_handler(logger, ctx.run_dir / "run.log")
    logger.info(f"[RUN] project_root={ctx.project_root}")
    logger.info(f"[RUN] run_dir={ctx.run_dir}")
    logger.info(f"[RUN] options={opts.to_dict()}")

    edges = load_df(Path(args.input))
    source = build_source_from_edges(edges)
    logger.info(f"[SRC] vertices={source.vertex_count} orphans={len(source.orphan_communities)} total_weight={source.total_edge_weight:g}")

    results = run_leiden(source, opts, logger=logger)
    frames = to_frames(results)

    paths = make_artifact_paths(ctx.run_dir, cfg["project"].get("artifacts_format", "parquet"))
    # level 1 children are input ids, later levels community ids; parquet needs one type per column
    communities = frames["communities"].assign(child=frames["communities"]["child"].astype(str))
    save_df(communities, paths["communities"])
    save_df(frames["bridges"], paths["bridges"])

    summary = {
        "input": str(Path(args.input).resolve()),
        "options": opts.to_dict(),
        "n_vertices": source.vertex_count,
        "orphans": list(source.orphan_communities),
        "levels": {
            str(level): {"n_communities": len(r.communities), "n_bridges": len(r.bridges)}
            for level, r in results.items()
        },
    }
    if 1 in results:
        partition = partition_from_communities(results[1], source.degree_sequence)
        save_df(community_structure_table(source.adjacency_matrix, partition), paths["structure"])
        summary["level1_quality"] = partition_quality(
            source.adjacency_matrix, partition, opts.quality_function, opts.resolution
        )
    save_json(summary, paths["summary"])

    logger.info(f"[DONE] levels={len(results)}")
    logger.info(f"[DONE] Artifacts saved under: {ctx.run_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
