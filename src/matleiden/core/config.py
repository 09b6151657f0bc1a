from __future__ import annotations

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional

import yaml


def find_repo_root(start: Optional[Path] = None) -> Path:
    env_root = os.environ.get("MATLEIDEN_PROJECT_ROOT")
    if env_root:
        p = Path(env_root).expanduser().resolve()
        if p.exists():
            return p
        raise FileNotFoundError(f"MATLEIDEN_PROJECT_ROOT is set but does not exist: {env_root}")

    if start is None:
        start = Path.cwd()
    start = start.resolve()

    for p in [start] + list(start.parents):
        if (p / "pyproject.toml").exists():
            return p
        if (p / "configs" / "default.yaml").exists():
            return p

    return start


def default_cfg() -> Dict[str, Any]:
    # leiden section mirrors LeidenOptions defaults
    return {
        "project": {
            "name": "matleiden",
            "output_dir": "outputs",
            "artifacts_format": "parquet",
        },
        "run": {
            "seed": 42,
            "log_level": "INFO",
            "save_run_config": True,
        },
        "leiden": {
            "resolution": 1.0,
            "quality_function": "modularity",
            "max_level": 5,
            "community_size_threshold": None,
            "theta": 0.01,
            "format": "communities_and_bridges",
        },
    }


def deep_update(d: Dict[str, Any], u: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in (u or {}).items():
        if isinstance(v, dict) and isinstance(d.get(k), dict):
            deep_update(d[k], v)
        else:
            d[k] = v
    return d


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> Dict[str, Any]:
    if project_root is None:
        project_root = find_repo_root()

    if config_path is None:
        config_path = project_root / "configs" / "default.yaml"

    cfg = default_cfg()

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f) or {}
        if not isinstance(y, dict):
            raise ValueError(f"Config file must contain a mapping at top level: {config_path}")
        cfg = deep_update(cfg, y)

    cfg["_resolved"] = {
        "project_root": str(project_root),
        "config_path": str(config_path),
    }
    return cfg


def leiden_opts_from_cfg(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Raw (unvalidated) option mapping; the run seed is used unless leiden.seed is set."""
    opts = dict(cfg.get("leiden", {}))
    if opts.get("seed") is None:
        opts["seed"] = cfg.get("run", {}).get("seed")
    return opts


def save_run_config(cfg: Dict[str, Any], out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2, ensure_ascii=False)
