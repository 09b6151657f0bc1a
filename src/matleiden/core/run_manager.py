from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .config import save_run_config


@dataclass(frozen=True)
class RunContext:
    project_root: Path
    output_dir: Path
    run_dir: Path
    run_id: str


def create_run_context(cfg: Dict[str, Any], run_id: Optional[str] = None) -> RunContext:
    project_root = Path(cfg["_resolved"]["project_root"]).resolve()
    output_dir = (project_root / cfg["project"]["output_dir"]).resolve()
    output_dir.mkdir(parents=True, exist_ok=True)

    if run_id is None:
        run_id = time.strftime("%Y%m%d_%H%M%S")
    run_dir = output_dir / "_runs" / run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    if cfg.get("run", {}).get("save_run_config", True):
        save_run_config(cfg, run_dir / "run_config.json")

    return RunContext(
        project_root=project_root,
        output_dir=output_dir,
        run_dir=run_dir,
        run_id=run_id,
    )
