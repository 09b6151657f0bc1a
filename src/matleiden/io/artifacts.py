from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pandas as pd


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def save_json(obj: Dict[str, Any], path: Path) -> None:
    ensure_dir(path.parent)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False, default=str)


def _can_parquet() -> bool:
    try:
        import pyarrow  # noqa
        return True
    except ImportError:
        try:
            import fastparquet  # noqa
            return True
        except ImportError:
            return False


def save_df(df: pd.DataFrame, path: Path) -> Path:
    """
    Save dataframe to parquet if an engine is installed, else csv.
    Returns the path actually written (suffix may change to .csv).
    """
    ensure_dir(path.parent)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df.to_csv(path, index=False)
        return path

    if _can_parquet():
        out = path.with_suffix(".parquet")
        df.to_parquet(out, index=False)
        return out

    out = path.with_suffix(".csv")
    df.to_csv(out, index=False)
    return out


def load_df(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".parquet":
        return pd.read_parquet(path)
    if path.suffix.lower() in (".csv", ".tsv", ".txt"):
        sep = "\t" if path.suffix.lower() == ".tsv" else ","
        return pd.read_csv(path, sep=sep)
    raise ValueError(f"Unsupported dataframe format: {path}")


def make_artifact_paths(run_dir: Path, artifacts_format: str = "parquet") -> Dict[str, Path]:
    ext = ".csv" if artifacts_format == "csv" else ".parquet"
    return {
        "communities": run_dir / f"communities{ext}",
        "bridges": run_dir / f"bridges{ext}",
        "structure": run_dir / f"level1_structure{ext}",
        "summary": run_dir / "summary.json",
    }
