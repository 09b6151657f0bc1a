from __future__ import annotations

from typing import Callable, Dict, NamedTuple, Tuple

import numpy as np

from matleiden.quality import cpm, modularity


class QualityFunction(NamedTuple):
    name: str
    delta_gains: Callable[[np.ndarray, int, np.ndarray, float, float], np.ndarray]
    best_move: Callable[[np.ndarray, int, np.ndarray, float, float], Tuple[int, float]]


QUALITY_FUNCTIONS: Dict[str, QualityFunction] = {
    "modularity": QualityFunction("modularity", modularity.delta_gains, modularity.best_move),
    "cpm": QualityFunction("cpm", cpm.delta_gains, cpm.best_move),
}


def get_quality_function(name: str) -> QualityFunction:
    try:
        return QUALITY_FUNCTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown quality function: {name!r}. Use 'modularity' or 'cpm'") from None
