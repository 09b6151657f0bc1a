from __future__ import annotations

from typing import Tuple

import numpy as np


def current_community(partition: np.ndarray, node_index: int) -> int:
    return int(np.argmax(partition[node_index]))


def pick_best(deltas: np.ndarray) -> Tuple[int, float]:
    # np.argmax returns the first maximum, so ties go to the lowest community index
    best = int(np.argmax(deltas))
    return best, float(deltas[best])
