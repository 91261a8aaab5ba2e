from typing import Sequence

from .config import PHASE_HUNT, PHASE_TARGET
from .types import Cell


def classify_phase(clusters: Sequence[Sequence[Cell]]) -> str:
    # Any unresolved hit cluster means we are finishing a ship rather than searching.
    if any(cluster for cluster in clusters):
        return PHASE_TARGET
    return PHASE_HUNT
