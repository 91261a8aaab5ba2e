import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from battleship_advisor.domain.board import board_dims, unknown_cells
from battleship_advisor.domain.clusters import adjacent_cells, endpoint_distance
from battleship_advisor.domain.config import PHASE_HUNT, UNKNOWN
from battleship_advisor.domain.types import Cell

# battleship_advisor.engine.heat.HeatSurface / local_solver.LocalSolveResult
HeatSurfaceLike = object
LocalResultLike = object

CERTAIN = 1.0 - 1e-9


class SelectionType(str, Enum):
    HUNT = "hunt"
    LOCAL_DETERMINISTIC = "local deterministic"
    LOCAL_ENTROPY = "local entropy"
    ADJACENT_HEAT = "adjacent-heat"
    GLOBAL_FALLBACK = "global-fallback"
    BOARD_ORDER = "board-order"
    NONE = "none"


@dataclass(frozen=True)
class Selection:
    type: SelectionType
    row: int = -1
    col: int = -1
    score: float = 0.0
    probability: float = 0.0
    cluster_index: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.row >= 0 and self.col >= 0

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"type": self.type.value, "score": self.score}
        if self.cluster_index is not None:
            data["clusterIndex"] = self.cluster_index
        return data


def binary_entropy(p: float) -> float:
    if p <= 0.0 or p >= 1.0:
        return 0.0
    return -(p * math.log2(p) + (1.0 - p) * math.log2(1.0 - p))


def _best_by_heat(cells: Sequence[Cell], heat: HeatSurfaceLike) -> Optional[Tuple[Cell, float]]:
    # cells arrive in row-major order, so strict '>' keeps the lowest row/col on ties
    best: Optional[Cell] = None
    best_val = -1.0
    for r, c in cells:
        val = heat.value(r, c)
        if val > best_val:
            best_val = val
            best = (r, c)
    if best is None:
        return None
    return best, best_val


def select_hunt(board: Sequence[Sequence[int]], heat: HeatSurfaceLike) -> Selection:
    choice = _best_by_heat(unknown_cells(board), heat)
    if choice is None:
        return Selection(SelectionType.NONE)
    (r, c), val = choice
    kind = SelectionType.HUNT if val > 0 else SelectionType.BOARD_ORDER
    return Selection(kind, r, c, val, val)


def select_local_deterministic(
    board: Sequence[Sequence[int]],
    local_results: Sequence[LocalResultLike],
) -> Optional[Selection]:
    for res in local_results:
        if not res.unique:
            continue
        certain = sorted(
            cell for cell, p in res.probabilities.items()
            if p >= CERTAIN and board[cell[0]][cell[1]] == UNKNOWN
        )
        if certain:
            r, c = certain[0]
            return Selection(SelectionType.LOCAL_DETERMINISTIC, r, c, 1.0, 1.0, res.cluster_index)
    return None


def select_local_entropy(
    board: Sequence[Sequence[int]],
    local_results: Sequence[LocalResultLike],
) -> Optional[Selection]:
    """
    Most informative UNKNOWN cell inside any ROI whose solver found >= 2 solutions.

    Score is binary entropy of the cell's occupancy divided by sqrt(solutions),
    so small, well-constrained solution sets win over large noisy ones. Ties go
    to higher probability, then closeness to a cluster endpoint, then row/col.
    """
    best_key = None
    best: Optional[Selection] = None
    for res in local_results:
        if not res.attempted or res.total_solutions < 2:
            continue
        roi = res.roi
        norm = math.sqrt(res.total_solutions)
        for r in range(roi.r0, roi.r1 + 1):
            for c in range(roi.c0, roi.c1 + 1):
                if board[r][c] != UNKNOWN:
                    continue
                p = res.probability(r, c)
                if p <= 0.0:
                    continue
                score = binary_entropy(p) / norm
                key = (score, p, -endpoint_distance((r, c), res.cluster), -r, -c, -res.cluster_index)
                if best_key is None or key > best_key:
                    best_key = key
                    best = Selection(SelectionType.LOCAL_ENTROPY, r, c, score, p, res.cluster_index)
    return best


def select_adjacent_heat(
    board: Sequence[Sequence[int]],
    clusters: Sequence[Sequence[Cell]],
    heat: HeatSurfaceLike,
) -> Optional[Selection]:
    rows, cols = board_dims(board)
    owner: Dict[Cell, int] = {}
    for index, cluster in enumerate(clusters):
        for cell in adjacent_cells(cluster, rows, cols):
            if board[cell[0]][cell[1]] == UNKNOWN and cell not in owner:
                owner[cell] = index
    choice = _best_by_heat(sorted(owner), heat)
    if choice is None or choice[1] <= 0.0:
        return None
    (r, c), val = choice
    return Selection(SelectionType.ADJACENT_HEAT, r, c, val, val, owner[(r, c)])


def select_global_fallback(board: Sequence[Sequence[int]], heat: HeatSurfaceLike) -> Selection:
    choice = _best_by_heat(unknown_cells(board), heat)
    if choice is None:
        return Selection(SelectionType.NONE)
    (r, c), val = choice
    kind = SelectionType.GLOBAL_FALLBACK if val > 0 else SelectionType.BOARD_ORDER
    return Selection(kind, r, c, val, val)


def select_move(
    board: Sequence[Sequence[int]],
    mode: str,
    clusters: Sequence[Sequence[Cell]],
    heat: HeatSurfaceLike,
    local_results: Sequence[LocalResultLike],
) -> Selection:
    if mode == PHASE_HUNT:
        return select_hunt(board, heat)

    rules = (
        lambda: select_local_deterministic(board, local_results),
        lambda: select_local_entropy(board, local_results),
        lambda: select_adjacent_heat(board, clusters, heat),
    )
    for rule in rules:
        selection = rule()
        if selection is not None:
            return selection
    return select_global_fallback(board, heat)

