from dataclasses import dataclass
from typing import List, Sequence

from battleship_advisor.domain.board import board_dims, make_mask, status_mask
from battleship_advisor.domain.clusters import continuation_cells
from battleship_advisor.domain.config import HIT, UNKNOWN, EngineParams
from battleship_advisor.domain.placements import PlacementBook
from battleship_advisor.domain.types import Cell


@dataclass
class HeatSurface:
    raw: List[List[float]]
    heat: List[List[float]]
    has_any_placement: bool
    parity_applied: bool
    allow_touching: bool
    placements_considered: int
    placements_valid: int

    def value(self, r: int, c: int) -> float:
        return self.heat[r][c]

    def max_raw(self) -> float:
        return max((v for row in self.raw for v in row), default=0.0)


def parity_applies(lengths: Sequence[int], hit_mask: int, params: EngineParams) -> bool:
    # Every ship of length >= 2 covers an even (row + col) cell, so odd cells can wait.
    return bool(params.parity_hunt and hit_mask == 0 and lengths and min(lengths) >= 2)


def compute_heat(
    board: Sequence[Sequence[int]],
    lengths: Sequence[int],
    clusters: Sequence[Sequence[Cell]],
    params: EngineParams,
    book: PlacementBook,
) -> HeatSurface:
    """
    Aggregate legal placements of the remaining ships into a per-cell heat surface.

    Each ship length spreads length ** E over its own legal placements. Placements
    overlapping a HIT are boosted by (1 + hit_bonus); in target mode placements that
    extend a cluster from an endpoint get a further (1 + endpoint_bonus). Weight only
    lands on UNKNOWN tiles; the surface is then divided by its maximum.
    """
    rows, cols = board_dims(board)
    raw = [[0.0 for _ in range(cols)] for _ in range(rows)]
    hit_mask = status_mask(board, (HIT,))
    continuation_mask = make_mask(continuation_cells(board, clusters), cols) if clusters else 0

    has_any = False
    for length in lengths:
        legal = book.legal(length)
        if not legal:
            continue
        has_any = True
        base = (float(length) ** params.length_exponent) / len(legal)
        for p in legal:
            w = base
            if p.mask & hit_mask:
                w *= 1.0 + params.hit_bonus
            if continuation_mask and (p.mask & continuation_mask):
                w *= 1.0 + params.endpoint_bonus
            for r, c in p.cells:
                if board[r][c] == UNKNOWN:
                    raw[r][c] += w

    parity = parity_applies(lengths, hit_mask, params)
    if parity:
        for r in range(rows):
            for c in range(cols):
                if (r + c) % 2 == 1:
                    raw[r][c] = 0.0

    max_raw = max((v for row in raw for v in row), default=0.0)
    if max_raw > 0:
        heat = [[v / max_raw for v in row] for row in raw]
    else:
        heat = [[0.0 for _ in range(cols)] for _ in range(rows)]

    considered, valid = book.totals(lengths)
    return HeatSurface(
        raw=raw,
        heat=heat,
        has_any_placement=has_any,
        parity_applied=parity,
        allow_touching=book.allow_touching,
        placements_considered=considered,
        placements_valid=valid,
    )
