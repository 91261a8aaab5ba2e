from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from battleship_advisor.domain.board import board_dims, constraint_masks, normalize_board, validate_board
from battleship_advisor.domain.clusters import find_hit_clusters
from battleship_advisor.domain.config import PHASE_HUNT, EngineParams
from battleship_advisor.domain.phase import classify_phase
from battleship_advisor.domain.placements import PlacementBook
from battleship_advisor.domain.roster import parse_roster, remaining_ships
from battleship_advisor.domain.types import Cell
from battleship_advisor.engine.explain import NO_BOARD_REASON, build_explanation
from battleship_advisor.engine.heat import compute_heat
from battleship_advisor.engine.local_solver import (
    LocalSolveResult,
    is_suspected_sunk,
    is_unexplained,
    solve_clusters,
)
from battleship_advisor.strategies.selection import Selection, SelectionType, select_move
from battleship_advisor.utils.debug import debug_log


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    normalized_score: float
    reason: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "row": self.row,
            "col": self.col,
            "normalizedScore": self.normalized_score,
            "reason": self.reason,
        }


@dataclass
class Diagnostics:
    mode: str
    ships_remaining: int = 0
    placements_considered: int = 0
    placements_valid: int = 0
    hit_clusters: List[List[Cell]] = field(default_factory=list)
    unexplained_hits: List[List[Cell]] = field(default_factory=list)
    local_solve: List[LocalSolveResult] = field(default_factory=list)
    selection: Selection = field(default_factory=lambda: Selection(SelectionType.NONE))
    no_touch: bool = True
    parity_hunt: bool = False
    relaxed_placements: bool = False
    suspected_sunk: List[int] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    trace: List[str] = field(default_factory=list)

    @property
    def local_attempts(self) -> int:
        return sum(1 for res in self.local_solve if res.attempted)

    def to_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode,
            "shipsRemaining": self.ships_remaining,
            "placementsConsidered": self.placements_considered,
            "placementsValid": self.placements_valid,
            "hitClusters": [[list(cell) for cell in cluster] for cluster in self.hit_clusters],
            "unexplainedHits": [[list(cell) for cell in cluster] for cluster in self.unexplained_hits],
            "localSolve": {
                "attempts": self.local_attempts,
                "perCluster": [res.to_dict() for res in self.local_solve],
            },
            "selection": self.selection.to_dict(),
            "rules": {
                "noTouch": self.no_touch,
                "parityHunt": self.parity_hunt,
                "relaxedPlacements": self.relaxed_placements,
            },
            "suspectedSunk": list(self.suspected_sunk),
            "errors": list(self.errors),
            "trace": list(self.trace),
        }


@dataclass
class MoveResult:
    move: Move
    heatmap: List[List[float]]
    raw_heat: List[List[float]]
    has_any_placement: bool
    diagnostics: Diagnostics

    def to_dict(self) -> Dict[str, object]:
        return {
            "move": self.move.to_dict(),
            "heatmap": [list(row) for row in self.heatmap],
            "rawHeat": [list(row) for row in self.raw_heat],
            "flags": {"hasAnyPlacement": self.has_any_placement},
            "diagnostics": self.diagnostics.to_dict(),
        }


def _no_board_result(errors: List[str]) -> MoveResult:
    diagnostics = Diagnostics(mode=PHASE_HUNT, errors=list(errors), trace=[NO_BOARD_REASON])
    return MoveResult(Move(-1, -1, 0.0, NO_BOARD_REASON), [], [], False, diagnostics)


def recommend_move(
    board: Sequence[Sequence[object]],
    roster: Optional[Sequence[object]],
    params: Optional[EngineParams] = None,
) -> MoveResult:
    """
    Recommend the next cell to fire at.

    `board` is a rectangular grid of tile statuses (ints, {"status": n} tiles or
    text-board rows); `roster` lists ships as ShipEntry, dicts or bare lengths.
    Nothing passed in is mutated and no state survives the call.
    """
    if params is None:
        params = EngineParams()

    board_errors = validate_board(board)
    if board_errors:
        debug_log("recommend", "degenerate board", "\n".join(board_errors), level="warning")
        return _no_board_result(board_errors)

    grid = normalize_board(board)
    rows, cols = board_dims(grid)
    ships, roster_errors = parse_roster(roster)
    remaining = remaining_ships(ships)
    lengths = [s.length for s in remaining]

    blocked_mask, known_mask = constraint_masks(grid)
    clusters = find_hit_clusters(grid)
    mode = classify_phase(clusters)

    strict = PlacementBook(rows, cols, blocked_mask, known_mask)
    local_results = solve_clusters(clusters, lengths, strict, params)
    unexplained = [res.cluster_index for res in local_results if is_unexplained(res, lengths, strict)]
    suspected_sunk = [res.cluster_index for res in local_results if is_suspected_sunk(res)]

    heat = compute_heat(grid, lengths, clusters, params, strict)
    if unexplained:
        touching = PlacementBook(rows, cols, blocked_mask, known_mask, allow_touching=True)
        relaxed = compute_heat(grid, lengths, clusters, params, touching)
        if relaxed.has_any_placement:
            heat = relaxed

    selection = select_move(grid, mode, clusters, heat, local_results)
    reason, trace = build_explanation(
        mode, selection, clusters, local_results, unexplained, suspected_sunk, remaining, heat
    )

    diagnostics = Diagnostics(
        mode=mode,
        ships_remaining=len(remaining),
        placements_considered=heat.placements_considered,
        placements_valid=heat.placements_valid,
        hit_clusters=[list(c) for c in clusters],
        unexplained_hits=[list(clusters[i]) for i in unexplained],
        local_solve=local_results,
        selection=selection,
        no_touch=not heat.allow_touching,
        parity_hunt=heat.parity_applied,
        relaxed_placements=heat.allow_touching,
        suspected_sunk=suspected_sunk,
        errors=roster_errors,
        trace=trace,
    )
    move = Move(selection.row, selection.col, selection.probability if selection.found else 0.0, reason)

    debug_log(
        "recommend",
        f"{mode} {selection.type.value} -> ({move.row},{move.col}) "
        f"solver attempts={diagnostics.local_attempts}",
        "\n".join(trace),
    )
    return MoveResult(move, heat.heat, heat.raw, heat.has_any_placement, diagnostics)


def recommend_from_snapshot(snapshot: Mapping[str, object], params: Optional[EngineParams] = None) -> MoveResult:
    """Convenience entry point for a {"board": ..., "boats": ...} game snapshot."""
    board = snapshot.get("board") if isinstance(snapshot, Mapping) else None
    boats = snapshot.get("boats") if isinstance(snapshot, Mapping) else None
    if boats is None and isinstance(snapshot, Mapping):
        boats = snapshot.get("ships")
    return recommend_move(board, boats, params)  # type: ignore[arg-type]

