from typing import List, Sequence, Tuple

from battleship_advisor.domain.types import Cell, ShipEntry
from battleship_advisor.engine.heat import HeatSurface
from battleship_advisor.engine.local_solver import LocalSolveResult
from battleship_advisor.strategies.selection import Selection, SelectionType

NO_BOARD_REASON = "no board provided"
NO_UNKNOWN_REASON = "no unknown tiles available"


def _cell(cell: Cell) -> str:
    return f"({cell[0]},{cell[1]})"


def _cells(cells: Sequence[Cell]) -> str:
    return "[" + ", ".join(_cell(c) for c in cells) + "]"


def _hits(n: int) -> str:
    return f"{n} hit" if n == 1 else f"{n} hits"


def ships_label(remaining: Sequence[ShipEntry]) -> str:
    if not remaining:
        return "no remaining ships reported"
    names = ", ".join(f"{s.identifier}:{s.length}" for s in remaining)
    return f"{len(remaining)} ship(s) remaining ({names})"


def _selection_sentence(
    mode: str,
    selection: Selection,
    clusters: Sequence[Sequence[Cell]],
    local_results: Sequence[LocalSolveResult],
    remaining: Sequence[ShipEntry],
    heat: HeatSurface,
) -> str:
    cell = _cell((selection.row, selection.col))
    kind = selection.type
    size = len(clusters[selection.cluster_index]) if selection.cluster_index is not None else 0

    if kind == SelectionType.HUNT:
        text = f"Hunt mode: highest-heat unknown tile {cell} (heat {selection.score:.3f}) with {ships_label(remaining)}."
        if heat.parity_applied:
            text += " Parity filter skips odd (row+col) tiles."
        return text
    if kind == SelectionType.LOCAL_DETERMINISTIC:
        res = local_results[selection.cluster_index]
        found = "the only arrangement found before the search budget ran out" if res.exhausted else "the only consistent arrangement"
        return (
            f"Target mode: local deterministic deduction on cluster {selection.cluster_index} ({_hits(size)}); "
            f"{found} puts a ship on {cell}."
        )
    if kind == SelectionType.LOCAL_ENTROPY:
        res = local_results[selection.cluster_index]
        sampled = ", sampled" if res.exhausted else ""
        return (
            f"Target mode: local entropy pick {cell} on cluster {selection.cluster_index} "
            f"({_hits(size)}, {res.total_solutions} solutions{sampled}); "
            f"p={selection.probability:.3f}, information score {selection.score:.3f}."
        )
    if kind == SelectionType.ADJACENT_HEAT:
        return (
            f"Target mode: adjacent-heat fallback {cell} next to cluster {selection.cluster_index} "
            f"({_hits(size)}), heat {selection.score:.3f}."
        )
    if kind == SelectionType.GLOBAL_FALLBACK:
        return (
            f"Target mode: global fallback to highest-heat tile {cell} (heat {selection.score:.3f}); "
            "no cluster produced a candidate."
        )
    label = "Hunt" if mode == "hunt" else "Target"
    return f"{label} mode: no legal placement available; first unknown tile {cell} in board order."


def build_explanation(
    mode: str,
    selection: Selection,
    clusters: Sequence[Sequence[Cell]],
    local_results: Sequence[LocalSolveResult],
    unexplained: Sequence[int],
    suspected_sunk: Sequence[int],
    remaining: Sequence[ShipEntry],
    heat: HeatSurface,
) -> Tuple[str, List[str]]:
    """Return (reason, trace). Purely descriptive; never feeds back into selection."""
    trace: List[str] = [
        f"mode: {mode}",
        ships_label(remaining),
        f"placements: {heat.placements_valid}/{heat.placements_considered} legal"
        + (" (touching allowed)" if heat.allow_touching else " (no-touch)"),
        f"hit clusters: {len(clusters)}",
    ]
    for res in local_results:
        head = f"cluster {res.cluster_index}: {_hits(len(res.cluster))} at {_cells(res.cluster)}"
        if not res.attempted:
            trace.append(f"{head}; local solve skipped, ROI over area cap")
            continue
        roi = res.roi
        budget = ", budget reached" if res.exhausted else ""
        trace.append(
            f"{head}; ROI rows {roi.r0}-{roi.r1} cols {roi.c0}-{roi.c1}, "
            f"{res.total_solutions} solution(s){budget}, {res.nodes} nodes"
        )

    if selection.type == SelectionType.NONE:
        reason = NO_UNKNOWN_REASON
        trace.append(f"selection: {selection.type.value}")
        return reason, trace

    parts = [_selection_sentence(mode, selection, clusters, local_results, remaining, heat)]

    attempts = sum(1 for res in local_results if res.attempted)
    if clusters:
        parts.append(f"Local exact solver used on {attempts}/{len(clusters)} cluster(s).")

    if unexplained:
        coords = "; ".join(_cells(clusters[i]) for i in unexplained)
        text = f"Unexplained hits in {len(unexplained)} cluster(s): {coords}"
        if heat.allow_touching:
            text += "; relaxed touching placements used as fallback."
        else:
            text += "."
        parts.append(text)

    if suspected_sunk:
        idx = ", ".join(str(i) for i in suspected_sunk)
        parts.append(f"Cluster(s) {idx} already match a full ship length; mark them sunk if confirmed.")

    trace.append(
        f"selection: {selection.type.value} at {_cell((selection.row, selection.col))} "
        f"score {selection.score:.3f}"
    )
    return " ".join(parts), trace
