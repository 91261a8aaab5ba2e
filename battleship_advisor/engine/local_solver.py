from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from battleship_advisor.domain.board import iter_mask_indices, make_mask
from battleship_advisor.domain.clusters import bounding_box
from battleship_advisor.domain.config import EngineParams
from battleship_advisor.domain.placements import PlacementBook
from battleship_advisor.domain.types import Cell, Placement, Roi


@dataclass
class LocalSolveResult:
    cluster_index: int
    cluster: List[Cell]
    roi: Optional[Roi]
    padding: int
    total_solutions: int = 0
    exhausted: bool = False
    nodes: int = 0
    exact_fit_solutions: int = 0
    probabilities: Dict[Cell, float] = field(default_factory=dict)

    @property
    def attempted(self) -> bool:
        return self.roi is not None

    @property
    def unique(self) -> bool:
        return self.attempted and self.total_solutions == 1

    def probability(self, r: int, c: int) -> float:
        return self.probabilities.get((r, c), 0.0)

    def to_dict(self) -> Dict[str, object]:
        return {
            "clusterIndex": self.cluster_index,
            "totalSolutions": self.total_solutions,
            "roi": self.roi.to_dict() if self.roi is not None else None,
            "padding": self.padding,
            "skipped": not self.attempted,
            "complete": self.attempted and not self.exhausted,
            "nodes": self.nodes,
        }


def build_roi(
    cluster: Sequence[Cell],
    rows: int,
    cols: int,
    lengths: Sequence[int],
    params: EngineParams,
) -> Tuple[Optional[Roi], int]:
    """
    Expand the cluster's bounding box by the longest remaining ship, shrinking
    the padding until the clipped region fits the area cap.

    Returns (None, padding) when even the minimum padding is too large.
    """
    r0, c0, r1, c1 = bounding_box(cluster)
    min_pad = max(1, int(params.roi_min_padding))
    pad = max(min_pad, max(lengths, default=1))
    while True:
        roi = Roi(max(0, r0 - pad), max(0, c0 - pad), min(rows - 1, r1 + pad), min(cols - 1, c1 + pad))
        if roi.area <= params.roi_area_cap:
            return roi, pad
        if pad <= min_pad:
            return None, pad
        pad -= 1


def solve_cluster(
    cluster_index: int,
    cluster: Sequence[Cell],
    lengths: Sequence[int],
    book: PlacementBook,
    params: EngineParams,
) -> LocalSolveResult:
    """
    Enumerate the ways the remaining ships can explain the cluster inside its ROI.

    A ship either takes a legal placement fully inside the ROI whose hull covers
    at least one hit of the cluster, or it is assumed to be elsewhere on the
    board. Placed ships may not share hull or halo cells, and the placed hulls
    must cover every hit of the cluster. Solutions are counted once
    per distinct occupied-cell union. The search stops at the node or solution
    budget, in which case the result is a sample (exhausted=True).
    """
    rows, cols = book.rows, book.cols
    roi, pad = build_roi(cluster, rows, cols, lengths, params)
    result = LocalSolveResult(cluster_index, list(cluster), roi, pad)
    if roi is None:
        return result

    cluster_mask = make_mask(cluster, cols)
    options: List[List[Placement]] = [
        [p for p in book.legal(length) if p.mask & cluster_mask and roi.contains_all(p.cells)]
        for length in lengths
    ]
    # fewest options first
    order = sorted(range(len(lengths)), key=lambda i: (len(options[i]), i))
    ordered = [options[i] for i in order]
    n = len(ordered)

    # can_cover[k]: some ship at position >= k could still reach the cluster
    can_cover = [False] * (n + 1)
    for k in range(n - 1, -1, -1):
        can_cover[k] = can_cover[k + 1] or bool(ordered[k])

    seen: Set[int] = set()
    counts: Dict[int, int] = {}
    placed: List[int] = []
    nodes = 0
    exact_fit = 0
    stopped = False

    def backtrack(k: int, hull_mask: int) -> None:
        nonlocal nodes, exact_fit, stopped
        if stopped:
            return
        if nodes >= params.node_budget:
            stopped = True
            return
        nodes += 1

        covered = (hull_mask & cluster_mask) == cluster_mask
        if not covered and not can_cover[k]:
            return
        if k == n:
            if hull_mask in seen:
                return
            seen.add(hull_mask)
            for idx in iter_mask_indices(hull_mask):
                counts[idx] = counts.get(idx, 0) + 1
            if cluster_mask in placed:
                exact_fit += 1
            if len(seen) >= params.solution_budget:
                stopped = True
            return

        # ship k stays outside the ROI
        backtrack(k + 1, hull_mask)
        for p in ordered[k]:
            if stopped:
                return
            if p.adjacency_mask & hull_mask:
                continue
            placed.append(p.mask)
            backtrack(k + 1, hull_mask | p.mask)
            placed.pop()

    backtrack(0, 0)

    total = len(seen)
    result.total_solutions = total
    result.exhausted = stopped
    result.nodes = nodes
    result.exact_fit_solutions = exact_fit
    if total > 0:
        result.probabilities = {
            (idx // cols, idx % cols): cnt / total for idx, cnt in sorted(counts.items())
        }
    return result


def solve_clusters(
    clusters: Sequence[Sequence[Cell]],
    lengths: Sequence[int],
    book: PlacementBook,
    params: EngineParams,
) -> List[LocalSolveResult]:
    return [solve_cluster(i, cluster, lengths, book, params) for i, cluster in enumerate(clusters)]


def is_unexplained(result: LocalSolveResult, lengths: Sequence[int], book: PlacementBook) -> bool:
    """A cluster no legal arrangement can account for."""
    if result.attempted and not result.exhausted:
        return result.total_solutions == 0
    if result.total_solutions > 0:
        return False
    # skipped or cut short before any solution: fall back to a single-ship check
    return not book.covers(lengths, make_mask(result.cluster, book.cols))


def is_suspected_sunk(result: LocalSolveResult) -> bool:
    """Every solution puts a ship exactly on the cluster's hits: the caller has likely not marked it sunk."""
    return (
        result.attempted
        and not result.exhausted
        and result.total_solutions > 0
        and result.exact_fit_solutions == result.total_solutions
    )
