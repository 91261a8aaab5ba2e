from typing import List, Sequence, Set, Tuple

from .board import board_dims
from .config import HIT, UNKNOWN
from .types import Cell

NEIGHBORS4 = ((-1, 0), (1, 0), (0, -1), (0, 1))


def find_hit_clusters(board: Sequence[Sequence[int]]) -> List[List[Cell]]:
    """
    Group HIT tiles into 4-connected clusters.

    Clusters come out in row-major order of their first tile; the cells of each
    cluster are sorted by row, then column.
    """
    rows, cols = board_dims(board)
    seen: Set[Cell] = set()
    clusters: List[List[Cell]] = []
    for r in range(rows):
        for c in range(cols):
            if board[r][c] != HIT or (r, c) in seen:
                continue
            seen.add((r, c))
            stack = [(r, c)]
            component: List[Cell] = []
            while stack:
                cr, cc = stack.pop()
                component.append((cr, cc))
                for dr, dc in NEIGHBORS4:
                    nr, nc = cr + dr, cc + dc
                    if 0 <= nr < rows and 0 <= nc < cols and board[nr][nc] == HIT and (nr, nc) not in seen:
                        seen.add((nr, nc))
                        stack.append((nr, nc))
            clusters.append(sorted(component))
    return clusters


def cluster_endpoints(cluster: Sequence[Cell]) -> List[Cell]:
    """Cells with at most one hit neighbour: the likely ends of a partly found ship."""
    members = set(cluster)
    ends: List[Cell] = []
    for r, c in cluster:
        n = sum(1 for dr, dc in NEIGHBORS4 if (r + dr, c + dc) in members)
        if n <= 1:
            ends.append((r, c))
    return sorted(ends)


def bounding_box(cluster: Sequence[Cell]) -> Tuple[int, int, int, int]:
    rs = [r for r, _ in cluster]
    cs = [c for _, c in cluster]
    return min(rs), min(cs), max(rs), max(cs)


def adjacent_cells(cluster: Sequence[Cell], rows: int, cols: int) -> List[Cell]:
    members = set(cluster)
    out: Set[Cell] = set()
    for r, c in cluster:
        for dr, dc in NEIGHBORS4:
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols and (nr, nc) not in members:
                out.add((nr, nc))
    return sorted(out)


def continuation_cells(board: Sequence[Sequence[int]], clusters: Sequence[Sequence[Cell]]) -> List[Cell]:
    """UNKNOWN tiles that would extend a cluster from one of its endpoints."""
    rows, cols = board_dims(board)
    out: Set[Cell] = set()
    for cluster in clusters:
        for r, c in cluster_endpoints(cluster):
            for dr, dc in NEIGHBORS4:
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols and board[nr][nc] == UNKNOWN:
                    out.add((nr, nc))
    return sorted(out)


def endpoint_distance(cell: Cell, cluster: Sequence[Cell]) -> int:
    ends = cluster_endpoints(cluster) or list(cluster)
    r, c = cell
    return min(abs(r - er) + abs(c - ec) for er, ec in ends)
