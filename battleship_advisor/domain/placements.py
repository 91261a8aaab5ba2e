from typing import Dict, Iterable, List, Sequence, Tuple

from .board import make_mask
from .types import HORIZONTAL, VERTICAL, Cell, Placement


def _halo(cells: Sequence[Cell], rows: int, cols: int) -> Tuple[Cell, ...]:
    hull = set(cells)
    halo = set()
    for r, c in cells:
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                rr = r + dr
                cc = c + dc
                if 0 <= rr < rows and 0 <= cc < cols and (rr, cc) not in hull:
                    halo.add((rr, cc))
    return tuple(sorted(halo))


def _make_placement(length: int, orientation: str, cells: Tuple[Cell, ...], rows: int, cols: int) -> Placement:
    halo = _halo(cells, rows, cols)
    return Placement(length, orientation, cells, make_mask(cells, cols), halo, make_mask(halo, cols))


def generate_silhouettes(length: int, rows: int, cols: int) -> List[Placement]:
    """
    Every in-bounds straight placement of a ship, row-major by start cell with
    the horizontal silhouette before the vertical one.

    A length-1 ship has a single orientation.
    """
    placements: List[Placement] = []
    if length < 1:
        return placements
    for r in range(rows):
        for c in range(cols):
            if c + length <= cols:
                cells = tuple((r, c + i) for i in range(length))
                placements.append(_make_placement(length, HORIZONTAL, cells, rows, cols))
            if length > 1 and r + length <= rows:
                cells = tuple((r + i, c) for i in range(length))
                placements.append(_make_placement(length, VERTICAL, cells, rows, cols))
    return placements


def is_legal_placement(p: Placement, blocked_mask: int, known_mask: int, allow_touching: bool = False) -> bool:
    # cannot sit on misses or sunk ships
    if p.mask & blocked_mask:
        return False
    # no-touch: a revealed ship cell next to the hull must be part of the hull
    if not allow_touching and (p.halo_mask & known_mask):
        return False
    return True


def enumerate_legal_placements(
    length: int,
    rows: int,
    cols: int,
    blocked_mask: int,
    known_mask: int,
    allow_touching: bool = False,
) -> Tuple[List[Placement], int]:
    """Return (legal placements, number of silhouettes considered)."""
    silhouettes = generate_silhouettes(length, rows, cols)
    legal = [p for p in silhouettes if is_legal_placement(p, blocked_mask, known_mask, allow_touching)]
    return legal, len(silhouettes)


class PlacementBook:
    """Per-invocation table of legal placements, built once per distinct ship length."""

    def __init__(self, rows: int, cols: int, blocked_mask: int, known_mask: int, allow_touching: bool = False):
        self.rows = rows
        self.cols = cols
        self.blocked_mask = blocked_mask
        self.known_mask = known_mask
        self.allow_touching = allow_touching
        self._legal: Dict[int, List[Placement]] = {}
        self._considered: Dict[int, int] = {}

    def legal(self, length: int) -> List[Placement]:
        if length not in self._legal:
            legal, considered = enumerate_legal_placements(
                length,
                self.rows,
                self.cols,
                self.blocked_mask,
                self.known_mask,
                self.allow_touching,
            )
            self._legal[length] = legal
            self._considered[length] = considered
        return self._legal[length]

    def considered(self, length: int) -> int:
        self.legal(length)
        return self._considered[length]

    def totals(self, lengths: Iterable[int]) -> Tuple[int, int]:
        """(silhouettes considered, legal placements) summed over a list of ship lengths."""
        considered = 0
        valid = 0
        for length in lengths:
            valid += len(self.legal(length))
            considered += self.considered(length)
        return considered, valid

    def covers(self, lengths: Iterable[int], required_mask: int) -> bool:
        """True if some legal placement of one of the lengths covers every required cell."""
        for length in set(lengths):
            for p in self.legal(length):
                if (p.mask & required_mask) == required_mask:
                    return True
        return False
