from dataclasses import dataclass
from typing import Dict, Tuple

Cell = Tuple[int, int]

HORIZONTAL = "H"
VERTICAL = "V"


@dataclass(frozen=True)
class ShipEntry:
    identifier: str
    length: int
    sunk: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.identifier, "length": int(self.length), "sunk": bool(self.sunk)}


@dataclass(frozen=True)
class Placement:
    length: int
    orientation: str  # HORIZONTAL or VERTICAL
    cells: Tuple[Cell, ...]
    mask: int
    halo: Tuple[Cell, ...]
    halo_mask: int

    @property
    def adjacency_mask(self) -> int:
        # hull plus halo: everything another ship's hull must stay out of
        return self.mask | self.halo_mask


@dataclass(frozen=True)
class Roi:
    """Inclusive rectangle r0..r1 x c0..c1, already clipped to the board."""

    r0: int
    c0: int
    r1: int
    c1: int

    @property
    def height(self) -> int:
        return self.r1 - self.r0 + 1

    @property
    def width(self) -> int:
        return self.c1 - self.c0 + 1

    @property
    def area(self) -> int:
        return self.height * self.width

    def contains(self, r: int, c: int) -> bool:
        return self.r0 <= r <= self.r1 and self.c0 <= c <= self.c1

    def contains_all(self, cells) -> bool:
        return all(self.contains(r, c) for r, c in cells)

    def to_dict(self) -> Dict[str, int]:
        return {"r0": self.r0, "c0": self.c0, "r1": self.r1, "c1": self.c1}
