from typing import Iterable, List, Sequence, Set, Tuple, Union

from .config import (
    CHAR_TO_STATUS,
    DEFAULT_COLS,
    DEFAULT_ROWS,
    HIT,
    MISS,
    STATUS_TO_CHAR,
    SUNK,
    TILE_STATUSES,
    UNKNOWN,
)
from .types import Cell

Board = List[List[int]]


def cell_index(r: int, c: int, cols: int) -> int:
    return r * cols + c


def make_mask(cells: Iterable[Cell], cols: int) -> int:
    m = 0
    for r, c in cells:
        m |= 1 << cell_index(r, c, cols)
    return m


def iter_mask_indices(mask: int) -> List[int]:
    idxs: List[int] = []
    m = int(mask)
    while m:
        lsb = m & -m
        idxs.append(lsb.bit_length() - 1)
        m ^= lsb
    return idxs


def mask_to_cells(mask: int, cols: int) -> List[Cell]:
    return [(idx // cols, idx % cols) for idx in iter_mask_indices(mask)]


def create_board(rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> Board:
    return [[UNKNOWN for _ in range(cols)] for _ in range(rows)]


def board_dims(board: Sequence[Sequence[int]]) -> Tuple[int, int]:
    rows = len(board)
    cols = len(board[0]) if rows > 0 else 0
    return rows, cols


def in_bounds(board: Sequence[Sequence[int]], r: int, c: int) -> bool:
    rows, cols = board_dims(board)
    return 0 <= r < rows and 0 <= c < cols


def parse_status(value: object) -> int:
    """Accept an int status, a {"status": n} tile or a single text-board character."""
    if isinstance(value, dict):
        value = value.get("status", UNKNOWN)
    if isinstance(value, bool):
        raise ValueError(f"invalid tile status: {value!r}")
    if isinstance(value, int):
        if value in TILE_STATUSES:
            return value
        raise ValueError(f"invalid tile status: {value!r}")
    if isinstance(value, str) and value in CHAR_TO_STATUS:
        return CHAR_TO_STATUS[value]
    raise ValueError(f"invalid tile status: {value!r}")


def validate_board(raw: object) -> List[str]:
    errors: List[str] = []
    if not isinstance(raw, (list, tuple)):
        errors.append("board must be a list of rows")
        return errors
    if not raw:
        errors.append("board must have at least one row")
        return errors

    width = None
    for r, row in enumerate(raw):
        if not isinstance(row, (list, tuple, str)):
            errors.append(f"row {r} is not a list")
            continue
        values = list(row)
        if not values:
            errors.append(f"row {r} is empty")
            continue
        if width is None:
            width = len(values)
        elif len(values) != width:
            errors.append(f"row {r} has {len(values)} tiles, expected {width}")
        for c, value in enumerate(values):
            try:
                parse_status(value)
            except ValueError:
                errors.append(f"tile ({r},{c}) has invalid status {value!r}")
    return errors


def normalize_board(raw: Sequence[Union[str, Sequence[object]]]) -> Board:
    errors = validate_board(raw)
    if errors:
        raise ValueError("; ".join(errors))
    return [[parse_status(v) for v in list(row)] for row in raw]


def parse_text_board(text: Union[str, Sequence[str]]) -> Board:
    """Parse '/'-separated (or listed) rows of '.', 'o', 'x', '#'."""
    if isinstance(text, str):
        rows = [part.strip() for part in text.replace("\n", "/").split("/") if part.strip()]
    else:
        rows = [row.strip() for row in text]
    return normalize_board(rows)


def format_board(board: Sequence[Sequence[int]]) -> str:
    return "\n".join("".join(STATUS_TO_CHAR[s] for s in row) for row in board)


def status_mask(board: Sequence[Sequence[int]], statuses: Iterable[int]) -> int:
    rows, cols = board_dims(board)
    wanted = set(statuses)
    m = 0
    for r in range(rows):
        for c in range(cols):
            if board[r][c] in wanted:
                m |= 1 << cell_index(r, c, cols)
    return m


def constraint_masks(board: Sequence[Sequence[int]]) -> Tuple[int, int]:
    """Return (blocked, ship_known) masks: MISS/SUNK cells and HIT/SUNK cells."""
    rows, cols = board_dims(board)
    blocked = 0
    ship_known = 0
    for r in range(rows):
        for c in range(cols):
            status = board[r][c]
            bit = 1 << cell_index(r, c, cols)
            if status == MISS:
                blocked |= bit
            elif status == HIT:
                ship_known |= bit
            elif status == SUNK:
                blocked |= bit
                ship_known |= bit
    return blocked, ship_known


def constraint_sets(board: Sequence[Sequence[int]]) -> Tuple[Set[Cell], Set[Cell]]:
    _, cols = board_dims(board)
    blocked, ship_known = constraint_masks(board)
    return set(mask_to_cells(blocked, cols)), set(mask_to_cells(ship_known, cols))


def unknown_cells(board: Sequence[Sequence[int]]) -> List[Cell]:
    rows, cols = board_dims(board)
    return [(r, c) for r in range(rows) for c in range(cols) if board[r][c] == UNKNOWN]


def apply_shot(board: Sequence[Sequence[int]], row: int, col: int, status: int) -> Board:
    """Return a copy of the board with one tile's status replaced."""
    if status not in TILE_STATUSES or isinstance(status, bool):
        raise ValueError(f"invalid tile status: {status!r}")
    next_board = [list(line) for line in board]
    if in_bounds(next_board, row, col):
        next_board[row][col] = status
    return next_board
