from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .board import create_board
from .config import DEFAULT_COLS, DEFAULT_FLEET, DEFAULT_ROWS
from .types import ShipEntry


def _entry_length(raw: object) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    try:
        length = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if float(length) != float(raw):  # type: ignore[arg-type]
        return None
    return length


def _coerce_entry(raw: object, index: int) -> Tuple[Optional[ShipEntry], Optional[str]]:
    default_id = f"ship{index + 1}"
    if isinstance(raw, ShipEntry):
        entry = raw
    elif isinstance(raw, dict):
        ident = raw.get("id", raw.get("identifier", raw.get("name")))
        length = _entry_length(raw.get("length"))
        if length is None:
            return None, f"ship {index} has invalid length {raw.get('length')!r}"
        ident_text = str(ident).strip() if ident is not None else ""
        entry = ShipEntry(ident_text or default_id, length, bool(raw.get("sunk", False)))
    else:
        length = _entry_length(raw)
        if length is None:
            return None, f"ship {index} is not a ship entry: {raw!r}"
        entry = ShipEntry(default_id, length, False)

    if entry.length < 1:
        return None, f"ship {entry.identifier} must have length > 0"
    return entry, None


def parse_roster(raw: Optional[Iterable[object]]) -> Tuple[List[ShipEntry], List[str]]:
    """Coerce roster entries; bad lengths are dropped, duplicate ids are reported but kept."""
    ships: List[ShipEntry] = []
    errors: List[str] = []
    if raw is None:
        return ships, errors
    ids: Set[str] = set()
    for index, item in enumerate(raw):
        entry, error = _coerce_entry(item, index)
        if error:
            errors.append(error)
        if entry is None:
            continue
        if entry.identifier in ids:
            errors.append(f"duplicate ship id: {entry.identifier}")
        ids.add(entry.identifier)
        ships.append(entry)
    return ships, errors


def validate_roster(raw: Optional[Iterable[object]]) -> List[str]:
    _, errors = parse_roster(raw)
    return errors


def remaining_ships(roster: Sequence[ShipEntry]) -> List[ShipEntry]:
    return [ship for ship in roster if not ship.sunk]


def is_game_over(roster: Sequence[ShipEntry]) -> bool:
    return len(roster) > 0 and all(ship.sunk for ship in roster)


def fleet_from_lengths(lengths: Iterable[int]) -> List[ShipEntry]:
    return [ShipEntry(f"ship{i + 1}", int(length)) for i, length in enumerate(lengths)]


def default_fleet() -> List[ShipEntry]:
    return fleet_from_lengths(DEFAULT_FLEET)


def create_game_state(
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    boats: Optional[Sequence[ShipEntry]] = None,
) -> Dict[str, object]:
    return {
        "board": create_board(rows, cols),
        "boats": list(boats) if boats is not None else [],
    }
