import json
import os
from typing import Any, Dict, List, Sequence, Tuple

from battleship_advisor.domain.board import Board, normalize_board, validate_board
from battleship_advisor.domain.roster import parse_roster
from battleship_advisor.domain.types import ShipEntry

SNAPSHOT_SCHEMA = 1


class SnapshotError(ValueError):
    """A snapshot file or payload that cannot be turned into a board and roster."""


def snapshot_to_dict(board: Sequence[Sequence[int]], roster: Sequence[ShipEntry]) -> Dict[str, Any]:
    return {
        "schema": SNAPSHOT_SCHEMA,
        "board": [[{"status": int(s)} for s in row] for row in board],
        "boats": [ship.to_dict() for ship in roster],
    }


def snapshot_from_dict(data: Any) -> Tuple[Board, List[ShipEntry]]:
    if not isinstance(data, dict):
        raise SnapshotError("snapshot must be a JSON object")
    raw_board = data.get("board")
    errors = validate_board(raw_board)
    if errors:
        raise SnapshotError("invalid board: " + "; ".join(errors))
    raw_boats = data.get("boats", data.get("ships", []))
    if not isinstance(raw_boats, list):
        raise SnapshotError("boats must be a list")
    roster, roster_errors = parse_roster(raw_boats)
    if roster_errors:
        raise SnapshotError("invalid boats: " + "; ".join(roster_errors))
    return normalize_board(raw_board), roster


def load_snapshot(path: str) -> Tuple[Board, List[ShipEntry]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SnapshotError(f"cannot read snapshot {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"snapshot {path} is not valid JSON: {e}") from e
    return snapshot_from_dict(data)


def _write_atomic(path: str, data: Dict[str, Any]) -> None:
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise


def save_snapshot(path: str, board: Sequence[Sequence[int]], roster: Sequence[ShipEntry]) -> None:
    _write_atomic(path, snapshot_to_dict(board, roster))
