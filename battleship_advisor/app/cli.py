#!/usr/bin/env python3
import argparse
import json
import sys
from typing import Iterable, List, Optional, Sequence, Tuple

from battleship_advisor.domain.board import Board, format_board, parse_text_board
from battleship_advisor.domain.config import EngineParams, parse_param_assignments
from battleship_advisor.domain.roster import default_fleet, fleet_from_lengths
from battleship_advisor.domain.types import ShipEntry
from battleship_advisor.engine.recommend import MoveResult, recommend_move
from battleship_advisor.persistence.snapshot_store import SnapshotError, load_snapshot, save_snapshot
from battleship_advisor.utils import debug


def _parse_ships(raw: str) -> List[ShipEntry]:
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    lengths = []
    for part in parts:
        try:
            lengths.append(int(part))
        except ValueError:
            raise ValueError(f"Ship lengths must be integers, got '{part}'.")
    return fleet_from_lengths(lengths)


def _resolve_inputs(args: argparse.Namespace) -> Tuple[Board, List[ShipEntry]]:
    if args.snapshot:
        board, roster = load_snapshot(args.snapshot)
        if args.ships:
            roster = _parse_ships(args.ships)
        return board, roster
    if not args.board:
        raise ValueError("Provide --snapshot or --board.")
    board = parse_text_board(args.board)
    roster = _parse_ships(args.ships) if args.ships else default_fleet()
    return board, roster


def _format_heat(heatmap: Sequence[Sequence[float]], best: Tuple[int, int]) -> str:
    lines = []
    for r, row in enumerate(heatmap):
        cells = []
        for c, value in enumerate(row):
            mark = "*" if (r, c) == best else " "
            cells.append(f"{value:4.2f}{mark}")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def _print_text(result: MoveResult, board: Board, show_heat: bool) -> None:
    move = result.move
    diag = result.diagnostics
    print(format_board(board))
    print()
    print(f"Mode: {diag.mode}  Ships remaining: {diag.ships_remaining}")
    print(f"Placements: {diag.placements_valid}/{diag.placements_considered} legal")
    print(f"Selection: {diag.selection.type.value}")
    print(f"Best move: ({move.row},{move.col})  score={move.normalized_score:.3f}")
    print(f"Reason: {move.reason}")
    for err in diag.errors:
        print(f"Warning: {err}")
    if show_heat and result.heatmap:
        print()
        print(_format_heat(result.heatmap, (move.row, move.col)))


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Battleship advisor: recommend the next shot for a board.")
    parser.add_argument("--snapshot", help="JSON snapshot with 'board' and 'boats'")
    parser.add_argument("--board", help="Text board, rows separated by '/' ('.' unknown, 'o' miss, 'x' hit, '#' sunk)")
    parser.add_argument("--ships", help="Comma-separated ship lengths (default 5,4,3,3,2)")
    parser.add_argument("--param", action="append", default=[], metavar="KEY=VALUE", help="Engine parameter override")
    parser.add_argument("--save", help="Write the resolved board and ships to a snapshot file")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--heat", action="store_true", help="Print the normalized heat map")
    parser.add_argument("--debug", action="store_true", help="Append engine events to the debug log")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.debug:
        debug.set_enabled(True)
    else:
        debug.enable_from_env()

    try:
        params = EngineParams.from_overrides(parse_param_assignments(args.param))
        board, roster = _resolve_inputs(args)
        if args.save:
            save_snapshot(args.save, board, roster)
    except (SnapshotError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    result = recommend_move(board, roster, params)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_text(result, board, args.heat)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
