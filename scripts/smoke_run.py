from battleship_advisor.domain.board import apply_shot, create_board
from battleship_advisor.domain.config import HIT, MISS
from battleship_advisor.domain.roster import fleet_from_lengths
from battleship_advisor.engine.recommend import recommend_move


def main() -> None:
    board = create_board(6, 6)
    ships = fleet_from_lengths([3, 2])

    result = recommend_move(board, ships)
    print(f"Hunt: ({result.move.row},{result.move.col}) {result.diagnostics.selection.type.value}")

    board = apply_shot(board, result.move.row, result.move.col, HIT)
    board = apply_shot(board, 0, 0, MISS)
    result = recommend_move(board, ships)
    print(f"Target: ({result.move.row},{result.move.col}) {result.diagnostics.selection.type.value}")
    print(f"Smoke OK: {result.move.reason}")


if __name__ == "__main__":
    main()
