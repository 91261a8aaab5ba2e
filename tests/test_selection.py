import unittest

from battleship_advisor.domain.board import create_board, parse_text_board
from battleship_advisor.domain.types import Roi
from battleship_advisor.engine.heat import HeatSurface
from battleship_advisor.engine.local_solver import LocalSolveResult
from battleship_advisor.strategies.selection import (
    SelectionType,
    binary_entropy,
    select_adjacent_heat,
    select_hunt,
    select_local_entropy,
    select_move,
)


def _surface(heat):
    return HeatSurface(heat, heat, True, False, False, 0, 0)


class EntropyTests(unittest.TestCase):
    def test_binary_entropy(self):
        self.assertEqual(binary_entropy(0.5), 1.0)
        self.assertEqual(binary_entropy(0.0), 0.0)
        self.assertEqual(binary_entropy(1.0), 0.0)
        self.assertAlmostEqual(binary_entropy(0.25), binary_entropy(0.75))


class SelectorRuleTests(unittest.TestCase):
    def test_hunt_ties_go_to_lowest_row_then_column(self):
        board = create_board(2, 2)
        sel = select_hunt(board, _surface([[0.5, 1.0], [1.0, 0.2]]))
        self.assertEqual((sel.type, sel.row, sel.col), (SelectionType.HUNT, 0, 1))

    def test_entropy_prefers_small_solution_sets(self):
        board = create_board(3, 6)
        roi = Roi(0, 0, 2, 5)
        many = LocalSolveResult(0, [(1, 1)], roi, 1, total_solutions=16, probabilities={(0, 1): 0.5})
        few = LocalSolveResult(1, [(1, 4)], roi, 1, total_solutions=4, probabilities={(0, 4): 0.3})
        sel = select_local_entropy(board, [many, few])
        self.assertEqual((sel.row, sel.col, sel.cluster_index), (0, 4, 1))
        self.assertAlmostEqual(sel.probability, 0.3)

    def test_entropy_ties_prefer_endpoint_proximity(self):
        board = create_board(1, 6)
        roi = Roi(0, 0, 0, 5)
        res = LocalSolveResult(
            0,
            [(0, 2)],
            roi,
            1,
            total_solutions=4,
            probabilities={(0, 0): 0.5, (0, 3): 0.5},
        )
        sel = select_local_entropy(board, [res])
        self.assertEqual((sel.row, sel.col), (0, 3))

    def test_adjacent_heat_needs_positive_heat(self):
        board = parse_text_board(["...", ".x.", "..."])
        zero = [[0.0] * 3 for _ in range(3)]
        self.assertIsNone(select_adjacent_heat(board, [[(1, 1)]], _surface(zero)))
        heat = [[0.9, 0.1, 0.0], [0.3, 0.0, 0.0], [0.0, 0.0, 0.0]]
        sel = select_adjacent_heat(board, [[(1, 1)]], _surface(heat))
        self.assertEqual((sel.type, sel.row, sel.col), (SelectionType.ADJACENT_HEAT, 1, 0))

    def test_target_mode_falls_back_to_global_heat(self):
        board = parse_text_board([".o.", "oxo", ".o."])
        heat = [[0.4, 0.0, 0.7], [0.0, 0.0, 0.0], [1.0, 0.0, 0.2]]
        sel = select_move(board, "target", [[(1, 1)]], _surface(heat), [])
        self.assertEqual((sel.type, sel.row, sel.col), (SelectionType.GLOBAL_FALLBACK, 2, 0))


if __name__ == "__main__":
    unittest.main()
