import unittest

from battleship_advisor.domain.board import parse_text_board
from battleship_advisor.domain.config import EngineParams
from battleship_advisor.domain.roster import fleet_from_lengths
from battleship_advisor.engine.explain import ships_label
from battleship_advisor.engine.recommend import recommend_move


class ExplanationTests(unittest.TestCase):
    def test_ships_label(self):
        self.assertEqual(ships_label([]), "no remaining ships reported")
        self.assertEqual(ships_label(fleet_from_lengths([3, 2])), "2 ship(s) remaining (ship1:3, ship2:2)")

    def test_trace_lists_every_cluster(self):
        board = parse_text_board(["x.......", "........", "........", "........", ".......x"])
        result = recommend_move(board, fleet_from_lengths([2]))
        trace = result.diagnostics.trace
        self.assertEqual(trace[0], "mode: target")
        self.assertTrue(any(line.startswith("cluster 0: 1 hit at [(0,0)]") for line in trace))
        self.assertTrue(any(line.startswith("cluster 1: 1 hit at [(4,7)]") for line in trace))
        self.assertTrue(trace[-1].startswith("selection: local entropy"))

    def test_skipped_cluster_is_explained(self):
        board = parse_text_board([".....", ".....", "..x..", ".....", "....."])
        result = recommend_move(board, fleet_from_lengths([2]), EngineParams(roi_area_cap=1))
        self.assertTrue(any("local solve skipped" in line for line in result.diagnostics.trace))
        self.assertIn("adjacent-heat", result.move.reason)

    def test_explanation_does_not_change_selection(self):
        board = parse_text_board(["......", "..x...", "......"])
        first = recommend_move(board, fleet_from_lengths([3]))
        second = recommend_move(board, fleet_from_lengths([3]))
        self.assertEqual(first.move, second.move)
        self.assertIn("Target mode", first.move.reason)


if __name__ == "__main__":
    unittest.main()
