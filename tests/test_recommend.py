import json
import unittest

from battleship_advisor.domain.board import apply_shot, create_board, parse_text_board
from battleship_advisor.domain.config import HIT, MISS, EngineParams
from battleship_advisor.domain.roster import default_fleet, fleet_from_lengths
from battleship_advisor.domain.types import ShipEntry
from battleship_advisor.engine.explain import NO_BOARD_REASON, NO_UNKNOWN_REASON
from battleship_advisor.engine.recommend import recommend_from_snapshot, recommend_move
from battleship_advisor.strategies.selection import SelectionType, binary_entropy


def _ships(*lengths):
    return fleet_from_lengths(lengths)


class HuntModeTests(unittest.TestCase):
    def test_empty_board_single_destroyer(self):
        result = recommend_move(create_board(10, 10), _ships(2))
        diag = result.diagnostics
        self.assertEqual(diag.mode, "hunt")
        self.assertEqual(diag.selection.type, SelectionType.HUNT)
        for r in range(10):
            for c in range(10):
                if (r + c) % 2 == 1:
                    self.assertEqual(result.heatmap[r][c], 0.0)
        self.assertEqual((result.move.row + result.move.col) % 2, 0)
        self.assertEqual((result.move.row, result.move.col), (1, 1))
        self.assertEqual(result.move.normalized_score, 1.0)
        self.assertTrue(result.has_any_placement)
        self.assertEqual(diag.placements_considered, 180)
        self.assertEqual(diag.placements_valid, 180)
        self.assertTrue(diag.parity_hunt)
        self.assertIn("Hunt mode", result.move.reason)

    def test_sunk_ships_are_ignored(self):
        roster = [ShipEntry("carrier", 5, sunk=True), ShipEntry("destroyer", 2)]
        result = recommend_move(create_board(6, 6), roster)
        self.assertEqual(result.diagnostics.ships_remaining, 1)

    def test_no_legal_placement_falls_back_to_board_order(self):
        result = recommend_move(parse_text_board(["o.."]), _ships(5))
        self.assertFalse(result.has_any_placement)
        self.assertEqual(result.diagnostics.selection.type, SelectionType.BOARD_ORDER)
        self.assertEqual((result.move.row, result.move.col), (0, 1))
        self.assertIn("no legal placement", result.move.reason)


class TargetModeTests(unittest.TestCase):
    def test_single_hit_extends_orthogonally(self):
        board = parse_text_board([".....", ".....", "..x..", ".....", "....."])
        result = recommend_move(board, _ships(2))
        diag = result.diagnostics
        self.assertEqual(diag.mode, "target")
        self.assertIn((result.move.row, result.move.col), [(1, 2), (3, 2), (2, 1), (2, 3)])
        self.assertEqual((result.move.row, result.move.col), (1, 2))
        self.assertEqual(diag.selection.type, SelectionType.LOCAL_ENTROPY)
        self.assertEqual(diag.selection.cluster_index, 0)
        self.assertAlmostEqual(diag.selection.score, binary_entropy(0.25) / 2.0)
        self.assertAlmostEqual(result.move.normalized_score, 0.25)
        self.assertEqual(diag.local_attempts, 1)
        self.assertIn("local entropy", result.move.reason)
        self.assertIn("Local exact solver used on 1/1 cluster(s).", result.move.reason)

    def test_unique_solution_scores_one(self):
        board = parse_text_board(["xo...", ".....", ".....", ".....", "....."])
        result = recommend_move(board, _ships(2))
        self.assertEqual(result.diagnostics.selection.type, SelectionType.LOCAL_DETERMINISTIC)
        self.assertEqual((result.move.row, result.move.col), (1, 0))
        self.assertEqual(result.move.normalized_score, 1.0)
        self.assertIn("local deterministic", result.move.reason)

    def test_single_sampled_solution_scores_one(self):
        board = parse_text_board(["xo...", ".....", ".....", ".....", "....."])
        result = recommend_move(board, _ships(2), EngineParams(solution_budget=1))
        per_cluster = result.to_dict()["diagnostics"]["localSolve"]["perCluster"][0]
        self.assertEqual(per_cluster["totalSolutions"], 1)
        self.assertFalse(per_cluster["complete"])
        self.assertEqual(result.diagnostics.selection.type, SelectionType.LOCAL_DETERMINISTIC)
        self.assertEqual((result.move.row, result.move.col), (1, 0))
        self.assertEqual(result.move.normalized_score, 1.0)
        self.assertIn("search budget ran out", result.move.reason)

    def test_complete_line_flagged_as_should_be_sunk(self):
        board = parse_text_board([".....", "oooo.", ".xx..", "oooo.", "....."])
        result = recommend_move(board, _ships(2))
        diag = result.diagnostics
        self.assertEqual(diag.mode, "target")
        self.assertEqual(diag.local_solve[0].total_solutions, 1)
        self.assertEqual(diag.suspected_sunk, [0])
        self.assertEqual(diag.unexplained_hits, [])
        self.assertEqual(diag.selection.type, SelectionType.GLOBAL_FALLBACK)
        self.assertEqual(board[result.move.row][result.move.col], 0)
        self.assertIn("mark them sunk if confirmed", result.move.reason)

    def test_diagonal_hits_are_unexplained(self):
        board = parse_text_board([".....", ".x...", "..x..", ".....", "....."])
        result = recommend_move(board, _ships(2))
        diag = result.diagnostics
        self.assertEqual(diag.unexplained_hits, [[(1, 1)], [(2, 2)]])
        self.assertTrue(diag.relaxed_placements)
        self.assertFalse(diag.no_touch)
        self.assertTrue(result.has_any_placement)
        self.assertEqual(diag.selection.type, SelectionType.ADJACENT_HEAT)
        neighbours = {(0, 1), (1, 0), (1, 2), (2, 1), (2, 3), (3, 2)}
        self.assertIn((result.move.row, result.move.col), neighbours)
        self.assertIn("Unexplained hits in 2 cluster(s)", result.move.reason)

    def test_skipped_clusters_use_adjacent_heat(self):
        board = parse_text_board([".....", ".....", "..x..", ".....", "....."])
        result = recommend_move(board, _ships(2), EngineParams(roi_area_cap=1))
        diag = result.diagnostics
        self.assertEqual(diag.local_attempts, 0)
        self.assertEqual(diag.selection.type, SelectionType.ADJACENT_HEAT)
        self.assertIn((result.move.row, result.move.col), [(1, 2), (3, 2), (2, 1), (2, 3)])
        self.assertIn("Local exact solver used on 0/1 cluster(s).", result.move.reason)

    def test_solver_runs_for_every_cluster(self):
        board = parse_text_board(["x.......", "........", "........", "........", ".......x"])
        result = recommend_move(board, _ships(3, 2))
        self.assertEqual(result.diagnostics.local_attempts, 2)
        self.assertEqual(len(result.diagnostics.local_solve), 2)



def _fleet_board(*hits):
    board = create_board(10, 10)
    for r, c in hits:
        board = apply_shot(board, r, c, HIT)
    return board


class DefaultFleetTargetTests(unittest.TestCase):
    def _assert_next_to(self, move, hit):
        self.assertEqual(abs(move.row - hit[0]) + abs(move.col - hit[1]), 1, (move.row, move.col))

    def test_single_hit_in_open_water(self):
        result = recommend_move(_fleet_board((4, 4)), default_fleet())
        diag = result.diagnostics
        self.assertEqual(diag.selection.type, SelectionType.LOCAL_ENTROPY)
        self._assert_next_to(result.move, (4, 4))
        self.assertEqual((result.move.row, result.move.col), (3, 4))
        self.assertAlmostEqual(result.move.normalized_score, 0.375)
        per_cluster = result.to_dict()["diagnostics"]["localSolve"]["perCluster"][0]
        self.assertTrue(per_cluster["complete"])
        self.assertEqual(per_cluster["totalSolutions"], 24)

    def test_single_hit_off_centre_and_in_corner(self):
        for hit in ((2, 7), (0, 0), (9, 5)):
            result = recommend_move(_fleet_board(hit), default_fleet())
            self._assert_next_to(result.move, hit)
            self.assertTrue(result.to_dict()["diagnostics"]["localSolve"]["perCluster"][0]["complete"])

    def test_two_hit_line_extends_at_an_end(self):
        result = recommend_move(_fleet_board((4, 4), (4, 5)), default_fleet())
        diag = result.diagnostics
        self.assertEqual(diag.selection.type, SelectionType.LOCAL_ENTROPY)
        self.assertEqual(diag.local_solve[0].total_solutions, 10)
        self.assertFalse(diag.local_solve[0].exhausted)
        self.assertIn((result.move.row, result.move.col), [(4, 3), (4, 6)])
        self.assertEqual((result.move.row, result.move.col), (4, 3))
        self.assertAlmostEqual(result.move.normalized_score, 0.6)

    def test_sampled_solve_still_stays_in_line_with_the_hit(self):
        result = recommend_move(_fleet_board((4, 4)), default_fleet(), EngineParams(solution_budget=5))
        diag = result.diagnostics
        self.assertTrue(diag.local_solve[0].exhausted)
        self.assertEqual(diag.local_solve[0].total_solutions, 5)
        self.assertEqual(diag.selection.type, SelectionType.LOCAL_ENTROPY)
        self.assertTrue(result.move.row == 4 or result.move.col == 4)
        self.assertNotEqual((result.move.row, result.move.col), (4, 4))
        self.assertIn("sampled", result.move.reason)

class DegenerateInputTests(unittest.TestCase):
    def test_no_board(self):
        for board in ([], None, [[0, 0], [0]]):
            result = recommend_move(board, _ships(2))
            self.assertEqual((result.move.row, result.move.col), (-1, -1))
            self.assertEqual(result.move.reason, NO_BOARD_REASON)
            self.assertEqual(result.move.normalized_score, 0.0)
            self.assertEqual(result.heatmap, [])
            self.assertEqual(result.raw_heat, [])
            self.assertFalse(result.has_any_placement)

    def test_no_unknown_tiles(self):
        board = [[MISS, MISS], [MISS, HIT]]
        result = recommend_move(board, _ships(2))
        self.assertEqual((result.move.row, result.move.col), (-1, -1))
        self.assertEqual(result.move.reason, NO_UNKNOWN_REASON)

    def test_roster_errors_are_reported(self):
        result = recommend_move(create_board(4, 4), [2, {"length": 0}])
        self.assertEqual(result.diagnostics.ships_remaining, 1)
        self.assertTrue(result.diagnostics.errors)


class ResultShapeTests(unittest.TestCase):
    def test_recommend_is_idempotent_and_pure(self):
        board = parse_text_board(["......", ".x....", ".x....", "......", "...o..", "......"])
        snapshot = [list(row) for row in board]
        roster = _ships(4, 3, 2)
        first = recommend_move(board, roster).to_dict()
        second = recommend_move(board, roster).to_dict()
        self.assertEqual(first, second)
        self.assertEqual(board, snapshot)

    def test_to_dict_keys(self):
        board = apply_shot(create_board(6, 6), 2, 2, HIT)
        data = recommend_move(board, _ships(3)).to_dict()
        self.assertEqual(set(data), {"move", "heatmap", "rawHeat", "flags", "diagnostics"})
        self.assertEqual(set(data["move"]), {"row", "col", "normalizedScore", "reason"})
        self.assertIn("hasAnyPlacement", data["flags"])
        diag = data["diagnostics"]
        for key in (
            "mode",
            "shipsRemaining",
            "placementsConsidered",
            "placementsValid",
            "hitClusters",
            "unexplainedHits",
            "localSolve",
            "selection",
            "rules",
        ):
            self.assertIn(key, diag)
        self.assertEqual(diag["localSolve"]["attempts"], 1)
        per_cluster = diag["localSolve"]["perCluster"][0]
        self.assertEqual(per_cluster["clusterIndex"], 0)
        self.assertIn("totalSolutions", per_cluster)
        self.assertIn("roi", per_cluster)
        self.assertEqual(diag["selection"]["clusterIndex"], 0)
        self.assertEqual(diag["hitClusters"], [[[2, 2]]])
        json.dumps(data)

    def test_snapshot_entry_point(self):
        snapshot = {
            "board": [[{"status": 0} for _ in range(5)] for _ in range(5)],
            "boats": [{"name": "Destroyer", "length": 2, "sunk": False}],
        }
        snapshot["board"][2][2] = {"status": 2}
        result = recommend_from_snapshot(snapshot)
        self.assertEqual((result.move.row, result.move.col), (1, 2))
        self.assertEqual(recommend_from_snapshot({}).move.reason, NO_BOARD_REASON)


if __name__ == "__main__":
    unittest.main()
