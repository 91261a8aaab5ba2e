import unittest

from battleship_advisor.domain.roster import (
    create_game_state,
    default_fleet,
    is_game_over,
    parse_roster,
    remaining_ships,
    validate_roster,
)
from battleship_advisor.domain.types import ShipEntry


class RosterValidationTests(unittest.TestCase):
    def test_invalid_entries_report_errors(self):
        ships, errors = parse_roster(
            [
                5,
                {"id": "sub", "length": 3, "sunk": True},
                {"length": 0},
                {"length": "x"},
                {"id": "sub", "length": 2},
                2.5,
            ]
        )
        self.assertEqual([s.identifier for s in ships], ["ship1", "sub", "sub"])
        self.assertTrue(any("must have length > 0" in e for e in errors))
        self.assertTrue(any("invalid length" in e for e in errors))
        self.assertIn("duplicate ship id: sub", errors)
        self.assertTrue(any("not a ship entry" in e for e in errors))
        self.assertEqual(len(errors), 4)

    def test_valid_roster_has_no_errors(self):
        self.assertEqual(validate_roster([{"name": "Destroyer", "length": "2"}, ShipEntry("a", 3)]), [])
        self.assertEqual(parse_roster(None), ([], []))

    def test_remaining_and_game_over(self):
        roster = [ShipEntry("a", 3, sunk=True), ShipEntry("b", 2)]
        self.assertEqual(remaining_ships(roster), [ShipEntry("b", 2)])
        self.assertFalse(is_game_over(roster))
        self.assertTrue(is_game_over([ShipEntry("a", 3, sunk=True)]))
        self.assertFalse(is_game_over([]))

    def test_game_state_helpers(self):
        state = create_game_state(3, 4, default_fleet())
        self.assertEqual(len(state["board"]), 3)
        self.assertEqual(len(state["board"][0]), 4)
        self.assertEqual([s.length for s in state["boats"]], [5, 4, 3, 3, 2])
        self.assertEqual(create_game_state()["boats"], [])


if __name__ == "__main__":
    unittest.main()
