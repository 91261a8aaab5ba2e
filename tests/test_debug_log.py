import os
import tempfile
import unittest
from unittest import mock

from battleship_advisor.utils import debug


class DebugLogTests(unittest.TestCase):
    def tearDown(self):
        debug.set_enabled(False)

    def test_disabled_log_writes_nothing(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "debug.log")
            with mock.patch.object(debug, "DEBUG_LOG_PATH", path):
                debug.set_enabled(False)
                debug.debug_log("recommend", "hunt")
            self.assertFalse(os.path.exists(path))

    def test_enabled_log_appends_event_and_details(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "debug.log")
            with mock.patch.object(debug, "DEBUG_LOG_PATH", path):
                debug.set_enabled(True)
                debug.debug_log("recommend", "target", "line one\nline two", level="warning")
            with open(path, "r", encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].endswith("WARNING | recommend | target"))
        self.assertTrue(lines[1].endswith("    line one"))

    def test_enable_from_env(self):
        self.assertFalse(debug.enable_from_env({}))
        self.assertTrue(debug.enable_from_env({debug.DEBUG_ENV_VAR: "yes"}))


if __name__ == "__main__":
    unittest.main()
