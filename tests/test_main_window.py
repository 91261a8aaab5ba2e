import os
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PyQt5 import QtGui, QtWidgets
except ImportError:  # pragma: no cover - GUI extra not installed
    QtWidgets = None

if QtWidgets is not None:
    from battleship_advisor.app.main import apply_dark_palette
    from battleship_advisor.ui.theme import Theme


@unittest.skipIf(QtWidgets is None, "PyQt5 not installed")
class DarkPaletteTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])

    def test_palette_uses_theme_colors(self):
        apply_dark_palette(self.app)
        palette = self.app.palette()
        self.assertEqual(palette.color(QtGui.QPalette.Window).name(), Theme.BG_DARK)
        self.assertEqual(palette.color(QtGui.QPalette.Text).name(), Theme.TEXT_MAIN)
        self.assertEqual(palette.color(QtGui.QPalette.Highlight).name(), Theme.HIGHLIGHT)


if __name__ == "__main__":
    unittest.main()
