import os
import sys

from PyQt5 import QtCore, QtGui, QtWidgets

from battleship_advisor.domain.config import EngineParams
from battleship_advisor.domain.roster import create_game_state, default_fleet
from battleship_advisor.persistence.snapshot_store import SnapshotError, load_snapshot, save_snapshot
from battleship_advisor.ui.advisor_tab import AdvisorTab
from battleship_advisor.ui.messages import debug_event
from battleship_advisor.ui.params_tab import ParamsTab
from battleship_advisor.ui.theme import Theme
from battleship_advisor.utils import debug


def apply_dark_palette(app: QtWidgets.QApplication):
    """Apply a consistent dark theme using the Theme color palette."""
    QtWidgets.QApplication.setStyle("Fusion")
    palette = QtGui.QPalette()

    # Core backgrounds
    palette.setColor(QtGui.QPalette.Window, QtGui.QColor(Theme.BG_DARK))
    palette.setColor(QtGui.QPalette.Base, QtGui.QColor(Theme.BG_DARK))
    palette.setColor(QtGui.QPalette.AlternateBase, QtGui.QColor(Theme.BG_PANEL))

    # Text colors
    palette.setColor(QtGui.QPalette.WindowText, QtGui.QColor(Theme.TEXT_MAIN))
    palette.setColor(QtGui.QPalette.Text, QtGui.QColor(Theme.TEXT_MAIN))
    palette.setColor(QtGui.QPalette.ButtonText, QtGui.QColor(Theme.TEXT_MAIN))

    # Buttons
    palette.setColor(QtGui.QPalette.Button, QtGui.QColor(Theme.BG_BUTTON))

    # Selection
    palette.setColor(QtGui.QPalette.Highlight, QtGui.QColor(Theme.HIGHLIGHT))
    palette.setColor(QtGui.QPalette.HighlightedText, QtCore.Qt.black)

    app.setPalette(palette)


class MainWindow(QtWidgets.QMainWindow):
    SESSION_PATH = "battleship_advisor_session.json"

    def __init__(self, session_path: str = SESSION_PATH):
        super().__init__()
        self.setWindowTitle("Battleship Advisor – No-touch Heat & Local Solver")
        self.resize(1150, 680)
        self.session_path = session_path

        board, roster = self._load_session()
        params = EngineParams()

        self.tabs = QtWidgets.QTabWidget()
        self.advisor_tab = AdvisorTab(board, roster, params)
        self.params_tab = ParamsTab(params)
        self.tabs.addTab(self.advisor_tab, "Advisor")
        self.tabs.addTab(self.params_tab, "Parameters")
        self.setCentralWidget(self.tabs)

        self.advisor_tab.state_updated.connect(self._save_session)
        self.params_tab.params_changed.connect(self.advisor_tab.set_params)

    def _load_session(self):
        if os.path.exists(self.session_path):
            try:
                return load_snapshot(self.session_path)
            except SnapshotError as e:
                debug_event(self, "Session", "Could not restore the last session; starting a new board.", str(e), level="warning")
        state = create_game_state(boats=default_fleet())
        return state["board"], state["boats"]

    def _save_session(self) -> None:
        try:
            save_snapshot(self.session_path, self.advisor_tab.board, self.advisor_tab.roster)
        except OSError as e:
            debug_event(self, "Session", "Could not save the session.", str(e), level="error")

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._save_session()
        super().closeEvent(event)


def main():
    # Enable debug via flag or env var (BATTLESHIP_ADVISOR_DEBUG=1)
    argv = list(sys.argv)
    if "--debug" in argv:
        debug.set_enabled(True)
        argv.remove("--debug")
    debug.enable_from_env()

    app = QtWidgets.QApplication(argv)
    apply_dark_palette(app)
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
