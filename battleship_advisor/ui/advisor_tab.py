from typing import Dict, List, Optional, Sequence, Set, Tuple

from PyQt5 import QtCore, QtGui, QtWidgets

from battleship_advisor.domain.board import Board, apply_shot, board_dims, create_board
from battleship_advisor.domain.config import HIT, MISS, SUNK, UNKNOWN, EngineParams
from battleship_advisor.domain.roster import is_game_over
from battleship_advisor.domain.types import ShipEntry
from battleship_advisor.engine.recommend import MoveResult, recommend_move
from battleship_advisor.ui.theme import Theme, heat_color

# Left-click order: unknown -> miss -> hit -> sunk -> unknown
NEXT_STATUS = {UNKNOWN: MISS, MISS: HIT, HIT: SUNK, SUNK: UNKNOWN}
STATUS_LABELS = {UNKNOWN: "", MISS: "M", HIT: "H", SUNK: "S"}


class AdvisorTab(QtWidgets.QWidget):
    state_updated = QtCore.pyqtSignal()

    def __init__(self, board: Board, roster: Sequence[ShipEntry], params: Optional[EngineParams] = None, parent=None):
        super().__init__(parent)
        self.board: Board = [list(row) for row in board]
        self.roster: List[ShipEntry] = list(roster)
        self.params = params or EngineParams()
        self.result: Optional[MoveResult] = None
        self.undo_stack: List[Tuple[Board, List[ShipEntry]]] = []

        self.cell_buttons: List[List[QtWidgets.QPushButton]] = []
        self._build_ui()
        self._rebuild_grid()
        self._refresh_roster_table()
        self.recompute()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        main_layout = QtWidgets.QHBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(12)

        # --- Left: board ---
        left_panel = QtWidgets.QWidget()
        left_layout = QtWidgets.QVBoxLayout(left_panel)
        left_layout.setContentsMargins(0, 0, 0, 0)

        header = QtWidgets.QLabel("Opponent board")
        hfont = header.font()
        hfont.setPointSize(hfont.pointSize() + 1)
        hfont.setBold(True)
        header.setFont(hfont)
        left_layout.addWidget(header)

        overlay_row = QtWidgets.QHBoxLayout()
        overlay_row.addWidget(QtWidgets.QLabel("Overlay:"))
        self.overlay_combo = QtWidgets.QComboBox()
        self.overlay_combo.addItems(["None", "Heat (%)"])
        self.overlay_combo.setCurrentIndex(1)
        self.overlay_combo.currentIndexChanged.connect(self.update_board_view)
        overlay_row.addWidget(self.overlay_combo)
        overlay_row.addStretch(1)
        left_layout.addLayout(overlay_row)

        self.board_container = QtWidgets.QWidget()
        self.board_layout = QtWidgets.QGridLayout(self.board_container)
        self.board_layout.setSpacing(2)
        self.board_layout.setAlignment(QtCore.Qt.AlignCenter)
        left_layout.addWidget(self.board_container, stretch=1)

        hint = QtWidgets.QLabel(
            "Left-click cycles unknown → miss → hit → sunk.\n"
            "Shift=Hit, Alt=Miss, Ctrl=Clear."
        )
        hint.setWordWrap(True)
        hint.setStyleSheet(f"color: {Theme.TEXT_LABEL};")
        left_layout.addWidget(hint)

        size_row = QtWidgets.QHBoxLayout()
        size_row.addWidget(QtWidgets.QLabel("Rows:"))
        self.rows_spin = QtWidgets.QSpinBox()
        self.rows_spin.setRange(1, 26)
        size_row.addWidget(self.rows_spin)
        size_row.addWidget(QtWidgets.QLabel("Cols:"))
        self.cols_spin = QtWidgets.QSpinBox()
        self.cols_spin.setRange(1, 26)
        size_row.addWidget(self.cols_spin)
        self.new_board_btn = QtWidgets.QPushButton("New board")
        self.new_board_btn.clicked.connect(self.new_board)
        size_row.addWidget(self.new_board_btn)
        self.undo_btn = QtWidgets.QPushButton("Undo (Ctrl+Z)")
        self.undo_btn.clicked.connect(self.undo)
        size_row.addWidget(self.undo_btn)
        left_layout.addLayout(size_row)
        self.shortcut_undo = QtWidgets.QShortcut(QtGui.QKeySequence("Ctrl+Z"), self)
        self.shortcut_undo.setContext(QtCore.Qt.WidgetWithChildrenShortcut)
        self.shortcut_undo.activated.connect(self.undo)

        main_layout.addWidget(left_panel, stretch=3)

        # --- Right: ships + explanation ---
        right_panel = QtWidgets.QWidget()
        right_layout = QtWidgets.QVBoxLayout(right_panel)
        right_layout.setContentsMargins(0, 0, 0, 0)

        ships_group = QtWidgets.QGroupBox("Ships")
        ships_layout = QtWidgets.QVBoxLayout(ships_group)
        self.roster_table = QtWidgets.QTableWidget(0, 3)
        self.roster_table.setHorizontalHeaderLabels(["Ship", "Length", "Sunk"])
        self.roster_table.verticalHeader().setVisible(False)
        self.roster_table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.roster_table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.roster_table.horizontalHeader().setStretchLastSection(True)
        ships_layout.addWidget(self.roster_table)

        add_row = QtWidgets.QHBoxLayout()
        self.length_spin = QtWidgets.QSpinBox()
        self.length_spin.setRange(1, 26)
        self.length_spin.setValue(3)
        add_row.addWidget(QtWidgets.QLabel("Length:"))
        add_row.addWidget(self.length_spin)
        self.add_ship_btn = QtWidgets.QPushButton("Add ship")
        self.add_ship_btn.clicked.connect(self.add_ship)
        add_row.addWidget(self.add_ship_btn)
        self.remove_ship_btn = QtWidgets.QPushButton("Remove selected")
        self.remove_ship_btn.clicked.connect(self.remove_selected_ship)
        add_row.addWidget(self.remove_ship_btn)
        ships_layout.addLayout(add_row)
        right_layout.addWidget(ships_group)

        explain_group = QtWidgets.QGroupBox("Best move")
        explain_layout = QtWidgets.QVBoxLayout(explain_group)
        self.best_label = QtWidgets.QLabel("Best move: (none)")
        bfont = self.best_label.font()
        bfont.setBold(True)
        self.best_label.setFont(bfont)
        explain_layout.addWidget(self.best_label)
        self.reason_label = QtWidgets.QLabel("")
        self.reason_label.setWordWrap(True)
        explain_layout.addWidget(self.reason_label)
        self.warning_label = QtWidgets.QLabel("")
        self.warning_label.setWordWrap(True)
        self.warning_label.setStyleSheet(f"color: {Theme.TEXT_WARNING}; font-weight: bold;")
        explain_layout.addWidget(self.warning_label)
        self.trace_view = QtWidgets.QPlainTextEdit()
        self.trace_view.setReadOnly(True)
        explain_layout.addWidget(self.trace_view, stretch=1)
        right_layout.addWidget(explain_group, stretch=1)

        main_layout.addWidget(right_panel, stretch=2)

    def _board_cell_size(self) -> int:
        rows, cols = board_dims(self.board)
        size = int(520 / max(1, rows, cols))
        return max(24, min(48, size))

    def _rebuild_grid(self) -> None:
        while self.board_layout.count():
            item = self.board_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        rows, cols = board_dims(self.board)
        self.rows_spin.setValue(rows)
        self.cols_spin.setValue(cols)
        for c in range(cols):
            lbl = QtWidgets.QLabel(chr(ord("A") + c))
            lbl.setAlignment(QtCore.Qt.AlignCenter)
            lbl.setStyleSheet(f"color: {Theme.TEXT_LABEL};")
            self.board_layout.addWidget(lbl, 0, c + 1)
        for r in range(rows):
            lbl = QtWidgets.QLabel(str(r + 1))
            lbl.setAlignment(QtCore.Qt.AlignCenter)
            lbl.setStyleSheet(f"color: {Theme.TEXT_LABEL};")
            self.board_layout.addWidget(lbl, r + 1, 0)

        cell_size = self._board_cell_size()
        self.cell_buttons = []
        for r in range(rows):
            row = []
            for c in range(cols):
                btn = QtWidgets.QPushButton("")
                btn.setFixedSize(cell_size, cell_size)
                btn.setCursor(QtGui.QCursor(QtCore.Qt.PointingHandCursor))
                btn.clicked.connect(self._make_cell_handler(r, c))
                row.append(btn)
                self.board_layout.addWidget(btn, r + 1, c + 1)
            self.cell_buttons.append(row)

    def _refresh_roster_table(self) -> None:
        self.roster_table.setRowCount(len(self.roster))
        for i, ship in enumerate(self.roster):
            self.roster_table.setItem(i, 0, QtWidgets.QTableWidgetItem(ship.identifier))
            self.roster_table.setItem(i, 1, QtWidgets.QTableWidgetItem(str(ship.length)))
            cb = QtWidgets.QCheckBox()
            cb.setChecked(ship.sunk)
            cb.stateChanged.connect(self._make_sunk_handler(i))
            self.roster_table.setCellWidget(i, 2, cb)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def _push_history(self) -> None:
        self.undo_stack.append(([list(row) for row in self.board], list(self.roster)))
        if len(self.undo_stack) > 200:
            self.undo_stack.pop(0)

    def undo(self) -> None:
        if not self.undo_stack:
            return
        board, roster = self.undo_stack.pop()
        resized = board_dims(board) != board_dims(self.board)
        self.board = board
        self.roster = roster
        if resized:
            self._rebuild_grid()
        self._refresh_roster_table()
        self._changed()

    def _make_cell_handler(self, r: int, c: int):
        def handler():
            modifiers = QtWidgets.QApplication.keyboardModifiers()
            if modifiers & QtCore.Qt.ShiftModifier:
                new_status = HIT
            elif modifiers & QtCore.Qt.AltModifier:
                new_status = MISS
            elif modifiers & QtCore.Qt.ControlModifier:
                new_status = UNKNOWN
            else:
                new_status = NEXT_STATUS[self.board[r][c]]
            self.set_cell(r, c, new_status)

        return handler

    def set_cell(self, r: int, c: int, status: int) -> None:
        if self.board[r][c] == status:
            return
        self._push_history()
        self.board = apply_shot(self.board, r, c, status)
        self._changed()

    def _make_sunk_handler(self, index: int):
        def handler(state: int):
            if not (0 <= index < len(self.roster)):
                return
            self._push_history()
            ship = self.roster[index]
            self.roster[index] = ShipEntry(ship.identifier, ship.length, state == QtCore.Qt.Checked)
            self._changed()

        return handler

    def add_ship(self) -> None:
        self._push_history()
        taken: Set[str] = {s.identifier for s in self.roster}
        n = len(self.roster) + 1
        while f"ship{n}" in taken:
            n += 1
        self.roster.append(ShipEntry(f"ship{n}", int(self.length_spin.value())))
        self._refresh_roster_table()
        self._changed()

    def remove_selected_ship(self) -> None:
        rows = sorted({idx.row() for idx in self.roster_table.selectedIndexes()}, reverse=True)
        if not rows:
            return
        self._push_history()
        for row in rows:
            if 0 <= row < len(self.roster):
                del self.roster[row]
        self._refresh_roster_table()
        self._changed()

    def new_board(self) -> None:
        self._push_history()
        self.board = create_board(int(self.rows_spin.value()), int(self.cols_spin.value()))
        self.roster = [ShipEntry(s.identifier, s.length, False) for s in self.roster]
        self._rebuild_grid()
        self._refresh_roster_table()
        self._changed()

    def set_params(self, params: EngineParams) -> None:
        self.params = params
        self.recompute()

    def _changed(self) -> None:
        self.recompute()
        self.state_updated.emit()

    # ------------------------------------------------------------------
    # Recommendation
    # ------------------------------------------------------------------
    def recompute(self) -> None:
        self.result = recommend_move(self.board, self.roster, self.params)
        self.update_board_view()
        self.update_status_view()

    def _outlined_cells(self) -> Dict[Tuple[int, int], str]:
        outlines: Dict[Tuple[int, int], str] = {}
        if self.result is None:
            return outlines
        diag = self.result.diagnostics
        for cluster in diag.unexplained_hits:
            for cell in cluster:
                outlines[tuple(cell)] = Theme.UNEXPLAINED_BORDER
        for index in diag.suspected_sunk:
            for cell in diag.hit_clusters[index]:
                outlines[tuple(cell)] = Theme.SUSPECTED_SUNK_BORDER
        return outlines

    def _cell_style(self, r: int, c: int, show_heat: bool, outlines: Dict[Tuple[int, int], str]) -> Tuple[str, str]:
        status = self.board[r][c]
        base_color = Theme.BG_DARK
        text_color = Theme.TEXT_MAIN
        border_style = f"1px solid {Theme.BORDER_EMPTY}"
        text = STATUS_LABELS[status]

        if status == UNKNOWN:
            heat_val = 0.0
            if show_heat and self.result is not None and self.result.heatmap:
                heat_val = self.result.heatmap[r][c]
            if heat_val > 0.0:
                base_color = heat_color(heat_val)
                text = f"{int(round(heat_val * 100))}"
                if heat_val > 0.6:
                    text_color = Theme.TEXT_DARK
        elif status == MISS:
            base_color = Theme.MISS_BG
            text_color = Theme.MISS_TEXT
            border_style = f"1px solid {Theme.MISS_BORDER}"
        elif status == HIT:
            base_color = Theme.HIT_BG
            text_color = Theme.HIT_TEXT
            border_style = f"1px solid {Theme.HIT_BORDER}"
        else:
            base_color = Theme.SUNK_BG
            text_color = Theme.SUNK_TEXT
            border_style = f"1px solid {Theme.SUNK_BORDER}"

        if (r, c) in outlines:
            border_style = f"2px dashed {outlines[(r, c)]}"

        style_str = (
            f"background-color: {base_color};"
            f"color: {text_color};"
            f"border: {border_style};"
        )
        move = self.result.move if self.result is not None else None
        if move is not None and (move.row, move.col) == (r, c) and status == UNKNOWN:
            style_str += f"border: 2px solid {Theme.BORDER_BEST};"
        return style_str, text

    def update_board_view(self) -> None:
        show_heat = self.overlay_combo.currentIndex() == 1
        outlines = self._outlined_cells()
        for r, row in enumerate(self.cell_buttons):
            for c, btn in enumerate(row):
                style_str, text = self._cell_style(r, c, show_heat, outlines)
                btn.setStyleSheet(style_str)
                btn.setText(text)

    def update_status_view(self) -> None:
        if self.result is None:
            return
        move = self.result.move
        diag = self.result.diagnostics
        if move.row < 0:
            self.best_label.setText("Best move: (none)")
        else:
            self.best_label.setText(
                f"Best move: {chr(ord('A') + move.col)}{move.row + 1}  "
                f"({diag.selection.type.value}, score {move.normalized_score:.3f})"
            )
        self.reason_label.setText(move.reason)

        warnings = list(diag.errors)
        if is_game_over(self.roster):
            warnings.append("All ships are marked sunk.")
        elif not self.result.has_any_placement and move.row >= 0:
            warnings.append("No remaining ship fits the board; check the marks and the ship list.")
        self.warning_label.setText("\n".join(warnings))
        self.trace_view.setPlainText("\n".join(diag.trace))
