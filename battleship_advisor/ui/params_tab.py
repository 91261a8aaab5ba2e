from typing import Dict

from PyQt5 import QtCore, QtWidgets

from battleship_advisor.domain.config import PARAM_SPECS, EngineParams
from battleship_advisor.ui.theme import Theme

GROUP_TITLES = {"heat": "Global heat", "local_solver": "Local exact solver"}


class ParamsTab(QtWidgets.QWidget):
    params_changed = QtCore.pyqtSignal(object)

    def __init__(self, params: EngineParams, parent=None):
        super().__init__(parent)
        self.inputs: Dict[str, QtWidgets.QWidget] = {}
        self._build_ui(params)

    def _build_ui(self, params: EngineParams) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        current = params.as_dict()

        for group_key, specs in PARAM_SPECS.items():
            group = QtWidgets.QGroupBox(GROUP_TITLES.get(group_key, group_key))
            grid = QtWidgets.QGridLayout(group)
            grid.setHorizontalSpacing(10)
            grid.setColumnMinimumWidth(0, 190)
            for r, spec in enumerate(specs):
                key = spec["key"]
                lbl = QtWidgets.QLabel(spec.get("label", key))
                lbl.setStyleSheet(f"color: {Theme.TEXT_LABEL};")
                grid.addWidget(lbl, r, 0)

                if spec.get("is_bool"):
                    widget = QtWidgets.QCheckBox()
                    widget.setChecked(bool(current[key]))
                    widget.toggled.connect(self._emit_params)
                elif spec.get("is_int"):
                    widget = QtWidgets.QSpinBox()
                    widget.setRange(int(spec["min"]), int(spec["max"]))
                    widget.setSingleStep(max(1, int(spec.get("step", 1))))
                    widget.setValue(int(current[key]))
                    widget.valueChanged.connect(self._emit_params)
                else:
                    widget = QtWidgets.QDoubleSpinBox()
                    widget.setDecimals(3)
                    widget.setRange(float(spec["min"]), float(spec["max"]))
                    widget.setSingleStep(float(spec.get("step", 0.1)))
                    widget.setValue(float(current[key]))
                    widget.valueChanged.connect(self._emit_params)
                grid.addWidget(widget, r, 1)
                self.inputs[key] = widget
            layout.addWidget(group)

        reset_btn = QtWidgets.QPushButton("Reset to defaults")
        reset_btn.clicked.connect(self.reset_defaults)
        layout.addWidget(reset_btn)
        layout.addStretch(1)

    def current_params(self) -> EngineParams:
        values: Dict[str, object] = {}
        for key, widget in self.inputs.items():
            if isinstance(widget, QtWidgets.QCheckBox):
                values[key] = widget.isChecked()
            else:
                values[key] = widget.value()
        return EngineParams.from_overrides(values)

    def reset_defaults(self) -> None:
        defaults = EngineParams().as_dict()
        for key, widget in self.inputs.items():
            widget.blockSignals(True)
            if isinstance(widget, QtWidgets.QCheckBox):
                widget.setChecked(bool(defaults[key]))
            else:
                widget.setValue(defaults[key])
            widget.blockSignals(False)
        self._emit_params()

    def _emit_params(self, *_args) -> None:
        self.params_changed.emit(self.current_params())
