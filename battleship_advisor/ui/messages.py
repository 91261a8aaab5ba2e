from PyQt5 import QtWidgets

from battleship_advisor.utils import debug


def debug_event(
    parent,
    title: str,
    message: str,
    details: str = "",
    *,
    force_popup: bool = False,
    level: str = "info",
) -> None:
    """Log a debug event and optionally show a popup."""
    debug.debug_log(title, message, details, level=level)

    if not (debug.DEBUG_ENABLED or force_popup):
        return

    box = QtWidgets.QMessageBox(parent)
    box.setWindowTitle(title)
    box.setText(message)
    if details:
        box.setDetailedText(details)
    if level == "error":
        box.setIcon(QtWidgets.QMessageBox.Critical)
    elif level == "warning":
        box.setIcon(QtWidgets.QMessageBox.Warning)
    else:
        box.setIcon(QtWidgets.QMessageBox.Information)
    box.exec_()
