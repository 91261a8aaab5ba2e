import os
from datetime import datetime
from typing import Mapping, Optional

# -----------------------------
# Debug helpers (enable with --debug or env BATTLESHIP_ADVISOR_DEBUG=1)
# -----------------------------
DEBUG_ENABLED = False
DEBUG_LOG_PATH = "battleship_advisor_debug.log"
DEBUG_ENV_VAR = "BATTLESHIP_ADVISOR_DEBUG"


def enable_from_env(environ: Optional[Mapping[str, str]] = None) -> bool:
    global DEBUG_ENABLED
    env = os.environ if environ is None else environ
    if env.get(DEBUG_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "on"}:
        DEBUG_ENABLED = True
    return DEBUG_ENABLED


def set_enabled(enabled: bool) -> None:
    global DEBUG_ENABLED
    DEBUG_ENABLED = bool(enabled)


def _debug_log_line(line: str) -> None:
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    try:
        with open(DEBUG_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"[{ts}] {line}\n")
    except OSError:
        # an unwritable log must never break a recommendation
        pass


def debug_log(title: str, message: str, details: str = "", *, level: str = "info") -> None:
    """Append an event (and indented detail lines) to the debug log when enabled."""
    if not DEBUG_ENABLED:
        return
    _debug_log_line(f"{level.upper()} | {title} | {message}")
    for ln in details.splitlines():
        _debug_log_line(f"    {ln}")
