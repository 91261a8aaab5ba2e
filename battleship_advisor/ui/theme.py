class Theme:
    """Centralized colors used across the UI."""

    # Backgrounds
    BG_DARK = "#020617"  # slate-950
    BG_PANEL = "#0f172a"  # slate-900
    BG_BUTTON = "#1f2937"  # gray-800

    # Generic text
    TEXT_MAIN = "#e5e7eb"  # gray-200
    TEXT_LABEL = "#9ca3af"  # gray-400
    TEXT_DARK = "#000000"
    TEXT_WARNING = "#ff6b6b"

    # Unknown-tile border
    BORDER_EMPTY = "#1f2937"

    # Tile statuses
    MISS_BG = "#1e3a8a"
    MISS_TEXT = "#bfdbfe"
    MISS_BORDER = "#2563eb"

    HIT_BG = "#7f1d1d"
    HIT_TEXT = "#fecaca"
    HIT_BORDER = "#f97373"

    SUNK_BG = "#3f3f46"
    SUNK_TEXT = "#fca5a5"
    SUNK_BORDER = "#71717a"

    # Unexplained / suspected-sunk cluster outlines
    UNEXPLAINED_BORDER = "#fb923c"
    SUSPECTED_SUNK_BORDER = "#facc15"

    # Heat gradient end points (rgb)
    HEAT_START = (2, 6, 23)
    HEAT_END = (14, 165, 233)

    # Links / highlights
    HIGHLIGHT = "#0ea5e9"
    BORDER_BEST = "#38bdf8"


def heat_color(val: float) -> str:
    val = max(0.0, min(1.0, float(val)))
    start_r, start_g, start_b = Theme.HEAT_START
    end_r, end_g, end_b = Theme.HEAT_END
    r = int(start_r + (end_r - start_r) * val)
    g = int(start_g + (end_g - start_g) * val)
    b = int(start_b + (end_b - start_b) * val)
    return f"rgb({r},{g},{b})"
