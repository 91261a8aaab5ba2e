from dataclasses import dataclass, fields
from typing import Dict, List, Mapping, Optional

# Tile statuses (same integers as the serialisable board snapshot)
UNKNOWN = 0
MISS = 1
HIT = 2
SUNK = 3

TILE_STATUSES = (UNKNOWN, MISS, HIT, SUNK)
STATUS_NAMES = {UNKNOWN: "UNKNOWN", MISS: "MISS", HIT: "HIT", SUNK: "SUNK"}

# Text boards (CLI, tests): one character per tile
CHAR_TO_STATUS = {".": UNKNOWN, "o": MISS, "x": HIT, "#": SUNK}
STATUS_TO_CHAR = {status: ch for ch, status in CHAR_TO_STATUS.items()}

DEFAULT_ROWS = 10
DEFAULT_COLS = 10
DEFAULT_FLEET = (5, 4, 3, 3, 2)

# Global heat weighting.
# A placement of length L carries L ** LENGTH_EXPONENT mass, spread over every
# legal placement of that length.
LENGTH_EXPONENT = 1.5
HIT_BONUS = 0.75
ENDPOINT_BONUS = 0.25
PARITY_HUNT = True

# Local exact solver budgets.
# ROI padding starts at the longest remaining ship and shrinks towards
# ROI_MIN_PADDING until the region fits ROI_AREA_CAP cells.
ROI_MIN_PADDING = 1
ROI_AREA_CAP = 64
LOCAL_NODE_BUDGET = 20000
LOCAL_SOLUTION_BUDGET = 2000

PHASE_HUNT = "hunt"
PHASE_TARGET = "target"

# Tunables, keyed by the engine stage that reads them.
PARAM_SPECS = {
    "heat": [
        {"key": "length_exponent", "label": "Length Exponent (E)", "default": LENGTH_EXPONENT, "min": 0.0, "max": 4.0, "step": 0.1},
        {"key": "hit_bonus", "label": "Hit Bonus", "default": HIT_BONUS, "min": 0.0, "max": 5.0, "step": 0.05},
        {"key": "endpoint_bonus", "label": "Endpoint Bonus", "default": ENDPOINT_BONUS, "min": 0.0, "max": 5.0, "step": 0.05},
        {"key": "parity_hunt", "label": "Parity Hunt", "default": PARITY_HUNT, "is_bool": True},
    ],
    "local_solver": [
        {"key": "roi_min_padding", "label": "Min ROI Padding", "default": ROI_MIN_PADDING, "min": 1, "max": 10, "step": 1, "is_int": True},
        {"key": "roi_area_cap", "label": "ROI Area Cap", "default": ROI_AREA_CAP, "min": 1, "max": 400, "step": 1, "is_int": True},
        {"key": "node_budget", "label": "Node Budget", "default": LOCAL_NODE_BUDGET, "min": 1, "max": 1000000, "step": 1000, "is_int": True},
        {"key": "solution_budget", "label": "Solution Budget", "default": LOCAL_SOLUTION_BUDGET, "min": 1, "max": 100000, "step": 100, "is_int": True},
    ],
}


def param_spec_index() -> Dict[str, Dict[str, object]]:
    index: Dict[str, Dict[str, object]] = {}
    for specs in PARAM_SPECS.values():
        for spec in specs:
            index[str(spec["key"])] = spec
    return index


def _coerce_param(spec: Mapping[str, object], value: object) -> object:
    key = spec["key"]
    if spec.get("is_bool"):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in {"1", "true", "yes", "on"}:
            return True
        if text in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"Parameter '{key}' expects a boolean, got {value!r}.")
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Parameter '{key}' expects a number, got {value!r}.")
    num = max(float(spec["min"]), min(float(spec["max"]), num))
    if spec.get("is_int"):
        return int(round(num))
    return num


@dataclass(frozen=True)
class EngineParams:
    length_exponent: float = LENGTH_EXPONENT
    hit_bonus: float = HIT_BONUS
    endpoint_bonus: float = ENDPOINT_BONUS
    parity_hunt: bool = PARITY_HUNT
    roi_min_padding: int = ROI_MIN_PADDING
    roi_area_cap: int = ROI_AREA_CAP
    node_budget: int = LOCAL_NODE_BUDGET
    solution_budget: int = LOCAL_SOLUTION_BUDGET

    @classmethod
    def from_overrides(cls, overrides: Optional[Mapping[str, object]] = None) -> "EngineParams":
        """Build params from defaults plus overrides, clamped to PARAM_SPECS ranges."""
        if not overrides:
            return cls()
        index = param_spec_index()
        values: Dict[str, object] = {}
        for key, value in overrides.items():
            spec = index.get(key)
            if spec is None:
                raise ValueError(f"Unknown parameter '{key}'.")
            values[key] = _coerce_param(spec, value)
        return cls(**values)

    def as_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def parse_param_assignments(items: List[str]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise ValueError(f"Expected key=value, got '{item}'.")
        key, value = item.split("=", 1)
        overrides[key.strip()] = value.strip()
    return overrides
