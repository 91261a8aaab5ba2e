from .explain import build_explanation
from .heat import HeatSurface, compute_heat
from .local_solver import LocalSolveResult, build_roi, solve_cluster, solve_clusters
from .recommend import Diagnostics, Move, MoveResult, recommend_from_snapshot, recommend_move

__all__ = [
    "Diagnostics",
    "HeatSurface",
    "LocalSolveResult",
    "Move",
    "MoveResult",
    "build_explanation",
    "build_roi",
    "compute_heat",
    "recommend_from_snapshot",
    "recommend_move",
    "solve_cluster",
    "solve_clusters",
]
