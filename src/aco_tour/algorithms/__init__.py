from .aco_solver import ColonyOptimizer, ColonyState, RunResult, roulette_select
from .baseline_solver import nearest_neighbor_tour

__all__ = [
    "ColonyOptimizer",
    "ColonyState",
    "RunResult",
    "roulette_select",
    "nearest_neighbor_tour",
]
