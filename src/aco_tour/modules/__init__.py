from .evaluator import TourEvaluator
from .pheromone import (
    DEPOSIT_STRATEGIES,
    PheromoneEvaporator,
    PheromoneField,
    PheromoneUpdater,
    closed_edges,
)

__all__ = [
    "TourEvaluator",
    "DEPOSIT_STRATEGIES",
    "PheromoneField",
    "PheromoneEvaporator",
    "PheromoneUpdater",
    "closed_edges",
]
