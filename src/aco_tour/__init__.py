"""
aco_tour: CIFP空港レコードの解析とACOによる巡回路探索
"""

from .algorithms import ColonyOptimizer, ColonyState, RunResult, nearest_neighbor_tour
from .config import load_config
from .core import AirportCatalog, AirportRecord, DistanceModel, read_filter_set
from .exceptions import AcoTourError, ConfigurationError, RecordParseError
from .modules import PheromoneField
from .parser import Decoded, Malformed, NotApplicable, decode_line, decode_records

__version__ = "0.1.0"

__all__ = [
    "ColonyOptimizer",
    "ColonyState",
    "RunResult",
    "nearest_neighbor_tour",
    "load_config",
    "AirportCatalog",
    "AirportRecord",
    "DistanceModel",
    "read_filter_set",
    "AcoTourError",
    "ConfigurationError",
    "RecordParseError",
    "PheromoneField",
    "Decoded",
    "Malformed",
    "NotApplicable",
    "decode_line",
    "decode_records",
]
