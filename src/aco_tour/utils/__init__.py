from .metrics import MetricsCalculator
from .report import format_catalog, format_report
from .visualization import Visualizer

__all__ = ["MetricsCalculator", "format_catalog", "format_report", "Visualizer"]
