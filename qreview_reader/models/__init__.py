from .config import ReaderConfig
from .summary import MeasurementSummary, Vertical

__all__ = [
    "ReaderConfig",
    "MeasurementSummary",
    "Vertical",
]
