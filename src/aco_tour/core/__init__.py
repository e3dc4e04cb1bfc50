from .airport import AirportRecord, Latitude, Longitude
from .ant import Ant
from .catalog import AirportCatalog, read_filter_set
from .graph import DistanceModel, haversine_km, haversine_matrix

__all__ = [
    "AirportRecord",
    "Latitude",
    "Longitude",
    "Ant",
    "AirportCatalog",
    "read_filter_set",
    "DistanceModel",
    "haversine_km",
    "haversine_matrix",
]
