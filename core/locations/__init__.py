"""
POS Locations — Public API
============================
Static location key ↔ id directory.
"""

from core.locations.directory import Location, LocationDirectory
from core.locations.errors import (
    DuplicateLocationError,
    LocationError,
    UnknownLocation,
)

__all__ = [
    "Location",
    "LocationDirectory",
    "LocationError",
    "UnknownLocation",
    "DuplicateLocationError",
]
