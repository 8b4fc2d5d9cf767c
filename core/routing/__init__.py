"""
POS Routing — Public API
==========================
Path normalization, pattern sets, and route classification.
"""

from core.routing.classifier import ResourceDescriptor, RouteClass, RouteClassifier
from core.routing.patterns import (
    InvalidPatternError,
    LocationPattern,
    RoutePatterns,
    normalize_path,
)

__all__ = [
    "RouteClass",
    "ResourceDescriptor",
    "RouteClassifier",
    "RoutePatterns",
    "LocationPattern",
    "InvalidPatternError",
    "normalize_path",
]
