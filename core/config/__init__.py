"""
POS Core Config — Public API
===============================
Access guard configuration: locations, route patterns, fallbacks.
Doctrine: no hardcoded location keys or routes in guard logic.
"""

from core.config.access import AccessConfig, ConfigurationError

__all__ = [
    "AccessConfig",
    "ConfigurationError",
]
