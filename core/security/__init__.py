"""
POS Core Security — Public API
================================
Access guard façade: identity → route → policy → outcome.
"""

from core.security.guards import AccessGuard, AccessOutcome

__all__ = [
    "AccessGuard",
    "AccessOutcome",
]
