"""
POS Bootstrap — System Self-Defense
=====================================
Ensures the access guard never starts in an unsafe state.
"""

from core.bootstrap.errors import AccessBootstrapError
from core.bootstrap.self_check import run_bootstrap_checks

__all__ = [
    "AccessBootstrapError",
    "run_bootstrap_checks",
]
