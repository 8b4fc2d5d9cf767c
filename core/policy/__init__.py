"""
POS Policy — Public API
=========================
Access decisions and the evaluator that produces them.
"""

from core.policy.evaluator import PolicyEvaluator
from core.policy.result import DenyReason, PolicyDecision

__all__ = [
    "PolicyEvaluator",
    "PolicyDecision",
    "DenyReason",
]
