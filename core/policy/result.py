"""
POS Policy — Decision Model
=============================
PolicyDecision: Allow, or Deny with a concrete fallback path.

A Deny never surfaces a raw error to the caller. It always names a
safe path to redirect to. reason is machine-readable, for audit logs.

These are pure data structures. No side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# ══════════════════════════════════════════════════════════════
# DENY REASONS
# ══════════════════════════════════════════════════════════════

class DenyReason:
    """
    Known deny codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Identity ──────────────────────────────────────────────
    IDENTITY_ABSENT = "IDENTITY_ABSENT"
    IDENTITY_CORRUPT = "IDENTITY_CORRUPT"
    IDENTITY_INCOMPLETE = "IDENTITY_INCOMPLETE"

    # ── Location scoping ──────────────────────────────────────
    UNKNOWN_LOCATION = "UNKNOWN_LOCATION"
    LOCATION_MISMATCH = "LOCATION_MISMATCH"

    # ── Role / route ──────────────────────────────────────────
    ROLE_RESTRICTED = "ROLE_RESTRICTED"
    OPERATOR_RESTRICTED = "OPERATOR_RESTRICTED"

    # ── General ───────────────────────────────────────────────
    GUARD_ERROR = "GUARD_ERROR"

    ALL = frozenset({
        "IDENTITY_ABSENT",
        "IDENTITY_CORRUPT",
        "IDENTITY_INCOMPLETE",
        "UNKNOWN_LOCATION",
        "LOCATION_MISMATCH",
        "ROLE_RESTRICTED",
        "OPERATOR_RESTRICTED",
        "GUARD_ERROR",
    })


# ══════════════════════════════════════════════════════════════
# POLICY DECISION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PolicyDecision:
    """
    Outcome of one access evaluation.

    Fields:
        allowed:        True → render the requested resource.
        fallback_path:  Where to redirect instead (Deny only).
        reason:         DenyReason code (Deny only).

    Never partially populated: Allow carries neither fallback nor reason,
    Deny carries both.
    """

    allowed: bool
    fallback_path: Optional[str] = None
    reason: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.allowed, bool):
            raise ValueError("allowed must be a bool.")

        if self.allowed:
            if self.fallback_path is not None or self.reason is not None:
                raise ValueError("Allow decision carries no fallback_path or reason.")
            return

        if (
            not isinstance(self.fallback_path, str)
            or not self.fallback_path.startswith("/")
        ):
            raise ValueError("Deny decision requires an absolute fallback_path.")

        if self.reason not in DenyReason.ALL:
            raise ValueError(
                f"reason '{self.reason}' not valid. "
                f"Must be one of: {sorted(DenyReason.ALL)}"
            )

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, fallback_path: str, reason: str) -> "PolicyDecision":
        return cls(allowed=False, fallback_path=fallback_path, reason=reason)

    @property
    def denied(self) -> bool:
        return not self.allowed

    def to_dict(self) -> dict:
        if self.allowed:
            return {"allowed": True}
        return {
            "allowed": False,
            "fallback_path": self.fallback_path,
            "reason": self.reason,
        }
