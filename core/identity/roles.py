"""
POS Identity — Role Kinds
===========================
Closed set of roles an authenticated identity can hold.

Session payloads carry role names as free-form strings written by the
login flow ("caissier", "admin", "super_admin", ...). They are mapped to
RoleKind exactly once, at resolution time. Nothing downstream compares
role strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional


# ══════════════════════════════════════════════════════════════
# ROLE KIND
# ══════════════════════════════════════════════════════════════

class RoleKind(Enum):
    """Access role of an identity."""
    OPERATOR = "OPERATOR"
    MANAGER = "MANAGER"
    GLOBAL_ADMIN = "GLOBAL_ADMIN"

    @property
    def requires_location(self) -> bool:
        """Operator and Manager are always scoped to one location."""
        return self is not RoleKind.GLOBAL_ADMIN


# ══════════════════════════════════════════════════════════════
# ROLE ALIASES (session role string → RoleKind)
# ══════════════════════════════════════════════════════════════

DEFAULT_ROLE_ALIASES: Mapping[str, RoleKind] = {
    "caissier": RoleKind.OPERATOR,
    "cashier": RoleKind.OPERATOR,
    "operator": RoleKind.OPERATOR,
    "admin": RoleKind.MANAGER,
    "manager": RoleKind.MANAGER,
    "super_admin": RoleKind.GLOBAL_ADMIN,
    "global_admin": RoleKind.GLOBAL_ADMIN,
}


def normalize_role_alias(value: str) -> str:
    return value.strip().lower().replace("-", "_")


def parse_role_kind(value: str) -> RoleKind:
    """
    Parse a RoleKind from its canonical name ("OPERATOR", "global_admin").

    Used by configuration, not by session parsing.
    """
    if isinstance(value, RoleKind):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("role kind must be a non-empty string.")
    try:
        return RoleKind[value.strip().upper().replace("-", "_")]
    except KeyError:
        raise ValueError(
            f"Unknown role kind '{value}'. "
            f"Must be one of: {sorted(r.value for r in RoleKind)}"
        ) from None


def lookup_role(
    raw_role,
    aliases: Mapping[str, RoleKind],
) -> Optional[RoleKind]:
    if not isinstance(raw_role, str) or not raw_role.strip():
        return None
    return aliases.get(normalize_role_alias(raw_role))
