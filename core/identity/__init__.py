"""
POS Identity — Public API
===========================
Role kinds, identity value, and session payload resolution.
"""

from core.identity.errors import (
    IdentityAbsent,
    IdentityCorrupt,
    IdentityError,
    IdentityErrorKind,
    IdentityIncomplete,
)
from core.identity.resolver import Identity, resolve
from core.identity.roles import (
    DEFAULT_ROLE_ALIASES,
    RoleKind,
    lookup_role,
    parse_role_kind,
)

__all__ = [
    "RoleKind",
    "DEFAULT_ROLE_ALIASES",
    "lookup_role",
    "parse_role_kind",
    "Identity",
    "resolve",
    "IdentityError",
    "IdentityErrorKind",
    "IdentityAbsent",
    "IdentityCorrupt",
    "IdentityIncomplete",
]
