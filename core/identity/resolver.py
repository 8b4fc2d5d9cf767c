"""
POS Identity — Session Payload Resolver
=========================================
Parses the raw session text written at login into an immutable Identity.

Payload shape (JSON object):
    {"id": 7, "username": "amina", "email": "...",
     "role": "caissier", "stockId": 2}

"stock_id" is accepted as an alias of "stockId".

No side effects. The caller owns the session store; on IdentityCorrupt
it is told to purge, it is never purged from here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.identity.errors import IdentityAbsent, IdentityCorrupt, IdentityIncomplete
from core.identity.roles import DEFAULT_ROLE_ALIASES, RoleKind, lookup_role

logger = logging.getLogger("pos.identity")

LOCATION_FIELDS = ("stockId", "stock_id")


# ══════════════════════════════════════════════════════════════
# IDENTITY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Identity:
    """
    Authenticated identity for the duration of one access check.

    Invariant: OPERATOR and MANAGER carry assigned_location_id.
    GLOBAL_ADMIN may omit it (unrestricted location scope).
    """

    id: str
    role: RoleKind
    assigned_location_id: Optional[int] = None
    username: str = ""
    email: str = ""

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not isinstance(self.role, RoleKind):
            raise ValueError("role must be RoleKind.")
        if self.assigned_location_id is not None and (
            isinstance(self.assigned_location_id, bool)
            or not isinstance(self.assigned_location_id, int)
        ):
            raise ValueError("assigned_location_id must be an int or None.")
        if self.role.requires_location and self.assigned_location_id is None:
            raise ValueError(
                f"{self.role.value} identity requires assigned_location_id."
            )

    @property
    def is_global(self) -> bool:
        return self.role is RoleKind.GLOBAL_ADMIN


# ══════════════════════════════════════════════════════════════
# FIELD PARSING
# ══════════════════════════════════════════════════════════════

def _parse_id(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise IdentityIncomplete("Session payload has no usable 'id'.")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise IdentityIncomplete("Session payload has no usable 'id'.")


def _parse_location_id(payload: Mapping[str, Any]) -> Optional[int]:
    for field_name in LOCATION_FIELDS:
        value = payload.get(field_name)
        if value is None:
            continue
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
            return int(value.strip())
        raise IdentityIncomplete(
            f"Session field '{field_name}' must be an integer location id."
        )
    return None


def _optional_text(payload: Mapping[str, Any], field_name: str) -> str:
    value = payload.get(field_name)
    return value.strip() if isinstance(value, str) else ""


# ══════════════════════════════════════════════════════════════
# RESOLVER
# ══════════════════════════════════════════════════════════════

def resolve(
    raw_payload: Optional[str],
    *,
    role_aliases: Mapping[str, RoleKind] = DEFAULT_ROLE_ALIASES,
    directory=None,
) -> Identity:
    """
    Resolve a raw session payload into an Identity.

    Raises:
        IdentityAbsent:     payload is None, empty or whitespace.
        IdentityCorrupt:    payload is not a JSON object.
        IdentityIncomplete: role/id/location missing or invalid for the role,
                            or the assigned location is not in `directory`
                            (when one is supplied).
    """
    if raw_payload is None:
        raise IdentityAbsent()
    if isinstance(raw_payload, bytes):
        try:
            raw_payload = raw_payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise IdentityCorrupt("Session payload is not valid UTF-8.") from exc
    if not isinstance(raw_payload, str):
        raise IdentityCorrupt("Session payload must be text.")
    if not raw_payload.strip():
        raise IdentityAbsent()

    try:
        payload = json.loads(raw_payload)
    except ValueError as exc:
        raise IdentityCorrupt("Session payload is not valid JSON.") from exc
    except RecursionError as exc:
        raise IdentityCorrupt("Session payload is nested too deeply.") from exc

    if not isinstance(payload, dict):
        raise IdentityCorrupt("Session payload must be a JSON object.")

    role = lookup_role(payload.get("role"), role_aliases)
    if role is None:
        raise IdentityIncomplete(
            f"Session role {payload.get('role')!r} is missing or unknown."
        )

    identity_id = _parse_id(payload.get("id"))
    location_id = _parse_location_id(payload)

    if role.requires_location and location_id is None:
        raise IdentityIncomplete(
            f"{role.value} session has no assigned location."
        )

    if (
        directory is not None
        and location_id is not None
        and location_id not in directory
    ):
        raise IdentityIncomplete(
            f"Assigned location id {location_id} is not a known location."
        )

    return Identity(
        id=identity_id,
        role=role,
        assigned_location_id=location_id,
        username=_optional_text(payload, "username"),
        email=_optional_text(payload, "email"),
    )
