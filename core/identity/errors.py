"""
POS Identity — Resolution Errors
==================================
Every way a session payload can fail to become an Identity.

Kinds:
    ABSENT      → no session (empty / whitespace payload)
    CORRUPT     → payload does not parse; stored session must be purged
    INCOMPLETE  → payload parses but lacks what the declared role needs
"""

from __future__ import annotations


class IdentityErrorKind:
    ABSENT = "IDENTITY_ABSENT"
    CORRUPT = "IDENTITY_CORRUPT"
    INCOMPLETE = "IDENTITY_INCOMPLETE"

    ALL = frozenset({"IDENTITY_ABSENT", "IDENTITY_CORRUPT", "IDENTITY_INCOMPLETE"})


class IdentityError(Exception):
    """Base error for identity resolution."""

    kind: str = ""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.kind}: {detail}")

    @property
    def requires_purge(self) -> bool:
        return False


class IdentityAbsent(IdentityError):
    """No session payload present."""

    kind = IdentityErrorKind.ABSENT

    def __init__(self, detail: str = "Session payload is empty."):
        super().__init__(detail)


class IdentityCorrupt(IdentityError):
    """Payload failed structural parsing. Treated as a security event."""

    kind = IdentityErrorKind.CORRUPT

    @property
    def requires_purge(self) -> bool:
        return True


class IdentityIncomplete(IdentityError):
    """Payload is well-formed but missing fields required by its role."""

    kind = IdentityErrorKind.INCOMPLETE
