"""
POS Routing — Path Patterns
=============================
Prefix sets and location-bearing structural patterns.

A structural pattern is written as a template with one `{location}`
placeholder occupying a whole path segment:

    /dashboard/stock/{location}/cashier

It matches the template itself and anything below it
(`/dashboard/stock/gros/cashier/sell`), never a sibling segment
(`/dashboard/stock/gros/cashiers`).
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from core.identity.roles import RoleKind

PLACEHOLDER = "{location}"

_MULTI_SLASH = re.compile(r"/{2,}")


class InvalidPatternError(ValueError):
    """Pattern template is malformed."""

    def __init__(self, template: str, detail: str):
        self.template = template
        super().__init__(f"Invalid route pattern {template!r}: {detail}")


# ══════════════════════════════════════════════════════════════
# PATH NORMALIZATION
# ══════════════════════════════════════════════════════════════

def normalize_path(path: str) -> str:
    """
    Canonical form used for every match.

    Strips query string and fragment, collapses repeated slashes and
    resolves dot segments so that `/a/b/../c` cannot masquerade as `/a/b`.
    A trailing slash is preserved.
    """
    if not isinstance(path, str):
        return "/"
    path = path.split("#", 1)[0].split("?", 1)[0].strip()
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    path = _MULTI_SLASH.sub("/", path)
    trailing = path.endswith("/") and path != "/"
    path = posixpath.normpath(path)
    if trailing and path != "/":
        path += "/"
    return path


def has_prefix(path: str, prefix: str) -> bool:
    """Root prefix matches only the root path itself."""
    if prefix == "/":
        return path == "/"
    return path.startswith(prefix)


# ══════════════════════════════════════════════════════════════
# LOCATION PATTERN
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LocationPattern:
    """Compiled `{location}` template."""

    template: str
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        template = self.template
        if not isinstance(template, str) or not template.startswith("/"):
            raise InvalidPatternError(str(template), "must start with '/'.")
        if template.count(PLACEHOLDER) != 1:
            raise InvalidPatternError(
                template, f"must contain exactly one {PLACEHOLDER} placeholder."
            )
        head, tail = template.split(PLACEHOLDER)
        if not head.endswith("/"):
            raise InvalidPatternError(
                template, f"{PLACEHOLDER} must occupy a whole segment."
            )
        if tail and not tail.startswith("/"):
            raise InvalidPatternError(
                template, f"{PLACEHOLDER} must occupy a whole segment."
            )
        if tail.endswith("/"):
            tail = tail.rstrip("/")
        regex = re.compile(
            "^" + re.escape(head) + r"(?P<location>[^/]+)" + re.escape(tail) + r"(?:/.*)?$"
        )
        object.__setattr__(self, "_regex", regex)

    def match(self, path: str) -> Optional[str]:
        """Return the extracted location key, or None."""
        found = self._regex.match(path)
        if found is None:
            return None
        return found.group("location")

    def render(self, location_key: str) -> str:
        return self.template.replace(PLACEHOLDER, location_key)


# ══════════════════════════════════════════════════════════════
# ROUTE PATTERN SETS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RoutePatterns:
    """
    Pattern sets consulted by the classifier, in priority order.

    Fields:
        forbidden_prefixes:      paths never open to operators.
        scoped_dashboard:        operator-safe location patterns (cashier).
        location_scoped:         other location-bearing patterns; matching
                                 paths are restricted for operators.
        restricted_sections:     prefixes that are restricted unless they
                                 match a scoped dashboard pattern.
        allowed_prefixes:        permitted by default ("/" = root only).
        role_restricted:         (prefix, roles) pairs; longest prefix wins.
    """

    forbidden_prefixes: Tuple[str, ...] = ()
    scoped_dashboard: Tuple[LocationPattern, ...] = ()
    location_scoped: Tuple[LocationPattern, ...] = ()
    restricted_sections: Tuple[str, ...] = ()
    allowed_prefixes: Tuple[str, ...] = ()
    role_restricted: Tuple[Tuple[str, FrozenSet[RoleKind]], ...] = ()

    def __post_init__(self):
        for name in ("forbidden_prefixes", "restricted_sections", "allowed_prefixes"):
            values = getattr(self, name)
            if not isinstance(values, tuple):
                raise ValueError(f"{name} must be a tuple.")
            for prefix in values:
                if not isinstance(prefix, str) or not prefix.startswith("/"):
                    raise InvalidPatternError(str(prefix), "prefix must start with '/'.")
        for name in ("scoped_dashboard", "location_scoped"):
            values = getattr(self, name)
            if not isinstance(values, tuple) or not all(
                isinstance(p, LocationPattern) for p in values
            ):
                raise ValueError(f"{name} must be a tuple of LocationPattern.")
        for prefix, roles in self.role_restricted:
            if not isinstance(prefix, str) or not prefix.startswith("/"):
                raise InvalidPatternError(str(prefix), "prefix must start with '/'.")
            if not roles or not all(isinstance(r, RoleKind) for r in roles):
                raise ValueError(
                    f"role_restricted entry {prefix!r} needs a non-empty set of RoleKind."
                )
