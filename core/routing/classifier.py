"""
POS Routing — Route Classifier
================================
Turns a requested path into a ResourceDescriptor for the policy evaluator.

Priority (first match wins):
    1. forbidden prefix           → FORBIDDEN
    2. scoped dashboard pattern   → SCOPED_DASHBOARD (+ location key)
    3. location-scoped pattern    → RESTRICTED_SECTION (+ location key)
       restricted section prefix  → RESTRICTED_SECTION
    4. allowed prefix             → ALLOWED
    5. nothing                    → UNCLASSIFIED (default deny)

Role-restricted prefixes are orthogonal: they attach required_roles to
the descriptor whatever the class.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from core.identity.roles import RoleKind
from core.routing.patterns import RoutePatterns, has_prefix, normalize_path


# ══════════════════════════════════════════════════════════════
# ROUTE CLASS
# ══════════════════════════════════════════════════════════════

class RouteClass(Enum):
    FORBIDDEN = "FORBIDDEN"
    SCOPED_DASHBOARD = "SCOPED_DASHBOARD"
    RESTRICTED_SECTION = "RESTRICTED_SECTION"
    ALLOWED = "ALLOWED"
    UNCLASSIFIED = "UNCLASSIFIED"

    @property
    def is_restricted(self) -> bool:
        """Restricted classes are closed to operators."""
        return self in (
            RouteClass.FORBIDDEN,
            RouteClass.RESTRICTED_SECTION,
            RouteClass.UNCLASSIFIED,
        )

    @property
    def operator_safe(self) -> bool:
        return self is RouteClass.SCOPED_DASHBOARD


# ══════════════════════════════════════════════════════════════
# RESOURCE DESCRIPTOR
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ResourceDescriptor:
    """
    What is being requested, as seen by the policy evaluator.

    Constructed per access check. route_class defaults to UNCLASSIFIED so
    a hand-built descriptor is closed to operators unless stated otherwise.
    """

    requested_path: str
    requested_location_key: Optional[str] = None
    route_class: RouteClass = RouteClass.UNCLASSIFIED
    required_roles: Optional[FrozenSet[RoleKind]] = None

    def __post_init__(self):
        if not isinstance(self.requested_path, str):
            raise ValueError("requested_path must be a string.")
        if self.requested_location_key is not None and (
            not isinstance(self.requested_location_key, str)
            or not self.requested_location_key
        ):
            raise ValueError("requested_location_key must be a non-empty string or None.")
        if not isinstance(self.route_class, RouteClass):
            raise ValueError("route_class must be RouteClass.")
        if self.required_roles is not None:
            object.__setattr__(self, "required_roles", frozenset(self.required_roles))

    @property
    def is_restricted(self) -> bool:
        return self.route_class.is_restricted


# ══════════════════════════════════════════════════════════════
# CLASSIFIER
# ══════════════════════════════════════════════════════════════

class RouteClassifier:
    """
    Stateless path classifier over a fixed RoutePatterns table.

    Usage:
        classifier = RouteClassifier(config.route_patterns)
        descriptor = classifier.classify("/dashboard/stock/gros/cashier/sell")
        descriptor.route_class              # RouteClass.SCOPED_DASHBOARD
        descriptor.requested_location_key   # "gros"
    """

    def __init__(self, patterns: RoutePatterns):
        if not isinstance(patterns, RoutePatterns):
            raise ValueError("patterns must be RoutePatterns.")
        self._patterns = patterns
        # Longest prefix first so the most specific restriction wins.
        self._role_restricted = tuple(
            sorted(patterns.role_restricted, key=lambda item: len(item[0]), reverse=True)
        )

    @property
    def patterns(self) -> RoutePatterns:
        return self._patterns

    def classify(self, path: str) -> ResourceDescriptor:
        normalized = normalize_path(path)
        route_class, location_key = self._classify(normalized)
        return ResourceDescriptor(
            requested_path=normalized,
            requested_location_key=location_key,
            route_class=route_class,
            required_roles=self._required_roles(normalized),
        )

    def _classify(self, path: str):
        patterns = self._patterns

        if any(has_prefix(path, prefix) for prefix in patterns.forbidden_prefixes):
            return RouteClass.FORBIDDEN, None

        for pattern in patterns.scoped_dashboard:
            key = pattern.match(path)
            if key is not None:
                return RouteClass.SCOPED_DASHBOARD, key

        for pattern in patterns.location_scoped:
            key = pattern.match(path)
            if key is not None:
                return RouteClass.RESTRICTED_SECTION, key

        if any(has_prefix(path, prefix) for prefix in patterns.restricted_sections):
            return RouteClass.RESTRICTED_SECTION, None

        if any(has_prefix(path, prefix) for prefix in patterns.allowed_prefixes):
            return RouteClass.ALLOWED, None

        return RouteClass.UNCLASSIFIED, None

    def _required_roles(self, path: str) -> Optional[FrozenSet[RoleKind]]:
        for prefix, roles in self._role_restricted:
            if has_prefix(path, prefix):
                return frozenset(roles)
        return None
