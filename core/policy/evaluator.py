"""
POS Policy — Access Policy Evaluator
======================================
The single authority deciding whether an identity may reach a resource.

Algorithm:
    1. GLOBAL_ADMIN                        → Allow (global scope)
    2. resource names a location:
         unknown key                       → Deny(home)
         key ≠ identity's location         → Deny(home)
    3. resource restricted to roles the
       identity does not hold              → Deny(home)
    4. OPERATOR on a restricted route      → Deny(operator home)
    5. otherwise                           → Allow

Home paths:
    OPERATOR → /dashboard/stock/{location}/cashier
    MANAGER  → /dashboard/stock/{location}

A home path is always Allowed for its owning identity, so following a
Deny never loops. If the identity's own location cannot be reversed to
a key, the configured default location key is used instead.
"""

from __future__ import annotations

import logging

from core.identity.resolver import Identity
from core.identity.roles import RoleKind
from core.locations.directory import LocationDirectory
from core.locations.errors import UnknownLocation
from core.policy.result import DenyReason, PolicyDecision
from core.routing.classifier import ResourceDescriptor
from core.routing.patterns import LocationPattern

logger = logging.getLogger("pos.policy")


class PolicyEvaluator:
    """
    Deterministic, stateless policy evaluator.

    Thread-safe: holds only read-only configuration.
    """

    def __init__(
        self,
        directory: LocationDirectory,
        *,
        default_location_key: str,
        operator_home: LocationPattern,
        manager_home: LocationPattern,
    ):
        if not isinstance(directory, LocationDirectory):
            raise ValueError("directory must be LocationDirectory.")
        # Fails at construction, never while computing a fallback.
        directory.key_to_id(default_location_key)
        self._directory = directory
        self._default_location_key = default_location_key
        self._operator_home = operator_home
        self._manager_home = manager_home

    @property
    def directory(self) -> LocationDirectory:
        return self._directory

    # ── Home paths ────────────────────────────────────────────

    def home_location_key(self, identity: Identity) -> str:
        if identity.assigned_location_id is None:
            return self._default_location_key
        try:
            return self._directory.id_to_key(identity.assigned_location_id)
        except UnknownLocation:
            logger.warning(
                "Identity %s references unknown location id %s; "
                "using default location '%s'.",
                identity.id,
                identity.assigned_location_id,
                self._default_location_key,
            )
            return self._default_location_key

    def home_path(self, identity: Identity) -> str:
        key = self.home_location_key(identity)
        if identity.role is RoleKind.OPERATOR:
            return self._operator_home.render(key)
        return self._manager_home.render(key)

    # ── Evaluation ────────────────────────────────────────────

    def evaluate(
        self,
        identity: Identity,
        resource: ResourceDescriptor,
    ) -> PolicyDecision:
        decision = self._evaluate(identity, resource)
        if decision.allowed:
            logger.debug(
                "Allow %s (%s) → %s",
                identity.id, identity.role.value, resource.requested_path,
            )
        else:
            logger.info(
                "Deny %s (%s) → %s [%s], fallback %s",
                identity.id,
                identity.role.value,
                resource.requested_path,
                decision.reason,
                decision.fallback_path,
            )
        return decision

    def _evaluate(
        self,
        identity: Identity,
        resource: ResourceDescriptor,
    ) -> PolicyDecision:
        if identity.role is RoleKind.GLOBAL_ADMIN:
            return PolicyDecision.allow()

        if resource.requested_location_key is not None:
            try:
                required_id = self._directory.key_to_id(resource.requested_location_key)
            except UnknownLocation:
                return PolicyDecision.deny(
                    self.home_path(identity), DenyReason.UNKNOWN_LOCATION
                )
            if required_id != identity.assigned_location_id:
                return PolicyDecision.deny(
                    self.home_path(identity), DenyReason.LOCATION_MISMATCH
                )

        if (
            resource.required_roles is not None
            and identity.role not in resource.required_roles
        ):
            return PolicyDecision.deny(
                self.home_path(identity), DenyReason.ROLE_RESTRICTED
            )

        if identity.role is RoleKind.OPERATOR and resource.is_restricted:
            return PolicyDecision.deny(
                self.home_path(identity), DenyReason.OPERATOR_RESTRICTED
            )

        return PolicyDecision.allow()
