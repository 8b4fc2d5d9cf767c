"""
POS Core Security — Access Guard
==================================
The façade every entry point calls. Orchestrates, in order:
  1. Identity resolution (raw session payload → Identity)
  2. Route classification (path → ResourceDescriptor)
  3. Policy evaluation (Identity × ResourceDescriptor → PolicyDecision)

Fail-safe: on any error → DENY to the top-level fallback
(never permissive on error). No exception crosses authorize().

A corrupt session payload is a security event: the outcome instructs the
caller to purge the stored payload before redirecting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from core.config.access import AccessConfig
from core.identity.errors import (
    IdentityAbsent,
    IdentityCorrupt,
    IdentityError,
    IdentityIncomplete,
)
from core.identity.resolver import Identity, resolve
from core.identity.roles import RoleKind
from core.policy.evaluator import PolicyEvaluator
from core.policy.result import DenyReason, PolicyDecision
from core.routing.classifier import ResourceDescriptor, RouteClass, RouteClassifier
from core.routing.patterns import has_prefix, normalize_path

logger = logging.getLogger("pos.access")


# ══════════════════════════════════════════════════════════════
# ACCESS OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AccessOutcome:
    """
    What the caller acts on.

    Allow → render. Deny → redirect to fallback_path.
    purge_session → clear the stored session payload first.
    """

    decision: PolicyDecision
    purge_session: bool = False
    identity: Optional[Identity] = None

    def __post_init__(self):
        if not isinstance(self.decision, PolicyDecision):
            raise ValueError("decision must be PolicyDecision.")
        if not isinstance(self.purge_session, bool):
            raise ValueError("purge_session must be a bool.")

    @property
    def allowed(self) -> bool:
        return self.decision.allowed

    @property
    def fallback_path(self) -> Optional[str]:
        return self.decision.fallback_path

    @property
    def reason(self) -> Optional[str]:
        return self.decision.reason

    def to_dict(self) -> dict:
        payload = self.decision.to_dict()
        payload["purge_session"] = self.purge_session
        return payload


# ══════════════════════════════════════════════════════════════
# ACCESS GUARD
# ══════════════════════════════════════════════════════════════

class AccessGuard:
    """
    Stateless orchestrator over one AccessConfig.

    Safe to share across threads and requests: identical inputs always
    produce identical outcomes.

    Usage:
        guard = AccessGuard(AccessConfig.default())
        outcome = guard.authorize(session_text, "/dashboard/stock/gros/cashier")
        if not outcome.allowed:
            redirect(outcome.fallback_path)
    """

    def __init__(self, config: AccessConfig):
        if not isinstance(config, AccessConfig):
            raise ValueError("config must be AccessConfig.")
        self._config = config
        self._classifier = RouteClassifier(config.route_patterns)
        self._evaluator = PolicyEvaluator(
            config.directory,
            default_location_key=config.default_location_key,
            operator_home=config.operator_home,
            manager_home=config.manager_home,
        )

    @classmethod
    def default(cls) -> "AccessGuard":
        return cls(AccessConfig.default())

    @property
    def config(self) -> AccessConfig:
        return self._config

    @property
    def classifier(self) -> RouteClassifier:
        return self._classifier

    @property
    def evaluator(self) -> PolicyEvaluator:
        return self._evaluator

    # ── Building blocks ───────────────────────────────────────

    def resolve_identity(self, raw_payload) -> Identity:
        """Raises IdentityError subclasses; see core.identity.resolver."""
        return resolve(
            raw_payload,
            role_aliases=self._config.role_aliases,
            directory=self._config.directory,
        )

    def is_public(self, requested_path: str) -> bool:
        path = normalize_path(requested_path)
        return any(has_prefix(path, prefix) for prefix in self._config.public_paths)

    def _deny_top_level(self, reason: str, *, purge: bool = False) -> AccessOutcome:
        return AccessOutcome(
            decision=PolicyDecision.deny(self._config.top_level_fallback, reason),
            purge_session=purge,
        )

    # ── Authorization ─────────────────────────────────────────

    def authorize(self, raw_payload, requested_path: str) -> AccessOutcome:
        """
        Decide access for one request. Never raises.
        """
        try:
            return self._authorize(raw_payload, requested_path)
        except Exception:
            logger.exception(
                "Access guard failed for path %r; denying.", requested_path
            )
            return self._deny_top_level(DenyReason.GUARD_ERROR)

    def _authorize(self, raw_payload, requested_path: str) -> AccessOutcome:
        try:
            identity = self.resolve_identity(raw_payload)
        except IdentityCorrupt as exc:
            logger.warning(
                "Corrupt session payload on %r (%s); purging session.",
                requested_path, exc.detail,
            )
            return self._deny_top_level(DenyReason.IDENTITY_CORRUPT, purge=True)
        except (IdentityAbsent, IdentityIncomplete) as exc:
            if self.is_public(requested_path):
                return AccessOutcome(decision=PolicyDecision.allow())
            logger.info("No usable identity on %r: %s", requested_path, exc.detail)
            return self._deny_top_level(exc.kind)

        resource = self._classifier.classify(requested_path)
        decision = self._evaluator.evaluate(identity, resource)
        return AccessOutcome(decision=decision, identity=identity)

    def authorize_location(self, raw_payload, location_key: str) -> AccessOutcome:
        """
        Decide access to a location-scoped UI section that is not addressed
        by path (e.g. a stock selector entry). Never raises.
        """
        try:
            identity = self.resolve_identity(raw_payload)
        except IdentityError as exc:
            return self._deny_top_level(exc.kind, purge=exc.requires_purge)
        try:
            resource = ResourceDescriptor(
                requested_path=self._config.manager_home.render(location_key),
                requested_location_key=location_key,
                route_class=RouteClass.ALLOWED,
            )
            decision = self._evaluator.evaluate(identity, resource)
        except Exception:
            logger.exception("Location check failed for %r; denying.", location_key)
            return self._deny_top_level(DenyReason.GUARD_ERROR)
        return AccessOutcome(decision=decision, identity=identity)

    # ── Convenience checks ────────────────────────────────────

    def has_role(self, raw_payload, roles: Iterable[RoleKind]) -> bool:
        try:
            identity = self.resolve_identity(raw_payload)
        except IdentityError:
            return False
        return identity.role in frozenset(roles)

    def is_operator(self, raw_payload) -> bool:
        return self.has_role(raw_payload, (RoleKind.OPERATOR,))

    def can_access_location(self, raw_payload, location_key: str) -> bool:
        return self.authorize_location(raw_payload, location_key).allowed
