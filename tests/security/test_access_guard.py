"""
Tests — Access Guard Orchestrator
===================================
authorize(): identity → route → policy, never raising, purge on corrupt.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.config import AccessConfig
from core.identity import RoleKind
from core.policy import DenyReason
from core.security import AccessGuard, AccessOutcome


OPERATOR_SESSION = json.dumps({"id": 7, "role": "caissier", "stockId": 2})
MANAGER_SESSION = json.dumps({"id": 3, "role": "admin", "stockId": 3})
ADMIN_SESSION = json.dumps({"id": 1, "role": "super_admin"})


@pytest.fixture
def guard() -> AccessGuard:
    return AccessGuard(
        AccessConfig.from_mapping(
            {"locations": {"al-ouloum": 1, "renaissance": 2, "gros": 3}}
        )
    )


# ══════════════════════════════════════════════════════════════
# IDENTITY FAILURES
# ══════════════════════════════════════════════════════════════


class TestIdentityFailures:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_absent_session_denied_to_top_level(self, guard, raw):
        outcome = guard.authorize(raw, "/dashboard/stock/gros/cashier")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/"
        assert outcome.reason == DenyReason.IDENTITY_ABSENT
        assert outcome.purge_session is False
        assert outcome.identity is None

    def test_corrupt_session_denied_and_purged(self, guard):
        outcome = guard.authorize("{broken", "/dashboard/stock/gros/cashier")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/"
        assert outcome.reason == DenyReason.IDENTITY_CORRUPT
        assert outcome.purge_session is True

    def test_corrupt_session_purged_even_on_public_path(self, guard):
        outcome = guard.authorize("{broken", "/")
        assert outcome.allowed is False
        assert outcome.purge_session is True

    def test_deeply_nested_session_is_corrupt_not_guard_error(self, guard):
        outcome = guard.authorize("[" * 3000, "/")
        assert outcome.reason == DenyReason.IDENTITY_CORRUPT
        assert outcome.purge_session is True

    def test_incomplete_session_denied_without_purge(self, guard):
        outcome = guard.authorize(
            json.dumps({"id": 7, "role": "caissier"}), "/dashboard/stock/gros/cashier"
        )
        assert outcome.reason == DenyReason.IDENTITY_INCOMPLETE
        assert outcome.fallback_path == "/"
        assert outcome.purge_session is False

    def test_unknown_assigned_location_is_incomplete(self, guard):
        outcome = guard.authorize(
            json.dumps({"id": 7, "role": "caissier", "stockId": 9}), "/"
        )
        assert outcome.allowed is True
        outcome = guard.authorize(
            json.dumps({"id": 7, "role": "caissier", "stockId": 9}), "/api/sales"
        )
        assert outcome.reason == DenyReason.IDENTITY_INCOMPLETE

    def test_public_paths_open_without_session(self, guard):
        assert guard.authorize("", "/").allowed is True
        assert guard.authorize(None, "/api/auth/login").allowed is True
        assert guard.authorize("", "/?next=/dashboard").allowed is True


# ══════════════════════════════════════════════════════════════
# SCENARIOS
# ══════════════════════════════════════════════════════════════


class TestScenarios:
    def test_operator_own_cashier(self, guard):
        outcome = guard.authorize(OPERATOR_SESSION, "/dashboard/stock/renaissance/cashier/sell")
        assert outcome.allowed is True
        assert outcome.purge_session is False
        assert outcome.identity.role is RoleKind.OPERATOR

    def test_operator_other_cashier(self, guard):
        outcome = guard.authorize(OPERATOR_SESSION, "/dashboard/stock/al-ouloum/cashier/sell")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/dashboard/stock/renaissance/cashier"

    def test_operator_product_page(self, guard):
        outcome = guard.authorize(OPERATOR_SESSION, "/products/42")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/dashboard/stock/renaissance/cashier"

    def test_operator_fallback_is_reachable(self, guard):
        outcome = guard.authorize(OPERATOR_SESSION, "/products/42")
        assert guard.authorize(OPERATOR_SESSION, outcome.fallback_path).allowed is True

    def test_manager_own_stock(self, guard):
        assert guard.authorize(MANAGER_SESSION, "/dashboard/stock/gros/sales").allowed is True

    def test_manager_other_stock(self, guard):
        outcome = guard.authorize(MANAGER_SESSION, "/dashboard/stock/al-ouloum/sales")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/dashboard/stock/gros"

    def test_global_admin_anywhere(self, guard):
        for path in ("/dashboard/super-admin", "/dashboard/stock/al-ouloum/cashier", "/x"):
            assert guard.authorize(ADMIN_SESSION, path).allowed is True


# ══════════════════════════════════════════════════════════════
# FAIL-SAFE & DETERMINISM
# ══════════════════════════════════════════════════════════════


class TestFailSafe:
    def test_internal_error_denies_instead_of_raising(self, guard, monkeypatch):
        def _boom(path):
            raise RuntimeError("classifier exploded")

        monkeypatch.setattr(guard.classifier, "classify", _boom)
        outcome = guard.authorize(OPERATOR_SESSION, "/dashboard/stock/renaissance/cashier")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/"
        assert outcome.reason == DenyReason.GUARD_ERROR

    def test_identical_inputs_identical_outcomes(self, guard):
        inputs = [
            (OPERATOR_SESSION, "/products/42"),
            (MANAGER_SESSION, "/dashboard/stock/gros"),
            ("{bad", "/dashboard"),
        ] * 50
        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(lambda args: guard.authorize(*args), inputs))
        for index, outcome in enumerate(outcomes):
            assert outcome == outcomes[index % 3]

    def test_outcome_to_dict(self, guard):
        assert guard.authorize("{bad", "/x").to_dict() == {
            "allowed": False,
            "fallback_path": "/",
            "reason": "IDENTITY_CORRUPT",
            "purge_session": True,
        }

    def test_outcome_requires_decision(self):
        with pytest.raises(ValueError):
            AccessOutcome(decision=None)


# ══════════════════════════════════════════════════════════════
# CONVENIENCE CHECKS
# ══════════════════════════════════════════════════════════════


class TestConvenienceChecks:
    def test_has_role(self, guard):
        assert guard.has_role(MANAGER_SESSION, [RoleKind.MANAGER, RoleKind.GLOBAL_ADMIN]) is True
        assert guard.has_role(OPERATOR_SESSION, [RoleKind.MANAGER]) is False
        assert guard.has_role("{bad", [RoleKind.OPERATOR]) is False

    def test_is_operator(self, guard):
        assert guard.is_operator(OPERATOR_SESSION) is True
        assert guard.is_operator(ADMIN_SESSION) is False
        assert guard.is_operator("") is False

    def test_can_access_location(self, guard):
        assert guard.can_access_location(OPERATOR_SESSION, "renaissance") is True
        assert guard.can_access_location(OPERATOR_SESSION, "gros") is False
        assert guard.can_access_location(OPERATOR_SESSION, "nowhere") is False
        assert guard.can_access_location(ADMIN_SESSION, "gros") is True
        assert guard.can_access_location(None, "gros") is False

    def test_authorize_location_denial_carries_home(self, guard):
        outcome = guard.authorize_location(MANAGER_SESSION, "al-ouloum")
        assert outcome.allowed is False
        assert outcome.fallback_path == "/dashboard/stock/gros"

    def test_authorize_location_corrupt_purges(self, guard):
        outcome = guard.authorize_location("{bad", "gros")
        assert outcome.purge_session is True
        assert outcome.reason == DenyReason.IDENTITY_CORRUPT
