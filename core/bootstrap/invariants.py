"""
POS Bootstrap — Invariant Checks
==================================
Each function verifies one access-control law against a built guard.
If any check fails → AccessBootstrapError is raised.

These checks do NOT:
- Auto-fix anything
- Substitute default locations
- Silence failures

A guard that boots with a redirect loop is worse than no guard.
"""

import logging

from core.bootstrap.errors import AccessBootstrapError
from core.identity.resolver import Identity
from core.identity.roles import RoleKind
from core.locations.errors import UnknownLocation

logger = logging.getLogger("pos.bootstrap")


# ══════════════════════════════════════════════════════════════
# CHECK 1: Location Directory Round-Trip
# ══════════════════════════════════════════════════════════════

def check_directory_round_trip(guard):
    """
    key_to_id(id_to_key(x)) == x and id_to_key(key_to_id(k)) == k
    for every entry.
    """
    directory = guard.config.directory
    for location in directory:
        try:
            key = directory.id_to_key(location.id)
            location_id = directory.key_to_id(location.key)
        except UnknownLocation as exc:
            raise AccessBootstrapError(
                invariant="LOCATION_ROUND_TRIP",
                detail=f"Directory lookup failed for {location}: {exc}",
            ) from exc
        if key != location.key or location_id != location.id:
            raise AccessBootstrapError(
                invariant="LOCATION_ROUND_TRIP",
                detail=f"Location '{location.key}' does not round-trip to id {location.id}.",
            )

    logger.info("✓ Location directory round-trips (%d locations).", len(directory))


# ══════════════════════════════════════════════════════════════
# CHECK 2: Home Paths Reachable (no redirect loops)
# ══════════════════════════════════════════════════════════════

def check_home_paths_reachable(guard):
    """
    For every location and every location-bound role, the home path a
    Deny would redirect to must itself be Allowed for that identity.
    """
    classifier = guard.classifier
    evaluator = guard.evaluator

    for location in guard.config.directory:
        for role in (RoleKind.OPERATOR, RoleKind.MANAGER):
            identity = Identity(
                id="bootstrap-check",
                role=role,
                assigned_location_id=location.id,
            )
            home = evaluator.home_path(identity)
            decision = evaluator.evaluate(identity, classifier.classify(home))
            if not decision.allowed:
                raise AccessBootstrapError(
                    invariant="HOME_PATH_REACHABLE",
                    detail=(
                        f"{role.value} home path '{home}' for location "
                        f"'{location.key}' is denied ({decision.reason}). "
                        f"Denied requests would loop."
                    ),
                )

    logger.info("✓ Home paths reachable for every location.")


# ══════════════════════════════════════════════════════════════
# CHECK 3: Top-Level Fallback Public
# ══════════════════════════════════════════════════════════════

def check_top_level_fallback_public(guard):
    """
    Requests without a usable session are sent to the top-level
    fallback, so it must be reachable without one.
    """
    fallback = guard.config.top_level_fallback
    if not guard.is_public(fallback):
        raise AccessBootstrapError(
            invariant="TOP_LEVEL_FALLBACK_PUBLIC",
            detail=(
                f"Top-level fallback '{fallback}' is not a public path. "
                f"Anonymous requests would loop."
            ),
        )

    logger.info("✓ Top-level fallback '%s' is public.", fallback)
