"""
POS Bootstrap — Self-Check Orchestrator
=========================================
Runs all access invariant checks at system startup.
If any check fails → AccessBootstrapError propagates → system refuses to start.

Check order:
1. Location directory round-trip
2. Home paths reachable
3. Top-level fallback public

No auto-fix. No fallback. No silence.
"""

import logging

from core.bootstrap.invariants import (
    check_directory_round_trip,
    check_home_paths_reachable,
    check_top_level_fallback_public,
)

logger = logging.getLogger("pos.bootstrap")


def run_bootstrap_checks(guard):
    """
    Execute all access invariant checks against a built AccessGuard.
    Called once at startup via AppConfig.ready().
    """
    logger.info("═══ POS Access Self-Check Starting ═══")

    check_directory_round_trip(guard)
    check_home_paths_reachable(guard)
    check_top_level_fallback_public(guard)

    logger.info("═══ POS Access Self-Check PASSED ═══")
