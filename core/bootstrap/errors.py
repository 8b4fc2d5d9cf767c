"""
POS Bootstrap — Access Startup Errors
=======================================
Raised while Django loads apps, when the access configuration cannot
be built or would produce unusable redirects (unknown default location,
a home path its owner cannot open, a non-public top-level fallback).
"""


class AccessBootstrapError(Exception):
    """
    The access configuration failed a startup check.

    `invariant` names the failed check (LOCATION_ROUND_TRIP,
    HOME_PATH_REACHABLE, TOP_LEVEL_FALLBACK_PUBLIC, ACCESS_CONFIGURATION);
    `detail` says which location, role or path broke it.

    The process is not started in a degraded mode: fix the configuration.
    """

    def __init__(self, invariant: str, detail: str):
        self.invariant = invariant
        self.detail = detail
        super().__init__(f"Access configuration rejected at startup [{invariant}]: {detail}")
