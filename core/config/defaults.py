"""
POS Core Config — Default Access Configuration
================================================
Shipped defaults for the three stores and the point-of-sale route map.
Every value here can be replaced through AccessConfig.from_mapping()
or a JSON file without touching guard logic.
"""

from __future__ import annotations

from core.identity.roles import DEFAULT_ROLE_ALIASES, RoleKind

# ── Locations (key, id, display name) ─────────────────────────
DEFAULT_LOCATIONS = (
    ("al-ouloum", 1, "Librairie Al Ouloum"),
    ("renaissance", 2, "Librairie La Renaissance"),
    ("gros", 3, "Gros"),
)

DEFAULT_LOCATION_KEY = "al-ouloum"

# ── Fallbacks ─────────────────────────────────────────────────
TOP_LEVEL_FALLBACK = "/"
OPERATOR_HOME_TEMPLATE = "/dashboard/stock/{location}/cashier"
MANAGER_HOME_TEMPLATE = "/dashboard/stock/{location}"

# ── Route pattern sets ────────────────────────────────────────
FORBIDDEN_PREFIXES = (
    "/dashboard/super-admin",
    "/admin/",
    "/products/",
    "/stock/",
    "/clients/",
    "/suppliers/",
    "/purchases/",
    "/reports/",
    "/settings/",
    "/users/",
)

SCOPED_DASHBOARD_PATTERNS = (
    "/dashboard/stock/{location}/cashier",
    "/cashier/{location}",
)

LOCATION_SCOPED_PATTERNS = (
    "/dashboard/stock/{location}",
)

RESTRICTED_SECTIONS = (
    "/dashboard/",
)

ALLOWED_PREFIXES = (
    "/",
    "/cashier/",
    "/dashboard/stock/",
    "/api/products",
    "/api/sales",
    "/api/auth",
    "/api/direct-login",
    "/api/server-login",
)

ROLE_RESTRICTED = (
    ("/dashboard/super-admin", (RoleKind.GLOBAL_ADMIN,)),
    ("/api/superadmin", (RoleKind.GLOBAL_ADMIN,)),
    ("/api/users", (RoleKind.GLOBAL_ADMIN,)),
)

# Reachable without a session (login page and login endpoints).
PUBLIC_PATHS = (
    "/",
    "/api/auth/",
)

ROLE_ALIASES = dict(DEFAULT_ROLE_ALIASES)
