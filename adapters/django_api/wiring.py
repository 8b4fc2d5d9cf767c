"""
POS Django Adapter Wiring
=========================
Builds the process-wide AccessGuard from Django settings.

Settings:
    POS_ACCESS_FILE            path to a JSON access configuration
    POS_ACCESS                 mapping (same keys as the JSON file)
    POS_ACCESS_SESSION_COOKIE  cookie holding the session payload ("user")
    POS_ACCESS_EXEMPT_PREFIXES paths the middleware never guards

POS_ACCESS_FILE wins over POS_ACCESS; neither → shipped defaults.
Settings are read once, when the guard is first built; call
reset_access_guard() after changing them at runtime.

This module is adapter-only glue: the guard itself never reads settings.
"""

from __future__ import annotations

import logging
import threading
from urllib.parse import unquote

from django.conf import settings
from django.http import HttpRequest

from core.config.access import AccessConfig
from core.security.guards import AccessGuard

logger = logging.getLogger("pos.adapters")

DEFAULT_SESSION_COOKIE = "user"
DEFAULT_EXEMPT_PREFIXES = (
    "/static/",
    "/favicon.ico",
    "/v1/access/",
)

_GUARD_LOCK = threading.Lock()
_GUARD: AccessGuard | None = None


def load_access_config() -> AccessConfig:
    file_path = getattr(settings, "POS_ACCESS_FILE", None)
    if file_path:
        logger.info("Loading access configuration from %s", file_path)
        return AccessConfig.from_json_file(file_path)

    mapping = getattr(settings, "POS_ACCESS", None)
    if mapping is not None:
        return AccessConfig.from_mapping(mapping)

    return AccessConfig.default()


def build_access_guard() -> AccessGuard:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _GUARD
    with _GUARD_LOCK:
        if _GUARD is None:
            _GUARD = AccessGuard(load_access_config())
        return _GUARD


def reset_access_guard() -> None:
    global _GUARD
    with _GUARD_LOCK:
        _GUARD = None


# ══════════════════════════════════════════════════════════════
# REQUEST HELPERS
# ══════════════════════════════════════════════════════════════

def session_cookie_name() -> str:
    return getattr(settings, "POS_ACCESS_SESSION_COOKIE", DEFAULT_SESSION_COOKIE)


def exempt_prefixes() -> tuple[str, ...]:
    return tuple(getattr(settings, "POS_ACCESS_EXEMPT_PREFIXES", DEFAULT_EXEMPT_PREFIXES))


def session_payload(request: HttpRequest) -> str | None:
    raw = request.COOKIES.get(session_cookie_name())
    if raw is None:
        return None
    return unquote(raw)
