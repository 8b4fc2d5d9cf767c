"""
POS Django Adapter — Access Guard Middleware
============================================
Enacts AccessGuard decisions for every page request:

    Allow → pass through to the view
    Deny  → 302 to fallback_path (pages) or 403 JSON (API paths);
            403 as well when the fallback is the requested page itself
            and nothing is purged (a redirect there would repeat forever)
    purge → delete the session cookie on the way out

Decision logic lives in core.security; this module only translates it.
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse, HttpResponseRedirect, JsonResponse

from adapters.django_api.wiring import (
    build_access_guard,
    exempt_prefixes,
    session_cookie_name,
    session_payload,
)
from core.routing.patterns import normalize_path

logger = logging.getLogger("pos.adapters")

API_PREFIX = "/api/"


def _is_self_redirect(request: HttpRequest, outcome) -> bool:
    if outcome.purge_session:
        return False
    return normalize_path(request.path) == normalize_path(outcome.fallback_path)


def deny_response(request: HttpRequest, outcome) -> HttpResponse:
    if request.path.startswith(API_PREFIX) or _is_self_redirect(request, outcome):
        response = JsonResponse(
            {
                "ok": False,
                "error": {
                    "code": outcome.reason,
                    "message": "Access denied.",
                    "details": {"fallback_path": outcome.fallback_path},
                },
            },
            status=403,
        )
    else:
        response = HttpResponseRedirect(outcome.fallback_path)
    if outcome.purge_session:
        response.delete_cookie(session_cookie_name())
    return response


class AccessGuardMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        path = request.path
        if any(path.startswith(prefix) for prefix in exempt_prefixes()):
            return self.get_response(request)

        outcome = build_access_guard().authorize(session_payload(request), path)
        request.access_outcome = outcome

        if outcome.allowed:
            return self.get_response(request)

        logger.debug(
            "%s %s denied (%s) → %s",
            request.method, path, outcome.reason, outcome.fallback_path,
        )
        return deny_response(request, outcome)
