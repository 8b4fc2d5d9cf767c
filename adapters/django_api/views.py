"""
POS Django Adapter Views
========================
JSON access checks for client-side navigation. The client asks before
navigating and performs the redirect itself.
"""

from __future__ import annotations

from django.http import HttpRequest, JsonResponse

from adapters.django_api.wiring import (
    build_access_guard,
    session_cookie_name,
    session_payload,
)


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        {"ok": False, "error": {"code": code, "message": message, "details": {}}},
        status=status,
    )


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


def _outcome_response(outcome) -> JsonResponse:
    response = JsonResponse({"ok": True, "data": outcome.to_dict()})
    if outcome.purge_session:
        response.delete_cookie(session_cookie_name())
    return response


def access_check_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    path = request.GET.get("path")
    if not path:
        return _json_error("INVALID_REQUEST", "path is required.")
    outcome = build_access_guard().authorize(session_payload(request), path)
    return _outcome_response(outcome)


def location_check_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    location_key = request.GET.get("location")
    if not location_key:
        return _json_error("INVALID_REQUEST", "location is required.")
    outcome = build_access_guard().authorize_location(
        session_payload(request), location_key
    )
    return _outcome_response(outcome)
