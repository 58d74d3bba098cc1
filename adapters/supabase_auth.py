"""Supabase Auth adapter (GoTrue REST API).
"""

from typing import Any, Dict, Optional
import logging

import httpx

from app.config import settings
from app.exceptions import UnauthorizedError, UpstreamServiceError

logger = logging.getLogger("mealprep.supabase")

_client: Optional[httpx.Client] = None


def _get_client() -> httpx.Client:
    global _client
    if _client is None:
        _client = httpx.Client(
            base_url=settings.supabase_url.rstrip("/"),
            timeout=settings.auth_timeout_sec,
        )
    return _client


def use_client(client: Optional[httpx.Client]) -> None:
    """Swap the HTTP client (tests pass one built on ``httpx.MockTransport``)."""
    global _client
    _client = client


def close():
    global _client
    if _client is not None:
        _client.close()
    _client = None


def _base_headers() -> Dict[str, str]:
    return {"apikey": settings.supabase_anon_key}


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        logger.error("supabase_non_json_body status=%s", response.status_code)
        raise UpstreamServiceError("Authentication service returned a non-JSON body") from exc
    if not isinstance(data, dict):
        raise UpstreamServiceError("Authentication service returned an unexpected body")
    return data


def get_user(access_token: str) -> Dict[str, Any]:
    """
    Resolve the user behind an access token.

    Raises:
        UnauthorizedError: the token is rejected (401/403)
        UpstreamServiceError: Supabase is unreachable or misbehaving
    """
    headers = {**_base_headers(), "Authorization": f"Bearer {access_token}"}
    try:
        response = _get_client().get("/auth/v1/user", headers=headers)
    except httpx.HTTPError as exc:
        logger.error("supabase_get_user_failed error=%s", exc)
        raise UpstreamServiceError("Authentication service unavailable") from exc

    if response.status_code in (401, 403):
        raise UnauthorizedError("Invalid authentication")
    if response.status_code >= 400:
        logger.error("supabase_get_user_error status=%s", response.status_code)
        raise UpstreamServiceError(
            "Authentication service error", details={"status": response.status_code}
        )
    data = _json_object(response)
    if not data.get("id"):
        raise UnauthorizedError("Invalid authentication")
    return data


def exchange_code(auth_code: str, code_verifier: Optional[str] = None) -> Dict[str, Any]:
    """
    Exchange an OAuth authorization code for a session (PKCE flow).

    Returns the session dict with ``access_token``, ``refresh_token``,
    ``expires_in`` and ``user``.
    """
    body: Dict[str, Any] = {"auth_code": auth_code}
    if code_verifier:
        body["code_verifier"] = code_verifier
    try:
        response = _get_client().post(
            "/auth/v1/token",
            params={"grant_type": "pkce"},
            json=body,
            headers=_base_headers(),
        )
    except httpx.HTTPError as exc:
        logger.error("supabase_code_exchange_failed error=%s", exc)
        raise UpstreamServiceError("Authentication service unavailable") from exc

    if response.status_code >= 400:
        logger.warning("supabase_code_exchange_rejected status=%s", response.status_code)
        raise UnauthorizedError("Authorization code exchange failed")
    data = _json_object(response)
    if not data.get("access_token"):
        raise UnauthorizedError("Authorization code exchange failed")
    return data
