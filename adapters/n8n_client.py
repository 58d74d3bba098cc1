"""n8n adapter: event webhook and the recipe RAG workflow.
"""

from typing import Any, Dict, Optional
import json
import logging

import httpx

from app.config import settings

logger = logging.getLogger("mealprep.n8n")

USER_AGENT = "MealPrep-API/1.0"
SOURCE = "meal-prep-api"

_client: Optional[httpx.Client] = None


def _get_client() -> httpx.Client:
    global _client
    if _client is None:
        _client = httpx.Client()
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


def post_event(url: str, event_type: str, payload: Dict[str, Any]) -> httpx.Response:
    """POST an application event. Raises ``httpx.HTTPError`` on failure."""
    response = _get_client().post(
        url,
        json=payload,
        headers={
            "User-Agent": USER_AGENT,
            "X-Event-Type": event_type,
            "X-Source": SOURCE,
        },
        timeout=settings.webhook_timeout_sec,
    )
    response.raise_for_status()
    return response


def extract_reply(body: str) -> str:
    """
    Pick the reply text out of a RAG workflow response.

    JSON bodies yield the first of ``content``, ``message`` or ``output``;
    anything else is returned as the raw text.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body
    if isinstance(data, list) and data and isinstance(data[0], dict):
        data = data[0]
    if isinstance(data, dict):
        for key in ("content", "message", "output"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value)
        return body
    if isinstance(data, str):
        return data
    return body


def rag_search(
    message: str, session_id: str, conversation_id: str, user_id: str
) -> str:
    """
    Run the RAG workflow and return its reply text.

    Raises:
        RuntimeError: when the RAG webhook URL is not configured
        httpx.HTTPError: transport failure, timeout or non-2xx status
    """
    url = settings.n8n_rag_webhook_url
    if not url:
        raise RuntimeError("n8n RAG webhook URL not configured")
    response = _get_client().post(
        url,
        json={
            "message": message,
            "sessionId": session_id,
            "conversationId": conversation_id,
            "userId": user_id,
        },
        headers={"User-Agent": USER_AGENT, "X-Source": SOURCE},
        timeout=settings.rag_timeout_sec,
    )
    response.raise_for_status()
    return extract_reply(response.text)
