"""OpenRouter adapter: chat completions, JSON mode, vision and embeddings.
"""

from typing import Any, Dict, List, Optional
import json
import logging

import httpx

from app.config import settings
from app.exceptions import UpstreamServiceError

logger = logging.getLogger("mealprep.openrouter")

MAX_IMAGES = 4

_client: Optional[httpx.Client] = None


# ------------------ Connection ------------------
def _get_client() -> httpx.Client:
    """Lazy init the shared HTTP client."""
    global _client
    if _client is None:
        _client = httpx.Client(
            base_url=settings.openrouter_base_url,
            timeout=settings.openrouter_timeout_sec,
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
        logger.info("OpenRouter client closed")
    _client = None


def _headers() -> Dict[str, str]:
    if not settings.openrouter_api_key:
        raise UpstreamServiceError("OpenRouter API key not configured")
    return {
        "Authorization": f"Bearer {settings.openrouter_api_key}",
        "HTTP-Referer": settings.openrouter_referer,
        "X-Title": settings.openrouter_title,
    }


def _post(path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    headers = _headers()
    try:
        response = _get_client().post(path, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("openrouter_request_failed path=%s error=%s", path, exc)
        raise UpstreamServiceError(
            "OpenRouter request failed", details={"error": str(exc)}
        ) from exc

    if response.status_code >= 400:
        logger.error(
            "openrouter_api_error status=%s body=%s",
            response.status_code,
            response.text[:500],
        )
        raise UpstreamServiceError(
            f"OpenRouter API error: {response.status_code}",
            details={"status": response.status_code, "body": response.text[:500]},
        )
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamServiceError("OpenRouter returned a non-JSON body") from exc


# ------------------ Chat ------------------
def chat_completion(
    messages: List[Dict[str, Any]],
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 500,
    response_format: Optional[Dict[str, str]] = None,
) -> str:
    """Call ``/chat/completions`` and return the first choice's content.

    Raises:
        UpstreamServiceError: missing key, transport failure, non-2xx status
            or a response without choices
    """
    payload: Dict[str, Any] = {
        "model": model or settings.chat_model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if response_format:
        payload["response_format"] = response_format

    data = _post("/chat/completions", payload)
    choices = data.get("choices") or []
    if not choices:
        raise UpstreamServiceError("No response from AI model")
    content = (choices[0].get("message") or {}).get("content")
    if content is None:
        raise UpstreamServiceError("No response from AI model")
    logger.debug(
        "openrouter_completion model=%s usage=%s", payload["model"], data.get("usage")
    )
    return content


def chat(
    system_prompt: str,
    user_message: str,
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 500,
) -> str:
    return chat_completion(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
        model=model or settings.chat_model,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def chat_with_history(
    system_prompt: str,
    history: List[Dict[str, Any]],
    user_message: str,
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 500,
) -> str:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(history)
    messages.append({"role": "user", "content": user_message})
    return chat_completion(
        messages,
        model=model or settings.chat_model,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def chat_with_images(
    system_prompt: str,
    user_message: str,
    images: List[str],
    model: Optional[str] = None,
    temperature: float = 0.1,
    max_tokens: int = 2000,
    response_format: Optional[Dict[str, str]] = None,
) -> str:
    """Multimodal chat; only the first four images are sent."""
    content: List[Dict[str, Any]] = [{"type": "text", "text": user_message}]
    content.extend(
        {"type": "image_url", "image_url": {"url": url}} for url in images[:MAX_IMAGES]
    )
    return chat_completion(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": content},
        ],
        model=model or settings.vision_model,
        temperature=temperature,
        max_tokens=max_tokens,
        response_format=response_format,
    )


def chat_json(
    system_prompt: str,
    user_message: str,
    model: Optional[str] = None,
    temperature: float = 0.1,
    max_tokens: int = 500,
) -> Any:
    """JSON-mode chat. The reply must parse as JSON as-is."""
    content = chat_completion(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
        model=model or settings.text_model,
        temperature=temperature,
        max_tokens=max_tokens,
        response_format={"type": "json_object"},
    )
    try:
        return json.loads(content)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.error("openrouter_invalid_json content=%s", str(content)[:200])
        raise UpstreamServiceError("Invalid JSON response from model") from exc


# ------------------ Embeddings ------------------
def embed(text: str, model: Optional[str] = None) -> List[float]:
    data = _post(
        "/embeddings", {"model": model or settings.embedding_model, "input": text}
    )
    try:
        return [float(v) for v in data["data"][0]["embedding"]]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise UpstreamServiceError("Malformed embedding response") from exc
