"""Request dispatcher — blocking POST to the completion endpoint with bounded retries."""

import logging
import time
from typing import Any, Callable

import httpx

from chatline.config import settings

logger = logging.getLogger(__name__)


def build_payload(message: str, model: str) -> dict[str, Any]:
    """Single-message request body. httpx handles the JSON encoding."""
    return {
        "model": model,
        "messages": [{"role": "user", "content": message}],
    }


def build_headers(credential: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {credential}",
        "Content-Type": "application/json",
    }


def failure_sentinel(max_attempts: int) -> str:
    return f"Error: Failed to connect to the API after {max_attempts} attempts."


def encoding_sentinel(error: UnicodeEncodeError) -> str:
    return f"Error: Request could not be encoded ({error.encoding}: {error.reason})."


def _post(client: httpx.Client, url: str, payload: dict[str, Any], headers: dict[str, str]) -> str:
    resp = client.post(url, json=payload, headers=headers)
    # Non-2xx bodies still carry the API's error payload; the interpreter reads them.
    logger.debug(f"POST {url}: status={resp.status_code}, {len(resp.content)} bytes")
    return resp.text


def dispatch(
    message: str,
    credential: str,
    max_attempts: int = 3,
    delay_ms: int = 1000,
    *,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
    url: str | None = None,
    model: str | None = None,
    timeout: float | None = None,
) -> str:
    """
    Send one user message and return the raw response body.

    A transport error or an empty body counts as a failed attempt; the caller's
    thread sleeps delay_ms between attempts. After max_attempts failures the
    failure sentinel is returned instead of raising. Text that cannot be encoded
    onto the wire ends the call at once with an encoding sentinel.
    """
    if url is None:
        url = settings.api_url
    if model is None:
        model = settings.chat_model
    if timeout is None:
        timeout = settings.request_timeout
    payload = build_payload(message, model)
    headers = build_headers(credential)

    owned = client is None
    if owned:
        client = httpx.Client(timeout=timeout)

    try:
        for attempt in range(1, max_attempts + 1):
            try:
                body = _post(client, url, payload, headers)
            except httpx.RequestError as e:
                logger.debug(f"attempt {attempt}: {type(e).__name__}: {e}")
                body = ""
            except UnicodeEncodeError as e:
                # Header values must be ASCII and the body UTF-8; retrying cannot help.
                logger.warning(f"Request could not be encoded: {e.reason}")
                return encoding_sentinel(e)

            if body:
                return body

            if attempt == max_attempts:
                logger.warning(f"Attempt {attempt} failed. Giving up.")
                break
            logger.warning(f"Attempt {attempt} failed. Retrying...")
            sleep(delay_ms / 1000)
    finally:
        if owned:
            client.close()

    return failure_sentinel(max_attempts)
