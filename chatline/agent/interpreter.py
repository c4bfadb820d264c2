"""Response interpreter — decode a completion body into an error, a reply, or neither."""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class TokenUsage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    completion_tokens: int
    prompt_tokens: int
    total_tokens: int


class ApiError(BaseModel):
    """Error payload returned by the API, e.g. an invalid key."""

    model_config = ConfigDict(frozen=True)

    message: str


class Completion(BaseModel):
    """A model reply plus the token counts the API billed for it."""

    model_config = ConfigDict(frozen=True)

    reply: str
    usage: TokenUsage


class Malformed(BaseModel):
    model_config = ConfigDict(frozen=True)

    detail: str


Interpretation = ApiError | Completion | Malformed


def _api_error(error: Any) -> Interpretation:
    if isinstance(error, str):
        return ApiError(message=error)
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return ApiError(message=error["message"])
    return Malformed(detail=f"unrecognized error payload: {error!r}")


def _completion(data: dict[str, Any]) -> Interpretation:
    try:
        reply = data["choices"][0]["message"]["content"]
        usage = TokenUsage.model_validate(data["usage"])
    except (KeyError, IndexError, TypeError) as e:
        return Malformed(detail=f"missing completion field: {e}")
    except ValidationError as e:
        return Malformed(detail=f"invalid token usage: {e.error_count()} error(s)")

    if not isinstance(reply, str):
        return Malformed(detail="completion content is not text")
    return Completion(reply=reply, usage=usage)


def interpret(body: str) -> Interpretation:
    """
    Classify a raw response body.
    Parse failures and unknown shapes come back as Malformed rather than raising.
    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        logger.debug(f"interpret: not JSON ({e}), body='{body[:120]}'")
        return Malformed(detail=f"JSON parsing error: {e}")

    if not isinstance(data, dict):
        return Malformed(detail="unrecognized response")

    if "error" in data:
        return _api_error(data["error"])

    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        return _completion(data)

    return Malformed(detail="unrecognized response")
