"""
application.errors - Classify text-generation failures for the user.

Providers report quota and credential problems as free-form error text.
classify() turns that text into one friendly message; model_error_from()
wraps a raised exception into the matching ModelServiceError subclass.

Only text-generation failures go through here. Regulations.gov failures
are already normalized by the tool executor.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from regassist.domain.exceptions import (
    InvalidRequestError,
    ModelAuthError,
    ModelQuotaExceededError,
    ModelServiceError,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_DOCS = "https://ai.google.dev/gemini-api/docs/rate-limits"

_QUOTA_MARKERS = ("429", "Too Many Requests", "RESOURCE_EXHAUSTED")
_AUTH_MARKERS = ("API_KEY", "API key")

_RETRY_IN = re.compile(r"retry in ([\d.]+s)", re.IGNORECASE)
_RETRY_DELAY = re.compile(r'"retryDelay":\s*"(\d+s)"')
_QUOTA_METRIC = re.compile(r"Quota exceeded for metric:\s*([\w./]+)", re.IGNORECASE)


class ModelErrorCategory(str, Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    AUTH = "auth"
    GENERIC = "generic"


def categorize(raw_message: str) -> ModelErrorCategory:
    """Return the failure category detected in provider error text."""
    msg = raw_message or ""
    if any(marker in msg for marker in _QUOTA_MARKERS):
        return ModelErrorCategory.QUOTA_EXCEEDED
    if any(marker in msg for marker in _AUTH_MARKERS):
        return ModelErrorCategory.AUTH
    return ModelErrorCategory.GENERIC


def classify(raw_message: str) -> str:
    """Map provider error text to a user-facing message."""
    msg = raw_message or ""
    category = categorize(msg)

    if category is ModelErrorCategory.QUOTA_EXCEEDED:
        retry_match = _RETRY_IN.search(msg) or _RETRY_DELAY.search(msg)
        metric_match = _QUOTA_METRIC.search(msg)

        friendly = "AI quota exceeded: You've reached the AI provider's rate limit."
        if metric_match:
            friendly += f" (Metric: {metric_match.group(1)})"
        if retry_match:
            friendly += f" Please retry in {retry_match.group(1)}."
        friendly += f" See {RATE_LIMIT_DOCS} for details."
        return friendly

    if category is ModelErrorCategory.AUTH:
        return (
            "Invalid or missing AI provider API key. "
            "Check your LLM_PROVIDER credentials in the environment."
        )

    return msg or "An unexpected AI error occurred."


def model_error_from(exc: BaseException) -> ModelServiceError:
    """Wrap a text-generation failure in the matching domain exception."""
    if isinstance(exc, ModelServiceError):
        return exc
    raw = str(exc)
    category = categorize(raw)
    message = classify(raw)
    if category is ModelErrorCategory.QUOTA_EXCEEDED:
        return ModelQuotaExceededError(message)
    if category is ModelErrorCategory.AUTH:
        return ModelAuthError(message)
    return ModelServiceError(message)


@contextmanager
def model_errors(operation: str) -> Iterator[None]:
    """Translate any failure raised inside the block into a ModelServiceError.

    InvalidRequestError (a malformed conversation token) passes through.

    Usage:
        with model_errors("chat"):
            reply = await gateway.send_message(...)
    """
    try:
        yield
    except (ModelServiceError, InvalidRequestError):
        raise
    except Exception as e:
        logger.exception("Text-generation call failed during %s", operation)
        raise model_error_from(e) from e
