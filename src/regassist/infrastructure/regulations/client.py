"""
infrastructure.regulations.client - HTTP client for the Regulations.gov v4 API.

Implements RegulationsPort using requests via run_in_executor for async
compat. Every call carries the X-Api-Key header and a bounded timeout.

Non-2xx responses and transport failures are raised as UpstreamError
subclasses with the user-facing message already composed; the tool
executor turns them into failure results.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import requests

from regassist.domain.exceptions import (
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamRateLimitedError,
    UpstreamTransportError,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = (
    "Rate limit reached (50 req/min or 500 req/hour). "
    "Please wait a moment and try again."
)
NOT_FOUND_MESSAGE = "Not found: the requested ID does not exist on Regulations.gov."


class RegulationsClient:
    """Thin read-only client for api.regulations.gov.

    Built once by the ServiceFactory and shared by all requests. The
    session headers are set at construction and never changed.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.regulations.gov/v4",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"X-Api-Key": api_key})

    def close(self) -> None:
        self._session.close()

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """GET a path relative to the API root and return the JSON envelope.

        Raises:
            UpstreamRateLimitedError: on HTTP 429.
            UpstreamNotFoundError: on HTTP 404.
            UpstreamError: on any other non-2xx response.
            UpstreamTransportError: when no response was received.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get_sync, path, params)

    def _get_sync(self, path: str, params: Optional[dict[str, Any]]) -> dict[str, Any]:
        """Synchronous HTTP call (runs in thread pool)."""
        url = f"{self._base_url}/{path.lstrip('/')}"
        logger.info("GET %s params=%s", url, params)
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Regulations.gov transport failure for %s: %s", url, e)
            raise UpstreamTransportError(str(e)) from e

        if not response.ok:
            raise _error_for(response)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamTransportError(f"Invalid JSON from Regulations.gov: {e}") from e


def _error_for(response: requests.Response) -> UpstreamError:
    """Map a non-2xx response onto the upstream error hierarchy."""
    status = response.status_code
    logger.warning("Regulations.gov returned HTTP %d for %s", status, response.url)
    if status == 429:
        return UpstreamRateLimitedError(RATE_LIMIT_MESSAGE, status_code=status)
    if status == 404:
        return UpstreamNotFoundError(NOT_FOUND_MESSAGE, status_code=status)
    return UpstreamError(
        f"Regulations.gov API error ({status}): {_error_detail(response)}",
        status_code=status,
    )


def _error_detail(response: requests.Response) -> str:
    """First JSON:API error detail, else the serialized body."""
    try:
        body = response.json()
    except ValueError:
        body = response.text
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            detail = errors[0].get("detail")
            if detail:
                return str(detail)
    return json.dumps(body)
