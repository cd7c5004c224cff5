"""
domain.exceptions - Custom exception hierarchy for the regulations assistant.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""

from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class ConfigurationError(DomainError):
    """Raised when required settings (credentials) are missing."""


class InvalidRequestError(DomainError):
    """Raised when a caller omits a required field or sends malformed input."""


class UnknownOperationError(DomainError):
    """Raised when an operation name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


# ---------------------------------------------------------------------------
# Regulations.gov failures
# ---------------------------------------------------------------------------

class UpstreamError(DomainError):
    """Raised for a non-2xx response from Regulations.gov."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamNotFoundError(UpstreamError):
    """Raised when Regulations.gov answers 404."""


class UpstreamRateLimitedError(UpstreamError):
    """Raised when Regulations.gov answers 429."""


class UpstreamTransportError(UpstreamError):
    """Raised when the request never produced an HTTP response."""


# ---------------------------------------------------------------------------
# Text-generation failures
# ---------------------------------------------------------------------------

class ModelServiceError(DomainError):
    """Raised when the text-generation service fails a whole call.

    The message is already classified and safe to show to the user.
    """


class ModelQuotaExceededError(ModelServiceError):
    """Raised when the provider reports rate or quota exhaustion."""


class ModelAuthError(ModelServiceError):
    """Raised when the provider rejects the API key."""
