"""Map provider SDK exceptions onto the application error hierarchy.

Both the ``openai`` and ``anthropic`` SDKs are generated from the same
client template, so their exception classes line up one-to-one:

    APITimeoutError / APIConnectionError  -> ProviderUnavailableError
    RateLimitError (HTTP 429)             -> ProviderRateLimitedError
    AuthenticationError / PermissionDeniedError (401/403)
                                          -> ProviderAuthError
    InternalServerError (5xx)             -> ProviderUnavailableError
    anything else                         -> ProviderError
"""

from __future__ import annotations

import anthropic
import openai

from design_copilot.utils.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitedError,
    ProviderUnavailableError,
)


def classify_openai_error(exc: openai.APIError, provider_name: str) -> ProviderError:
    """Return the application error for an ``openai`` SDK exception."""
    if isinstance(exc, openai.APIConnectionError):
        return ProviderUnavailableError(
            message=f"{provider_name} unreachable: {exc}", provider_name=provider_name
        )
    if isinstance(exc, openai.RateLimitError):
        return ProviderRateLimitedError(
            message=f"{provider_name} rate limited the request", provider_name=provider_name
        )
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ProviderAuthError(
            message=f"{provider_name} rejected the API key", provider_name=provider_name
        )
    if isinstance(exc, openai.InternalServerError):
        return ProviderUnavailableError(
            message=f"{provider_name} server error: {exc}", provider_name=provider_name
        )
    return ProviderError(message=f"{provider_name} API error: {exc}", provider_name=provider_name)


def classify_anthropic_error(exc: anthropic.APIError, provider_name: str) -> ProviderError:
    """Return the application error for an ``anthropic`` SDK exception."""
    if isinstance(exc, anthropic.APIConnectionError):
        return ProviderUnavailableError(
            message=f"{provider_name} unreachable: {exc}", provider_name=provider_name
        )
    if isinstance(exc, anthropic.RateLimitError):
        return ProviderRateLimitedError(
            message=f"{provider_name} rate limited the request", provider_name=provider_name
        )
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return ProviderAuthError(
            message=f"{provider_name} rejected the API key", provider_name=provider_name
        )
    if isinstance(exc, anthropic.InternalServerError):
        return ProviderUnavailableError(
            message=f"{provider_name} server error: {exc}", provider_name=provider_name
        )
    return ProviderError(message=f"{provider_name} API error: {exc}", provider_name=provider_name)
