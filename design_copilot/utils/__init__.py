"""Utility modules for the design copilot backend.

- **errors** -- Exception hierarchy rooted at CopilotError; every class
  carries the HTTP status the API layer maps it to.
- **logging** -- structlog setup with a dual-renderer pattern and a
  processor that keeps document/question text out of log output.
- **retry** -- RetryPolicy, exponential backoff with jitter and an
  injectable clock.
- **concurrency** -- Semaphore-bounded gather that preserves input order.
"""

from design_copilot.utils.concurrency import throttled_gather
from design_copilot.utils.errors import (
    ConfigurationError,
    CopilotError,
    DimensionMismatchError,
    DocumentNotFoundError,
    DocumentStoreError,
    EmptyCompletionError,
    EmptyInputError,
    InvalidInputError,
    OrdinalConflictError,
    OwnerRequiredError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitedError,
    ProviderUnavailableError,
)
from design_copilot.utils.logging import configure_logging, get_logger
from design_copilot.utils.retry import RetryPolicy

__all__ = [
    "ConfigurationError",
    "CopilotError",
    "DimensionMismatchError",
    "DocumentNotFoundError",
    "DocumentStoreError",
    "EmptyCompletionError",
    "EmptyInputError",
    "InvalidInputError",
    "OrdinalConflictError",
    "OwnerRequiredError",
    "ProviderAuthError",
    "ProviderError",
    "ProviderRateLimitedError",
    "ProviderUnavailableError",
    "RetryPolicy",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
