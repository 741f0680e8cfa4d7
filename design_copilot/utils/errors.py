"""Custom exception hierarchy for the design copilot backend.

All application exceptions inherit from :class:`CopilotError`, which carries
an optional ``provider_name`` so error handlers can identify which external
service (e.g. "openai_embedding", "anthropic", "sqlite_document_store")
caused the failure.

The hierarchy is organized by where the failure originates:

    CopilotError  (base -- catch-all for any application error)
    +-- InvalidInputError          (missing/empty request field, rejected before I/O)
    |   +-- OwnerRequiredError     (empty owner identity)
    |   +-- EmptyInputError        (blank text handed to an embedder)
    +-- ConfigurationError         (bad chunker params, mixed embedding models)
    +-- ProviderError              (embedding / completion provider failure)
    |   +-- ProviderUnavailableError  (network down, timeout, 5xx)
    |   +-- ProviderRateLimitedError  (throttled -- the only retried provider error)
    |   +-- ProviderAuthError         (invalid credentials)
    |   +-- EmptyCompletionError      (completion contained no usable text)
    +-- DocumentStoreError         (store contract violations -- caller bugs)
        +-- DocumentNotFoundError
        +-- OrdinalConflictError
        +-- DimensionMismatchError (also a ConfigurationError)

Every class declares ``status_code``; the API error middleware uses it to
pick the HTTP status for the JSON error body.
"""


class CopilotError(Exception):
    """Base exception for all design copilot errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

class InvalidInputError(CopilotError):
    """Raised when a required field is missing or empty."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class OwnerRequiredError(InvalidInputError):
    """Raised when an operation is attempted without an owner identity."""

    def __init__(
        self,
        message: str = "Owner identity is required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyInputError(InvalidInputError):
    """Raised when blank text is handed to an embedding provider."""

    def __init__(
        self,
        message: str = "Cannot embed empty text",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(CopilotError):
    """Raised when configuration is invalid. Fatal, never retried."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External provider errors
# ---------------------------------------------------------------------------

class ProviderError(CopilotError):
    """Raised when an embedding or completion provider call fails."""

    status_code = 502

    def __init__(
        self,
        message: str = "Provider call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(ProviderError):
    """Raised when an external provider is unreachable or timed out."""

    status_code = 503

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderRateLimitedError(ProviderError):
    """Raised when a provider signals throttling.

    Provider adapters retry this with exponential backoff (see
    :class:`~design_copilot.utils.retry.RetryPolicy`) before letting it
    reach the caller.
    """

    status_code = 429

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderAuthError(ProviderError):
    """Raised when a provider rejects the configured credentials."""

    def __init__(
        self,
        message: str = "Provider rejected credentials",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyCompletionError(ProviderError):
    """Raised when a completion provider returns no usable text."""

    def __init__(
        self,
        message: str = "Completion provider returned no content",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Document store contract violations
# ---------------------------------------------------------------------------

class DocumentStoreError(CopilotError):
    """Raised when a document store operation violates the store contract."""

    def __init__(
        self,
        message: str = "Document store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DocumentNotFoundError(DocumentStoreError):
    """Raised when a chunk references (or a caller asks for) an unknown document."""

    status_code = 404

    def __init__(
        self,
        message: str = "Document not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class OrdinalConflictError(DocumentStoreError):
    """Raised when a chunk ordinal is already taken for its document."""

    status_code = 409

    def __init__(
        self,
        message: str = "Chunk ordinal already exists for this document",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DimensionMismatchError(DocumentStoreError, ConfigurationError):
    """Raised when an embedding's length differs from the store's dimension.

    Mixing embedding models in one store is a deployment bug, so this is
    also a :class:`ConfigurationError`.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Embedding dimension does not match the store",
        provider_name: str | None = None,
    ) -> None:
        CopilotError.__init__(self, message=message, provider_name=provider_name)
