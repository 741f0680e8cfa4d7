"""Unit tests for the CopilotError hierarchy."""

from __future__ import annotations

import pytest

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


class TestCopilotError:
    def test_str_without_provider(self) -> None:
        assert str(CopilotError("boom")) == "boom"

    def test_str_with_provider_prefix(self) -> None:
        err = ProviderRateLimitedError("Rate limit exceeded", provider_name="openai")
        assert str(err) == "[openai] Rate limit exceeded"
        assert err.message == "Rate limit exceeded"
        assert err.provider_name == "openai"

    def test_default_messages(self) -> None:
        assert OwnerRequiredError().message == "Owner identity is required"
        assert EmptyInputError().message == "Cannot embed empty text"


class TestHierarchy:
    @pytest.mark.parametrize(
        ("cls", "parent"),
        [
            (OwnerRequiredError, InvalidInputError),
            (EmptyInputError, InvalidInputError),
            (ProviderUnavailableError, ProviderError),
            (ProviderRateLimitedError, ProviderError),
            (ProviderAuthError, ProviderError),
            (EmptyCompletionError, ProviderError),
            (DocumentNotFoundError, DocumentStoreError),
            (OrdinalConflictError, DocumentStoreError),
            (DimensionMismatchError, DocumentStoreError),
            (DimensionMismatchError, ConfigurationError),
        ],
    )
    def test_subclassing(self, cls: type, parent: type) -> None:
        assert issubclass(cls, parent)
        assert issubclass(cls, CopilotError)

    def test_dimension_mismatch_keeps_message(self) -> None:
        err = DimensionMismatchError("768 != 1536", provider_name="sqlite_document_store")
        assert str(err) == "[sqlite_document_store] 768 != 1536"


class TestStatusCodes:
    @pytest.mark.parametrize(
        ("cls", "status"),
        [
            (CopilotError, 500),
            (InvalidInputError, 400),
            (OwnerRequiredError, 400),
            (EmptyInputError, 400),
            (ConfigurationError, 500),
            (ProviderError, 502),
            (ProviderUnavailableError, 503),
            (ProviderRateLimitedError, 429),
            (ProviderAuthError, 502),
            (EmptyCompletionError, 502),
            (DocumentNotFoundError, 404),
            (OrdinalConflictError, 409),
            (DimensionMismatchError, 500),
        ],
    )
    def test_status_code(self, cls: type[CopilotError], status: int) -> None:
        assert cls.status_code == status
