"""Unit tests for LLM provider adapters: OpenAI, Anthropic."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import openai
import pytest

from design_copilot.config.settings import Settings
from design_copilot.models.llm import ChatMessage
from design_copilot.providers.llm.anthropic_provider import AnthropicLLMProvider
from design_copilot.providers.llm.openai_provider import OpenAILLMProvider
from design_copilot.utils.errors import ProviderRateLimitedError, ProviderUnavailableError
from design_copilot.utils.retry import RetryPolicy


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "sk-test",
        "openai_base_url": "",
        "openai_text_model": "",
        "anthropic_api_key": "sk-ant-test",
        "anthropic_model": "claude-sonnet-4-20250514",
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _no_sleep_policy(**kwargs) -> RetryPolicy:
    async def _sleep(_: float) -> None:
        return None

    return RetryPolicy(base_delay=0.0, jitter=0.0, sleep=_sleep, **kwargs)


_MESSAGES = [ChatMessage(role="user", content="Context:\nabc\n\nQuestion: what?")]


# ======================================================================
# OpenAI LLM Provider
# ======================================================================


def _chat_response(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(prompt_tokens=12, completion_tokens=7)
    return response


class TestOpenAILLMProvider:
    def test_name_and_availability(self) -> None:
        provider = OpenAILLMProvider(_settings())
        assert provider.get_provider_name() == "openai"
        assert provider.is_available() is True
        assert OpenAILLMProvider(_settings(openai_api_key="")).is_available() is False

    def test_custom_base_url_label(self) -> None:
        provider = OpenAILLMProvider(_settings(openai_base_url="https://api.together.test/v1"))
        assert provider.get_provider_name() == "openai-compatible"

    @pytest.mark.asyncio
    async def test_complete_sends_system_prompt_first(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_chat_response("  Answer.  "))

        with patch(
            "design_copilot.providers.llm.openai_provider.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            provider = OpenAILLMProvider(_settings())
            completion = await provider.complete("Be grounded.", _MESSAGES, temperature=0.1, max_tokens=50)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4.1-mini"
        assert kwargs["messages"][0] == {"role": "system", "content": "Be grounded."}
        assert kwargs["messages"][1]["role"] == "user"
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 50
        assert completion.text == "  Answer.  "
        assert completion.usage.total_tokens == 19

    @pytest.mark.asyncio
    async def test_none_content_becomes_empty_text(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_chat_response(None))

        with patch(
            "design_copilot.providers.llm.openai_provider.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            completion = await OpenAILLMProvider(_settings()).complete("s", _MESSAGES)

        assert completion.text == ""

    @pytest.mark.asyncio
    async def test_connection_error_classified(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(
                request=httpx.Request("POST", "https://api.openai.test/v1/chat/completions")
            )
        )

        with patch(
            "design_copilot.providers.llm.openai_provider.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            provider = OpenAILLMProvider(_settings(), retry_policy=_no_sleep_policy())
            with pytest.raises(ProviderUnavailableError):
                await provider.complete("s", _MESSAGES)

        assert mock_client.chat.completions.create.await_count == 1

    @pytest.mark.asyncio
    async def test_validate_credentials(self) -> None:
        mock_client = AsyncMock()
        mock_client.models.list = AsyncMock(return_value=[])

        with patch(
            "design_copilot.providers.llm.openai_provider.openai.AsyncOpenAI",
            return_value=mock_client,
        ):
            assert await OpenAILLMProvider(_settings()).validate_credentials() is True


# ======================================================================
# Anthropic LLM Provider
# ======================================================================


def _messages_response(*blocks: tuple[str, str]) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(type=kind, text=text) for kind, text in blocks]
    response.usage = MagicMock(input_tokens=20, output_tokens=8)
    return response


class TestAnthropicLLMProvider:
    def test_name_and_availability(self) -> None:
        provider = AnthropicLLMProvider(_settings())
        assert provider.get_provider_name() == "anthropic"
        assert provider.is_available() is True
        assert AnthropicLLMProvider(_settings(anthropic_api_key="")).is_available() is False

    @pytest.mark.asyncio
    async def test_system_prompt_is_separate_parameter(self) -> None:
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(
            return_value=_messages_response(("text", "Part one."), ("text", "Part two."))
        )

        with patch(
            "design_copilot.providers.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            provider = AnthropicLLMProvider(_settings())
            completion = await provider.complete("Be grounded.", _MESSAGES)

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "Be grounded."
        assert kwargs["messages"] == [{"role": "user", "content": _MESSAGES[0].content}]
        assert kwargs["model"] == "claude-sonnet-4-20250514"
        assert completion.text == "Part one.\nPart two."
        assert completion.usage.input_tokens == 20
        assert completion.usage.output_tokens == 8

    @pytest.mark.asyncio
    async def test_no_text_blocks_gives_empty_text(self) -> None:
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=_messages_response())

        with patch(
            "design_copilot.providers.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            completion = await AnthropicLLMProvider(_settings()).complete("s", _MESSAGES)

        assert completion.text == ""

    @pytest.mark.asyncio
    async def test_rate_limit_retried(self) -> None:
        request = httpx.Request("POST", "https://api.anthropic.test/v1/messages")
        rate_limited = anthropic.RateLimitError(
            "slow down", response=httpx.Response(429, request=request), body=None
        )
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(side_effect=rate_limited)

        with patch(
            "design_copilot.providers.llm.anthropic_provider.anthropic.AsyncAnthropic",
            return_value=mock_client,
        ):
            provider = AnthropicLLMProvider(
                _settings(), retry_policy=_no_sleep_policy(max_attempts=2)
            )
            with pytest.raises(ProviderRateLimitedError):
                await provider.complete("s", _MESSAGES)

        assert mock_client.messages.create.await_count == 2
