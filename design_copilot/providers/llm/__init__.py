"""LLM provider adapters.

Two concrete implementations of ILLMProvider:
    - AnthropicLLMProvider - Claude via the Messages API (preferred when keyed)
    - OpenAILLMProvider    - gpt-4.1-mini (also OpenAI-compatible APIs)

main.py picks the first provider with a configured key and injects it into
the retrieval service.
"""

from design_copilot.providers.llm.anthropic_provider import AnthropicLLMProvider
from design_copilot.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OpenAILLMProvider"]
