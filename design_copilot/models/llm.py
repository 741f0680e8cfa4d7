"""Completion request/response models shared by the LLM provider adapters."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """One conversational turn sent to a completion provider."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class TokenUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class Completion(BaseModel):
    """Text returned by a completion provider plus token accounting.

    ``text`` is empty when the model produced no content; callers decide
    whether that is an error.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)
    model: str = ""
