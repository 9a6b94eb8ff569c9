"""Completion client factory helpers.

Supports OpenAI (GPT models) and Anthropic (Claude models). Model routing is
automatic based on the model name.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from src.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionResult:
    """Text and token usage of one completion."""

    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class CompletionClient(Protocol):
    """Anything that can turn a system + user prompt into JSON text."""

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult: ...


def is_anthropic_model(model: str) -> bool:
    """Check if model is Anthropic (Claude)."""
    return "claude" in model.lower()


def has_credentials(settings: Settings, model: str) -> bool:
    """Check that the provider serving ``model`` has an API key configured."""
    if is_anthropic_model(model):
        return bool(settings.anthropic_api_key)
    return bool(settings.openai_api_key)


class OpenAICompletionClient:
    """Chat completions with JSON output through the OpenAI API."""

    def __init__(self, settings: Settings, model: str):
        self.model = model
        self._client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            organization=settings.openai_organization_id,
        )

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult:
        response = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ValueError("No content received from OpenAI API")

        usage = response.usage
        return CompletionResult(
            text=content,
            model=response.model or self.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
        )


class AnthropicCompletionClient:
    """Messages API completions through Anthropic."""

    def __init__(self, settings: Settings, model: str):
        self.model = model
        self._client = AsyncAnthropic(api_key=settings.anthropic_api_key)

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult:
        response = await self._client.messages.create(
            model=self.model,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text:
            raise ValueError("No content received from Anthropic API")

        return CompletionResult(
            text=text,
            model=response.model or self.model,
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
        )


def create_completion_client(settings: Settings, model: str | None = None) -> CompletionClient:
    """
    Create a completion client for ``model``.

    Args:
        settings: Application settings
        model: Optional model name (defaults to settings.triage_agent_model)
    """
    final_model = model or settings.triage_agent_model
    logger.debug("Creating completion client for model: %s", final_model)

    if is_anthropic_model(final_model):
        return AnthropicCompletionClient(settings, final_model)
    return OpenAICompletionClient(settings, final_model)
