"""LLM infrastructure module."""

from src.infrastructure.llm.factory import (
    AnthropicCompletionClient,
    CompletionClient,
    CompletionResult,
    OpenAICompletionClient,
    create_completion_client,
    has_credentials,
    is_anthropic_model,
)

__all__ = [
    "AnthropicCompletionClient",
    "CompletionClient",
    "CompletionResult",
    "OpenAICompletionClient",
    "create_completion_client",
    "has_credentials",
    "is_anthropic_model",
]
