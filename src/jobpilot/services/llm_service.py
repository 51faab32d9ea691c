from __future__ import annotations

import os
from collections.abc import Iterator

from pydantic import BaseModel

from jobpilot.services.llm_providers import (
    GeminiProvider,
    LLMError,
    LLMProvider,
    ModelT,
)

"""LLM service with multi-provider support. (Gemini, OpenAI, Anthropic, etc.)"""

__all__ = ["LLMService"]


class LLMService:
    """Facade the pipeline talks to; one instance is built per generation run."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        """Initialize LLM service with a specific provider.

        Args:
            provider: LLM provider instance
        """
        self.provider = provider or LLMService._get_default_llm_provider_from_env()

    @staticmethod
    def _get_default_llm_provider_from_env() -> LLMProvider:
        """Get the configured LLM provider.

        Returns:
            An instance of the configured LLM provider.
        """
        provider_name = os.environ.get("LLM_PROVIDER", "gemini").lower()

        if provider_name == "gemini":
            return GeminiProvider()
        raise LLMError(f"Unknown LLM provider: {provider_name}.")

    def build_prompt(self, system_instructions: str, user_content: str) -> str:
        """Construct a full prompt with system and user parts.

        Args:
            system_instructions: System-level instructions
            user_content: User-provided content

        Returns:
            The complete formatted prompt.
        """
        return f"System instruction:\n{system_instructions}\n\nUser content:\n{user_content}"

    def generate_structured_response(
        self,
        system_instructions: str,
        user_content: str,
        schema: type[ModelT],
        temperature: float = 0.2,
        max_tokens: int | None = None,
        seed: int | None = None,
    ) -> ModelT:
        """Build a prompt and return the model's answer parsed into *schema*.

        Raises:
            NoStructuredOutput: If the provider cannot produce a conforming object.
            LLMError: If the provider call itself fails.
        """
        if not issubclass(schema, BaseModel):
            raise TypeError("schema must be a pydantic model class")
        prompt = self.build_prompt(system_instructions, user_content)
        config = self.provider.generate_llm_config(temperature, max_tokens, seed)
        return self.provider.send_structured_prompt(prompt, schema, config)

    def stream_llm_response(
        self,
        system_instructions: str,
        user_content: str,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        seed: int | None = None,
    ) -> Iterator[str]:
        """Build a prompt and yield the response text as it streams in."""
        prompt = self.build_prompt(system_instructions, user_content)
        config = self.provider.generate_llm_config(temperature, max_tokens, seed)
        yield from self.provider.stream_prompt(prompt, config)
