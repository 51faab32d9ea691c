from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

"""LLM provider implementations."""

# Load environment variables for LLM API keys (GEMINI_API_KEY, LLM_MODEL, etc.)
load_dotenv()

ModelT = TypeVar("ModelT", bound=BaseModel)


class LLMError(RuntimeError):
    """Raised when LLM service cannot be used or fails."""


class NoStructuredOutput(LLMError):
    """Raised when the model answers but not with an object of the requested shape.

    Attributes:
        text: Raw text the model returned, kept for diagnostics.
    """

    def __init__(self, message: str, text: str | None = None) -> None:
        super().__init__(message)
        self.text = text


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def generate_llm_config(
        self,
        temperature: float,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        """Generate llm configs

        Args:
            temperature: Controls randomness
            max_tokens: Maximum response length
            seed: Random seed for reproducibility

        Returns:
            Configuration dictionary with common parameters
        """
        config = {}

        if temperature is not None:
            config["temperature"] = temperature
        if max_tokens is not None:
            config["max_tokens"] = max_tokens
        if seed is not None:
            config["seed"] = seed

        return config

    @abstractmethod
    def send_structured_prompt(self, prompt: str, schema: type[ModelT], config: dict) -> ModelT:
        """Send a prompt and parse the answer into *schema*.

        Args:
            prompt: The full prompt string to send to the LLM.
            schema: Pydantic model the answer must conform to.
            config: Configuration dictionary for the LLM request.

        Returns:
            An instance of *schema*.

        Raises:
            NoStructuredOutput: If the answer does not validate against *schema*.
        """

    @abstractmethod
    def stream_prompt(self, prompt: str, config: dict) -> Iterator[str]:
        """Send a prompt and yield the text response as it arrives.

        Args:
            prompt: The full prompt string to send to the LLM.
            config: Configuration dictionary for the LLM request.

        Yields:
            Incremental, non-empty text deltas.
        """


class GeminiProvider(LLMProvider):
    """Gemini implementation."""

    def __init__(self) -> None:
        """Initialize Gemini provider with API key from environment.

        Note: Environment variables are loaded via load_dotenv() at module import.
        """
        from google import genai

        self.api_key = os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise LLMError("Missing GEMINI_API_KEY environment variable")

        self.model = os.environ.get("LLM_MODEL", "gemini-2.0-flash")
        self.client = genai.Client(api_key=self.api_key)

    def generate_llm_config(
        self,
        temperature: float,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        """Generate Gemini-specific configuration dictionary."""
        config = super().generate_llm_config(temperature, max_tokens, seed)

        # Map common 'max_tokens' to Gemini's 'max_output_tokens'
        if "max_tokens" in config:
            config["max_output_tokens"] = config.pop("max_tokens")

        return config

    def send_structured_prompt(self, prompt: str, schema: type[ModelT], config: dict) -> ModelT:
        """Ask Gemini for JSON output constrained by *schema*."""
        structured_config = {
            **config,
            "response_mime_type": "application/json",
            "response_schema": schema,
        }
        try:
            response = self.client.models.generate_content(
                model=self.model, contents=prompt, config=structured_config
            )
        except Exception as e:
            raise LLMError(f"Gemini API call failed: {e}") from e

        parsed = response.parsed
        if isinstance(parsed, schema):
            return parsed

        text = response.text or ""
        try:
            return schema.model_validate_json(text)
        except ValidationError as e:
            raise NoStructuredOutput(
                f"Gemini did not return a valid {schema.__name__} object", text=text
            ) from e

    def stream_prompt(self, prompt: str, config: dict) -> Iterator[str]:
        """Stream Gemini's response text chunk by chunk."""
        try:
            stream = self.client.models.generate_content_stream(
                model=self.model, contents=prompt, config=config
            )
            for chunk in stream:
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            raise LLMError(f"Gemini API call failed: {e}") from e
