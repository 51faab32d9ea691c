from __future__ import annotations

import pytest
from conftest import ScriptedProvider
from pydantic import BaseModel

from jobpilot.services.llm_providers import GeminiProvider, LLMError
from jobpilot.services.llm_service import LLMService


class _Answer(BaseModel):
    value: int


def test_llm_service_initialization_with_custom_provider() -> None:
    """Test service initialization with a custom provider."""
    provider = ScriptedProvider()
    service = LLMService(provider=provider)

    assert service.provider is provider


def test_llm_service_initialization_with_default_gemini_provider(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that Gemini is used as default provider when none specified."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("LLM_PROVIDER", "gemini")

    class _FakeClient:
        def __init__(self, api_key: str) -> None:
            pass

    import google.genai as _genai

    monkeypatch.setattr(_genai, "Client", _FakeClient, raising=True)

    service = LLMService()
    assert isinstance(service.provider, GeminiProvider)


def test_llm_service_initialization_with_unknown_provider(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that initialization fails with unknown provider name."""
    monkeypatch.setenv("LLM_PROVIDER", "unknown_provider")

    with pytest.raises(LLMError, match="Unknown LLM provider: unknown_provider"):
        LLMService()


def test_llm_service_build_prompt() -> None:
    """Test prompt building with system instructions and user content."""
    service = LLMService(provider=ScriptedProvider())

    prompt = service.build_prompt("You are a helpful assistant.", "What is Python?")

    expected = "System instruction:\nYou are a helpful assistant.\n\nUser content:\nWhat is Python?"
    assert prompt == expected


def test_generate_structured_response_uses_low_temperature_by_default() -> None:
    provider = ScriptedProvider(structured=[_Answer(value=1)])
    service = LLMService(provider=provider)

    result = service.generate_structured_response("rules", "content", _Answer)

    assert result == _Answer(value=1)
    assert provider.configs == [{"temperature": 0.2}]
    assert provider.prompts[0].endswith("User content:\ncontent")


def test_generate_structured_response_rejects_non_model_schema() -> None:
    service = LLMService(provider=ScriptedProvider())

    with pytest.raises(TypeError):
        service.generate_structured_response("rules", "content", dict)


def test_stream_llm_response_yields_provider_chunks() -> None:
    provider = ScriptedProvider(chunks=["a", "b", "c"])
    service = LLMService(provider=provider)

    chunks = list(service.stream_llm_response("rules", "content", max_tokens=50, seed=1))

    assert chunks == ["a", "b", "c"]
    assert provider.configs == [{"temperature": 0.7, "max_tokens": 50, "seed": 1}]
