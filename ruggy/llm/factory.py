"""
LLM Factory - Multi-provider LLM abstraction.

Supports:
- Google (Gemini)
- OpenAI (GPT)
- Anthropic (Claude)

Ruggy uses a single "small" model for extraction, confirmation
classification and in-character replies.
"""

import os
from typing import Literal

from langchain_core.language_models import BaseChatModel

from .exceptions import LLMInvalidModelError, LLMProviderError

Provider = Literal["google", "openai", "anthropic"]

MODEL_PROVIDERS: dict[Provider, list[str]] = {
    "google": [
        "gemini-2.5-flash",
        "gemini-2.5-pro",
        "gemini-2.0-flash",
        "gemini-1.5-flash",
    ],
    "openai": [
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
    ],
    "anthropic": [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
    ],
}

ALL_MODELS: set[str] = {model for models in MODEL_PROVIDERS.values() for model in models}

_API_KEY_ENV: dict[Provider, str] = {
    "google": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def detect_provider(model: str) -> Provider:
    """
    Detect the provider based on model name.

    Raises:
        LLMInvalidModelError: If the model is not recognized
    """
    model_lower = model.lower()

    if model_lower.startswith("gemini"):
        return "google"
    if model_lower.startswith("gpt"):
        return "openai"
    if model_lower.startswith("claude"):
        return "anthropic"

    for provider, models in MODEL_PROVIDERS.items():
        if model in models:
            return provider

    raise LLMInvalidModelError(model, list(ALL_MODELS))


class LLMFactory:
    """Factory for creating LLM instances across multiple providers."""

    # Cache for LLM instances (singleton per model+config)
    _instances: dict[str, BaseChatModel] = {}

    @classmethod
    def create(
        cls,
        model: str,
        temperature: float = 0.7,
        max_retries: int = 3,
        timeout: int = 60,
        api_key: str | None = None,
        use_cache: bool = True,
    ) -> BaseChatModel:
        """
        Create an LLM instance for the specified model.

        Missing credentials fail here, before any conversation turn runs.

        Raises:
            LLMInvalidModelError: If model is not recognized
            LLMProviderError: If provider initialization fails
        """
        cache_key = f"{model}:{temperature}:{timeout}"
        if use_cache and cache_key in cls._instances:
            return cls._instances[cache_key]

        provider = detect_provider(model)
        resolved_key = api_key or os.getenv(_API_KEY_ENV[provider])
        if not resolved_key:
            raise LLMProviderError(
                f"{_API_KEY_ENV[provider]} environment variable is required for '{model}'.",
                provider=provider,
                model=model,
            )

        try:
            llm = cls._create_for_provider(
                provider=provider,
                model=model,
                temperature=temperature,
                max_retries=max_retries,
                timeout=timeout,
                api_key=resolved_key,
            )
        except ImportError as e:
            raise LLMProviderError(
                f"Provider '{provider}' dependencies not installed: {e}",
                provider=provider,
                model=model,
            ) from e
        except Exception as e:
            raise LLMProviderError(
                f"Failed to create LLM for '{model}': {e}",
                provider=provider,
                model=model,
            ) from e

        if use_cache:
            cls._instances[cache_key] = llm
        return llm

    @classmethod
    def _create_for_provider(
        cls,
        provider: Provider,
        model: str,
        temperature: float,
        max_retries: int,
        timeout: int,
        api_key: str,
    ) -> BaseChatModel:
        match provider:
            case "google":
                from langchain_google_genai import ChatGoogleGenerativeAI

                return ChatGoogleGenerativeAI(
                    model=model,
                    temperature=temperature,
                    max_retries=max_retries,
                    timeout=timeout,
                    google_api_key=api_key,
                )
            case "openai":
                from langchain_openai import ChatOpenAI

                return ChatOpenAI(
                    model=model,
                    temperature=temperature,
                    max_retries=max_retries,
                    timeout=timeout,
                    api_key=api_key,
                )
            case "anthropic":
                from langchain_anthropic import ChatAnthropic

                return ChatAnthropic(
                    model=model,
                    temperature=temperature,
                    max_retries=max_retries,
                    timeout=timeout,
                    api_key=api_key,
                )
