"""
LLM Module - Multi-provider LLM abstraction layer.

This module provides:
- LLMFactory: Create LLM instances for multiple providers (Google, OpenAI, Anthropic)
"""

from .exceptions import LLMError, LLMInvalidModelError, LLMProviderError
from .factory import MODEL_PROVIDERS, LLMFactory, detect_provider

__all__ = [
    "LLMFactory",
    "detect_provider",
    "MODEL_PROVIDERS",
    "LLMError",
    "LLMProviderError",
    "LLMInvalidModelError",
]
