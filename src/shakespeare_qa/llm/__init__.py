"""LLM integration module."""

from .base import (
    LLMProvider,
    LLMError,
    LLMConnectionError,
    LLMTimeoutError,
    LLMRateLimitError,
    LLMInvalidRequestError
)
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .demo_provider import DemoProvider, DemoAnswer
from .factory import LLMFactory, ProviderKind

__all__ = [
    'LLMProvider',
    'LLMError',
    'LLMConnectionError',
    'LLMTimeoutError',
    'LLMRateLimitError',
    'LLMInvalidRequestError',
    'OpenAIProvider',
    'GeminiProvider',
    'DemoProvider',
    'DemoAnswer',
    'LLMFactory',
    'ProviderKind'
]
