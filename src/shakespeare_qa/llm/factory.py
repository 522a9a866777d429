"""Factory for creating LLM provider instances."""

import logging
from enum import Enum
from typing import Optional, Dict, Any, Type, Union

from ..retrieval.ranker import RelevanceRanker
from .base import LLMProvider
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .demo_provider import DemoProvider

logger = logging.getLogger(__name__)


class ProviderKind(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    DEMO = "demo"


PROVIDERS: Dict[ProviderKind, Type[LLMProvider]] = {
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.GEMINI: GeminiProvider,
    ProviderKind.DEMO: DemoProvider,
}


class LLMFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def parse_kind(provider_type: Union[str, ProviderKind]) -> ProviderKind:
        """Resolve a provider tag.

        Raises:
            ValueError: If provider type is unknown
        """
        if isinstance(provider_type, ProviderKind):
            return provider_type
        try:
            return ProviderKind(provider_type.lower())
        except ValueError:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Supported types: {', '.join(LLMFactory.get_available_providers())}"
            )

    @staticmethod
    def create(
        provider_type: Union[str, ProviderKind],
        config: Optional[Dict[str, Any]] = None
    ) -> LLMProvider:
        """Create an LLM provider instance.

        Args:
            provider_type: Provider tag ('openai', 'gemini', 'demo')
            config: Provider-specific configuration

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider type is unknown
        """
        kind = LLMFactory.parse_kind(provider_type)
        logger.info(f"Creating LLM provider: {kind.value}")
        return PROVIDERS[kind](config)

    @staticmethod
    def create_from_settings(settings, provider_type: Optional[Union[str, ProviderKind]] = None) -> LLMProvider:
        """Create LLM provider from application settings.

        Args:
            settings: Application settings object
            provider_type: Override for ``settings.llm_provider``

        Returns:
            LLMProvider instance
        """
        kind = LLMFactory.parse_kind(provider_type or settings.llm_provider)

        llm = settings.llm_config

        if kind == ProviderKind.OPENAI:
            config = {
                'api_key': llm.openai_api_key,
                'model': llm.openai_model,
                'temperature': llm.temperature,
                'timeout': settings.fetch_timeout
            }
        elif kind == ProviderKind.GEMINI:
            config = {
                'api_key': llm.gemini_api_key,
                'model': llm.gemini_model
            }
        else:
            config = {
                'ranker': RelevanceRanker(settings.ranking_config),
                'max_length': settings.max_context_chars
            }

        return LLMFactory.create(kind, config)

    @staticmethod
    def get_available_providers() -> list:
        """Get list of available provider types."""
        return [kind.value for kind in ProviderKind]
