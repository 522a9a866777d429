"""Base interface for LLM providers."""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import logging

from ..errors import GenerationFailure

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name = "base"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize LLM provider.

        Args:
            config: Provider-specific configuration
        """
        self.config = config or {}
        logger.info(f"Initializing {self.__class__.__name__}")

    @property
    def model(self) -> str:
        return self.config.get('model', '')

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> str:
        """Generate a response from the LLM.

        Args:
            prompt: Input prompt
            temperature: Sampling temperature (0-1), provider default if None
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            LLMError: On any provider failure
        """
        pass

    async def close(self):
        """Release provider resources."""
        pass


class LLMError(GenerationFailure):
    """Base exception for LLM errors."""
    pass


class LLMConnectionError(LLMError):
    """Exception for connection errors."""
    pass


class LLMTimeoutError(LLMError):
    """Exception for timeout errors."""
    pass


class LLMRateLimitError(LLMError):
    """Exception for rate limit and quota errors."""
    pass


class LLMInvalidRequestError(LLMError):
    """Exception for invalid request and authentication errors."""
    pass
