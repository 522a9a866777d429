"""OpenAI chat-completions provider."""

import os
import logging
from typing import Optional, Dict, Any

import openai
from openai import AsyncOpenAI

from .base import (
    LLMProvider,
    LLMError,
    LLMConnectionError,
    LLMTimeoutError,
    LLMRateLimitError,
    LLMInvalidRequestError
)

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI chat completions API."""

    name = "openai"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize OpenAI provider.

        Args:
            config: Configuration dict with optional keys:
                - api_key: API key (default: OPENAI_API_KEY env var)
                - model: Model name (default: gpt-3.5-turbo)
                - temperature: Default temperature (default: 0.2)
                - timeout: Request timeout in seconds (default: 60)
                - client: Pre-built AsyncOpenAI client
        """
        super().__init__(config)

        self.api_key = self.config.get('api_key') or os.getenv("OPENAI_API_KEY")
        self.config.setdefault('model', 'gpt-3.5-turbo')
        self.default_temperature = self.config.get('temperature', 0.2)
        self.timeout = self.config.get('timeout', 60)

        self.client = self.config.get('client')
        if self.client is None and self.api_key:
            self.client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

        logger.info(f"OpenAI provider initialized (model={self.model})")

    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> str:
        """Generate response using OpenAI.

        Args:
            prompt: Input prompt, sent as a single user message
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional parameters

        Returns:
            Generated text
        """
        if self.client is None:
            raise LLMInvalidRequestError("OPENAI_API_KEY not set", hint="Set OPENAI_API_KEY or use a different AI provider.")

        logger.info(f"Generating response via OpenAI ({self.model})")

        params = {
            'model': self.model,
            'messages': [{'role': 'user', 'content': prompt}],
            'temperature': self.default_temperature if temperature is None else temperature,
        }
        if max_tokens:
            params['max_tokens'] = max_tokens

        try:
            response = await self.client.chat.completions.create(**params)
        except openai.APITimeoutError:
            raise LLMTimeoutError(f"OpenAI timeout after {self.timeout}s")
        except openai.APIConnectionError as e:
            raise LLMConnectionError(f"OpenAI connection failed: {e}")
        except openai.RateLimitError as e:
            raise LLMRateLimitError(f"OpenAI rate limit or quota exceeded: {e}")
        except (openai.AuthenticationError, openai.BadRequestError) as e:
            raise LLMInvalidRequestError(f"OpenAI rejected the request: {e}")
        except openai.OpenAIError as e:
            logger.error(f"OpenAI generation failed: {e}")
            raise LLMError(f"OpenAI generation failed: {e}")

        generated_text = response.choices[0].message.content or ""

        logger.info(f"Generated {len(generated_text)} chars")
        return generated_text

    async def close(self):
        """Close HTTP client."""
        if self.client is not None and self.config.get('client') is None:
            await self.client.close()
