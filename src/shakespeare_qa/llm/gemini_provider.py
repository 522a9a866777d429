"""Google Gemini provider."""

import os
import logging
from typing import Optional, Dict, Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import (
    LLMProvider,
    LLMError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMInvalidRequestError
)

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider using the Gemini API."""

    name = "gemini"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Gemini provider.

        Args:
            config: Configuration dict with optional keys:
                - api_key: API key (default: GEMINI_API_KEY or GOOGLE_API_KEY env var)
                - model: Model name (default: gemini-1.5-flash)
                - temperature: Default temperature (default: model default)
                - client: Pre-built genai.Client
        """
        super().__init__(config)

        self.api_key = (
            self.config.get('api_key')
            or os.environ.get("GEMINI_API_KEY")
            or os.environ.get("GOOGLE_API_KEY")
        )
        self.config.setdefault('model', 'gemini-1.5-flash')
        self.default_temperature = self.config.get('temperature')

        self.client = self.config.get('client')
        if self.client is None and self.api_key:
            self.client = genai.Client(api_key=self.api_key)

        logger.info(f"Gemini provider initialized (model={self.model})")

    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> str:
        """Generate response using Gemini.

        Args:
            prompt: Input prompt
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
            **kwargs: Additional parameters

        Returns:
            Generated text
        """
        if self.client is None:
            raise LLMInvalidRequestError("GEMINI_API_KEY not set", hint="Set GEMINI_API_KEY or use a different AI provider.")

        logger.info(f"Generating response via Gemini ({self.model})")

        temperature = self.default_temperature if temperature is None else temperature
        generation_config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=generation_config
            )
        except genai_errors.ClientError as e:
            if e.code == 429:
                raise LLMRateLimitError(f"Gemini quota exceeded: {e}")
            raise LLMInvalidRequestError(f"Gemini rejected the request: {e}")
        except genai_errors.ServerError as e:
            raise LLMConnectionError(f"Gemini server error: {e}")
        except httpx.RequestError as e:
            raise LLMConnectionError(f"Gemini connection failed: {e}")
        except genai_errors.APIError as e:
            logger.error(f"Gemini generation failed: {e}")
            raise LLMError(f"Gemini generation failed: {e}")

        generated_text = response.text or ""

        logger.info(f"Generated {len(generated_text)} chars")
        return generated_text
