"""Question answering pipelines.

Each pipeline retrieves passages, composes a prompt and calls one generation
provider. A provider failure is classified as ``GenerationFailure`` and,
when ``fallback_to_demo`` is enabled, answered once by the offline demo
provider instead. Corpus loading errors are not retried or masked.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import httpx
import openai

from ..errors import GenerationFailure, VectorStoreError
from ..llm.base import LLMProvider
from ..llm.demo_provider import DemoProvider
from ..llm.factory import ProviderKind
from ..retrieval.context import PromptComposer, PromptStyle
from ..retrieval.ranker import RankMode
from .state import AppState

logger = logging.getLogger(__name__)


@dataclass
class Answer:
    """Generated text plus provenance."""
    answer: str
    source: str
    provider: str
    model: Optional[str] = None
    note: Optional[str] = None
    fallback_used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AnswerService:
    """Answer questions with the configured providers."""

    def __init__(self, state: AppState):
        self.state = state
        self.settings = state.settings
        self._pipelines = {
            ProviderKind.OPENAI: self.ask_openai,
            ProviderKind.GEMINI: self.ask_gemini,
            ProviderKind.DEMO: self.ask_demo,
        }

    async def ask(self, question: str, provider: ProviderKind = ProviderKind.DEMO) -> Answer:
        """Dispatch to the pipeline for ``provider``."""
        return await self._pipelines[provider](question)

    async def ask_openai(self, question: str) -> Answer:
        """Vector-store retrieval, then OpenAI chat completion."""
        try:
            retriever = await self.state.retriever.get()
            hits = retriever.retrieve(question, k=self.settings.vector_top_k)
        except (VectorStoreError, ValueError, ConnectionError, httpx.HTTPError, openai.OpenAIError) as e:
            # Embeddings come from the same API as generation; the index is a downstream service
            logger.error(f"OpenAI RAG retrieval failed: {e}")
            return self._fallback(question, GenerationFailure(f"Vector retrieval failed: {e}"))

        composer = PromptComposer(PromptStyle.CONTEXT)
        prompt = composer.compose(question, [text for text, _ in hits])

        provider = self.state.get_provider(ProviderKind.OPENAI)
        return await self._generate(
            question,
            prompt,
            provider,
            source="MIT OpenCourseWare",
            note="Powered by OpenAI with MIT OpenCourseWare Shakespeare data."
        )

    async def ask_gemini(self, question: str) -> Answer:
        """Keyword ranking over the full corpus, then Gemini.

        Raises:
            DataUnavailable: If no corpus can be loaded
        """
        corpus = await self.state.corpus.get()
        result = self.state.ranker.rank(question, corpus.text, mode=RankMode.SENTENCE)
        if result.used_fallback:
            logger.info(f"No sentence matched, using corpus prefix ({result.fallback.value})")

        composer = PromptComposer(PromptStyle.PASSAGES)
        prompt = composer.compose(question, [result.text])

        provider = self.state.get_provider(ProviderKind.GEMINI)
        return await self._generate(
            question,
            prompt,
            provider,
            source=corpus.source,
            note="Using Google Gemini API with MIT OpenCourseWare Shakespeare data."
        )

    async def ask_demo(self, question: str) -> Answer:
        """Offline answer from the cached corpus or canned knowledge."""
        demo = self._demo_provider()
        corpus = self.state.cached_corpus()
        result = demo.answer(question, corpus.text if corpus else None)
        return Answer(
            answer=result.answer,
            source=result.source,
            provider=demo.name,
            model=demo.model,
            note=result.note
        )

    async def _generate(
        self,
        question: str,
        prompt: str,
        provider: LLMProvider,
        source: str,
        note: str
    ) -> Answer:
        try:
            text = await provider.generate(prompt)
        except GenerationFailure as e:
            logger.error(f"{provider.name} generation failed: {e}")
            return self._fallback(question, e)
        except Exception as e:
            logger.error(f"{provider.name} generation failed: {e}", exc_info=True)
            return self._fallback(question, GenerationFailure(f"{provider.name} generation failed: {e}"))

        return Answer(
            answer=text,
            source=source,
            provider=provider.name,
            model=provider.model,
            note=note
        )

    def _fallback(self, question: str, failure: GenerationFailure) -> Answer:
        """Answer once from the offline provider, or re-raise the failure."""
        if not self.settings.fallback_to_demo:
            raise failure

        logger.info("Falling back to demo mode")
        demo = self._demo_provider()
        corpus = self.state.cached_corpus()
        result = demo.answer(question, corpus.text if corpus else None)

        return Answer(
            answer=result.answer,
            source=result.source,
            provider=demo.name,
            model=demo.model,
            note="Primary provider unavailable - using demo mode with pre-loaded Shakespeare knowledge.",
            fallback_used=True
        )

    def _demo_provider(self) -> DemoProvider:
        return self.state.get_provider(ProviderKind.DEMO)
