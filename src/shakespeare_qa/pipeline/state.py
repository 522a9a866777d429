"""Shared per-process state handed to request handlers."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from ..config import Settings
from ..core.chunker import chunk_text
from ..core.embedder import OpenAIEmbedder
from ..core.loader import CorpusLoader, Corpus, LocalCorpusStore, PlayFetcher, RemoteCorpusFetcher
from ..core.vector_store import VectorIndex
from ..llm.base import LLMProvider
from ..llm.factory import LLMFactory, ProviderKind
from ..retrieval.ranker import RelevanceRanker
from ..retrieval.retriever import PassageRetriever

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyValue(Generic[T]):
    """A value built on first use, at most once.

    Concurrent first callers wait on the same build. A failed build leaves
    the cell empty so the next caller tries again.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._value: Optional[T] = None
        self._ready = False
        self._lock = asyncio.Lock()

    @property
    def is_set(self) -> bool:
        return self._ready

    def peek(self) -> Optional[T]:
        return self._value if self._ready else None

    def set(self, value: T) -> None:
        """Replace the value (used after an explicit re-ingestion)."""
        self._value = value
        self._ready = True

    async def get(self) -> T:
        if self._ready:
            return self._value

        async with self._lock:
            if not self._ready:
                self._value = await self._factory()
                self._ready = True
        return self._value


class AppState:
    """Context object holding the loaded corpus, vector index and providers."""

    def __init__(
        self,
        settings: Settings,
        fetcher: Optional[RemoteCorpusFetcher] = None,
        providers: Optional[Dict[ProviderKind, LLMProvider]] = None,
        embedder: Optional[OpenAIEmbedder] = None,
        vector_index: Optional[VectorIndex] = None
    ):
        """Initialize state.

        Args:
            settings: Application settings
            fetcher: HTTP fetcher (default: built from settings)
            providers: Pre-built providers by kind; missing kinds are created on demand
            embedder: Embedder for the vector path (default: built on first use)
            vector_index: Vector index (default: connects to ChromaDB on first use)
        """
        self.settings = settings
        self.store = LocalCorpusStore(settings.data_dir)
        self.fetcher = fetcher or RemoteCorpusFetcher(timeout=settings.fetch_timeout)
        self.loader = CorpusLoader(
            store=self.store,
            fetcher=self.fetcher,
            url=settings.corpus_url,
            min_cached_length=settings.min_cached_length
        )
        self.play_fetcher = PlayFetcher(
            self.fetcher,
            self.store,
            settings.plays_base_url,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap
        )
        self.ranker = RelevanceRanker(settings.ranking_config)

        self._providers: Dict[ProviderKind, LLMProvider] = dict(providers or {})
        self._embedder = embedder
        self._vector_index = vector_index

        self.corpus: LazyValue[Corpus] = LazyValue(self.loader.load)
        self.retriever: LazyValue[PassageRetriever] = LazyValue(self._build_retriever)

        logger.info(f"App state initialized (data_dir={settings.data_dir})")

    def get_provider(self, kind: ProviderKind) -> LLMProvider:
        """Return the provider for ``kind``, creating it from settings once."""
        if kind not in self._providers:
            self._providers[kind] = LLMFactory.create_from_settings(self.settings, kind)
        return self._providers[kind]

    def cached_corpus(self) -> Optional[Corpus]:
        """Corpus already in memory or on disk, without fetching."""
        return self.corpus.peek() or self.loader.read_cached()

    def get_embedder(self) -> OpenAIEmbedder:
        if self._embedder is None:
            self._embedder = OpenAIEmbedder(
                api_key=self.settings.openai_api_key,
                model=self.settings.openai_embedding_model
            )
        return self._embedder

    def get_vector_index(self) -> VectorIndex:
        if self._vector_index is None:
            chroma = self.settings.chromadb_config
            self._vector_index = VectorIndex(
                host=chroma.host,
                port=chroma.port,
                collection_name=chroma.collection_name
            )
        return self._vector_index

    def index_texts(self, texts: List[str]) -> int:
        """Chunk, embed and store texts, replacing the vector index contents.

        Returns:
            Number of chunks stored
        """
        chunks = []
        for text in texts:
            chunks.extend(chunk_text(text, self.settings.chunk_size, self.settings.chunk_overlap))

        if not chunks:
            return 0

        logger.info(f"Creating embeddings for {len(chunks)} chunks...")
        embeddings = self.get_embedder().embed_batch([c.text for c in chunks])
        return self.get_vector_index().rebuild(chunks, embeddings)

    def make_retriever(self) -> PassageRetriever:
        return PassageRetriever(self.get_vector_index(), self.get_embedder())

    async def _build_retriever(self) -> PassageRetriever:
        index = self.get_vector_index()

        if index.count() == 0:
            corpus = await self.corpus.get()
            logger.info(f"Vector index empty, indexing corpus from {corpus.source}")
            self.index_texts([corpus.text])

        return self.make_retriever()

    async def close(self):
        await self.fetcher.close()
        for provider in self._providers.values():
            await provider.close()
