"""Shared fixtures and fakes for the test suite."""

from typing import Callable, Dict, List, Optional

import httpx
import numpy as np
import pytest

from shakespeare_qa.config import Settings
from shakespeare_qa.core.loader import RemoteCorpusFetcher
from shakespeare_qa.llm.base import LLMProvider


HAMLET_LINE = "HAMLET: To be or not to be, that is the question"

SAMPLE_CORPUS = "\n".join([
    "THE TRAGEDY OF HAMLET, PRINCE OF DENMARK",
    HAMLET_LINE,
    "Whether 'tis nobler in the mind to suffer",
    "The slings and arrows of outrageous fortune",
    "MACBETH: Is this a dagger which I see before me",
    "JULIET: Romeo, Romeo, wherefore art thou Romeo?",
])


def make_fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> RemoteCorpusFetcher:
    """Fetcher whose HTTP traffic is served by ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteCorpusFetcher(timeout=5.0, client=client)


def offline_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network unreachable", request=request)


class FakeProvider(LLMProvider):
    """Provider returning a fixed reply, or raising ``error`` when set."""

    def __init__(self, reply: str = "A generated answer.", error: Optional[Exception] = None, name: str = "fake"):
        super().__init__({'model': 'fake-model'})
        self.name = name
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt, temperature=None, max_tokens=None, **kwargs):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeEmbedder:
    """Deterministic embeddings: one axis per known word."""

    WORDS = ("hamlet", "macbeth", "romeo", "death", "dagger")

    def __init__(self):
        self.calls = 0

    def _vector(self, text: str) -> np.ndarray:
        lowered = text.lower()
        return np.array([float(lowered.count(w)) for w in self.WORDS] + [1.0])

    def embed_text(self, text: str) -> np.ndarray:
        self.calls += 1
        return self._vector(text)

    def embed_batch(self, texts: List[str]) -> np.ndarray:
        self.calls += 1
        return np.array([self._vector(t) for t in texts])


class FakeCollection:
    def __init__(self):
        self.items: Dict[str, Dict] = {}

    def add(self, ids, documents, metadatas, embeddings):
        for i, doc, meta, emb in zip(ids, documents, metadatas, embeddings):
            self.items[i] = {"document": doc, "metadata": meta, "embedding": np.array(emb)}

    def count(self):
        return len(self.items)

    def query(self, query_embeddings, n_results, include):
        query = np.array(query_embeddings[0])
        scored = sorted(
            ((float(np.linalg.norm(item["embedding"] - query)), item["document"]) for item in self.items.values()),
            key=lambda pair: pair[0]
        )[:n_results]
        return {
            "documents": [[doc for _, doc in scored]],
            "distances": [[dist for dist, _ in scored]],
        }


class FakeChromaClient:
    """In-memory stand-in for ``chromadb.HttpClient``.

    Set ``fail_next`` to an exception to make the next collection lookup raise it.
    """

    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}
        self.fail_next: Optional[Exception] = None

    def get_or_create_collection(self, name, metadata=None):
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error
        return self.collections.setdefault(name, FakeCollection())

    def delete_collection(self, name):
        if name not in self.collections:
            raise ValueError(f"Collection {name} does not exist")
        del self.collections[name]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=str(tmp_path / "data"),
        corpus_url="https://example.test/shakespeare.txt",
        plays_base_url="https://example.test/plays",
        min_cached_length=10,
        llm_provider="openai",
        openai_api_key=None,
        gemini_api_key=None,
        fallback_to_demo=True,
    )
