"""Similarity retrieval over the vector index."""

import logging
from typing import List, Tuple

from ..core.embedder import OpenAIEmbedder
from ..core.vector_store import VectorIndex

logger = logging.getLogger(__name__)


class PassageRetriever:
    """Embed a question and return the nearest stored chunks."""

    def __init__(self, index: VectorIndex, embedder: OpenAIEmbedder):
        self.index = index
        self.embedder = embedder

        logger.info("Passage retriever initialized")

    def retrieve(self, question: str, k: int = 5) -> List[Tuple[str, float]]:
        """Return up to ``k`` ``(text, distance)`` pairs, nearest first."""
        logger.info(f"Retrieving {k} chunks for query: {question[:100]}")

        query_embedding = self.embedder.embed_text(question)
        results = self.index.search(query_embedding, k=k)

        logger.info(f"Retrieved {len(results)} chunks")
        return results
