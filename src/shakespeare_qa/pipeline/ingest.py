"""Ingestion operations."""

import logging
from typing import Any, Dict

from ..core.chunker import chunk_text
from ..core.loader import CORE_WORKS, SHAKESPEARE_WORKS
from .state import AppState

logger = logging.getLogger(__name__)


class IngestService:
    """Populate the local data directory and the vector index."""

    def __init__(self, state: AppState):
        self.state = state

    async def ingest_complete_works(self) -> Dict[str, Any]:
        """Fetch the complete works and replace the cached corpus.

        Raises:
            NetworkError: If the remote fetch fails
            CorpusIOError: If the corpus cannot be saved
        """
        logger.info("Starting MIT Shakespeare ingestion...")
        corpus = await self.state.loader.ingest()
        self.state.corpus.set(corpus)

        return {
            "message": "Shakespeare data ingested successfully from MIT OpenCourseWare",
            "source": corpus.source,
            "characters": len(corpus),
            "chunks": self._count_chunks(corpus.text),
            "note": "You can now use all Q&A endpoints with comprehensive Shakespeare knowledge."
        }

    async def ingest_plays(self) -> Dict[str, Any]:
        """Fetch every play, save it, and rebuild the vector index from the plays.

        Raises:
            DataUnavailable: If no play could be fetched
        """
        plays = await self.state.play_fetcher.ingest_plays(SHAKESPEARE_WORKS, note="Individual play files with vector index")
        total_chunks = self.state.index_texts(list(plays.values()))

        self.state.retriever.set(self.state.make_retriever())

        logger.info(f"Ingestion complete: {len(plays)} plays, {total_chunks} chunks")
        return {
            "message": "Ingestion complete",
            "chunks": total_chunks,
            "plays": len(plays),
            "works": list(plays)
        }

    async def ingest_core_plays(self) -> Dict[str, Any]:
        """Fetch the reduced play list and save it, without a vector index."""
        plays = await self.state.play_fetcher.ingest_plays(CORE_WORKS, note="Simplified ingestion - individual play files")
        total_chunks = sum(self._count_chunks(t) for t in plays.values())

        return {
            "message": "Gemini ingestion complete",
            "plays": len(plays),
            "chunks": total_chunks,
            "works": list(plays)
        }

    def _count_chunks(self, text: str) -> int:
        settings = self.state.settings
        return len(chunk_text(text, settings.chunk_size, settings.chunk_overlap))
