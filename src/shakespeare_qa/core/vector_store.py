"""ChromaDB vector store interface for Shakespeare chunks."""

import logging
from typing import Any, List, Optional, Sequence, Tuple
import chromadb

from ..errors import VectorStoreError
from .chunker import Chunk

logger = logging.getLogger(__name__)


class VectorIndex:
    """One ChromaDB collection holding chunk texts and their embeddings."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8000,
        collection_name: str = "shakespeare",
        client: Optional[Any] = None
    ):
        """Initialize ChromaDB client.

        Args:
            host: ChromaDB host
            port: ChromaDB port
            collection_name: Collection holding the chunks
            client: Optional pre-built ChromaDB client
        """
        self.collection_name = collection_name

        if client is None:
            try:
                client = chromadb.HttpClient(host=host, port=port)
                client.heartbeat()
                logger.info(f"Connected to ChromaDB at {host}:{port}")
            except Exception as e:
                logger.error(f"Failed to connect to ChromaDB: {e}")
                raise
        self.client = client

    def _collection(self):
        return self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"description": "Shakespeare text chunks"}
        )

    def rebuild(
        self,
        chunks: Sequence[Chunk],
        embeddings: Any,
        batch_size: int = 100
    ) -> int:
        """Replace the collection contents with the given chunks.

        Args:
            chunks: Chunks to store
            embeddings: Pre-computed embeddings, one row per chunk
            batch_size: Number of chunks per add call

        Returns:
            Number of chunks added

        Raises:
            VectorStoreError: If the new collection cannot be written
        """
        try:
            self.client.delete_collection(name=self.collection_name)
            logger.info(f"Deleted collection: {self.collection_name}")
        except Exception:
            logger.debug(f"Collection {self.collection_name} did not exist")

        total_added = 0
        try:
            collection = self._collection()
            for i in range(0, len(chunks), batch_size):
                batch = chunks[i:i + batch_size]
                collection.add(
                    ids=[f"{self.collection_name}_{i + j}" for j in range(len(batch))],
                    documents=[chunk.text for chunk in batch],
                    metadatas=[{"start": chunk.start, "end": chunk.end} for chunk in batch],
                    embeddings=[list(map(float, e)) for e in embeddings[i:i + batch_size]]
                )
                total_added += len(batch)
                logger.info(f"Added batch {i // batch_size + 1}: {len(batch)} chunks to {self.collection_name}")
        except Exception as e:
            logger.error(f"Failed to add chunks to {self.collection_name}: {e}")
            raise VectorStoreError(f"Failed to write to {self.collection_name} after {total_added} chunks: {e}") from e

        logger.info(f"Successfully added {total_added} chunks to {self.collection_name}")
        return total_added

    def search(self, query_embedding: Any, k: int = 5) -> List[Tuple[str, float]]:
        """Return the ``k`` nearest chunks as ``(text, distance)``, nearest first.

        Raises:
            VectorStoreError: If the collection cannot be queried
        """
        try:
            results = self._collection().query(
                query_embeddings=[list(map(float, query_embedding))],
                n_results=k,
                include=["documents", "distances"]
            )
        except Exception as e:
            logger.error(f"Query against {self.collection_name} failed: {e}")
            raise VectorStoreError(f"Query against {self.collection_name} failed: {e}") from e

        documents = results["documents"][0] if results.get("documents") else []
        distances = results["distances"][0] if results.get("distances") else [0.0] * len(documents)

        logger.info(f"Query returned {len(documents)} results from {self.collection_name}")
        return list(zip(documents, distances))

    def count(self) -> int:
        """Number of stored chunks.

        Raises:
            VectorStoreError: If the collection cannot be reached; an
                unreachable index is never reported as empty
        """
        try:
            return self._collection().count()
        except Exception as e:
            logger.error(f"Failed to count {self.collection_name}: {e}")
            raise VectorStoreError(f"Failed to count {self.collection_name}: {e}") from e
