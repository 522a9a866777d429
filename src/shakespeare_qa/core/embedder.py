"""Embedding generation using OpenAI."""

import logging
import os
from typing import List, Optional
import numpy as np
from openai import OpenAI

logger = logging.getLogger(__name__)

MODEL_DIMENSIONS = {
    "text-embedding-3-large": 3072,
    "text-embedding-3-small": 1536,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbedder:
    """Generate embeddings using OpenAI API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        batch_size: int = 100,
        client: Optional[OpenAI] = None
    ):
        """Initialize the OpenAI embedder.

        Args:
            api_key: OpenAI API key (if None, reads from OPENAI_API_KEY env var)
            model: OpenAI embedding model name
            batch_size: Batch size for API requests
            client: Optional pre-built client
        """
        self.model_name = model
        self.batch_size = batch_size
        self._dimension = MODEL_DIMENSIONS.get(model, 1536)

        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY not set. Please set it in environment variables or pass it directly.")
            client = OpenAI(api_key=api_key)
        self.client = client

        logger.info(f"Initialized OpenAI embedder with model: {model} ({self._dimension} dimensions)")

    def embed_text(self, text: str) -> np.ndarray:
        """Generate embedding for a single text.

        Args:
            text: Text to embed

        Returns:
            Numpy array of embeddings
        """
        response = self.client.embeddings.create(
            input=text,
            model=self.model_name
        )
        return np.array(response.data[0].embedding)

    def embed_batch(self, texts: List[str]) -> np.ndarray:
        """Generate embeddings for a batch of texts.

        One request per batch; a failed request is not retried.

        Args:
            texts: List of texts to embed

        Returns:
            Numpy array of embeddings (n_texts x embedding_dim)
        """
        embeddings = []
        total_batches = (len(texts) + self.batch_size - 1) // self.batch_size

        logger.info(f"Generating OpenAI embeddings for {len(texts)} texts in batches of {self.batch_size}")

        for i in range(0, len(texts), self.batch_size):
            batch = texts[i:i + self.batch_size]
            logger.info(f"Processing batch {i // self.batch_size + 1}/{total_batches}")

            response = self.client.embeddings.create(
                input=batch,
                model=self.model_name
            )
            embeddings.extend(np.array(data.embedding) for data in response.data)

        logger.info(f"Generated {len(embeddings)} OpenAI embeddings")
        return np.array(embeddings)
