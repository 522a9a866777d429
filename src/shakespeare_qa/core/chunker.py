"""Fixed-size overlapping chunking for vector indexing."""

from dataclasses import dataclass
from typing import Iterator
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Chunk:
    """A window of the source text."""
    start: int
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


class TextChunks:
    """Lazy, restartable sequence of overlapping chunks.

    Iterating twice yields the same chunks; nothing is materialized until
    iteration. Adjacent chunks share exactly ``overlap`` characters and the
    last chunk may be shorter than ``size``.
    """

    def __init__(self, text: str, size: int, overlap: int):
        if overlap < 0:
            raise ValueError(f"overlap must be >= 0, got {overlap}")
        if size <= overlap:
            raise ValueError(f"size must be greater than overlap ({size} <= {overlap})")

        self.text = text
        self.size = size
        self.overlap = overlap

    @property
    def step(self) -> int:
        return self.size - self.overlap

    def __iter__(self) -> Iterator[Chunk]:
        n = len(self.text)
        start = 0
        while start < n:
            yield Chunk(start=start, text=self.text[start:start + self.size])
            if start + self.size >= n:
                break
            start += self.step

    def __len__(self) -> int:
        n = len(self.text)
        if n == 0:
            return 0
        if n <= self.size:
            return 1
        return -(-(n - self.size) // self.step) + 1


def chunk_text(text: str, size: int = 1000, overlap: int = 200) -> TextChunks:
    """Split text into overlapping fixed-size windows.

    Args:
        text: Text to split
        size: Target chunk length in characters
        overlap: Characters shared by adjacent chunks

    Returns:
        Restartable sequence of Chunk

    Raises:
        ValueError: Unless size > overlap >= 0
    """
    chunks = TextChunks(text, size, overlap)
    logger.debug(f"Chunking {len(text)} chars (size={size}, overlap={overlap})")
    return chunks
