"""Chunk selection policies for retrieval context assembly."""
from abc import ABC, abstractmethod
from typing import List, Sequence

from config import RAG_TOP_K
from models.chunk import Chunk


class ChunkSelector(ABC):
    """Base class for policies that pick which chunks go into a prompt."""

    @abstractmethod
    def select(self, chunks: Sequence[Chunk], query: str) -> List[Chunk]:
        """
        Choose chunks for the query.

        Args:
            chunks: Document chunks in index order
            query: User question

        Returns:
            Selected chunks, in the order they should appear in the prompt
        """
        pass


class FirstChunksSelector(ChunkSelector):
    """
    Placeholder policy: the first ``top_k`` chunks in index order.

    The query is ignored entirely. There is no ranking or similarity search
    here; a similarity-ranked selector can replace this one without touching
    the chunker or the assembler.
    """

    def __init__(self, top_k: int = RAG_TOP_K):
        if top_k < 0:
            raise ValueError("top_k cannot be negative")
        self.top_k = top_k

    def select(self, chunks: Sequence[Chunk], query: str) -> List[Chunk]:
        return list(chunks[:self.top_k])
