"""Retrieval context data models."""
from dataclasses import dataclass, field
from typing import List

from .chunk import Chunk, ChunkSet


@dataclass
class RetrievalContext:
    """Everything assembled for a single RAG query."""
    query: str
    document_chunks: ChunkSet
    selected_chunks: List[Chunk] = field(default_factory=list)
    context: str = ""
    assembled_prompt: str = ""
