"""Chunk data models."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class Chunk:
    """A contiguous window over a token or character sequence."""
    index: int  # 1-based position in the ChunkSet
    content: str
    unit_count: int  # tokens or characters, depending on mode
    start_offset: int
    end_offset: int  # inclusive
    length: int = 0
    word_count: int = 0


@dataclass
class ChunkStatistics:
    """
    Aggregates over a ChunkSet.

    coverage_percentage compares concatenated chunk text to the source text, so
    it is approximate: overlap pushes it above 100, lossy decoding can move it
    either way.
    """
    total_characters: int = 0
    total_units: int = 0
    avg_chunk_length: float = 0.0
    avg_units_per_chunk: float = 0.0
    coverage_percentage: float = 0.0


@dataclass
class ChunkSet:
    """Ordered chunks produced by one chunking call."""
    chunks: List[Chunk] = field(default_factory=list)
    statistics: ChunkStatistics = field(default_factory=ChunkStatistics)
    chunk_size: int = 0
    overlap: int = 0

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self):
        return iter(self.chunks)
