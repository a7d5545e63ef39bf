"""Windowed chunking over token ids or characters."""
import logging
from typing import Callable, List, Optional, Sequence

from models.chunk import Chunk, ChunkSet, ChunkStatistics
from services.errors import InvalidArgument
from services.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

# Turns a slice of units back into displayable text
Renderer = Callable[[Sequence], str]


def _render_characters(units: Sequence) -> str:
    if isinstance(units, str):
        return units
    return "".join(units)


def _average(total: float, count: int) -> float:
    return total / count if count else 0.0


class ChunkingEngine:
    """Segments token or character sequences into overlapping windows."""

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        """
        Initialize ChunkingEngine.

        Args:
            tokenizer: Tokenizer for token-mode chunking. Created from the shared
                rank table on first use when omitted; character mode never needs it.
        """
        self._tokenizer = tokenizer

    @property
    def tokenizer(self) -> Tokenizer:
        if self._tokenizer is None:
            logger.info("Loading tokenizer for chunking...")
            self._tokenizer = Tokenizer()
        return self._tokenizer

    @staticmethod
    def _validate(chunk_size: int, overlap: int) -> None:
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
            raise InvalidArgument("Chunk size must be an integer", details={"chunk_size": chunk_size})
        if chunk_size <= 0:
            raise InvalidArgument("Chunk size must be positive", details={"chunk_size": chunk_size})
        if isinstance(overlap, bool) or not isinstance(overlap, int):
            raise InvalidArgument("Overlap must be an integer", details={"overlap": overlap})
        if overlap < 0:
            raise InvalidArgument("Overlap cannot be negative", details={"overlap": overlap})

    def chunk(
        self,
        units: Sequence,
        chunk_size: int,
        overlap: int = 0,
        render: Renderer = _render_characters,
        source_length: Optional[int] = None
    ) -> ChunkSet:
        """
        Split ``units`` into windows of ``chunk_size`` that overlap by ``overlap``.

        The window start advances by ``max(chunk_size - overlap, 1)``, so the loop
        always terminates, even when overlap >= chunk_size.

        Args:
            units: Token ids or characters
            chunk_size: Window size in units, must be positive
            overlap: Units shared by consecutive windows, must be non-negative
            render: Turns a slice of units into chunk text
            source_length: Character length of the original text, for coverage
                (defaults to the length of the rendered full sequence)

        Returns:
            ChunkSet with 1-based chunks and aggregate statistics

        Raises:
            InvalidArgument: If chunk_size or overlap is out of range
        """
        self._validate(chunk_size, overlap)

        total_units = len(units)
        step = max(chunk_size - overlap, 1)
        chunks: List[Chunk] = []

        start = 0
        while start < total_units:
            end = min(start + chunk_size, total_units)
            content = render(units[start:end])
            chunks.append(Chunk(
                index=len(chunks) + 1,
                content=content,
                unit_count=end - start,
                start_offset=start,
                end_offset=end - 1,
                length=len(content),
                word_count=len(content.split())
            ))
            start += step

        if source_length is None:
            source_length = len(render(units)) if total_units else 0

        statistics = self._statistics(chunks, total_units, source_length)
        logger.debug(
            f"Chunked {total_units} units into {len(chunks)} chunks "
            f"(chunk_size={chunk_size}, overlap={overlap})"
        )
        return ChunkSet(chunks=chunks, statistics=statistics, chunk_size=chunk_size, overlap=overlap)

    @staticmethod
    def _statistics(chunks: List[Chunk], total_units: int, source_length: int) -> ChunkStatistics:
        """Aggregate over the finished chunk list; empty inputs report zeros."""
        covered_length = sum(c.length for c in chunks)
        coverage = covered_length / source_length * 100 if source_length else 0.0

        return ChunkStatistics(
            total_characters=source_length,
            total_units=total_units,
            avg_chunk_length=_average(covered_length, len(chunks)),
            avg_units_per_chunk=_average(sum(c.unit_count for c in chunks), len(chunks)),
            coverage_percentage=coverage
        )

    def chunk_tokens(self, text: str, chunk_size: int, overlap: int = 0) -> ChunkSet:
        """
        Tokenize ``text`` and chunk the token ids.

        Chunk text is produced by decoding each window, so a window that ends
        mid-codepoint shows a replacement character.
        """
        self._validate(chunk_size, overlap)
        token_ids = self.tokenizer.encode(text)
        chunk_set = self.chunk(
            token_ids,
            chunk_size,
            overlap,
            render=self.tokenizer.decode,
            source_length=len(text)
        )
        logger.info(
            f"Created {len(chunk_set)} token chunks from {len(token_ids)} tokens "
            f"(coverage {chunk_set.statistics.coverage_percentage:.1f}%)"
        )
        return chunk_set

    def chunk_characters(self, text: str, chunk_size: int, overlap: int = 0) -> ChunkSet:
        """Chunk ``text`` by characters."""
        chunk_set = self.chunk(text, chunk_size, overlap, source_length=len(text))
        logger.info(f"Created {len(chunk_set)} character chunks from {len(text)} characters")
        return chunk_set
