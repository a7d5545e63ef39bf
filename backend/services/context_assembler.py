"""Retrieval context assembly: chunk a document, select chunks, build the prompt."""
import logging
from typing import Optional

from config import RAG_CHUNK_OVERLAP, RAG_CHUNK_SIZE
from models.retrieval import RetrievalContext
from services.chunk_selector import ChunkSelector, FirstChunksSelector
from services.chunking_engine import ChunkingEngine

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant. Answer the user's question based on the provided context. "
    "If the context doesn't contain relevant information, say so clearly."
)

CONTEXT_SEPARATOR = "\n\n"


class ContextAssembler:
    """Builds the prompt for a document question without calling any model."""

    def __init__(
        self,
        chunking_engine: Optional[ChunkingEngine] = None,
        selector: Optional[ChunkSelector] = None,
        chunk_size: int = RAG_CHUNK_SIZE,
        chunk_overlap: int = RAG_CHUNK_OVERLAP
    ):
        """
        Initialize the assembler.

        Args:
            chunking_engine: Engine used in character mode
            selector: Chunk selection policy (defaults to the first three chunks)
            chunk_size: Characters per chunk
            chunk_overlap: Characters shared by consecutive chunks
        """
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.selector = selector or FirstChunksSelector()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def assemble(self, document_text: str, query: str) -> RetrievalContext:
        """
        Chunk the document, select context chunks and build the prompt.

        Args:
            document_text: Extracted document text (may be empty)
            query: User question

        Returns:
            RetrievalContext holding all chunks, the selected ones and the prompt
        """
        document_chunks = self.chunking_engine.chunk_characters(
            document_text, self.chunk_size, self.chunk_overlap
        )
        selected = self.selector.select(document_chunks.chunks, query)
        context = CONTEXT_SEPARATOR.join(chunk.content for chunk in selected)

        logger.info(
            f"Assembled context: {len(selected)} of {len(document_chunks)} chunks, "
            f"{len(context)} characters"
        )
        return RetrievalContext(
            query=query,
            document_chunks=document_chunks,
            selected_chunks=selected,
            context=context,
            assembled_prompt=self.build_prompt(context, query)
        )

    @staticmethod
    def build_prompt(context: str, query: str) -> str:
        """Fixed user-prompt template embedding the context block and question."""
        return (
            f"Context:\n{context}\n\n"
            f"Question: {query}\n\n"
            "Please answer based on the provided context."
        )
