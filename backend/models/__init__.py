"""Data models for the AI Text Tools backend."""
from .token import Token, TokenSequence, TokenizationResult, TokenizationStatistics
from .chunk import Chunk, ChunkSet, ChunkStatistics
from .evaluation import EvaluationReport, OverallScore, ReadabilityScore, SimilarityScore
from .retrieval import RetrievalContext
from .document import Document
from .api import (
    TokenizeRequest,
    ChunkRequest,
    ChatRequest,
    EmbedRequest,
    EvaluateRequest,
    ToolResponse,
)

__all__ = [
    "Token",
    "TokenSequence",
    "TokenizationResult",
    "TokenizationStatistics",
    "Chunk",
    "ChunkSet",
    "ChunkStatistics",
    "EvaluationReport",
    "OverallScore",
    "ReadabilityScore",
    "SimilarityScore",
    "RetrievalContext",
    "Document",
    "TokenizeRequest",
    "ChunkRequest",
    "ChatRequest",
    "EmbedRequest",
    "EvaluateRequest",
    "ToolResponse",
]
