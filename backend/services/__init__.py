"""Services for the AI Text Tools backend."""
from .errors import ToolError, InvalidArgument, UploadTooLarge, DecodeError, EncodeError, CollaboratorError, CollaboratorFailure
from .rank_table import RankTable, get_rank_table, set_rank_table
from .tokenizer import Tokenizer
from .chunking_engine import ChunkingEngine
from .output_evaluator import OutputEvaluator
from .chunk_selector import ChunkSelector, FirstChunksSelector
from .context_assembler import ContextAssembler
from .document_loader import DocumentLoader, DocumentExtractionError
from .llm_client import LLMClient, LLMResponse, LLMClientError
from .embedding_model import EmbeddingModel, EmbeddingError

__all__ = [
    'ToolError', 'InvalidArgument', 'UploadTooLarge', 'DecodeError', 'EncodeError', 'CollaboratorError', 'CollaboratorFailure',
    'RankTable', 'get_rank_table', 'set_rank_table', 'Tokenizer', 'ChunkingEngine', 'OutputEvaluator',
    'ChunkSelector', 'FirstChunksSelector', 'ContextAssembler', 'DocumentLoader', 'DocumentExtractionError',
    'LLMClient', 'LLMResponse', 'LLMClientError', 'EmbeddingModel', 'EmbeddingError',
]
