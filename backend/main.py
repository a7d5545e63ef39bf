"""Main entry point for the AI Text Tools API."""
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import (
    PORT, LOG_FORMAT, LOG_LEVEL, CORS_ORIGINS, MAX_UPLOAD_BYTES,
    CHAT_MODEL, CHAT_MAX_TOKENS, CHAT_TEMPERATURE, RAG_MAX_TOKENS, RAG_TEMPERATURE,
    DEFAULT_EMBEDDING_DIMENSIONS,
)
from logger import setup_logging
from models.api import ChatRequest, ChunkRequest, EmbedRequest, EvaluateRequest, TokenizeRequest, ToolResponse
from models.chunk import ChunkSet
from services.errors import CollaboratorError, DecodeError, EncodeError, InvalidArgument, ToolError, UploadTooLarge
from services.rank_table import get_rank_table
from services.tokenizer import Tokenizer
from services.chunking_engine import ChunkingEngine
from services.output_evaluator import OutputEvaluator
from services.context_assembler import ContextAssembler, SYSTEM_PROMPT
from services.document_loader import DocumentLoader
from services.llm_client import complete, CHAT_SYSTEM_PROMPT
from services.embedding_model import EmbeddingModel, mock_embedding, vector_statistics

# Initialize logging
logger = logging.getLogger(__name__)

NO_DOCUMENT_TEXT = "No document provided. This is a sample RAG response using the query alone."
PREVIEW_LENGTH = 200

# Initialize FastAPI app
app = FastAPI(
    title="AI Text Tools",
    description="Tokenization, chunking, evaluation and RAG tools for language-model work",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
tokenizer: Tokenizer = None
chunking_engine: ChunkingEngine = None
output_evaluator: OutputEvaluator = None
context_assembler: ContextAssembler = None
document_loader: DocumentLoader = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup; a vocabulary failure aborts startup."""
    global tokenizer, chunking_engine, output_evaluator, context_assembler, document_loader

    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    logger.info("Initializing AI Text Tools services...")

    try:
        tokenizer = Tokenizer(get_rank_table())
        logger.info("Initialized Tokenizer")

        chunking_engine = ChunkingEngine(tokenizer)
        output_evaluator = OutputEvaluator()
        context_assembler = ContextAssembler(chunking_engine)
        document_loader = DocumentLoader()

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


def _error_body(error: ToolError) -> Dict[str, Any]:
    return {"error": error.message, "code": error.code, "details": error.details}


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    return JSONResponse(status_code=400, content=_error_body(exc))


@app.exception_handler(DecodeError)
async def decode_error_handler(request: Request, exc: DecodeError):
    return JSONResponse(status_code=400, content=_error_body(exc))


@app.exception_handler(UploadTooLarge)
async def upload_too_large_handler(request: Request, exc: UploadTooLarge):
    return JSONResponse(status_code=413, content=_error_body(exc))


@app.exception_handler(EncodeError)
async def encode_error_handler(request: Request, exc: EncodeError):
    logger.error(f"Vocabulary unavailable: {exc.message}")
    return JSONResponse(status_code=503, content=_error_body(exc))


@app.exception_handler(CollaboratorError)
async def collaborator_error_handler(request: Request, exc: CollaboratorError):
    logger.error(f"Collaborator error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=502, content=_error_body(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid or missing fields: {', '.join(fields)}", "code": InvalidArgument.code}
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "AI Text Tools API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "ai-text-tools",
        "version": "1.0.0",
        "vocabulary_loaded": tokenizer is not None
    }


@app.post("/api/tools/tokenize", response_model=ToolResponse)
def tokenize_endpoint(request: TokenizeRequest) -> ToolResponse:
    """Encode text and list every token with its id."""
    result = tokenizer.tokenize(request.text)

    return ToolResponse(result={
        "original_text": result.original_text,
        "model": result.model,
        "token_count": result.token_count,
        "tokens": [
            {"index": index, "token": token.text, "id": token.id}
            for index, token in enumerate(result.tokens, start=1)
        ],
        "statistics": asdict(result.statistics)
    })


def _token_chunk_payload(text: str, chunk_set: ChunkSet) -> Dict[str, Any]:
    stats = chunk_set.statistics
    return {
        "original_text": text,
        "chunk_size": chunk_set.chunk_size,
        "overlap": chunk_set.overlap,
        "total_chunks": len(chunk_set),
        "chunks": [
            {
                "index": chunk.index,
                "content": chunk.content,
                "length": chunk.length,
                "token_count": chunk.unit_count,
                "start_token_index": chunk.start_offset,
                "end_token_index": chunk.end_offset,
                "word_count": chunk.word_count
            }
            for chunk in chunk_set
        ],
        "statistics": {
            "total_characters": stats.total_characters,
            "total_tokens": stats.total_units,
            "avg_chunk_length": stats.avg_chunk_length,
            "avg_tokens_per_chunk": stats.avg_units_per_chunk,
            "coverage_percentage": stats.coverage_percentage
        }
    }


@app.post("/api/tools/chunk", response_model=ToolResponse)
def chunk_endpoint(request: ChunkRequest) -> ToolResponse:
    """Split text into overlapping token windows."""
    chunk_set = chunking_engine.chunk_tokens(request.text, request.chunk_size, request.overlap)
    return ToolResponse(result=_token_chunk_payload(request.text, chunk_set))


@app.post("/api/tools/chat", response_model=ToolResponse)
def chat_endpoint(request: ChatRequest) -> ToolResponse:
    """Single-turn chat through the completion provider."""
    model = request.model or CHAT_MODEL
    llm_response = complete(
        request.message,
        model,
        request.groq_api_key,
        max_tokens=CHAT_MAX_TOKENS,
        temperature=CHAT_TEMPERATURE,
        system_prompt=CHAT_SYSTEM_PROMPT
    )

    return ToolResponse(result={
        "model_used": model,
        "user_message": request.message,
        "assistant_response": llm_response.text,
        "tokens_used": llm_response.tokens_total,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "metadata": {
            "finish_reason": llm_response.finish_reason,
            "prompt_tokens": llm_response.tokens_input,
            "completion_tokens": llm_response.tokens_output
        }
    })


@app.post("/api/tools/embed", response_model=ToolResponse)
def embed_endpoint(request: EmbedRequest) -> ToolResponse:
    """Embed text with the provider, or return a demo vector without an API key."""
    if not request.text.strip() or not request.model.strip():
        raise InvalidArgument("Text and model are required")

    if request.apikey and request.apikey.strip():
        embedding_model = EmbeddingModel(api_key=request.apikey.strip(), model_name=request.model)
        embedding = embedding_model.embed_text(request.text, dimensions=request.dimensions)
        note = "This is a real embedding from OpenAI."
    else:
        embedding = mock_embedding(request.dimensions or DEFAULT_EMBEDDING_DIMENSIONS)
        note = "This is a demo embedding. Provide OpenAI API key for real embeddings."

    return ToolResponse(result={
        "text": request.text,
        "model_used": request.model,
        "dimensions": len(embedding),
        "embedding": embedding,
        "statistics": asdict(vector_statistics(request.text, embedding)),
        "note": note
    })


def _split_lines(value: str) -> List[str]:
    return [line for line in (value or "").split("\n") if line.strip()]


@app.post("/api/tools/evaluate", response_model=ToolResponse)
def evaluate_endpoint(request: EvaluateRequest) -> ToolResponse:
    """Score newline-separated responses, optionally against ground truths."""
    report = output_evaluator.evaluate(
        _split_lines(request.model_responses),
        _split_lines(request.ground_truth)
    )
    return ToolResponse(result=asdict(report))


def _upload_limit_message() -> str:
    return f"File exceeds the upload size limit of {MAX_UPLOAD_BYTES} bytes"


@app.post("/api/tools/rag", response_model=ToolResponse)
async def rag_endpoint(
    groq_api_key: str = Form(None),
    query: str = Form(None),
    file: UploadFile = File(None)
) -> ToolResponse:
    """
    Answer a question about an uploaded document.

    The context is the first chunks of the document in order; no ranking
    against the query takes place.
    """
    if not groq_api_key or not query:
        raise InvalidArgument("Groq API key and query are required")

    logger.info(f"Processing RAG query: {query[:100]}...")

    if file is not None:
        # Reported size first; the bounded read still catches uploads without one
        if file.size is not None and file.size > MAX_UPLOAD_BYTES:
            raise UploadTooLarge(_upload_limit_message(), details={"size": file.size, "limit": MAX_UPLOAD_BYTES})
        file_bytes = await file.read(MAX_UPLOAD_BYTES + 1)
        if len(file_bytes) > MAX_UPLOAD_BYTES:
            raise UploadTooLarge(_upload_limit_message(), details={"limit": MAX_UPLOAD_BYTES})
        document = await run_in_threadpool(
            document_loader.extract, file_bytes, file.content_type, file.filename or ""
        )
        document_text = document.text
    else:
        document_text = NO_DOCUMENT_TEXT

    retrieval = context_assembler.assemble(document_text, query)

    llm_response = await run_in_threadpool(
        complete,
        retrieval.assembled_prompt,
        CHAT_MODEL,
        groq_api_key,
        max_tokens=RAG_MAX_TOKENS,
        temperature=RAG_TEMPERATURE,
        system_prompt=SYSTEM_PROMPT
    )

    return ToolResponse(result={
        "query": query,
        "document_info": {
            "filename": file.filename if file is not None else "No file",
            "size": len(file_bytes) if file is not None else 0,
            "type": (file.content_type if file is not None else None) or "unknown",
            "text_length": len(document_text),
            "chunks_created": len(retrieval.document_chunks)
        },
        "relevant_chunks": [
            {
                "index": position,
                "content": chunk.content[:PREVIEW_LENGTH] + ("..." if chunk.length > PREVIEW_LENGTH else ""),
                "full_content": chunk.content
            }
            for position, chunk in enumerate(retrieval.selected_chunks, start=1)
        ],
        "answer": llm_response.text,
        "metadata": {
            "model_used": CHAT_MODEL,
            "tokens_used": llm_response.tokens_total,
            "retrieval_method": "simple_chunking",
            "context_length": len(retrieval.context),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    })


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting AI Text Tools API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
