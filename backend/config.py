"""Configuration management for the AI Text Tools backend."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys (request bodies may override these)
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
MAX_TEXT_LENGTH = int(os.getenv("MAX_TEXT_LENGTH", "200000"))  # characters per tokenize/chunk request

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Tokenizer Configuration
TOKENIZER_ENCODING = os.getenv("TOKENIZER_ENCODING", "o200k_base")
TOKENIZER_VOCAB_PATH = os.getenv("TOKENIZER_VOCAB_PATH")  # local .tiktoken file, optional
TOKENIZER_MODEL_LABEL = os.getenv("TOKENIZER_MODEL_LABEL", "gpt-4o")

# Model Configuration
CHAT_MODEL = os.getenv("CHAT_MODEL", "llama-3.1-8b-instant")
CHAT_MAX_TOKENS = 1000
CHAT_TEMPERATURE = 0.7
RAG_MAX_TOKENS = 800
RAG_TEMPERATURE = 0.3

# Embedding Configuration
EMBEDDING_API_URL = os.getenv("EMBEDDING_API_URL", "https://api.openai.com/v1/embeddings")
EMBEDDING_TIMEOUT = float(os.getenv("EMBEDDING_TIMEOUT", "60"))
DEFAULT_EMBEDDING_DIMENSIONS = 1536

# RAG Configuration
RAG_CHUNK_SIZE = 1000  # characters
RAG_CHUNK_OVERLAP = 0  # characters
RAG_TOP_K = 3

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
