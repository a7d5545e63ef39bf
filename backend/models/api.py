"""Request and response models for the tools API."""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from config import MAX_TEXT_LENGTH


class TokenizeRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)


class ChunkRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    chunk_size: int
    overlap: int = 0


class ChatRequest(BaseModel):
    groq_api_key: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    model: Optional[str] = None


class EmbedRequest(BaseModel):
    text: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    dimensions: Optional[int] = Field(default=None, gt=0)
    apikey: Optional[str] = None


class EvaluateRequest(BaseModel):
    model_responses: str = Field(..., min_length=1)
    ground_truth: Optional[str] = None
    metrics: str = "basic"


class ToolResponse(BaseModel):
    """Envelope shared by every successful tool call."""
    success: bool = True
    result: Dict[str, Any]
