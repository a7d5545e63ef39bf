"""Document data models."""
from dataclasses import dataclass


@dataclass
class Document:
    """Plain text extracted from an uploaded file."""
    filename: str
    mime_type: str
    size: int
    text: str
