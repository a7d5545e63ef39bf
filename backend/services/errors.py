"""Error kinds raised by the text tools core and its collaborators."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class ToolError(Exception):
    """Base class for all errors surfaced to the HTTP layer."""

    code = "TOOL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgument(ToolError):
    """Bad chunk size, empty response list or malformed request shape."""

    code = "INVALID_ARGUMENT"


class DecodeError(ToolError):
    """A token id is outside the loaded vocabulary."""

    code = "DECODE_ERROR"


class EncodeError(ToolError):
    """The rank table could not be loaded, so nothing can be encoded."""

    code = "ENCODE_ERROR"


@dataclass
class CollaboratorFailure:
    """Structured description of a failed collaborator call."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class CollaboratorError(ToolError):
    """A document extractor, completion or embedding provider failed."""

    code = "COLLABORATOR_ERROR"

    def __init__(self, error: CollaboratorFailure):
        super().__init__(error.message, error.details)
        self.error = error
        self.code = error.code


class UploadTooLarge(ToolError):
    """An uploaded file exceeds the configured size limit."""

    code = "UPLOAD_TOO_LARGE"
