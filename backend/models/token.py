"""Token data models."""
from dataclasses import dataclass
from typing import Tuple

# Ordered token ids produced by Tokenizer.encode
TokenSequence = Tuple[int, ...]


@dataclass(frozen=True)
class Token:
    """A single vocabulary entry as seen in an encoded text."""
    id: int
    bytes: bytes
    text: str  # lossy UTF-8 decode of `bytes`


@dataclass
class TokenizationStatistics:
    """Aggregate figures reported alongside a tokenization."""
    avg_token_length: float
    unique_tokens: int
    character_count: int
    word_count: int


@dataclass
class TokenizationResult:
    """Result of tokenizing one text."""
    original_text: str
    model: str
    token_ids: TokenSequence
    tokens: Tuple[Token, ...]
    statistics: TokenizationStatistics

    @property
    def token_count(self) -> int:
        return len(self.token_ids)
