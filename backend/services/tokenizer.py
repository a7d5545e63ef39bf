"""Byte-level BPE tokenizer built on the shared rank table."""
import heapq
import logging
from typing import Iterable, List, Optional, Tuple

from config import TOKENIZER_MODEL_LABEL
from models.token import Token, TokenSequence, TokenizationResult, TokenizationStatistics
from services.errors import DecodeError
from services.rank_table import RankTable, get_rank_table

logger = logging.getLogger(__name__)


def byte_pair_encode(piece: bytes, rank_table: RankTable) -> List[int]:
    """
    Encode one pre-tokenized piece by greedy rank-ordered merging.

    Starts from single bytes and repeatedly merges the adjacent pair whose
    concatenation has the lowest rank (leftmost wins ties) until no adjacent
    pair is in the table.

    Candidate pairs live in a heap keyed by (rank, start offset). A merge only
    changes the pairs on either side of it, so only those two are pushed again;
    entries made stale by earlier merges are skipped when popped.

    Args:
        piece: UTF-8 bytes of a single pre-tokenization match
        rank_table: Vocabulary to merge against

    Returns:
        Token ids for the piece
    """
    size = len(piece)

    # Parts form a linked list keyed by start offset; a part ends where the next begins
    next_start = list(range(1, size + 1))
    prev_start = list(range(-1, size - 1))
    alive = [True] * size
    heap: List[Tuple[int, int, int, int]] = []

    def push_pair(left: int) -> None:
        right = next_start[left]
        if right >= size:
            return
        end = next_start[right]
        rank = rank_table.rank(piece[left:end])
        if rank is not None:
            heapq.heappush(heap, (rank, left, right, end))

    for start in range(size - 1):
        push_pair(start)

    while heap:
        _, left, right, end = heapq.heappop(heap)
        if not alive[left] or next_start[left] != right or next_start[right] != end:
            continue

        alive[right] = False
        next_start[left] = end
        if end < size:
            prev_start[end] = left

        push_pair(left)
        if prev_start[left] >= 0:
            push_pair(prev_start[left])

    ids = []
    start = 0
    while start < size:
        ids.append(rank_table.rank(piece[start:next_start[start]]))
        start = next_start[start]
    return ids


class Tokenizer:
    """Encodes text to token ids and back using a shared RankTable."""

    def __init__(self, rank_table: Optional[RankTable] = None, model_label: str = TOKENIZER_MODEL_LABEL):
        """
        Initialize Tokenizer.

        Args:
            rank_table: Vocabulary to use (defaults to the process-wide table)
            model_label: Model name reported in tokenization results

        Raises:
            EncodeError: If the process-wide vocabulary cannot be loaded
        """
        self.rank_table = rank_table if rank_table is not None else get_rank_table()
        self.model_label = model_label

    def encode(self, text: str) -> TokenSequence:
        """Encode text into an immutable sequence of token ids."""
        ids: List[int] = []
        for match in self.rank_table.pattern.finditer(text):
            piece = self._to_bytes(match.group())

            # Whole piece already in the vocabulary
            rank = self.rank_table.rank(piece)
            if rank is not None:
                ids.append(rank)
                continue

            ids.extend(byte_pair_encode(piece, self.rank_table))

        logger.debug(f"Encoded {len(text)} characters into {len(ids)} tokens")
        return tuple(ids)

    @staticmethod
    def _to_bytes(piece: str) -> bytes:
        try:
            return piece.encode("utf-8")
        except UnicodeEncodeError:
            # Lone surrogates cannot be UTF-8 encoded; replace them instead of failing
            return piece.encode("utf-16", "surrogatepass").decode("utf-16", "replace").encode("utf-8")

    def decode_bytes(self, ids: Iterable[int]) -> bytes:
        """
        Concatenate the byte strings of ``ids``.

        Raises:
            DecodeError: If any id is not in the vocabulary
        """
        parts = []
        for position, token_id in enumerate(ids):
            token = self.rank_table.token_bytes(token_id)
            if token is None:
                raise DecodeError(
                    f"Token id {token_id!r} is not in the vocabulary",
                    details={"token_id": token_id, "position": position},
                )
            parts.append(token)
        return b"".join(parts)

    def decode(self, ids: Iterable[int]) -> str:
        """Decode token ids to text; invalid UTF-8 in the joined bytes is replaced."""
        return self.decode_bytes(ids).decode("utf-8", errors="replace")

    def token(self, token_id: int) -> Token:
        """Describe a single token id."""
        data = self.decode_bytes([token_id])
        return Token(id=token_id, bytes=data, text=data.decode("utf-8", errors="replace"))

    def tokenize(self, text: str) -> TokenizationResult:
        """
        Encode text and describe every token it produced.

        Args:
            text: Text to tokenize (may be empty)

        Returns:
            TokenizationResult with per-token detail and summary statistics
        """
        token_ids = self.encode(text)
        tokens: Tuple[Token, ...] = tuple(self.token(token_id) for token_id in token_ids)

        avg_token_length = 0.0
        if tokens:
            avg_token_length = sum(len(t.text) for t in tokens) / len(tokens)

        statistics = TokenizationStatistics(
            avg_token_length=avg_token_length,
            unique_tokens=len({t.text for t in tokens}),
            character_count=len(text),
            word_count=len(text.split()),
        )

        logger.info(f"Tokenized text: characters={len(text)}, tokens={len(token_ids)}")
        return TokenizationResult(
            original_text=text,
            model=self.model_label,
            token_ids=token_ids,
            tokens=tokens,
            statistics=statistics,
        )
