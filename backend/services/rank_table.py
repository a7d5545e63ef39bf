"""
Byte-pair merge rank table shared by every tokenizer in the process.

The table maps a byte string to its merge rank; the rank doubles as the token id.
It is loaded once (from a named tiktoken encoding or a local ``.tiktoken`` file),
never mutated afterwards, and handed to tokenizers by reference.
"""
import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional

import regex
from tiktoken.load import load_tiktoken_bpe

from config import TOKENIZER_ENCODING, TOKENIZER_VOCAB_PATH
from services.errors import EncodeError

logger = logging.getLogger(__name__)

# Pre-tokenization pattern of the o200k_base vocabulary
O200K_PATTERN = "|".join(
    [
        r"""[^\r\n\p{L}\p{N}]?[\p{Lu}\p{Lt}\p{Lm}\p{Lo}\p{M}]*[\p{Ll}\p{Lm}\p{Lo}\p{M}]+(?i:'s|'t|'re|'ve|'m|'ll|'d)?""",
        r"""[^\r\n\p{L}\p{N}]?[\p{Lu}\p{Lt}\p{Lm}\p{Lo}\p{M}]+[\p{Ll}\p{Lm}\p{Lo}\p{M}]*(?i:'s|'t|'re|'ve|'m|'ll|'d)?""",
        r"""\p{N}{1,3}""",
        r""" ?[^\s\p{L}\p{N}]+[\r\n/]*""",
        r"""\s*[\r\n]+""",
        r"""\s+(?!\S)""",
        r"""\s+""",
    ]
)


class RankTable:
    """Immutable byte-sequence -> rank mapping plus its segmentation pattern."""

    def __init__(self, mergeable_ranks: Mapping[bytes, int], pat_str: str = O200K_PATTERN, name: str = "custom"):
        """
        Build a rank table.

        Args:
            mergeable_ranks: Mapping from token bytes to non-negative rank
            pat_str: Pre-tokenization regex; merges never cross its match boundaries
            name: Label used in logs

        Raises:
            EncodeError: If the table is incomplete or inconsistent
        """
        self.name = name
        self._validate(mergeable_ranks)

        self._ranks: Mapping[bytes, int] = MappingProxyType(dict(mergeable_ranks))
        self._decoder: Mapping[int, bytes] = MappingProxyType(
            {rank: token for token, rank in mergeable_ranks.items()}
        )
        try:
            self.pattern = regex.compile(pat_str)
        except regex.error as e:
            raise EncodeError(f"Invalid pre-tokenization pattern for {name}: {e}")

        logger.info(f"Loaded rank table '{name}' with {len(self._ranks)} entries")

    @staticmethod
    def _validate(mergeable_ranks: Mapping[bytes, int]) -> None:
        if not mergeable_ranks:
            raise EncodeError("Rank table is empty")

        # Every single byte must be a token or arbitrary input could not be encoded
        missing = [b for b in range(256) if bytes([b]) not in mergeable_ranks]
        if missing:
            raise EncodeError(
                f"Rank table is missing {len(missing)} single-byte tokens",
                details={"first_missing_byte": missing[0]},
            )

        ranks = list(mergeable_ranks.values())
        if any(not isinstance(rank, int) or rank < 0 for rank in ranks):
            raise EncodeError("Rank table contains negative or non-integer ranks")
        if len(set(ranks)) != len(ranks):
            raise EncodeError("Rank table assigns the same rank to several tokens")

    @classmethod
    def from_file(cls, path: str, pat_str: str = O200K_PATTERN) -> "RankTable":
        """Load a tiktoken-format file (``base64(token) rank`` per line)."""
        try:
            ranks = load_tiktoken_bpe(path)
        except (OSError, ValueError) as e:
            raise EncodeError(f"Could not read vocabulary file {path}: {e}")
        return cls(ranks, pat_str=pat_str, name=path)

    @classmethod
    def from_encoding(cls, encoding_name: str) -> "RankTable":
        """Load one of the published tiktoken encodings (e.g. ``o200k_base``)."""
        from tiktoken_ext.openai_public import ENCODING_CONSTRUCTORS

        if encoding_name not in ENCODING_CONSTRUCTORS:
            raise EncodeError(f"Unknown encoding: {encoding_name}")
        try:
            definition = ENCODING_CONSTRUCTORS[encoding_name]()
        except Exception as e:
            raise EncodeError(f"Could not load encoding {encoding_name}: {e}")
        return cls(definition["mergeable_ranks"], pat_str=definition["pat_str"], name=encoding_name)

    def rank(self, token: bytes) -> Optional[int]:
        """Rank of ``token``, or None when it is not in the vocabulary."""
        return self._ranks.get(token)

    def token_bytes(self, token_id: int) -> Optional[bytes]:
        """Byte string for ``token_id``, or None when it is unknown."""
        return self._decoder.get(token_id)

    @property
    def ranks(self) -> Mapping[bytes, int]:
        return self._ranks

    def __len__(self) -> int:
        return len(self._ranks)

    def __contains__(self, token: bytes) -> bool:
        return token in self._ranks


_rank_table: Optional[RankTable] = None


def get_rank_table() -> RankTable:
    """
    Return the process-wide rank table, loading it on first use.

    TOKENIZER_VOCAB_PATH takes precedence over TOKENIZER_ENCODING.

    Raises:
        EncodeError: If the vocabulary cannot be loaded
    """
    global _rank_table
    if _rank_table is None:
        if TOKENIZER_VOCAB_PATH:
            logger.info(f"Loading vocabulary from file: {TOKENIZER_VOCAB_PATH}")
            _rank_table = RankTable.from_file(TOKENIZER_VOCAB_PATH)
        else:
            logger.info(f"Loading vocabulary for encoding: {TOKENIZER_ENCODING}")
            _rank_table = RankTable.from_encoding(TOKENIZER_ENCODING)
    return _rank_table


def set_rank_table(table: Optional[RankTable]) -> None:
    """Install (or with None, forget) the process-wide rank table."""
    global _rank_table
    _rank_table = table


__all__ = ["RankTable", "O200K_PATTERN", "get_rank_table", "set_rank_table"]
