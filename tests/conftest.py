"""Shared fixtures: a miniature byte-level vocabulary."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from services.rank_table import RankTable
from services.tokenizer import Tokenizer

GPT2_PATTERN = r"""'s|'t|'re|'ve|'m|'ll|'d| ?\p{L}+| ?\p{N}+| ?[^\s\p{L}\p{N}]+|\s+(?!\S)|\s+"""

MERGES = [b"th", b"he", b"the", b"er", b" the", b"re"]


def build_ranks():
    """All 256 single bytes followed by a handful of merges (ids 256..261)."""
    ranks = {bytes([i]): i for i in range(256)}
    for offset, token in enumerate(MERGES):
        ranks[token] = 256 + offset
    return ranks


@pytest.fixture
def mini_ranks():
    return build_ranks()


@pytest.fixture
def rank_table(mini_ranks):
    return RankTable(mini_ranks, pat_str=GPT2_PATTERN, name="mini")


@pytest.fixture
def tokenizer(rank_table):
    return Tokenizer(rank_table, model_label="mini-model")
