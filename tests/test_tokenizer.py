"""Unit tests for the byte-level BPE Tokenizer."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import time

import pytest
import tiktoken
from services.errors import DecodeError
from services.rank_table import O200K_PATTERN, RankTable
from services.tokenizer import Tokenizer, byte_pair_encode


class TestBytePairEncode:
    """Greedy rank-ordered merging of a single piece."""

    def test_merges_lowest_rank_first(self, rank_table):
        # th(256) merges before er(259)/re(261); then the(258) consumes the first e
        assert byte_pair_encode(b"there", rank_table) == [258, 261]

    def test_merge_chain_builds_longer_token(self, rank_table):
        assert byte_pair_encode(b"the", rank_table) == [258]

    def test_unmergeable_bytes_stay_single(self, rank_table):
        assert byte_pair_encode(b"xyz", rank_table) == [ord("x"), ord("y"), ord("z")]

    def test_partial_merge(self, rank_table):
        assert byte_pair_encode(b"hello", rank_table) == [257, ord("l"), ord("l"), ord("o")]

    def test_leading_space_merge(self, rank_table):
        # " t" is unknown, so th merges first and " the" only forms afterwards
        assert byte_pair_encode(b" there", rank_table) == [260, 261]

    def test_single_byte(self, rank_table):
        assert byte_pair_encode(b"a", rank_table) == [ord("a")]


class TestEncode:
    """Tests for Tokenizer.encode."""

    def test_empty_string(self, tokenizer):
        assert tokenizer.encode("") == ()

    def test_returns_tuple(self, tokenizer):
        assert isinstance(tokenizer.encode("the"), tuple)

    def test_whole_piece_in_vocabulary(self, tokenizer):
        assert tokenizer.encode("the") == (258,)

    def test_merges_do_not_cross_segments(self, tokenizer):
        assert tokenizer.encode("the there") == (258, 260, 261)

    def test_punctuation_and_digits(self, tokenizer):
        ids = tokenizer.encode("a1!")
        assert ids == (ord("a"), ord("1"), ord("!"))

    def test_multibyte_characters(self, tokenizer):
        assert tokenizer.encode("é") == (0xC3, 0xA9)

    def test_lone_surrogate_does_not_fail(self, tokenizer):
        ids = tokenizer.encode("a\ud800b")
        assert tokenizer.decode(ids) == "a�b"

    def test_deterministic(self, tokenizer):
        text = "the there, the theme"
        assert tokenizer.encode(text) == tokenizer.encode(text)

    def test_uses_shared_rank_table_by_reference(self, rank_table):
        first = Tokenizer(rank_table)
        second = Tokenizer(rank_table)
        assert first.rank_table is second.rank_table


class TestDecode:
    """Tests for Tokenizer.decode."""

    @pytest.mark.parametrize("text", [
        "the there",
        "Hello, world!",
        "naïve café 🙂",
        "line one\nline two\n\n  indented",
        "",
    ])
    def test_round_trip(self, tokenizer, text):
        assert tokenizer.decode(tokenizer.encode(text)) == text

    def test_unknown_id_raises(self, tokenizer):
        with pytest.raises(DecodeError) as exc_info:
            tokenizer.decode([258, 5000])
        assert exc_info.value.details == {"token_id": 5000, "position": 1}

    def test_negative_id_raises(self, tokenizer):
        with pytest.raises(DecodeError):
            tokenizer.decode([-1])

    def test_partial_codepoint_is_replaced(self, tokenizer):
        assert tokenizer.decode([0xC3]) == "�"

    def test_bytes_joined_before_utf8_decoding(self, tokenizer):
        # Each id alone is half a codepoint; together they form "é"
        assert tokenizer.decode([0xC3, 0xA9]) == "é"

    def test_decode_bytes(self, tokenizer):
        assert tokenizer.decode_bytes([260, 261]) == b" there"


class TestTokenize:
    """Tests for Tokenizer.tokenize."""

    def test_tokens_and_statistics(self, tokenizer):
        result = tokenizer.tokenize("the there")

        assert result.model == "mini-model"
        assert result.original_text == "the there"
        assert result.token_count == 3
        assert [t.text for t in result.tokens] == ["the", " the", "re"]
        assert [t.id for t in result.tokens] == [258, 260, 261]
        assert result.statistics.character_count == 9
        assert result.statistics.word_count == 2
        assert result.statistics.unique_tokens == 3
        assert result.statistics.avg_token_length == pytest.approx((3 + 4 + 2) / 3)

    def test_repeated_tokens_counted_once(self, tokenizer):
        result = tokenizer.tokenize("the the")
        assert result.statistics.unique_tokens == 2  # "the" and " the"

    def test_empty_text_reports_zero_average(self, tokenizer):
        result = tokenizer.tokenize("")
        assert result.token_count == 0
        assert result.statistics.avg_token_length == 0.0
        assert result.statistics.word_count == 0

    def test_token_text_is_lossy_per_token(self, tokenizer):
        token = tokenizer.token(0xC3)
        assert token.bytes == b"\xc3"
        assert token.text == "�"


def _space_run_ranks():
    ranks = {bytes([i]): i for i in range(256)}
    ranks[b"  "] = 256
    return ranks


class TestLongPieces:
    """Merging stays fast on a single very long pre-tokenized piece."""

    def test_long_run_merges_pairwise_from_the_left(self):
        table = RankTable(_space_run_ranks())
        assert byte_pair_encode(b" " * 5001, table) == [256] * 2500 + [ord(" ")]

    def test_long_whitespace_run_matches_reference(self):
        ranks = _space_run_ranks()
        reference = tiktoken.Encoding("spaces", pat_str=O200K_PATTERN, mergeable_ranks=ranks, special_tokens={})
        tokenizer = Tokenizer(RankTable(ranks))
        text = "x" + " " * 20000 + "x"

        started = time.perf_counter()
        ids = tokenizer.encode(text)
        elapsed = time.perf_counter() - started

        assert list(ids) == reference.encode(text)
        assert elapsed < 2.0


CONFORMANCE_CORPUS = (
    "The quick brown fox jumps over the lazy dog. They're sure it'll work; we've SEEN it didn't. "
    "Numbers like 1234567 and 3.14159 repeat: 1234567, 2024-01-01.\r\n"
    "Naïve café résumé, Ελληνικά γράμματα, русский текст, 日本語のテキスト, 한국어 문장.\n"
    "    indented    code\tand\ttabs\n\n\n"
) * 4

CONFORMANCE_INPUTS = [
    "Hello, world! The quick brown fox.",
    "They'll've WE'RE don't I'M you'd",
    "1234567890 12 345 6789",
    "line one\r\nline two\r\n\r\nline three",
    "   leading and trailing   ",
    "tabs\t\tand    spaces     \n  \n",
    "naïve café Ελληνικά русский 日本語 한국어",
    "emoji 🎉🎉 mixed 😀 text",
    "CamelCaseWords and snake_case_words",
    "The quick brown fox jumps over the lazy dog. " * 3,
]


@pytest.fixture(scope="module")
def trained_ranks():
    from tiktoken._educational import bpe_train

    return bpe_train(CONFORMANCE_CORPUS, 256 + 80, O200K_PATTERN, visualise=None)


class TestReferenceConformance:
    """Token ids agree with tiktoken's encoder built from the same ranks."""

    @pytest.mark.parametrize("text", CONFORMANCE_INPUTS)
    def test_trained_vocabulary(self, trained_ranks, text):
        reference = tiktoken.Encoding("trained", pat_str=O200K_PATTERN, mergeable_ranks=trained_ranks, special_tokens={})
        tokenizer = Tokenizer(RankTable(trained_ranks))

        assert list(tokenizer.encode(text)) == reference.encode(text)

    @pytest.mark.parametrize("text", CONFORMANCE_INPUTS)
    def test_miniature_vocabulary(self, mini_ranks, text):
        reference = tiktoken.Encoding("mini", pat_str=O200K_PATTERN, mergeable_ranks=mini_ranks, special_tokens={})
        tokenizer = Tokenizer(RankTable(mini_ranks))

        assert list(tokenizer.encode(text)) == reference.encode(text)
