"""Unit tests for EmbeddingModel and embedding helpers."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock, patch, MagicMock
import httpx
from services.embedding_model import EmbeddingModel, EmbeddingError, mock_embedding, vector_statistics


def patch_client(mock_client_class, response=None, side_effect=None):
    mock_client = MagicMock()
    post = mock_client.__enter__.return_value.post
    if side_effect is not None:
        post.side_effect = side_effect
    else:
        post.return_value = response
    mock_client_class.return_value = mock_client
    return post


class TestEmbeddingModel:
    """Test suite for EmbeddingModel."""

    def test_initialization_success(self):
        model = EmbeddingModel(api_key="test_key", model_name="text-embedding-3-large")
        assert model.api_key == "test_key"
        assert model.model_name == "text-embedding-3-large"

    def test_initialization_without_api_key(self):
        with patch('services.embedding_model.OPENAI_API_KEY', None):
            with pytest.raises(ValueError, match="OPENAI_API_KEY"):
                EmbeddingModel(api_key=None)

    def test_embed_text_empty_string(self):
        model = EmbeddingModel(api_key="test_key")
        with pytest.raises(ValueError, match="Text cannot be empty"):
            model.embed_text("   ")

    @patch('httpx.Client')
    def test_embed_text_success(self, mock_client_class):
        response = Mock(status_code=200)
        response.json.return_value = {"data": [{"embedding": [0.1, 0.2, 0.3]}]}
        post = patch_client(mock_client_class, response)

        model = EmbeddingModel(api_key="test_key", model_name="text-embedding-3-small")
        result = model.embed_text("test text", dimensions=3)

        assert result == [0.1, 0.2, 0.3]
        payload = post.call_args.kwargs["json"]
        assert payload == {"input": "test text", "model": "text-embedding-3-small", "dimensions": 3}
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test_key"

    @patch('httpx.Client')
    def test_dimensions_omitted_when_not_requested(self, mock_client_class):
        response = Mock(status_code=200)
        response.json.return_value = {"data": [{"embedding": [1.0]}]}
        post = patch_client(mock_client_class, response)

        EmbeddingModel(api_key="test_key").embed_text("hello")
        assert "dimensions" not in post.call_args.kwargs["json"]

    @patch('httpx.Client')
    def test_api_error_wrapped(self, mock_client_class):
        patch_client(mock_client_class, Mock(status_code=401, text="invalid key"))

        with pytest.raises(EmbeddingError) as exc_info:
            EmbeddingModel(api_key="bad").embed_text("hello")

        assert exc_info.value.error.code == "API_ERROR"
        assert "invalid key" in exc_info.value.message
        assert exc_info.value.details["status_code"] == 401

    @patch('httpx.Client')
    def test_timeout_wrapped(self, mock_client_class):
        patch_client(mock_client_class, side_effect=httpx.TimeoutException("slow"))

        with pytest.raises(EmbeddingError) as exc_info:
            EmbeddingModel(api_key="k", timeout=5).embed_text("hello")
        assert exc_info.value.code == "TIMEOUT_ERROR"

    @patch('httpx.Client')
    def test_network_error_wrapped(self, mock_client_class):
        patch_client(mock_client_class, side_effect=httpx.ConnectError("refused"))

        with pytest.raises(EmbeddingError) as exc_info:
            EmbeddingModel(api_key="k").embed_text("hello")
        assert exc_info.value.code == "NETWORK_ERROR"

    @patch('httpx.Client')
    def test_malformed_response(self, mock_client_class):
        response = Mock(status_code=200)
        response.json.return_value = {"data": []}
        patch_client(mock_client_class, response)

        with pytest.raises(EmbeddingError) as exc_info:
            EmbeddingModel(api_key="k").embed_text("hello")
        assert exc_info.value.code == "INVALID_RESPONSE"


class TestEmbeddingHelpers:
    """Tests for mock vectors and vector statistics."""

    def test_mock_embedding_shape_and_range(self):
        vector = mock_embedding(64, seed=7)
        assert len(vector) == 64
        assert all(-1.0 <= v < 1.0 for v in vector)

    def test_mock_embedding_seeded(self):
        assert mock_embedding(8, seed=1) == mock_embedding(8, seed=1)

    def test_mock_embedding_rejects_non_positive(self):
        with pytest.raises(ValueError):
            mock_embedding(0)

    def test_vector_statistics(self):
        stats = vector_statistics("two words", [3.0, -4.0])
        assert stats.text_length == 9
        assert stats.word_count == 2
        assert stats.vector_magnitude == pytest.approx(5.0)
        assert stats.min_value == -4.0
        assert stats.max_value == 3.0

    def test_vector_statistics_empty(self):
        stats = vector_statistics("", [])
        assert stats.vector_magnitude == 0.0
        assert stats.min_value == 0.0
