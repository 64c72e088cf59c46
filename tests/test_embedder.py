import json

import pytest
import responses

from ragshop.embedder import (
    EMBEDDING_MODEL,
    OPENAI_EMBEDDINGS_URL,
    EmbeddingError,
    get_embedding,
)


@pytest.fixture
def rsps(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "placeholder")
    with responses.RequestsMock() as mock:
        yield mock


def test_missing_api_key_raises(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(EmbeddingError, match="missing OPENAI_API_KEY"):
        get_embedding("hello")


def test_returns_first_embedding(rsps):
    rsps.add(
        responses.POST,
        OPENAI_EMBEDDINGS_URL,
        json={"data": [{"embedding": [0.5, -0.25, 1]}, {"embedding": [9.0]}]},
    )
    assert get_embedding("hello") == [0.5, -0.25, 1.0]


def test_request_carries_model_input_and_auth(rsps):
    rsps.add(responses.POST, OPENAI_EMBEDDINGS_URL, json={"data": [{"embedding": [0.75]}]})
    assert get_embedding("some text") == [0.75]
    request = rsps.calls[0].request
    assert json.loads(request.body) == {"input": "some text", "model": EMBEDDING_MODEL}
    assert request.headers["Authorization"] == "Bearer placeholder"
    assert request.headers["Content-Type"] == "application/json"


def test_empty_data_raises(rsps):
    rsps.add(responses.POST, OPENAI_EMBEDDINGS_URL, json={"data": []})
    with pytest.raises(EmbeddingError, match="embedding response was empty"):
        get_embedding("hello")


def test_error_body_without_data_raises(rsps):
    rsps.add(responses.POST, OPENAI_EMBEDDINGS_URL, json={"error": {"message": "bad"}}, status=401)
    with pytest.raises(EmbeddingError, match="empty"):
        get_embedding("hello")


def test_invalid_json_raises(rsps):
    rsps.add(responses.POST, OPENAI_EMBEDDINGS_URL, body="not json")
    with pytest.raises(EmbeddingError):
        get_embedding("hello")


def test_connection_error_raises(rsps):
    rsps.add(responses.POST, OPENAI_EMBEDDINGS_URL, body=ConnectionError("refused"))
    with pytest.raises(EmbeddingError):
        get_embedding("hello")