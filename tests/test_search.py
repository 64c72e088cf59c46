import json

import pytest
import responses

from ragshop.embedder import OPENAI_EMBEDDINGS_URL, EmbeddingError
from ragshop.search import SearchResult, search_products

HOST = "http://qdrant.test:6333"
SEARCH_URL = f"{HOST}/collections/products/points/search"
VECTOR = [0.5, 0.25]


@pytest.fixture
def rsps(monkeypatch):
    monkeypatch.setenv("QDRANT_HOST", HOST)
    monkeypatch.setenv("OPENAI_API_KEY", "placeholder")
    with responses.RequestsMock() as mock:
        mock.add(responses.POST, OPENAI_EMBEDDINGS_URL, json={"data": [{"embedding": VECTOR}]})
        yield mock


def _search_body(rsps):
    return json.loads(rsps.calls[1].request.body)


def test_search_result_to_dict():
    result = SearchResult(id="abc", payload={"name": "Widget"})
    assert result.to_dict() == {"id": "abc", "payload": {"name": "Widget"}}


def test_search_result_default_payload_is_empty():
    assert SearchResult(id=7).to_dict() == {"id": 7, "payload": {}}


def test_search_returns_results(rsps):
    rsps.add(
        responses.POST,
        SEARCH_URL,
        json={
            "result": [
                {"id": "a", "score": 0.9, "payload": {"name": "Widget"}},
                {"id": 2, "score": 0.5, "payload": {"name": "Gadget"}},
            ]
        },
    )
    results = search_products("widget", 2)
    assert results == [
        SearchResult(id="a", payload={"name": "Widget"}),
        SearchResult(id=2, payload={"name": "Gadget"}),
    ]


def test_search_request_without_price_filter(rsps):
    rsps.add(responses.POST, SEARCH_URL, json={"result": []})
    assert search_products("widget", 3, None) == []
    assert _search_body(rsps) == {
        "vector": VECTOR,
        "top": 3,
        "with_payload": True,
        "with_vector": False,
    }


def test_search_request_with_price_filter(rsps):
    rsps.add(responses.POST, SEARCH_URL, json={"result": [{"id": "z", "payload": {}}]})
    assert search_products("widget", 5, 19.5) == [SearchResult(id="z", payload={})]
    body = _search_body(rsps)
    assert body["filter"] == {"must": [{"key": "price", "range": {"lt": 19.5}}]}
    assert body["top"] == 5


def test_search_missing_result_is_empty(rsps):
    rsps.add(responses.POST, SEARCH_URL, json={"status": "ok"})
    assert search_products("widget", 5) == []


def test_search_invalid_body_raises(rsps):
    rsps.add(responses.POST, SEARCH_URL, body="not json")
    with pytest.raises(ValueError):
        search_products("widget", 5)


def test_search_without_api_key_raises(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(EmbeddingError, match="missing OPENAI_API_KEY"):
        search_products("widget", 5)