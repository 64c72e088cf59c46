"""Vector search over the products collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from ragshop.collection import COLLECTION_NAME
from ragshop.config import qdrant_host
from ragshop.embedder import get_embedding


@dataclass
class SearchResult:
    """A point returned by a search, with its payload."""

    id: Any
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form of the result."""
        return {"id": self.id, "payload": self.payload}


def _parse_results(body: Any) -> list[SearchResult]:
    if not isinstance(body, dict):
        raise ValueError("invalid search response: expected an object")
    items = body.get("result") or []
    if not isinstance(items, list):
        raise ValueError("invalid search response: 'result' is not a list")
    results = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError("invalid search response: result entry is not an object")
        payload = item.get("payload") or {}
        if not isinstance(payload, dict):
            raise ValueError("invalid search response: payload is not an object")
        results.append(SearchResult(id=item.get("id"), payload=payload))
    return results


def search_products(
    query: str, top_k: int, max_price: float | None = None
) -> list[SearchResult]:
    """Return the ``top_k`` products nearest to ``query``, optionally below ``max_price``."""
    embedding = get_embedding(query)

    request: dict[str, Any] = {
        "vector": embedding,
        "top": top_k,
        "with_payload": True,
        "with_vector": False,
    }
    if max_price is not None:
        request["filter"] = {"must": [{"key": "price", "range": {"lt": max_price}}]}

    response = requests.post(
        f"{qdrant_host()}/collections/{COLLECTION_NAME}/points/search",
        json=request,
    )
    try:
        body = response.json()
    except ValueError as exc:
        raise ValueError(f"invalid search response: {exc}") from exc
    return _parse_results(body)