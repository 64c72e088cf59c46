"""Qdrant collection management."""

from __future__ import annotations

import requests

from ragshop.config import qdrant_host

COLLECTION_NAME = "products"
VECTOR_SIZE = 1536
DISTANCE = "Cosine"


def _collection_url() -> str:
    return f"{qdrant_host()}/collections/{COLLECTION_NAME}"


def is_collection_empty() -> bool:
    """Return True when the products collection holds no points."""
    response = requests.post(
        f"{_collection_url()}/points/count",
        params={"exact": "true"},
        json={},
    )
    try:
        body = response.json()
    except ValueError as exc:
        raise ValueError(f"failed to parse count response: {exc}") from exc

    if not isinstance(body, dict):
        raise ValueError("failed to parse count response: expected an object")
    result = body.get("result") or {}
    if not isinstance(result, dict):
        raise ValueError("failed to parse count response: 'result' is not an object")
    count = result.get("count") or 0
    if not isinstance(count, int) or isinstance(count, bool):
        raise ValueError("failed to parse count response: 'count' is not an integer")
    return count == 0


def create_collection() -> str:
    """Create the products collection and return the HTTP status line."""
    response = requests.put(
        _collection_url(),
        json={"vectors": {"size": VECTOR_SIZE, "distance": DISTANCE}},
    )
    status = f"{response.status_code} {response.reason}"
    print("Collection creation response:", status)
    return status