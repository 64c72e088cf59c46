"""Text embeddings from the OpenAI API."""

from __future__ import annotations

import os

import requests

OPENAI_EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"
EMBEDDING_MODEL = "text-embedding-ada-002"


class EmbeddingError(RuntimeError):
    """Raised when an embedding cannot be obtained."""


def get_embedding(text: str) -> list[float]:
    """Return the embedding vector for ``text``."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise EmbeddingError("missing OPENAI_API_KEY")

    try:
        response = requests.post(
            OPENAI_EMBEDDINGS_URL,
            headers={"Authorization": f"Bearer {api_key}"},
            json={"input": text, "model": EMBEDDING_MODEL},
        )
        data = response.json().get("data") or []
        if data:
            return [float(value) for value in data[0].get("embedding") or []]
    except (requests.RequestException, ValueError, TypeError, AttributeError) as exc:
        raise EmbeddingError(f"invalid embedding response: {exc}") from exc
    raise EmbeddingError("embedding response was empty")