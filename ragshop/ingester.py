"""Loading products into the Qdrant collection."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests

from ragshop.collection import COLLECTION_NAME
from ragshop.config import qdrant_host
from ragshop.embedder import EmbeddingError, get_embedding
from ragshop.models import Product

logger = logging.getLogger(__name__)


def _payload(product: Product) -> dict[str, Any]:
    return {
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "price_currency": product.price_currency,
        "supply_ability": product.supply_ability,
        "minimum_order": product.minimum_order,
    }


def insert_product(id: str, embedding: Sequence[float], product: Product) -> str:
    """Upsert one product point and return the HTTP status line."""
    body = {
        "points": [
            {"id": id, "vector": list(embedding), "payload": _payload(product)},
        ]
    }
    response = requests.put(
        f"{qdrant_host()}/collections/{COLLECTION_NAME}/points",
        json=body,
    )
    status = f"{response.status_code} {response.reason}"
    print(f"Inserted {id}: {status}")
    return status


def _worker_count() -> int:
    return (os.cpu_count() or 1) * 2


def _process(product: Product) -> bool:
    worker = threading.current_thread().name
    try:
        embedding = get_embedding(product.to_embedding_input())
    except EmbeddingError as exc:
        logger.warning("[%s] Failed to embed product %s: %s", worker, product.id, exc)
        return False
    try:
        insert_product(product.id, embedding, product)
    except requests.RequestException as exc:
        logger.warning("[%s] Failed to insert %s: %s", worker, product.id, exc)
        return False
    logger.info("[%s] Inserted product: %s", worker, product.id)
    return True


def insert_all_products(products: Iterable[Product]) -> list[str]:
    """Embed and insert products in parallel; return the ids that were inserted.

    Failures are logged and do not stop the remaining products.
    """
    items = list(products)
    print(f"Inserting {len(items)} products with parallel processing...")
    with ThreadPoolExecutor(
        max_workers=_worker_count(), thread_name_prefix="worker"
    ) as pool:
        outcomes = list(pool.map(_process, items))
    print("All products processed.")
    return [product.id for product, ok in zip(items, outcomes) if ok]