# ragshop

A library for semantic product search. Product descriptions are turned into
embeddings with the OpenAI embeddings API, stored in a Qdrant collection named
`products`, and queried either as a plain vector search or through a
retrieval-augmented step in which a chat model picks the best matching
products from the retrieved candidates.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from the process environment.

| Variable         | Meaning                              | Default                  |
|------------------|--------------------------------------|--------------------------|
| `OPENAI_API_KEY` | key for the OpenAI API (required)    | none                     |
| `QDRANT_HOST`    | base URL of the Qdrant server        | `http://localhost:6333`  |

`ragshop.config.load_env(file)` loads variables from a dotenv file. Variables
that are already set are not overridden, and a missing file raises
`FileNotFoundError`. `ragshop.config.qdrant_host()` returns `QDRANT_HOST` or the
default above.

An example env file:

```
OPENAI_API_KEY=placeholder
QDRANT_HOST=http://localhost:6333
```

## Product data

`ragshop.csvreader.load_products_csv(filename)` reads a pipe-separated file.
Its first line is a header, rows with fewer than seven fields are skipped, and
numbers that cannot be parsed become zero:

```
id|name|description|price|price_currency|supply_ability|minimum_order
3f2b6c1e-0000-4000-8000-000000000001|Steel bolts|M8 zinc-plated bolts|0.15|USD|100000|500
```

Each row becomes a `ragshop.models.Product`. `Product.to_embedding_input()`
builds the sentence that is embedded, from the name, description, price (two
decimals), currency, minimum order and supply ability.

## Modules

- `ragshop.embedder.get_embedding(text)` returns the embedding vector for a
  text using the `text-embedding-ada-002` model. It raises `EmbeddingError`
  when `OPENAI_API_KEY` is missing or the response holds no embedding.
- `ragshop.collection.create_collection()` creates the `products` collection
  (1536-dimensional vectors, cosine distance) and returns the HTTP status line.
  `is_collection_empty()` returns `True` when the collection holds no points.
- `ragshop.ingester.insert_product(id, embedding, product)` upserts one point
  and returns the HTTP status line. `insert_all_products(products)` embeds and
  inserts products in parallel, with twice as many worker threads as CPUs; it
  logs failures, carries on with the remaining products, and returns the ids
  that were inserted.
- `ragshop.search.search_products(query, top_k, max_price=None)` returns up to
  `top_k` `SearchResult` objects nearest to the query. With `max_price`, only
  products whose price is strictly below it are returned.
  `SearchResult.to_dict()` gives `{"id": ..., "payload": {...}}`.
- `ragshop.rag.run_rag(question, top_k)` retrieves `top_k` candidates, asks the
  `gpt-4o-2024-08-06` chat model to choose the products that answer the
  question, and returns a `RAGResponse`. Only products that were actually
  retrieved are kept, each at most once, in the order the model chose them.
  Failures raise `RAGError`. The helpers `build_context`, `build_prompt`,
  `strip_code_fence` and `match_payloads` are available on their own.

`RAGResponse.to_dict()` returns:

```json
{
  "question": "cheap bolts for furniture",
  "total": 1,
  "answer": [
    {
      "id": "3f2b6c1e-0000-4000-8000-000000000001",
      "payload": {
        "name": "Steel bolts",
        "description": "M8 zinc-plated bolts",
        "minimum_order": 500,
        "price": 0.15,
        "price_currency": "USD",
        "supply_ability": 100000
      }
    }
  ]
}
```

When nothing matched, `answer` is `null` and `total` is 0.

## Example

```python
from ragshop.config import load_env
from ragshop.collection import create_collection, is_collection_empty
from ragshop.csvreader import load_products_csv
from ragshop.ingester import insert_all_products
from ragshop.search import search_products
from ragshop.rag import run_rag

load_env("env/.env")
create_collection()
if is_collection_empty():
    insert_all_products(load_products_csv("data/products.csv"))

for hit in search_products("stainless steel screws", 3, 10.0):
    print(hit.to_dict())

print(run_rag("screws for outdoor decking", 5).to_dict())
```

## What this package does not do

The package is a library only. It has no command to run and no HTTP server;
to expose search or answers over HTTP, call `search_products` and `run_rag`
from a web application of your own.