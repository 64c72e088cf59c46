"""Retrieval-augmented answers over the product catalogue."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import requests

from ragshop.embedder import EmbeddingError
from ragshop.search import SearchResult, search_products

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
CHAT_MODEL = "gpt-4o-2024-08-06"

_FENCE = "```"

_PROMPT_LINES = [
    "",
    "\tYou are a helpful assistant. Given the product context below, respond with "
    "a valid JSON array of the best-matching product payloads.",
    "",
    "\tEach payload must include:",
    '\t- "name": string',
    '\t- "description": string',
    '\t- "minimum_order": integer',
    '\t- "price": number',
    '\t- "price_currency": string',
    '\t- "supply_ability": integer',
    "",
    '\tDO NOT include any "id" or "score" fields.',
    "\tDO NOT wrap the response in triple backticks or Markdown formatting.",
    "",
    "\tContext:",
    "\t{context}",
    "",
    "\tQuestion: {question}",
    "",
    "\tRespond ONLY with the array of payloads.",
]
_PROMPT_TEMPLATE = "\n".join(_PROMPT_LINES)

_PAYLOAD_FIELDS = ("minimum_order", "price", "price_currency", "supply_ability")


class RAGError(RuntimeError):
    """Raised when a retrieval-augmented answer cannot be produced."""


@dataclass
class RAGResponse:
    """The answer to a question: the matched products."""

    question: str
    answer: list[SearchResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.answer)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form; an empty answer is null."""
        return {
            "question": self.question,
            "total": self.total,
            "answer": [result.to_dict() for result in self.answer] or None,
        }


def _show(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def build_context(results: Iterable[SearchResult]) -> str:
    """Render search results as one '- name: description' line each."""
    return "".join(
        f"- {_show(r.payload.get('name'))}: {_show(r.payload.get('description'))}\n"
        for r in results
    )


def build_prompt(context: str, question: str) -> str:
    """Return the chat prompt asking for matching product payloads."""
    return _PROMPT_TEMPLATE.format(context=context, question=question)


def strip_code_fence(text: str) -> str:
    """Trim whitespace and remove a surrounding Markdown code fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith(_FENCE):
        cleaned = cleaned.removeprefix(_FENCE + "json").removeprefix(_FENCE)
        cleaned = cleaned.removesuffix(_FENCE).strip()
    return cleaned


def match_payloads(
    payloads: Iterable[dict[str, Any]], results: Sequence[SearchResult]
) -> list[SearchResult]:
    """Map payloads chosen by the model back to retrieved results.

    A payload matches the first result with the same name and description;
    each result appears at most once, in the order the model chose.
    """
    matched: list[SearchResult] = []
    seen: set[str] = set()
    for llm_payload in payloads:
        wanted = (llm_payload.get("name"), llm_payload.get("description"))
        wanted = tuple(v if isinstance(v, str) else "" for v in wanted)
        for result in results:
            name, desc = result.payload.get("name"), result.payload.get("description")
            if not (isinstance(name, str) and isinstance(desc, str)):
                continue
            if (name, desc) != wanted:
                continue
            key = repr(result.id)
            if key not in seen:
                clean = {"name": name, "description": desc}
                clean.update({k: result.payload.get(k) for k in _PAYLOAD_FIELDS})
                matched.append(SearchResult(id=result.id, payload=clean))
                seen.add(key)
            break
    return matched


def _message_content(raw: dict[str, Any], body_text: str) -> str:
    choices = raw.get("choices")
    if not isinstance(choices, list) or not choices:
        raise RAGError(f"unexpected OpenAI response: {body_text}")
    try:
        content = choices[0]["message"]["content"]
    except (KeyError, TypeError):
        content = None
    if not isinstance(content, str):
        raise RAGError("unexpected format in OpenAI message field")
    return content


def _parse_payloads(cleaned: str) -> list[dict[str, Any]]:
    try:
        parsed = json.loads(cleaned) or []
        if not isinstance(parsed, list):
            raise ValueError("expected an array")
        if not all(item is None or isinstance(item, dict) for item in parsed):
            raise ValueError("array entry is not an object")
    except ValueError as exc:
        raise RAGError(f"failed to parse LLM JSON: {exc}\nRaw:\n{cleaned}") from exc
    return [item or {} for item in parsed]


def run_rag(question: str, top_k: int) -> RAGResponse:
    """Retrieve candidates for ``question`` and let the chat model pick the answer."""
    try:
        results = search_products(question, top_k, None)
    except (EmbeddingError, ValueError, requests.RequestException) as exc:
        raise RAGError(f"retrieval error: {exc}") from exc

    prompt = build_prompt(build_context(results), question)

    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise RAGError("missing OPENAI_API_KEY")

    try:
        response = requests.post(
            OPENAI_CHAT_URL,
            headers={"Authorization": f"Bearer {api_key}"},
            json={"model": CHAT_MODEL, "messages": [{"role": "user", "content": prompt}]},
        )
    except requests.RequestException as exc:
        raise RAGError(f"OpenAI request failed: {exc}") from exc

    try:
        raw = json.loads(response.content) or {}
        if not isinstance(raw, dict):
            raise ValueError("expected an object")
    except ValueError as exc:
        raise RAGError(f"OpenAI JSON error: {exc}") from exc

    if "error" in raw:
        details = json.dumps(raw["error"], indent=2, sort_keys=True)
        raise RAGError(f"OpenAI API error: {details}")

    payloads = _parse_payloads(strip_code_fence(_message_content(raw, response.text)))
    return RAGResponse(question=question, answer=match_payloads(payloads, results))