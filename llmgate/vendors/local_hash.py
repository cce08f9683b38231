"""Deterministic offline vendor client with hash embeddings."""

from __future__ import annotations

import hashlib
import math
import re
from typing import Any

_TOKEN_RE = re.compile(r"[a-zA-Z0-9_]+")

MODERATION_CATEGORIES = (
    "hate",
    "hate/threatening",
    "self-harm",
    "sexual",
    "sexual/minors",
    "violence",
    "violence/graphic",
)


class LocalHashVendorClient:
    """Answers the vendor protocol without network access.

    Embeddings are normalized hashed bag-of-tokens vectors, moderation never
    flags, and chat echoes the last user message.
    """

    def __init__(self, dims: int = 256) -> None:
        if dims <= 0:
            raise ValueError("dims must be positive")
        self._dims = dims

    def moderate(self, text: str) -> dict[str, Any]:
        return {
            "results": [
                {
                    "flagged": False,
                    "categories": {category: False for category in MODERATION_CATEGORIES},
                }
            ]
        }

    def chat_complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        n: int | None = None,
    ) -> dict[str, Any]:
        reply = next((m["content"] for m in reversed(messages) if m.get("role") == "user"), "")
        choice = {"index": 0, "message": {"role": "assistant", "content": reply}}
        return {"model": model, "choices": [choice] * (n or 1)}

    def embed(self, model: str, texts: list[str]) -> dict[str, Any]:
        return {
            "model": model,
            "data": [
                {"index": idx, "object": "embedding", "embedding": self._embed_single(text)}
                for idx, text in enumerate(texts)
            ],
        }

    def _embed_single(self, text: str) -> list[float]:
        vector = [0.0] * self._dims
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
            idx = int(digest[:8], 16) % self._dims
            sign = -1.0 if int(digest[-1], 16) % 2 else 1.0
            vector[idx] += sign

        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]
