"""OpenAI provider adapter: moderation, chat completion and batched embeddings."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from llmgate.chunking import to_chunks
from llmgate.config import ProviderConfig, load_effective_config
from llmgate.errors import (
    EmbeddingAggregateError,
    InvalidModelError,
    UpstreamCallError,
    UpstreamProtocolError,
)
from llmgate.logging_utils import configure_logging
from llmgate.models import BatchError, BatchOutcome, ChatMessage, ModerationResult
from llmgate.vendors.base import VendorAPIError, VendorClient
from llmgate.vendors.local_hash import LocalHashVendorClient
from llmgate.vendors.openai_http import OpenAIHttpVendorClient

logger = logging.getLogger(__name__)

CHAT_MODELS = ("gpt-4", "gpt-3.5-turbo")
FALLBACK_CHAT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7

MessageLike = ChatMessage | Mapping[str, Any]


def is_valid_chat_model(model_name: str | None = "") -> bool:
    return model_name in CHAT_MODELS


def _coerce_temperature(value: Any) -> float:
    if value is None:
        return DEFAULT_TEMPERATURE
    try:
        temperature = float(value)
    except (TypeError, ValueError):
        return DEFAULT_TEMPERATURE
    if math.isnan(temperature):
        return DEFAULT_TEMPERATURE
    return temperature


def _message_payloads(messages: Iterable[MessageLike]) -> list[dict[str, str]]:
    payloads = []
    for message in messages:
        if not isinstance(message, ChatMessage):
            message = ChatMessage.model_validate(message)
        payloads.append(message.to_payload())
    return payloads


def _first_choice_content(choices: list[Any]) -> str:
    try:
        return choices[0]["message"]["content"]
    except (KeyError, TypeError, IndexError) as exc:
        raise UpstreamProtocolError("OpenAI chat: malformed choice in response!") from exc


def _vendor_from_config(config: ProviderConfig) -> VendorClient:
    if config.vendor == "local-hash":
        return LocalHashVendorClient()
    return OpenAIHttpVendorClient(
        api_key=config.api_key,
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
    )


class ProviderAdapter:
    def __init__(self, config: ProviderConfig, vendor: VendorClient | None = None) -> None:
        self.config = config
        self.vendor = vendor or _vendor_from_config(config)

    @classmethod
    def from_settings(
        cls,
        config_path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        runtime_override: dict | None = None,
        vendor: VendorClient | None = None,
    ) -> ProviderAdapter:
        config = load_effective_config(
            config_path=config_path,
            environ=environ,
            runtime_override=runtime_override,
        )
        configure_logging(config.logging.level)
        return cls(config=config.provider, vendor=vendor)

    def check_safety(self, text: str = "") -> ModerationResult:
        try:
            body = self.vendor.moderate(text)
        except VendorAPIError as exc:
            raise UpstreamCallError("createModeration", exc.message) from exc

        results = body.get("results")
        if not isinstance(results, list):
            raise UpstreamProtocolError("OpenAI moderation: No results!")
        if not results:
            raise UpstreamProtocolError("OpenAI moderation: No results length!")

        result = results[0] or {}
        if not isinstance(result, Mapping):
            raise UpstreamProtocolError("OpenAI moderation: malformed result!")
        if not result.get("flagged", False):
            return ModerationResult(safe=True, reasons=[])

        categories = result.get("categories") or {}
        if not isinstance(categories, Mapping):
            raise UpstreamProtocolError("OpenAI moderation: malformed result!")
        reasons = [category.replace("/", " or ", 1) for category, value in categories.items() if value is True]
        return ModerationResult(safe=False, reasons=reasons)

    def send_chat(
        self,
        history: Sequence[MessageLike],
        prompt: str,
        temperature: Any = None,
    ) -> str:
        """Complete ``prompt`` after ``history`` with the configured chat model.

        Raises ``InvalidModelError`` before any request when the configured
        model is not a supported chat model.
        """
        model = self.config.chat_model
        if not is_valid_chat_model(model):
            raise InvalidModelError(model)

        messages = [
            {"role": "system", "content": ""},
            *_message_payloads(history),
            {"role": "user", "content": prompt},
        ]
        try:
            body = self.vendor.chat_complete(
                model,
                messages,
                temperature=_coerce_temperature(temperature),
                n=1,
            )
        except VendorAPIError as exc:
            logger.warning("Chat completion failed for model=%s: %s", model, exc.message)
            raise UpstreamCallError("createChatCompletion", exc.message) from exc

        choices = body.get("choices")
        if not isinstance(choices, list):
            raise UpstreamProtocolError("OpenAI chat: No results!")
        if not choices:
            raise UpstreamProtocolError("OpenAI chat: No results length!")
        return _first_choice_content(choices)

    def get_chat_completion(
        self,
        messages: Sequence[MessageLike],
        temperature: Any = DEFAULT_TEMPERATURE,
    ) -> str | None:
        """Like ``send_chat`` for a prepared message list, but returns None when no choices come back."""
        model = self.config.chat_model or FALLBACK_CHAT_MODEL
        try:
            body = self.vendor.chat_complete(
                model,
                _message_payloads(messages),
                temperature=_coerce_temperature(temperature),
            )
        except VendorAPIError as exc:
            raise UpstreamCallError("createChatCompletion", exc.message) from exc

        choices = body.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        return _first_choice_content(choices)

    def embed_text_input(self, text: str) -> list[float]:
        result = self.embed_chunks([text])
        return result[0] if result else []

    def embed_chunks(self, text_chunks: Sequence[str]) -> list[list[float]] | None:
        """Embed every text, preserving order, or fail as a whole.

        Texts are split into batches of at most ``embedding_chunk_limit`` which
        are requested concurrently. When any batch fails, every vector is
        discarded and ``EmbeddingAggregateError`` is raised. Returns None when
        the vendor answered without usable embeddings.
        """
        if isinstance(text_chunks, str):
            raise TypeError("text_chunks must be a sequence of strings, not a single string")
        texts = list(text_chunks)
        if not texts:
            return []

        batches = list(to_chunks(texts, self.config.embedding_chunk_limit))
        max_workers = min(len(batches), self.config.embedding_workers or len(batches))
        logger.debug(
            "Embedding %s texts in %s batches (limit=%s workers=%s)",
            len(texts),
            len(batches),
            self.config.embedding_chunk_limit,
            max_workers,
        )

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self._embed_batch, idx, batch) for idx, batch in enumerate(batches)]
        # Read in submission order so completion order never reaches the output.
        outcomes = [future.result() for future in futures]

        failed = [outcome for outcome in outcomes if outcome.failed]
        if failed:
            logger.warning(
                "Embedding aborted: %s of %s batches failed (batches=%s)",
                len(failed),
                len(outcomes),
                [outcome.index for outcome in failed],
            )
            errors = [outcome.error for outcome in failed if outcome.error is not None]
            raise EmbeddingAggregateError(errors)

        data = [item for outcome in outcomes for item in outcome.data]
        if data and all(isinstance(item, Mapping) and "embedding" in item for item in data):
            return [item["embedding"] for item in data]
        return None

    def _embed_batch(self, index: int, batch: list[str]) -> BatchOutcome:
        try:
            body = self.vendor.embed(self.config.embedding_model, batch)
        except VendorAPIError as exc:
            error = BatchError(type=exc.error_type, message=exc.message)
        except Exception as exc:  # noqa: BLE001 - a batch must settle, not raise
            error = BatchError(type=type(exc).__name__, message=str(exc))
        else:
            data = body.get("data") if isinstance(body, Mapping) else None
            return BatchOutcome(index=index, data=data if isinstance(data, list) else [])

        logger.warning("Embedding batch %s (%s texts) failed: [%s] %s", index, len(batch), error.type, error.message)
        return BatchOutcome(index=index, error=error)
