"""Error taxonomy for the provider adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from llmgate.models import BatchError


class ProviderError(RuntimeError):
    """Base class for failures surfaced by ``ProviderAdapter``."""


class InvalidModelError(ProviderError):
    def __init__(self, model: str | None) -> None:
        super().__init__(f"OpenAI chat: {model} is not valid for chat completion!")
        self.model = model


class UpstreamCallError(ProviderError):
    """Transport or vendor API failure; keeps the upstream message."""

    def __init__(self, operation: str, upstream_message: str) -> None:
        super().__init__(f"OpenAI::{operation} failed with: {upstream_message}")
        self.operation = operation
        self.upstream_message = upstream_message


class UpstreamProtocolError(ProviderError):
    """The vendor answered but the response shape is unusable."""


class EmbeddingAggregateError(ProviderError):
    def __init__(self, errors: list[BatchError]) -> None:
        details = ", ".join(f"[{error.type}]: {error.message}" for error in errors)
        super().__init__(f"OpenAI Failed to embed: ({len(errors)}) Embedding Errors! {details}")
        self.errors = list(errors)
