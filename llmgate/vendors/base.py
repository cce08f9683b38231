"""Vendor client abstractions."""

from __future__ import annotations

from typing import Any, Protocol


class VendorAPIError(RuntimeError):
    """Failure reported by, or on the way to, the vendor API."""

    def __init__(self, message: str, *, error_type: str = "api_error", status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status = status


class VendorClient(Protocol):
    def moderate(self, text: str) -> dict[str, Any]:
        ...

    def chat_complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        n: int | None = None,
    ) -> dict[str, Any]:
        ...

    def embed(self, model: str, texts: list[str]) -> dict[str, Any]:
        ...
