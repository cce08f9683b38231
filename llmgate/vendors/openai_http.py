"""OpenAI REST client for moderation, chat completion and embeddings."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any

from llmgate.vendors.base import VendorAPIError

logger = logging.getLogger(__name__)


def _decode_error_body(raw: bytes) -> tuple[str | None, str | None]:
    try:
        body = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None, None
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return None, None
    return error.get("type"), error.get("message")


class OpenAIHttpVendorClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 120.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def moderate(self, text: str) -> dict[str, Any]:
        return self._post("moderations", {"input": text})

    def chat_complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        n: int | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": model, "temperature": temperature, "messages": messages}
        if n is not None:
            payload["n"] = n
        return self._post("chat/completions", payload)

    def embed(self, model: str, texts: list[str]) -> dict[str, Any]:
        return self._post("embeddings", {"model": model, "input": texts})

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        data = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        req = urllib.request.Request(
            f"{self._base_url}/{path}",
            data=data,
            headers=headers,
            method="POST",
        )
        logger.debug("POST %s/%s", self._base_url, path)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_seconds) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            error_type, message = _decode_error_body(exc.read() if exc.fp is not None else b"")
            raise VendorAPIError(
                message or f"Request failed with status code {exc.code}",
                error_type=error_type or "http_error",
                status=exc.code,
            ) from exc
        except urllib.error.URLError as exc:
            raise VendorAPIError(str(exc.reason), error_type="connection_error") from exc
        except TimeoutError as exc:
            raise VendorAPIError(f"Request timed out after {self._timeout_seconds}s", error_type="timeout") from exc

        try:
            body = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise VendorAPIError("Vendor returned a non-JSON body", error_type="invalid_response") from exc
        if not isinstance(body, dict):
            raise VendorAPIError("Vendor returned a non-object JSON body", error_type="invalid_response")
        return body
