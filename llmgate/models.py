"""Core Pydantic domain models for llmgate."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: ChatRole
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ModerationResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    safe: bool
    reasons: list[str] = Field(default_factory=list)


class BatchError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    message: str


class BatchOutcome(BaseModel):
    """Settled result of one embedding batch request."""

    model_config = ConfigDict(extra="forbid")

    index: int
    data: list[Any] = Field(default_factory=list)
    error: BatchError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None
