"""Session gate and LLM provider adapter."""

from .provider import ProviderAdapter

__all__ = ["ProviderAdapter"]
