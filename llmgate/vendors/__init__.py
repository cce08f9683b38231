"""Vendor client interfaces and implementations."""

from .base import VendorAPIError, VendorClient
from .local_hash import LocalHashVendorClient
from .openai_http import OpenAIHttpVendorClient

__all__ = ["VendorAPIError", "VendorClient", "LocalHashVendorClient", "OpenAIHttpVendorClient"]
