"""Session-authentication gate for client routes.

Decides whether a route may render, given the instance's auth mode and
whatever session material the client has stored. Token validation is
delegated to the caller.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

AUTH_USER = "anythingllm_user"
AUTH_TOKEN = "anythingllm_authToken"
AUTH_TIMESTAMP = "anythingllm_authTimestamp"

TokenValidator = Callable[[], bool]


class SystemKeys(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    multi_user_mode: bool = Field(default=False, alias="MultiUserMode")
    requires_auth: bool = Field(default=False, alias="RequiresAuth")
    open_ai_key: bool = Field(default=False, alias="OpenAiKey")
    azure_open_ai_key: bool = Field(default=False, alias="AzureOpenAiKey")


class SessionCheck(BaseModel):
    model_config = ConfigDict(extra="forbid")

    authenticated: bool
    redirect_to_onboarding: bool = False


class RouteDecision(str, Enum):
    RENDER = "render"
    ONBOARDING = "onboarding"
    LOGIN = "login"
    HOME = "home"


class SessionStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def remove(self, key: str) -> None: ...


class MemorySessionStore:
    def __init__(self, items: dict[str, str] | None = None) -> None:
        self._items = dict(items or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


def stored_user(store: SessionStore) -> dict[str, Any] | None:
    raw = store.get(AUTH_USER)
    if not raw:
        return None
    try:
        user = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return user if isinstance(user, dict) else None


def check_session(keys: SystemKeys, store: SessionStore, validate_token: TokenValidator) -> SessionCheck:
    single_user = not keys.multi_user_mode
    if single_user and not keys.requires_auth and not keys.open_ai_key and not keys.azure_open_ai_key:
        return SessionCheck(authenticated=True, redirect_to_onboarding=True)

    if single_user and not keys.requires_auth:
        return SessionCheck(authenticated=True)

    if single_user:
        if not store.get(AUTH_TOKEN):
            return SessionCheck(authenticated=False)
        return SessionCheck(authenticated=bool(validate_token()))

    if not store.get(AUTH_USER) or not store.get(AUTH_TOKEN):
        return SessionCheck(authenticated=False)

    if not validate_token():
        logger.info("Stored session token rejected; clearing local session")
        for key in (AUTH_USER, AUTH_TOKEN, AUTH_TIMESTAMP):
            store.remove(key)
        return SessionCheck(authenticated=False)

    return SessionCheck(authenticated=True)


def resolve_route(check: SessionCheck, store: SessionStore, admin_only: bool = False) -> RouteDecision:
    if check.redirect_to_onboarding:
        return RouteDecision.ONBOARDING

    if admin_only:
        user = stored_user(store)
        if check.authenticated and user is not None and user.get("role") == "admin":
            return RouteDecision.RENDER
        return RouteDecision.HOME

    return RouteDecision.RENDER if check.authenticated else RouteDecision.LOGIN
