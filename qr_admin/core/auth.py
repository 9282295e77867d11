from __future__ import annotations

import json
from functools import lru_cache
from typing import Mapping

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from qr_admin.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


class ShopSession(BaseModel):
    shop: str
    admin_access_token: str
    user_id: str
    token_source: str


@lru_cache(maxsize=1)
def _token_map() -> dict[str, dict]:
    raw = settings.shop_token_map_json.strip()
    try:
        parsed = json.loads(raw or "{}")
    except json.JSONDecodeError as exc:
        raise RuntimeError("Invalid SHOP_TOKEN_MAP_JSON configuration") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError("SHOP_TOKEN_MAP_JSON must be a JSON object")
    return parsed


def _dev_session() -> ShopSession:
    return ShopSession(
        shop=settings.dev_shop,
        admin_access_token=settings.dev_admin_access_token,
        user_id="dev-local",
        token_source="dev-bypass",
    )


def _parse_header_token(auth_header: str | None, api_key_header: str | None) -> tuple[str, str] | None:
    if auth_header:
        parts = auth_header.strip().split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
            return parts[1].strip(), "authorization"
    if api_key_header and api_key_header.strip():
        return api_key_header.strip(), "x-api-key"
    return None


def resolve_session_from_headers(headers: Mapping[str, str]) -> ShopSession | None:
    if not settings.auth_enabled:
        return _dev_session()

    parsed = _parse_header_token(
        headers.get("Authorization") or headers.get("authorization"),
        headers.get("X-API-Key") or headers.get("x-api-key"),
    )
    if not parsed:
        return None

    token, source = parsed
    info = _token_map().get(token)
    if not isinstance(info, dict) or not info.get("shop"):
        return None

    return ShopSession(
        shop=str(info["shop"]),
        admin_access_token=str(info.get("access_token", "")),
        user_id=str(info.get("user_id", "unknown")),
        token_source=source,
    )


def get_current_session(
    bearer: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    api_key: str | None = Security(api_key_scheme),
) -> ShopSession:
    headers = {}
    if bearer:
        headers["authorization"] = f"Bearer {bearer.credentials}"
    if api_key:
        headers["x-api-key"] = api_key

    session = resolve_session_from_headers(headers)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid shop session token",
        )
    return session
