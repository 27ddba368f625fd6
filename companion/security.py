"""Security helpers for API authentication."""

from __future__ import annotations

import os
from typing import Set

from fastapi import Header, HTTPException, Query, status

from companion.config import env_bool


def _allowed_keys() -> Set[str]:
    keys = {key.strip() for key in os.getenv("API_KEYS", "").split(",") if key.strip()}
    primary = os.getenv("API_KEY")
    if primary:
        keys.add(primary)
    return keys


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    api_key_query: str | None = Query(default=None, alias="apiKey"),
) -> str | None:
    """Require a matching API key when enabled via ``REQUIRE_API_KEY=1``.

    The query form exists for the configuration page, which is opened as a
    plain browser navigation and cannot set headers.
    """

    candidate = x_api_key or api_key_query

    if not env_bool("REQUIRE_API_KEY"):
        return candidate

    allowed_keys = _allowed_keys()
    if not allowed_keys or candidate not in allowed_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid api key",
        )

    return candidate


__all__ = ["require_api_key"]
