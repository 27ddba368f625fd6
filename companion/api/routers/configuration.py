"""Configuration page events: open the page and receive its result."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from companion.api.deps import get_settings_bridge
from companion.bridge import SettingsBridge
from companion.security import require_api_key

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/api/config")
async def show_configuration(
    bridge: SettingsBridge = Depends(get_settings_bridge),
) -> RedirectResponse:
    return RedirectResponse(
        bridge.on_show_configuration(), status_code=status.HTTP_307_TEMPORARY_REDIRECT
    )


class ClosedIn(BaseModel):
    response: str = ""


class ClosedOut(BaseModel):
    status: str = "ok"
    options: Dict[str, Any]


@router.post("/api/config/closed", response_model=ClosedOut)
async def post_webview_closed(
    body: ClosedIn,
    bridge: SettingsBridge = Depends(get_settings_bridge),
) -> ClosedOut:
    config = bridge.on_webview_closed(body.response)
    if config is None:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, "malformed configuration response"
        )
    return ClosedOut(options=config)
