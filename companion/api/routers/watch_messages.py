"""Device-side host events: ready, inbound app messages, outbound stream and acks."""

from __future__ import annotations

import asyncio
import json
import time
from queue import Empty
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from companion.api.deps import get_device_channel, get_settings_bridge
from companion.bridge import SettingsBridge
from companion.security import require_api_key
from companion.services.device_channel import DeviceMessageChannel

PING_INTERVAL_SECONDS = 15.0
POLL_INTERVAL_SECONDS = 0.25

router = APIRouter(dependencies=[Depends(require_api_key)])


class ReadyOut(BaseModel):
    status: str = "ok"
    requestedDefaults: bool


class AppMessageOut(BaseModel):
    status: str = "ok"
    options: str


@router.post("/api/watch/ready", response_model=ReadyOut)
async def post_ready(
    bridge: SettingsBridge = Depends(get_settings_bridge),
) -> ReadyOut:
    pending = bridge.on_ready()
    return ReadyOut(requestedDefaults=pending is not None)


@router.post("/api/watch/appmessage", response_model=AppMessageOut)
async def post_app_message(
    payload: Dict[str, Any] = Body(...),
    bridge: SettingsBridge = Depends(get_settings_bridge),
) -> AppMessageOut:
    return AppMessageOut(options=bridge.on_app_message(payload))


async def _message_stream(
    channel: DeviceMessageChannel, request: Request
) -> AsyncIterator[str]:
    queue = channel.subscribe()
    last_ping = time.time()
    try:
        yield ":ok\n\n"
        while True:
            if await request.is_disconnected():
                break

            now = time.time()
            if now - last_ping >= PING_INTERVAL_SECONDS:
                last_ping = now
                yield "event: ping\ndata: {}\n\n"

            try:
                message = queue.get_nowait()
            except Empty:
                message = None

            if message is not None:
                data = json.dumps(message.to_dict(), separators=(",", ":"))
                yield f"event: appmessage\ndata: {data}\n\n"
                continue

            await asyncio.sleep(POLL_INTERVAL_SECONDS)
    finally:
        channel.unsubscribe(queue)


@router.get("/api/watch/appmessage/stream")
async def stream_app_messages(
    request: Request,
    channel: DeviceMessageChannel = Depends(get_device_channel),
) -> StreamingResponse:
    generator = _message_stream(channel, request)
    headers = {"Cache-Control": "no-cache", "Connection": "keep-alive"}
    return StreamingResponse(generator, media_type="text/event-stream", headers=headers)


class AckIn(BaseModel):
    ok: bool = True
    error: str | None = None


@router.post("/api/watch/appmessage/{transaction_id}/ack")
async def post_ack(
    transaction_id: int,
    body: AckIn,
    channel: DeviceMessageChannel = Depends(get_device_channel),
) -> Dict[str, str]:
    if body.ok:
        known = channel.ack(transaction_id)
    else:
        known = channel.nack(transaction_id, body.error)
    if not known:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "unknown transaction")
    return {"status": "ok"}
