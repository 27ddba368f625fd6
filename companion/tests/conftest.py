"""Shared pytest fixtures for companion tests."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping

import pytest
from fastapi.testclient import TestClient

from companion.api.deps import (
    get_device_channel,
    get_settings_bridge,
    reset_dependencies,
)
from companion.app import app
from companion.bridge import SettingsBridge, WebViewLauncher
from companion.config import reset_settings_cache
from companion.services.device_channel import DeviceMessageChannel
from companion.storage import MemoryKeyValueStore
from companion.telemetry.events import set_bridge_telemetry_emitter

BASE_URL = "http://config.example/watchface/"


class RecordingChannel:
    """Channel double that records sends and settles them immediately."""

    def __init__(self, error: Exception | None = None) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.error = error

    def send(self, payload: Mapping[str, Any]) -> asyncio.Future[int]:
        self.sent.append(dict(payload))
        future: asyncio.Future[int] = asyncio.get_running_loop().create_future()
        if self.error is not None:
            future.set_exception(self.error)
        else:
            future.set_result(len(self.sent))
        return future


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def webview() -> WebViewLauncher:
    return WebViewLauncher()


@pytest.fixture
def bridge(
    store: MemoryKeyValueStore, channel: RecordingChannel, webview: WebViewLauncher
) -> SettingsBridge:
    return SettingsBridge(store, channel, webview, config_base_url=BASE_URL)


@pytest.fixture
def telemetry_events():
    events: list[tuple[str, dict]] = []
    set_bridge_telemetry_emitter(lambda name, payload: events.append((name, payload)))
    yield events
    set_bridge_telemetry_emitter(None)


@pytest.fixture
def bridge_client(store: MemoryKeyValueStore, webview: WebViewLauncher):
    """TestClient wired to an in-memory store and a real device channel."""

    device_channel = DeviceMessageChannel(queue_maxsize=4)
    service = SettingsBridge(store, device_channel, webview, config_base_url=BASE_URL)
    app.dependency_overrides[get_settings_bridge] = lambda: service
    app.dependency_overrides[get_device_channel] = lambda: device_channel
    with TestClient(app) as client:
        yield client, service, device_channel
    app.dependency_overrides.pop(get_settings_bridge, None)
    app.dependency_overrides.pop(get_device_channel, None)


@pytest.fixture(autouse=True)
def _isolated_store_path(tmp_path, monkeypatch):
    monkeypatch.setenv("OPTIONS_STORE_PATH", str(tmp_path / "local_storage.json"))
    reset_settings_cache()
    reset_dependencies()
    yield
    reset_settings_cache()
    reset_dependencies()
