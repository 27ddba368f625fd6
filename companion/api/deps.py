"""Process-wide bridge wiring, built once and injected into routes."""

from __future__ import annotations

from functools import lru_cache

from companion.bridge import SettingsBridge, WebViewLauncher
from companion.config import get_settings
from companion.services.device_channel import DeviceMessageChannel
from companion.storage import FileKeyValueStore


@lru_cache(maxsize=1)
def get_options_store() -> FileKeyValueStore:
    settings = get_settings()
    return FileKeyValueStore(settings.options_store_path, scope=settings.app_scope)


@lru_cache(maxsize=1)
def get_device_channel() -> DeviceMessageChannel:
    return DeviceMessageChannel(queue_maxsize=get_settings().device_queue_maxsize)


@lru_cache(maxsize=1)
def get_webview() -> WebViewLauncher:
    return WebViewLauncher()


@lru_cache(maxsize=1)
def get_settings_bridge() -> SettingsBridge:
    return SettingsBridge(
        get_options_store(),
        get_device_channel(),
        get_webview(),
        config_base_url=get_settings().config_base_url,
    )


def reset_dependencies() -> None:
    """Drop cached wiring so the next request rebuilds it (tests)."""

    for factory in (
        get_settings_bridge,
        get_webview,
        get_device_channel,
        get_options_store,
    ):
        factory.cache_clear()


__all__ = [
    "get_device_channel",
    "get_options_store",
    "get_settings_bridge",
    "get_webview",
    "reset_dependencies",
]
