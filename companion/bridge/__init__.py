"""Settings bridge between the watch and its configuration page."""

from .blob import SettingsBlob, build_config_url, parse_blob, serialize_blob
from .errors import BridgeError, ParseError, TransportError
from .settings_bridge import OPTIONS_KEY, SettingsBridge
from .webview import WebView, WebViewLauncher

__all__ = [
    "OPTIONS_KEY",
    "BridgeError",
    "ParseError",
    "SettingsBlob",
    "SettingsBridge",
    "TransportError",
    "WebView",
    "WebViewLauncher",
    "build_config_url",
    "parse_blob",
    "serialize_blob",
]
