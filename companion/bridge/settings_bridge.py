"""Relay watchface options between the device and the configuration page.

The bridge owns a single value, the serialized settings blob stored under
``options``. Four host events drive it:

* ``on_ready`` asks the watch for its defaults when nothing is stored yet.
* ``on_app_message`` stores what the watch reports.
* ``on_show_configuration`` opens the configuration page with the stored
  options in the query string.
* ``on_webview_closed`` stores the page's result and pushes it to the watch.

Sends are fire-and-forget: failures are logged from the future's done
callback and never retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol

from companion.metrics import BRIDGE_EVENTS, BRIDGE_SENDS
from companion.storage import KeyValueStore
from companion.telemetry import events as telemetry

from .blob import SettingsBlob, build_config_url, parse_blob, serialize_blob
from .errors import ParseError, TransportError
from .webview import WebView

_LOG = logging.getLogger(__name__)

OPTIONS_KEY = "options"


class MessageChannel(Protocol):
    def send(self, payload: Mapping[str, Any]) -> asyncio.Future[int]: ...


class SettingsBridge:
    def __init__(
        self,
        store: KeyValueStore,
        channel: MessageChannel,
        webview: WebView,
        *,
        config_base_url: str,
    ) -> None:
        self._store = store
        self._channel = channel
        self._webview = webview
        self._config_base_url = config_base_url

    @property
    def config_base_url(self) -> str:
        return self._config_base_url

    def stored_options(self) -> str | None:
        return self._store.get(OPTIONS_KEY)

    def _store_options(self, blob: Mapping[str, Any], source: str) -> str:
        text = serialize_blob(blob)
        self._store.set(OPTIONS_KEY, text)
        telemetry.record_options_stored(source, len(text.encode("utf-8")))
        return text

    def _send(self, blob: Mapping[str, Any], reason: str) -> asyncio.Future[int]:
        future = self._channel.send(blob)
        telemetry.record_send_issued(reason, keys=len(blob))
        future.add_done_callback(_log_send_outcome)
        return future

    def on_ready(self) -> asyncio.Future[int] | None:
        """Request device defaults on first run.

        Returns the pending send, or ``None`` when options are already stored.
        """

        BRIDGE_EVENTS.labels(event="ready").inc()
        _LOG.info("companion ready")
        if self.stored_options() is not None:
            return None
        return self._send({}, "request_defaults")

    def on_app_message(self, payload: Mapping[str, Any]) -> str:
        BRIDGE_EVENTS.labels(event="appmessage").inc()
        text = self._store_options(payload, "device")
        _LOG.info("got settings: %s", text)
        return text

    def on_show_configuration(self) -> str:
        BRIDGE_EVENTS.labels(event="showConfiguration").inc()
        stored = self.stored_options()
        url = build_config_url(self._config_base_url, stored)
        if stored is None:
            _LOG.info("showing config with no options")
        else:
            _LOG.info("showing config with options=%s", stored)
        telemetry.record_config_opened(has_options=stored is not None)
        self._webview.open_url(url)
        return url

    def on_webview_closed(self, response: str) -> SettingsBlob | None:
        """Store and forward the configuration page result.

        A response that is not a JSON object is logged and ignored; stored
        options stay as they were and nothing is sent.
        """

        BRIDGE_EVENTS.labels(event="webviewclosed").inc()
        _LOG.info("got response: %s", response)
        try:
            config = parse_blob(response)
        except ParseError as exc:
            _LOG.warning("ignoring configuration response: %s", exc)
            telemetry.record_response_rejected(str(exc))
            return None

        self._store_options(config, "webview")
        self._send(config, "configuration")
        return config


def _log_send_outcome(future: asyncio.Future[int]) -> None:
    if future.cancelled():
        BRIDGE_SENDS.labels(outcome="cancelled").inc()
        return
    exc = future.exception()
    if exc is None:
        BRIDGE_SENDS.labels(outcome="ok").inc()
        return
    BRIDGE_SENDS.labels(outcome="failed").inc()
    _LOG.error("Error sending message to watch: %s", exc)
    transaction_id = exc.transaction_id if isinstance(exc, TransportError) else None
    telemetry.record_send_failed(str(exc), transaction_id=transaction_id)


__all__ = ["OPTIONS_KEY", "MessageChannel", "SettingsBridge"]
