from __future__ import annotations

import logging
from typing import Protocol

_LOG = logging.getLogger(__name__)


class WebView(Protocol):
    def open_url(self, url: str) -> None: ...


class WebViewLauncher:
    """Host web view stand-in; the HTTP layer redirects to the opened URL."""

    def __init__(self) -> None:
        self.last_url: str | None = None

    def open_url(self, url: str) -> None:
        _LOG.info("opening configuration page %s", url)
        self.last_url = url


__all__ = ["WebView", "WebViewLauncher"]
