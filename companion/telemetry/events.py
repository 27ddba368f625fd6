"""Telemetry helpers for settings bridge instrumentation."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, MutableMapping, Optional

BridgeTelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_emitter: Optional[BridgeTelemetryEmitter] = None
_logger = logging.getLogger("companion.telemetry.events")


def set_bridge_telemetry_emitter(candidate: BridgeTelemetryEmitter | None) -> None:
    """Register a telemetry emitter used for bridge instrumentation."""

    global _emitter
    _emitter = candidate if callable(candidate) else None


def _safe_emit(event: str, payload: MutableMapping[str, object]) -> None:
    if not _emitter:
        _logger.debug("telemetry emitter not configured for event %s", event)
        return
    try:
        _emitter(event, dict(payload))
    except Exception:  # pragma: no cover - logging only
        _logger.exception("failed to emit telemetry event %s", event)


def record_options_stored(source: str, size: int) -> None:
    payload: Dict[str, object] = {
        "source": source,
        "bytes": int(max(0, size)),
        "ts": _now_ms(),
    }
    _safe_emit("bridge.options.stored", payload)


def record_config_opened(*, has_options: bool) -> None:
    _safe_emit(
        "bridge.config.opened", {"hasOptions": bool(has_options), "ts": _now_ms()}
    )


def record_send_issued(reason: str, *, keys: int) -> None:
    payload: Dict[str, object] = {"reason": reason, "keys": int(keys), "ts": _now_ms()}
    _safe_emit("bridge.send.issued", payload)


def record_send_failed(error: str, *, transaction_id: int | None = None) -> None:
    payload: Dict[str, object] = {"error": error, "ts": _now_ms()}
    if transaction_id is not None:
        payload["transactionId"] = int(transaction_id)
    _safe_emit("bridge.send.failed", payload)


def record_response_rejected(reason: str) -> None:
    _safe_emit("bridge.response.rejected", {"reason": reason, "ts": _now_ms()})


def _now_ms() -> int:
    from time import time

    return int(time() * 1000)


__all__ = [
    "set_bridge_telemetry_emitter",
    "record_options_stored",
    "record_config_opened",
    "record_send_issued",
    "record_send_failed",
    "record_response_rejected",
]
