"""Settings blob codec and configuration URL helpers."""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Mapping, Union
from urllib.parse import quote

from .errors import ParseError

Primitive = Union[bool, int, float, str, None]
SettingsBlob = Dict[str, Primitive]

OPTIONS_QUERY_PARAM = "options"


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(item) for item in value]
    return value


def serialize_blob(blob: Mapping[str, Any]) -> str:
    """Return the compact JSON text stored and transmitted for *blob*.

    Non-finite floats become ``null``, as in a browser's ``JSON.stringify``.
    """

    return json.dumps(
        _finite(blob), separators=(",", ":"), ensure_ascii=False, allow_nan=False
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def parse_blob(text: str) -> SettingsBlob:
    """Parse *text* into a settings blob.

    Raises ``ParseError`` for malformed JSON, for JSON that is not an object
    and for the non-standard ``NaN``/``Infinity`` literals.
    """

    if not isinstance(text, str) or not text.strip():
        raise ParseError("empty configuration response")
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"malformed configuration response: {exc}") from exc
    if not isinstance(value, dict):
        raise ParseError(
            f"configuration response must be a JSON object, got {type(value).__name__}"
        )
    return value


def build_config_url(base_url: str, stored: str | None) -> str:
    if stored is None:
        return base_url
    return f"{base_url}?{OPTIONS_QUERY_PARAM}={quote(stored, safe='')}"


__all__ = [
    "OPTIONS_QUERY_PARAM",
    "Primitive",
    "SettingsBlob",
    "build_config_url",
    "parse_blob",
    "serialize_blob",
]
