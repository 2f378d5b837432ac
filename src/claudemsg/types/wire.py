"""Compact JSON helpers shared by the wire codecs."""

import json
from typing import Any

from claudemsg.errors import MalformedPayloadError


def dumps(value: Any) -> bytes:
    """Encode a JSON value the way the API expects it: compact UTF-8."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def loads(payload: bytes | bytearray | str) -> Any:
    """Decode a JSON payload, raising MalformedPayloadError on bad input."""
    try:
        return json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedPayloadError(f"invalid JSON payload: {e}") from e


__all__ = ["dumps", "loads"]
