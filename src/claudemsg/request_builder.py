"""Builds httpx requests from a method, URL, body and headers."""

from collections.abc import Iterator, Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from claudemsg.types import wire


def encode_body(body: Any) -> bytes:
    """Encode a request body as compact JSON.

    Objects with a ``to_wire()`` method use it; other pydantic models are
    dumped without unset optional fields.
    """
    if hasattr(body, "to_wire"):
        return wire.dumps(body.to_wire())
    if isinstance(body, BaseModel):
        return wire.dumps(body.model_dump(mode="json", exclude_none=True))
    return wire.dumps(body)


def build_request(
    method: str,
    url: str,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
) -> httpx.Request:
    """Build an httpx.Request.

    Args:
        method: HTTP method.
        url: Absolute target URL.
        body: Raw bytes, str or a byte iterator are sent as is. Anything
            else is encoded as JSON with encode_body.
        headers: Header set of the request.

    Raises:
        ContentConflictError: If a message in the body sets both content forms.
    """
    content: bytes | str | Iterator[bytes] | None = None
    if body is not None:
        if isinstance(body, (bytes, bytearray)):
            content = bytes(body)
        elif isinstance(body, (str, Iterator)):
            content = body
        else:
            content = encode_body(body)

    return httpx.Request(method, url, content=content, headers=headers)


__all__ = ["build_request", "encode_body"]
