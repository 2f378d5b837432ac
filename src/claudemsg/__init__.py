"""claudemsg - A typed client for the Anthropic Messages API.

claudemsg provides:
- Content Model: tagged ContentBlock variants with an exact wire codec
- Messages: MessageRequest / MessageResponse with compact JSON encoding
- Streaming: a pull-based SSE StreamReader yielding typed events
- Client: a synchronous httpx-based client with typed errors

Quick Start:
    >>> from claudemsg import Client, InputMessage, MessageRequest
    >>> client = Client.from_api_key("sk-ant-...")
    >>> response = client.create_message(
    ...     MessageRequest(
    ...         model="claude-3-haiku-20240307",
    ...         messages=[InputMessage(role="user", content="Hello!")],
    ...         max_tokens=256,
    ...     )
    ... )

Streaming:
    >>> with client.create_message_stream(request) as stream:
    ...     for delta in stream.iter_deltas():
    ...         print(delta.text, end="")
"""

from ._version import __version__, __version_info__

# =============================================================================
# Lazy imports for top-level convenience
# =============================================================================
# Submodules are imported on first attribute access.


def __getattr__(name: str) -> object:
    """Lazy import for top-level classes."""
    if name == "Client":
        from .client import Client

        return Client

    if name in ("ClientConfig", "APIVersion", "default_config", "load_config"):
        from . import config

        return getattr(config, name)

    if name in ("StreamReader", "END_OF_DATA", "EndOfData", "ReaderState"):
        from . import streaming

        return getattr(streaming, name)

    if name in (
        "ContentBlock",
        "TextBlock",
        "ImageBlock",
        "ImageSource",
        "ToolUseBlock",
        "ToolResultBlock",
        "UnknownBlock",
        "InputMessage",
        "MessageRequest",
        "MessageResponse",
        "MessageStreamDelta",
        "MessageStreamEvent",
        "StreamEventType",
        "Tool",
        "ToolChoice",
    ):
        from . import types

        return getattr(types, name)

    if name in (
        "ClaudeMsgError",
        "ContentConflictError",
        "MalformedPayloadError",
        "TransportError",
        "APIError",
        "StreamProtocolError",
        "StreamingNotSupportedError",
    ):
        from . import errors

        return getattr(errors, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    "__version_info__",
    # Client
    "Client",
    "ClientConfig",
    "APIVersion",
    "default_config",
    "load_config",
    # Streaming
    "StreamReader",
    "END_OF_DATA",
    "EndOfData",
    "ReaderState",
    # Types
    "ContentBlock",
    "TextBlock",
    "ImageBlock",
    "ImageSource",
    "ToolUseBlock",
    "ToolResultBlock",
    "UnknownBlock",
    "InputMessage",
    "MessageRequest",
    "MessageResponse",
    "MessageStreamDelta",
    "MessageStreamEvent",
    "StreamEventType",
    "Tool",
    "ToolChoice",
    # Errors
    "ClaudeMsgError",
    "ContentConflictError",
    "MalformedPayloadError",
    "TransportError",
    "APIError",
    "StreamProtocolError",
    "StreamingNotSupportedError",
]
