"""Error types raised by claudemsg.

All library errors derive from ClaudeMsgError so callers can catch the
whole family at once. Graceful end of a stream is not an error and is
reported with claudemsg.streaming.END_OF_DATA instead.
"""


class ClaudeMsgError(Exception):
    """Base class for all claudemsg errors."""


class ContentConflictError(ClaudeMsgError, ValueError):
    """Both the string content and the content blocks of a message are set."""

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message or "can't use both content and content_blocks simultaneously"
        )


class MalformedPayloadError(ClaudeMsgError, ValueError):
    """A JSON payload could not be decoded into the expected shape.

    The underlying parse or validation error is kept as ``__cause__``.
    """


class TransportError(ClaudeMsgError):
    """The API answered with a failure status and no recognized error body."""

    def __init__(self, status_code: int, body: str = "", message: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"request failed with status {status_code}")


class APIError(TransportError):
    """The API answered with a failure status and an error envelope.

    Attributes:
        status_code: HTTP status of the response.
        type: Provider error type (e.g. "invalid_request_error").
        message: Provider error message.
    """

    def __init__(self, status_code: int, type: str, message: str) -> None:
        self.type = type
        self.message = message
        super().__init__(
            status_code,
            message=f"API error of type \"{type}\" (status {status_code}): {message}",
        )


class StreamProtocolError(ClaudeMsgError):
    """An ``error`` event arrived in the middle of a message stream."""

    def __init__(self, error_type: str, message: str) -> None:
        self.error_type = error_type
        self.message = message
        super().__init__(f"API error of type \"{error_type}\": {message}")


class StreamingNotSupportedError(ClaudeMsgError):
    """A streaming request was passed to a non-streaming call."""

    def __init__(self) -> None:
        super().__init__(
            "streaming is not supported with this method, "
            "please use create_message_stream"
        )


__all__ = [
    "APIError",
    "ClaudeMsgError",
    "ContentConflictError",
    "MalformedPayloadError",
    "StreamProtocolError",
    "StreamingNotSupportedError",
    "TransportError",
]
