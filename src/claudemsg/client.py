"""Synchronous client for the Anthropic Messages API.

The client builds authenticated requests, sends them with httpx and turns
failure statuses into APIError / TransportError. Streaming responses are
handed to a StreamReader, which then owns the open response.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from claudemsg.config import ClientConfig, default_config
from claudemsg.errors import APIError, StreamingNotSupportedError, TransportError
from claudemsg.request_builder import build_request
from claudemsg.streaming import StreamReader
from claudemsg.types import wire
from claudemsg.types.messages import (
    MessageRequest,
    MessageResponse,
    decode_message_response,
)

logger = logging.getLogger(__name__)

MESSAGES_SUFFIX = "/messages"


class ErrorDetail(BaseModel):
    type: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned with failure statuses."""

    type: str = "error"
    error: ErrorDetail


def is_failure_status(status_code: int) -> bool:
    return status_code < 200 or status_code >= 400


def raise_for_error_response(response: httpx.Response) -> None:
    """Raise if the response has a failure status.

    The response body must already be read.

    Raises:
        APIError: If the body is a recognized error envelope.
        TransportError: Otherwise.
    """
    if not is_failure_status(response.status_code):
        return

    logger.warning("Messages API returned status %d", response.status_code)
    try:
        envelope = ErrorResponse.model_validate_json(response.content)
    except ValidationError:
        raise TransportError(response.status_code, response.text) from None
    raise APIError(response.status_code, envelope.error.type, envelope.error.message)


class Client:
    """Client for the Anthropic Messages API.

    Example:
        >>> client = Client.from_api_key("sk-ant-...")
        >>> response = client.create_message(
        ...     MessageRequest(
        ...         model=CLAUDE_3_HAIKU,
        ...         messages=[InputMessage(role="user", content="Hello")],
        ...         max_tokens=256,
        ...     )
        ... )
        >>> print(response.text)
    """

    def __init__(self, config: ClientConfig) -> None:
        """Initialize the client.

        Args:
            config: Client settings. When config.http_client is None the
                client creates and owns its own httpx.Client.
        """
        self._config = config
        if config.http_client is not None:
            self._http = config.http_client
            self._owns_http = False
        else:
            self._http = httpx.Client(timeout=config.timeout)
            self._owns_http = True

    @classmethod
    def from_api_key(cls, api_key: str) -> "Client":
        """Create a client with the default configuration and an API key."""
        return cls(default_config(api_key))

    @property
    def config(self) -> ClientConfig:
        return self._config

    def full_url(self, suffix: str) -> str:
        return f"{self._config.base_url}{suffix}"

    def new_request(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Build a request carrying the common API headers."""
        request = build_request(method, url, body=body, headers=headers)
        request.headers["content-type"] = "application/json"
        request.headers["anthropic-version"] = self._config.api_version.value
        request.headers["x-api-key"] = self._config.api_key
        return request

    def send_request(self, request: httpx.Request) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            APIError: On a failure status with an error envelope.
            TransportError: On a failure status without one.
            MalformedPayloadError: If a success body is not valid JSON.
        """
        logger.debug("%s %s", request.method, request.url)
        response = self._http.send(request)
        try:
            logger.debug("Response status %d", response.status_code)
            raise_for_error_response(response)
            return wire.loads(response.content)
        finally:
            response.close()

    def create_message(self, request: MessageRequest) -> MessageResponse:
        """Create a message completion.

        Raises:
            StreamingNotSupportedError: If request.stream is set.
        """
        if request.stream:
            raise StreamingNotSupportedError()

        http_request = self.new_request(
            "POST", self.full_url(MESSAGES_SUFFIX), body=request
        )
        return decode_message_response(self.send_request(http_request))

    def create_message_stream(self, request: MessageRequest) -> StreamReader:
        """Create a streamed message completion.

        The returned reader owns the open response and must be closed,
        preferably with a ``with`` block.

        Raises:
            APIError: On a failure status with an error envelope.
            TransportError: On a failure status without one.
        """
        stream_request = request.model_copy(update={"stream": True})
        http_request = self.new_request(
            "POST", self.full_url(MESSAGES_SUFFIX), body=stream_request
        )

        logger.debug("%s %s (stream)", http_request.method, http_request.url)
        response = self._http.send(http_request, stream=True)
        logger.debug("Response status %d", response.status_code)
        if is_failure_status(response.status_code):
            try:
                response.read()
                raise_for_error_response(response)
            finally:
                response.close()

        return StreamReader.from_response(response)

    def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "MESSAGES_SUFFIX",
    "Client",
    "ErrorResponse",
    "is_failure_status",
    "raise_for_error_response",
]
