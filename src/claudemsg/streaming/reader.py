"""Pull-based reader for streamed Messages API responses.

The reader consumes a byte source line by line and turns ``data:`` lines
into typed events. It is synchronous and single-pass: every read advances
the underlying cursor, and there is no way back.

A StreamReader is not thread-safe. Callers must serialize access to one
instance.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import Final, Union

import httpx

from claudemsg.errors import StreamProtocolError
from claudemsg.types.stream import (
    ContentBlockDeltaEvent,
    ErrorEvent,
    MessageStopEvent,
    MessageStreamDelta,
    MessageStreamEvent,
    UnknownStreamEvent,
    decode_stream_event,
)

logger = logging.getLogger(__name__)

DATA_PREFIX: Final = b"data: "


class ReaderState(str, Enum):
    """Position of a StreamReader in its byte source."""

    AWAITING_LINE = "awaiting_line"
    HAVE_DATA_LINE = "have_data_line"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class EndOfData:
    """Marker returned when a stream has no more data.

    Use the END_OF_DATA singleton; it is falsy so ``while event := ...``
    loops terminate on it.
    """

    _instance: "EndOfData | None" = None

    def __new__(cls) -> "EndOfData":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END_OF_DATA"


END_OF_DATA: Final = EndOfData()


class StreamReader:
    """Reads MessageStreamEvents from an SSE byte stream.

    Two read modes share one cursor:
    - read_event() returns every event in arrival order.
    - read_delta() returns only content_block_delta payloads, and treats
      message_stop as the end of the turn.

    The reader owns the byte source. Call close() (or use it as a context
    manager) to release it, also when abandoning the stream early.

    Example:
        >>> with client.create_message_stream(request) as stream:
        ...     for delta in stream.iter_deltas():
        ...         print(delta.text, end="")
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        close: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            chunks: Byte chunks of the response body, split anywhere.
            close: Callback that releases the underlying transport.
        """
        self._chunks: Iterator[bytes] = iter(chunks)
        self._close_callback = close
        self._buffer = bytearray()
        self._state = ReaderState.AWAITING_LINE
        self._data_line: bytes = b""
        self._error: Exception | None = None
        self._closed = False

    @classmethod
    def from_response(cls, response: httpx.Response) -> "StreamReader":
        """Create a reader that owns an open streaming httpx response."""
        return cls(response.iter_bytes(), close=response.close)

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Line consumption
    # =========================================================================

    def _read_line(self) -> bytes | None:
        """Return the next ``\\n``-terminated line, or None at end of source."""
        while True:
            end = self._buffer.find(b"\n")
            if end >= 0:
                line = bytes(self._buffer[: end + 1])
                del self._buffer[: end + 1]
                return line

            chunk = next(self._chunks, None)
            if chunk is None:
                if self._buffer:
                    logger.debug(
                        "Discarding %d bytes of unterminated trailing data",
                        len(self._buffer),
                    )
                    self._buffer.clear()
                return None
            self._buffer.extend(chunk)

    def _advance(self) -> bytes | EndOfData:
        """Move the cursor to the next data line and return its payload.

        Non-data lines are skipped. Returns END_OF_DATA once the byte source
        is exhausted.
        """
        while self._state is ReaderState.AWAITING_LINE:
            try:
                line = self._read_line()
            except Exception as e:
                self._fail(e)
                raise

            if line is None:
                self._state = ReaderState.EXHAUSTED
            elif not line.strip():
                continue
            elif line.startswith(DATA_PREFIX):
                self._data_line = line[len(DATA_PREFIX):]
                self._state = ReaderState.HAVE_DATA_LINE
            else:
                logger.debug("Skipping non-data SSE line: %r", line[:80])

        if self._state is ReaderState.EXHAUSTED:
            return END_OF_DATA

        payload = self._data_line
        self._data_line = b""
        self._state = ReaderState.AWAITING_LINE
        return payload

    def _fail(self, error: Exception) -> None:
        self._state = ReaderState.FAILED
        self._error = error

    def _check_readable(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed stream reader")
        if self._state is ReaderState.FAILED and self._error is not None:
            raise self._error

    # =========================================================================
    # Read modes
    # =========================================================================

    def read_event(self) -> Union[MessageStreamEvent, UnknownStreamEvent, EndOfData]:
        """Read the next event.

        Returns:
            The next MessageStreamEvent (or UnknownStreamEvent), or
            END_OF_DATA when the byte source is exhausted.

        Raises:
            MalformedPayloadError: If a data line is not a valid event.
        """
        self._check_readable()

        payload = self._advance()
        if isinstance(payload, EndOfData):
            return END_OF_DATA

        try:
            return decode_stream_event(payload)
        except Exception as e:
            self._fail(e)
            raise

    def read_delta(self) -> MessageStreamDelta | EndOfData:
        """Read the next content delta, skipping every other event.

        Returns:
            The delta of the next content_block_delta event, or END_OF_DATA
            on message_stop or when the byte source is exhausted.

        Raises:
            StreamProtocolError: If the stream reports an error event.
            MalformedPayloadError: If a data line is not a valid event.
        """
        while True:
            event = self.read_event()
            if isinstance(event, EndOfData):
                return END_OF_DATA
            if isinstance(event, ContentBlockDeltaEvent):
                return event.delta
            if isinstance(event, ErrorEvent):
                error = StreamProtocolError(event.error.type, event.error.message)
                self._fail(error)
                raise error
            if isinstance(event, MessageStopEvent):
                return END_OF_DATA

    def __iter__(self) -> Iterator[Union[MessageStreamEvent, UnknownStreamEvent]]:
        while True:
            event = self.read_event()
            if isinstance(event, EndOfData):
                return
            yield event

    def iter_deltas(self) -> Iterator[MessageStreamDelta]:
        """Yield content deltas until the end of the turn."""
        while True:
            delta = self.read_delta()
            if isinstance(delta, EndOfData):
                return
            yield delta

    # =========================================================================
    # Resource handling
    # =========================================================================

    def close(self) -> None:
        """Release the underlying transport. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing stream reader in state %s", self._state.value)
        if self._close_callback is not None:
            self._close_callback()

    def __enter__(self) -> "StreamReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "DATA_PREFIX",
    "END_OF_DATA",
    "EndOfData",
    "ReaderState",
    "StreamReader",
]
