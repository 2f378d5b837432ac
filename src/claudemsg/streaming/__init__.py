"""Streaming support for the Messages API.

This subpackage provides:
- StreamReader: pull-based SSE reader over a response body
- END_OF_DATA: marker for graceful end of a stream
- ReaderState: the reader's position in its byte source
"""

from claudemsg.streaming.reader import (
    DATA_PREFIX,
    END_OF_DATA,
    EndOfData,
    ReaderState,
    StreamReader,
)

__all__ = [
    "DATA_PREFIX",
    "END_OF_DATA",
    "EndOfData",
    "ReaderState",
    "StreamReader",
]
