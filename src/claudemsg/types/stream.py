"""Typed events of a streamed Messages API response.

Each SSE ``data:`` line carries one JSON object whose ``type`` field selects
one of the event models below. Events are frozen once decoded.

Event Types:
- message_start: carries the initial MessageResponse
- content_block_start / content_block_stop: bracket one content block
- content_block_delta: an incremental text or partial JSON fragment
- message_delta: top-level changes such as the stop reason
- message_stop: logical end of the message
- ping: keep-alive
- error: an API error reported mid-stream
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from claudemsg.errors import MalformedPayloadError
from claudemsg.types import wire
from claudemsg.types.content import ResponseContentBlock
from claudemsg.types.messages import MessageResponse, StopReasonValue, Usage

logger = logging.getLogger(__name__)


class StreamEventType(str, Enum):
    """Type tags of stream events."""

    MESSAGE_START = "message_start"
    CONTENT_BLOCK_START = "content_block_start"
    CONTENT_BLOCK_DELTA = "content_block_delta"
    CONTENT_BLOCK_STOP = "content_block_stop"
    MESSAGE_DELTA = "message_delta"
    MESSAGE_STOP = "message_stop"
    PING = "ping"
    ERROR = "error"


TEXT_DELTA_TYPE = "text_delta"
INPUT_JSON_DELTA_TYPE = "input_json_delta"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class MessageStreamDelta(_FrozenModel):
    """An incremental fragment of a content block.

    Attributes:
        type: "text_delta" or "input_json_delta".
        text: Text fragment, for text deltas.
        partial_json: Fragment of a tool input JSON document.
    """

    type: str
    text: str = ""
    partial_json: str = ""


class MessageDelta(_FrozenModel):
    stop_reason: Optional[StopReasonValue] = None
    stop_sequence: Optional[str] = None


class StreamError(_FrozenModel):
    type: str
    message: str


class MessageStartEvent(_FrozenModel):
    type: Literal["message_start"] = "message_start"
    message: MessageResponse


class ContentBlockStartEvent(_FrozenModel):
    type: Literal["content_block_start"] = "content_block_start"
    index: int = 0
    content_block: ResponseContentBlock


class ContentBlockDeltaEvent(_FrozenModel):
    type: Literal["content_block_delta"] = "content_block_delta"
    index: int = 0
    delta: MessageStreamDelta


class ContentBlockStopEvent(_FrozenModel):
    type: Literal["content_block_stop"] = "content_block_stop"
    index: int = 0


class MessageDeltaEvent(_FrozenModel):
    type: Literal["message_delta"] = "message_delta"
    delta: MessageDelta = Field(default_factory=MessageDelta)
    usage: Optional[Usage] = None


class MessageStopEvent(_FrozenModel):
    type: Literal["message_stop"] = "message_stop"


class PingEvent(_FrozenModel):
    type: Literal["ping"] = "ping"


class ErrorEvent(_FrozenModel):
    type: Literal["error"] = "error"
    error: StreamError


MessageStreamEvent = Annotated[
    Union[
        MessageStartEvent,
        ContentBlockStartEvent,
        ContentBlockDeltaEvent,
        ContentBlockStopEvent,
        MessageDeltaEvent,
        MessageStopEvent,
        PingEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]


class UnknownStreamEvent(_FrozenModel):
    """An event whose type this library does not know yet.

    Attributes:
        type: The raw type tag, empty when the object has none.
        data: The whole decoded JSON object.
    """

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


_STREAM_EVENT_ADAPTER: TypeAdapter[MessageStreamEvent] = TypeAdapter(MessageStreamEvent)
_KNOWN_EVENT_TYPES = frozenset(t.value for t in StreamEventType)


def decode_stream_event(
    payload: bytes | str | Mapping[str, Any],
) -> Union[MessageStreamEvent, UnknownStreamEvent]:
    """Decode one stream event.

    Returns:
        One of the MessageStreamEvent models, or UnknownStreamEvent when the
        type tag is not recognized.

    Raises:
        MalformedPayloadError: If the payload is not valid JSON or does not
            match the shape of its event type.
    """
    data = wire.loads(payload) if isinstance(payload, (bytes, bytearray, str)) else payload
    if not isinstance(data, Mapping):
        raise MalformedPayloadError(
            f"stream event must be a JSON object, got {type(data).__name__}"
        )

    event_type = data.get("type")
    if not isinstance(event_type, str) or event_type not in _KNOWN_EVENT_TYPES:
        logger.debug("Unknown stream event type: %r", event_type)
        tag = "" if event_type is None else str(event_type)
        return UnknownStreamEvent(type=tag, data=dict(data))

    try:
        return _STREAM_EVENT_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"invalid {event_type} event: {e}") from e


__all__ = [
    "INPUT_JSON_DELTA_TYPE",
    "TEXT_DELTA_TYPE",
    "ContentBlockDeltaEvent",
    "ContentBlockStartEvent",
    "ContentBlockStopEvent",
    "ErrorEvent",
    "MessageDelta",
    "MessageDeltaEvent",
    "MessageStartEvent",
    "MessageStopEvent",
    "MessageStreamDelta",
    "MessageStreamEvent",
    "PingEvent",
    "StreamError",
    "StreamEventType",
    "UnknownStreamEvent",
    "decode_stream_event",
]
