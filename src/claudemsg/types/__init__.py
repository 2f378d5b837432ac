"""Wire types for the Messages API.

This subpackage provides:
- ContentBlock variants and InputMessage, with their wire codec
- MessageRequest and MessageResponse
- MessageStreamEvent variants for streamed responses
"""

from claudemsg.types.content import (
    ContentBlock,
    ImageBlock,
    ImageSource,
    InputMessage,
    ResponseContentBlock,
    TextBlock,
    ToolResultBlock,
    ToolResultContent,
    ToolUseBlock,
    UnknownBlock,
    decode_content_block,
    decode_input_message,
    encode_content_block,
    encode_input_message,
)
from claudemsg.types.messages import (
    CLAUDE_3_5_SONNET,
    CLAUDE_3_HAIKU,
    CLAUDE_3_OPUS,
    CLAUDE_3_SONNET,
    MessageRequest,
    MessageRequestMetadata,
    MessageResponse,
    StopReason,
    Tool,
    ToolChoice,
    Usage,
    decode_message_request,
    decode_message_response,
)
from claudemsg.types.stream import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    ErrorEvent,
    MessageDelta,
    MessageDeltaEvent,
    MessageStartEvent,
    MessageStopEvent,
    MessageStreamDelta,
    MessageStreamEvent,
    PingEvent,
    StreamError,
    StreamEventType,
    UnknownStreamEvent,
    decode_stream_event,
)

__all__ = [
    "CLAUDE_3_5_SONNET",
    "CLAUDE_3_HAIKU",
    "CLAUDE_3_OPUS",
    "CLAUDE_3_SONNET",
    "ContentBlock",
    "ContentBlockDeltaEvent",
    "ContentBlockStartEvent",
    "ContentBlockStopEvent",
    "ErrorEvent",
    "ImageBlock",
    "ImageSource",
    "InputMessage",
    "MessageDelta",
    "MessageDeltaEvent",
    "MessageRequest",
    "MessageRequestMetadata",
    "MessageResponse",
    "MessageStartEvent",
    "MessageStopEvent",
    "MessageStreamDelta",
    "MessageStreamEvent",
    "PingEvent",
    "ResponseContentBlock",
    "StopReason",
    "StreamError",
    "StreamEventType",
    "TextBlock",
    "Tool",
    "ToolChoice",
    "ToolResultBlock",
    "ToolResultContent",
    "ToolUseBlock",
    "UnknownBlock",
    "UnknownStreamEvent",
    "Usage",
    "decode_content_block",
    "decode_input_message",
    "decode_message_request",
    "decode_message_response",
    "decode_stream_event",
    "encode_content_block",
    "encode_input_message",
]
