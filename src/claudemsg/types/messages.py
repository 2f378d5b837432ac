"""Request and response shapes for the Messages API.

MessageRequest encodes to the exact field order the API documents:
model, messages, max_tokens, then the optional parameters, each left out
when unset.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, Field, ValidationError, field_validator

from claudemsg.errors import MalformedPayloadError
from claudemsg.types import wire
from claudemsg.types.content import (
    InputMessage,
    ResponseContentBlock,
    TextBlock,
    decode_input_message,
    encode_input_message,
)

CLAUDE_3_5_SONNET = "claude-3-5-sonnet-20240620"
CLAUDE_3_OPUS = "claude-3-opus-20240229"
CLAUDE_3_SONNET = "claude-3-sonnet-20240229"
CLAUDE_3_HAIKU = "claude-3-haiku-20240307"

AUTO_TOOL_CHOICE = "auto"
ANY_TOOL_CHOICE = "any"
TOOL_TOOL_CHOICE = "tool"


class StopReason(str, Enum):
    """Why the model stopped generating."""

    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    TOOL_USE = "tool_use"


def _as_stop_reason(value: str) -> Union[StopReason, str]:
    try:
        return StopReason(value)
    except ValueError:
        return value


# Known reasons decode to StopReason members; any other string is kept as is
StopReasonValue = Annotated[str, AfterValidator(_as_stop_reason)]


class Tool(BaseModel):
    """A tool the model may call.

    Attributes:
        name: Tool name.
        description: Optional human readable description.
        input_schema: JSON schema of the tool input.
    """

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=lambda: {"type": "object"})

    def to_wire(self) -> dict[str, Any]:
        obj: dict[str, Any] = {"name": self.name}
        if self.description:
            obj["description"] = self.description
        obj["input_schema"] = self.input_schema
        return obj


class ToolChoice(BaseModel):
    """How the model should pick tools."""

    type: Literal["auto", "any", "tool"] = AUTO_TOOL_CHOICE
    name: str = ""

    def to_wire(self) -> dict[str, Any]:
        obj: dict[str, Any] = {"type": self.type}
        if self.name:
            obj["name"] = self.name
        return obj


class MessageRequestMetadata(BaseModel):
    user_id: str = ""

    def to_wire(self) -> dict[str, Any]:
        return {"user_id": self.user_id} if self.user_id else {}


def _coerce_message(value: Any) -> Any:
    if isinstance(value, InputMessage):
        return value
    if isinstance(value, Mapping) and "content_blocks" in value:
        return value
    return decode_input_message(value)


class MessageRequest(BaseModel):
    """A request to create a message.

    Attributes:
        model: Model id, e.g. CLAUDE_3_5_SONNET.
        messages: Conversation so far.
        max_tokens: Maximum number of tokens to generate.
        temperature: Optional sampling temperature.
        stop_sequences: Optional custom stop sequences.
        metadata: Optional request metadata.
        stream: Whether the response is streamed as SSE.
        system: Optional system prompt.
        top_k: Optional top-k sampling.
        top_p: Optional nucleus sampling.
        tools: Optional tool declarations.
        tool_choice: Optional tool choice policy.
    """

    model: str
    messages: list[InputMessage] = Field(default_factory=list)
    max_tokens: int = 0

    temperature: Optional[float] = None
    stop_sequences: list[str] = Field(default_factory=list)
    metadata: Optional[MessageRequestMetadata] = None
    stream: bool = False
    system: str = ""
    top_k: Optional[int] = None
    top_p: Optional[float] = None

    tools: list[Tool] = Field(default_factory=list)
    tool_choice: Optional[ToolChoice] = None

    @field_validator("messages", mode="before")
    @classmethod
    def _decode_messages(cls, value: Any) -> Any:
        # Raw wire objects go through the dual-shape content decoder. Dicts
        # in model form (from model_dump) carry content_blocks and are
        # validated directly.
        if isinstance(value, list):
            return [_coerce_message(m) for m in value]
        return value

    def to_wire(self) -> dict[str, Any]:
        """Encode this request into its wire object.

        Raises:
            ContentConflictError: If any message sets both content forms.
        """
        obj: dict[str, Any] = {
            "model": self.model,
            "messages": [encode_input_message(m) for m in self.messages],
            "max_tokens": self.max_tokens,
        }
        if self.temperature is not None:
            obj["temperature"] = self.temperature
        if self.stop_sequences:
            obj["stop_sequences"] = list(self.stop_sequences)
        if self.metadata is not None:
            obj["metadata"] = self.metadata.to_wire()
        if self.stream:
            obj["stream"] = True
        if self.system:
            obj["system"] = self.system
        if self.top_k is not None:
            obj["top_k"] = self.top_k
        if self.top_p is not None:
            obj["top_p"] = self.top_p
        if self.tools:
            obj["tools"] = [t.to_wire() for t in self.tools]
        if self.tool_choice is not None:
            obj["tool_choice"] = self.tool_choice.to_wire()
        return obj

    def to_json(self) -> bytes:
        """Encode this request as compact JSON bytes."""
        return wire.dumps(self.to_wire())


class Usage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class MessageResponse(BaseModel):
    """A message returned by the API.

    Attributes:
        id: Message id.
        type: Object type, always "message".
        content: Generated content blocks.
        role: Always "assistant".
        model: Model that produced the message.
        stop_reason: Why generation stopped, None while streaming. Reasons
            outside StopReason are kept as plain strings.
        stop_sequence: The stop sequence that was hit, if any.
        usage: Token accounting.
    """

    id: str = ""
    type: str = "message"
    content: list[ResponseContentBlock] = Field(default_factory=list)
    role: str = "assistant"
    model: str = ""
    stop_reason: Optional[StopReasonValue] = None
    stop_sequence: Optional[str] = None
    usage: Usage = Field(default_factory=Usage)

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))


def decode_message_request(payload: bytes | str | Mapping[str, Any]) -> MessageRequest:
    """Decode a MessageRequest from wire bytes or a parsed object.

    Raises:
        MalformedPayloadError: If the payload is not a valid request.
    """
    data = wire.loads(payload) if isinstance(payload, (bytes, str)) else payload
    try:
        return MessageRequest.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"invalid message request: {e}") from e


def decode_message_response(payload: bytes | str | Mapping[str, Any]) -> MessageResponse:
    """Decode a MessageResponse from wire bytes or a parsed object.

    Raises:
        MalformedPayloadError: If the payload is not a valid response.
    """
    data = wire.loads(payload) if isinstance(payload, (bytes, str)) else payload
    try:
        return MessageResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"invalid message response: {e}") from e


__all__ = [
    "ANY_TOOL_CHOICE",
    "AUTO_TOOL_CHOICE",
    "CLAUDE_3_5_SONNET",
    "CLAUDE_3_HAIKU",
    "CLAUDE_3_OPUS",
    "CLAUDE_3_SONNET",
    "TOOL_TOOL_CHOICE",
    "MessageRequest",
    "MessageRequestMetadata",
    "MessageResponse",
    "StopReason",
    "StopReasonValue",
    "Tool",
    "ToolChoice",
    "Usage",
    "decode_message_request",
    "decode_message_response",
]
