"""Message content types and their wire codec.

This module defines the polymorphic content of a conversation turn:
- ContentBlock variants (TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock)
- ResponseContentBlock, which adds an UnknownBlock fallback for API output
- ImageSource and ToolResultContent nested shapes
- InputMessage, whose content is either a string or a list of ContentBlocks

Encoding is explicit: each variant emits ``type`` followed only by its own
fields, and zero-valued fields are left out of the wire object entirely.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
)

from claudemsg.errors import ContentConflictError, MalformedPayloadError
from claudemsg.types import wire

TEXT_CONTENT_TYPE = "text"
IMAGE_CONTENT_TYPE = "image"
TOOL_USE_CONTENT_TYPE = "tool_use"
TOOL_RESULT_CONTENT_TYPE = "tool_result"

IMAGE_SOURCE_TYPE = "base64"

IMAGE_JPEG_MEDIA_TYPE = "image/jpeg"
IMAGE_PNG_MEDIA_TYPE = "image/png"
IMAGE_GIF_MEDIA_TYPE = "image/gif"
IMAGE_WEBP_MEDIA_TYPE = "image/webp"

ImageMediaType = Literal["image/jpeg", "image/png", "image/gif", "image/webp"]
Role = Literal["user", "assistant"]


class ImageSource(BaseModel):
    """Base64-encoded image payload.

    Attributes:
        type: Encoding kind, always "base64".
        media_type: MIME type of the image.
        data: Base64-encoded image bytes.
    """

    type: Literal["base64"] = IMAGE_SOURCE_TYPE
    media_type: ImageMediaType
    data: str


class TextBlock(BaseModel):
    """A text content block.

    Attributes:
        type: Discriminator field, always "text".
        text: The text content.
    """

    type: Literal["text"] = TEXT_CONTENT_TYPE
    text: str = ""


class ImageBlock(BaseModel):
    """An image content block.

    Attributes:
        type: Discriminator field, always "image".
        source: The image payload, or None when unset.
    """

    type: Literal["image"] = IMAGE_CONTENT_TYPE
    source: Optional[ImageSource] = None


# Content carried inside a tool result: text or image, never nested further
ToolResultContent = Annotated[
    Union[TextBlock, ImageBlock],
    Field(discriminator="type"),
]


class ToolUseBlock(BaseModel):
    """A tool invocation requested by the assistant.

    Attributes:
        type: Discriminator field, always "tool_use".
        id: Identifier of this tool use.
        name: Name of the tool to call.
        input: Free-form input arguments.
    """

    type: Literal["tool_use"] = TOOL_USE_CONTENT_TYPE
    id: str = ""
    name: str = ""
    input: dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel):
    """The result of a tool invocation, sent back by the user.

    Attributes:
        type: Discriminator field, always "tool_result".
        tool_use_id: The id of the ToolUseBlock this result answers.
        is_error: Whether the tool failed.
        content: The result payload, or None when unset.
    """

    type: Literal["tool_result"] = TOOL_RESULT_CONTENT_TYPE
    tool_use_id: str = ""
    is_error: bool = False
    content: Optional[ToolResultContent] = None


ContentBlock = Annotated[
    Union[TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock],
    Field(discriminator="type"),
]

_CONTENT_BLOCK_ADAPTER: TypeAdapter[Any] = TypeAdapter(ContentBlock)
_KNOWN_CONTENT_TYPES = frozenset(
    {TEXT_CONTENT_TYPE, IMAGE_CONTENT_TYPE, TOOL_USE_CONTENT_TYPE, TOOL_RESULT_CONTENT_TYPE}
)


class UnknownBlock(BaseModel):
    """A content block whose type this library does not know yet.

    Only produced when decoding responses and stream events. Every field of
    the wire object is kept as an extra attribute.

    Attributes:
        type: The raw type tag.
    """

    model_config = ConfigDict(extra="allow")

    type: str = ""


def _response_block_tag(value: Any) -> str:
    if isinstance(value, Mapping):
        tag = value.get("type")
    else:
        tag = getattr(value, "type", None)
    if isinstance(tag, str) and tag in _KNOWN_CONTENT_TYPES:
        return tag
    return "unknown"


# Content produced by the API. Tags outside the known variants decode to
# UnknownBlock.
ResponseContentBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag(TEXT_CONTENT_TYPE)],
        Annotated[ImageBlock, Tag(IMAGE_CONTENT_TYPE)],
        Annotated[ToolUseBlock, Tag(TOOL_USE_CONTENT_TYPE)],
        Annotated[ToolResultBlock, Tag(TOOL_RESULT_CONTENT_TYPE)],
        Annotated[UnknownBlock, Tag("unknown")],
    ],
    Discriminator(_response_block_tag),
]


class InputMessage(BaseModel):
    """A message sent to the Messages API.

    ``content`` carries a plain string and ``content_blocks`` carries
    structured content. Only one of them may be non-empty. Assignment is
    not validated; the check happens in encode_input_message.

    Attributes:
        role: "user" or "assistant".
        content: Plain string content.
        content_blocks: Structured content, or None when unused.
    """

    role: Role
    content: str = ""
    content_blocks: Optional[list[ContentBlock]] = None

    def to_wire(self) -> dict[str, Any]:
        """Encode this message into its wire object."""
        return encode_input_message(self)

    @classmethod
    def from_wire(cls, payload: bytes | str | Mapping[str, Any]) -> "InputMessage":
        """Decode a message from wire bytes or an already parsed object."""
        return decode_input_message(payload)


def encode_image_source(source: ImageSource) -> dict[str, Any]:
    return {"type": source.type, "media_type": source.media_type, "data": source.data}


def encode_content_block(block: ContentBlock) -> dict[str, Any]:
    """Encode a content block into its wire object.

    Only the active variant's fields are emitted. Nested ``source`` and
    ``content`` objects are left out entirely when they are None.

    Raises:
        TypeError: If block is not one of the ContentBlock variants.
    """
    if isinstance(block, TextBlock):
        obj: dict[str, Any] = {"type": TEXT_CONTENT_TYPE}
        if block.text:
            obj["text"] = block.text
    elif isinstance(block, ImageBlock):
        obj = {"type": IMAGE_CONTENT_TYPE}
        if block.source is not None:
            obj["source"] = encode_image_source(block.source)
    elif isinstance(block, ToolUseBlock):
        obj = {"type": TOOL_USE_CONTENT_TYPE}
        if block.id:
            obj["id"] = block.id
        if block.name:
            obj["name"] = block.name
        if block.input:
            obj["input"] = dict(block.input)
    elif isinstance(block, ToolResultBlock):
        obj = {"type": TOOL_RESULT_CONTENT_TYPE}
        if block.tool_use_id:
            obj["tool_use_id"] = block.tool_use_id
        if block.is_error:
            obj["is_error"] = True
        if block.content is not None:
            obj["content"] = encode_content_block(block.content)
    else:
        raise TypeError(f"Unsupported content block: {type(block).__name__}")
    return obj


def decode_content_block(payload: bytes | str | Mapping[str, Any]) -> ContentBlock:
    """Decode a single content block from wire bytes or a parsed object."""
    data = wire.loads(payload) if isinstance(payload, (bytes, str)) else payload
    try:
        return _CONTENT_BLOCK_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"invalid content block: {e}") from e


def encode_input_message(message: InputMessage) -> dict[str, Any]:
    """Encode an InputMessage into its wire object.

    Raises:
        ContentConflictError: If both content and content_blocks are non-empty.
    """
    if message.content and message.content_blocks:
        raise ContentConflictError()

    if message.content_blocks:
        return {
            "role": message.role,
            "content": [encode_content_block(b) for b in message.content_blocks],
        }
    return {"role": message.role, "content": message.content}


# =============================================================================
# Decoding
# =============================================================================
# The wire ``content`` field is either a string or an array of blocks. Each
# candidate shape below is tried in order against the same parsed object;
# a failed attempt leaves nothing behind.


class _StringContentShape(BaseModel):
    role: Role
    content: str = ""

    def build(self) -> InputMessage:
        return InputMessage(role=self.role, content=self.content)


class _BlockContentShape(BaseModel):
    role: Role
    content: list[ContentBlock]

    def build(self) -> InputMessage:
        return InputMessage(role=self.role, content_blocks=self.content)


_INPUT_MESSAGE_SHAPES: tuple[type[BaseModel], ...] = (
    _StringContentShape,
    _BlockContentShape,
)


def decode_input_message(payload: bytes | str | Mapping[str, Any]) -> InputMessage:
    """Decode an InputMessage from wire bytes or an already parsed object.

    String content is tried first, then a list of content blocks.

    Raises:
        MalformedPayloadError: If the payload matches neither shape.
    """
    data = wire.loads(payload) if isinstance(payload, (bytes, str)) else payload

    last_error: ValidationError | None = None
    for shape in _INPUT_MESSAGE_SHAPES:
        try:
            candidate = shape.model_validate(data)
        except ValidationError as e:
            last_error = e
            continue
        return candidate.build()  # type: ignore[attr-defined]

    raise MalformedPayloadError(f"invalid input message: {last_error}") from last_error


__all__ = [
    "IMAGE_CONTENT_TYPE",
    "IMAGE_GIF_MEDIA_TYPE",
    "IMAGE_JPEG_MEDIA_TYPE",
    "IMAGE_PNG_MEDIA_TYPE",
    "IMAGE_SOURCE_TYPE",
    "IMAGE_WEBP_MEDIA_TYPE",
    "TEXT_CONTENT_TYPE",
    "TOOL_RESULT_CONTENT_TYPE",
    "TOOL_USE_CONTENT_TYPE",
    "ContentBlock",
    "ImageBlock",
    "ImageMediaType",
    "ImageSource",
    "InputMessage",
    "Role",
    "TextBlock",
    "ToolResultBlock",
    "ToolResultContent",
    "ToolUseBlock",
    "ResponseContentBlock",
    "UnknownBlock",
    "decode_content_block",
    "decode_input_message",
    "encode_content_block",
    "encode_image_source",
    "encode_input_message",
]
