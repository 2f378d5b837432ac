"""Tests for MessageRequest / MessageResponse encoding and decoding."""

import pytest

from claudemsg.errors import ContentConflictError, MalformedPayloadError
from claudemsg.types.content import (
    IMAGE_PNG_MEDIA_TYPE,
    ImageBlock,
    ImageSource,
    InputMessage,
    TextBlock,
    ToolUseBlock,
    UnknownBlock,
)
from claudemsg.types.messages import (
    CLAUDE_3_HAIKU,
    MessageRequest,
    MessageRequestMetadata,
    StopReason,
    Tool,
    ToolChoice,
    decode_message_request,
    decode_message_response,
)


class TestMessageRequestEncoding:
    """Tests for MessageRequest.to_json."""

    def test_minimal_request_omits_optional_fields(self):
        """Only model, messages and max_tokens are emitted by default."""
        request = MessageRequest(
            model="mock",
            messages=[InputMessage(role="user", content="content")],
        )
        assert request.to_json() == (
            b'{"model":"mock","messages":[{"role":"user","content":"content"}],"max_tokens":0}'
        )

    def test_image_block_request(self):
        """Block content renders nested image sources."""
        request = MessageRequest(
            model="mock",
            messages=[
                InputMessage(
                    role="user",
                    content_blocks=[
                        ImageBlock(source=ImageSource(media_type=IMAGE_PNG_MEDIA_TYPE, data="data"))
                    ],
                )
            ],
            max_tokens=2000,
        )
        assert request.to_json() == (
            b'{"model":"mock","messages":[{"role":"user","content":[{"type":"image",'
            b'"source":{"type":"base64","media_type":"image/png","data":"data"}}]}],'
            b'"max_tokens":2000}'
        )

    def test_conflicting_message_fails(self):
        """A message with both content forms fails the whole request."""
        request = MessageRequest(
            model="mock",
            messages=[InputMessage(role="user", content="content", content_blocks=[TextBlock()])],
        )
        with pytest.raises(ContentConflictError):
            request.to_json()

    def test_optional_fields_in_wire_order(self):
        """Optional parameters follow max_tokens in a fixed order."""
        request = MessageRequest(
            model=CLAUDE_3_HAIKU,
            messages=[InputMessage(role="user", content="hi")],
            max_tokens=10,
            temperature=0.5,
            stop_sequences=["END"],
            metadata=MessageRequestMetadata(user_id="u-1"),
            stream=True,
            system="Be brief.",
            top_k=5,
            top_p=0.9,
            tools=[Tool(name="get_weather", input_schema={"type": "object"})],
            tool_choice=ToolChoice(type="tool", name="get_weather"),
        )
        assert list(request.to_wire()) == [
            "model",
            "messages",
            "max_tokens",
            "temperature",
            "stop_sequences",
            "metadata",
            "stream",
            "system",
            "top_k",
            "top_p",
            "tools",
            "tool_choice",
        ]

    def test_tool_description_omitted_when_empty(self):
        """Tools without a description omit the key."""
        assert Tool(name="noop").to_wire() == {"name": "noop", "input_schema": {"type": "object"}}

    def test_tool_choice_name_omitted_when_empty(self):
        """Tool choices without a name omit the key."""
        assert ToolChoice(type="auto").to_wire() == {"type": "auto"}

    def test_non_ascii_is_kept_as_utf8(self):
        """Non-ASCII text is encoded as UTF-8, not escaped."""
        request = MessageRequest(model="mock", messages=[InputMessage(role="user", content="héllo")])
        assert "héllo".encode("utf-8") in request.to_json()

    def test_zero_sampling_values_are_sent(self):
        """Explicit zeros are set values, only None is left out."""
        request = MessageRequest(
            model="mock",
            messages=[InputMessage(role="user", content="hi")],
            max_tokens=1,
            temperature=0.0,
            top_k=0,
            top_p=0.0,
        )
        wire_obj = request.to_wire()
        assert wire_obj["temperature"] == 0.0
        assert wire_obj["top_k"] == 0
        assert wire_obj["top_p"] == 0.0
        assert request.to_json().endswith(b'"max_tokens":1,"temperature":0.0,"top_k":0,"top_p":0.0}')


class TestMessageRequestDecoding:
    """Tests for decode_message_request."""

    def test_byte_exact_round_trip(self):
        """Decoding then re-encoding reproduces the input bytes."""
        payload = b'{"model":"mock","messages":[{"role":"user","content":"content"}],"max_tokens":0}'
        assert decode_message_request(payload).to_json() == payload

    def test_block_messages_are_decoded(self):
        """Block content goes through the dual-shape decoder."""
        request = decode_message_request(
            {
                "model": "mock",
                "messages": [
                    {"role": "user", "content": "question"},
                    {"role": "assistant", "content": [{"type": "tool_use", "id": "t1", "name": "f"}]},
                ],
                "max_tokens": 5,
            }
        )
        assert request.messages[0] == InputMessage(role="user", content="question")
        assert request.messages[1].content_blocks == [ToolUseBlock(id="t1", name="f")]

    def test_model_dump_round_trip_keeps_blocks(self):
        """model_dump output validates back to the same request."""
        request = MessageRequest(
            model="mock",
            messages=[
                InputMessage(role="user", content_blocks=[TextBlock(text="hi")]),
                InputMessage(role="assistant", content="hello"),
            ],
            max_tokens=5,
        )
        restored = MessageRequest.model_validate(request.model_dump())
        assert restored == request
        assert restored.to_json() == request.to_json()

    def test_model_form_dict_messages(self):
        """Dicts using the content_blocks field are taken as InputMessages."""
        request = MessageRequest(
            model="mock",
            messages=[{"role": "user", "content_blocks": [{"type": "text", "text": "hi"}]}],
        )
        assert request.messages[0].content_blocks == [TextBlock(text="hi")]
        assert request.to_wire()["messages"] == [
            {"role": "user", "content": [{"type": "text", "text": "hi"}]}
        ]

    def test_malformed_message_fails(self):
        """A message that matches no content shape fails the request."""
        with pytest.raises(MalformedPayloadError):
            decode_message_request({"model": "mock", "messages": [{"role": "user", "content": 3}]})

    def test_invalid_json_fails(self):
        """Broken JSON fails with MalformedPayloadError."""
        with pytest.raises(MalformedPayloadError):
            decode_message_request(b"not json")


class TestMessageResponse:
    """Tests for decode_message_response."""

    def test_decode_full_response(self):
        """A typical response decodes into typed fields."""
        response = decode_message_response(
            {
                "id": "msg_1",
                "type": "message",
                "role": "assistant",
                "model": CLAUDE_3_HAIKU,
                "content": [
                    {"type": "text", "text": "Hello"},
                    {"type": "tool_use", "id": "toolu_1", "name": "f", "input": {"a": 1}},
                    {"type": "text", "text": " world"},
                ],
                "stop_reason": "tool_use",
                "stop_sequence": None,
                "usage": {"input_tokens": 12, "output_tokens": 7},
            }
        )
        assert response.id == "msg_1"
        assert response.stop_reason is StopReason.TOOL_USE
        assert response.usage.output_tokens == 7
        assert response.text == "Hello world"
        assert response.content[1] == ToolUseBlock(id="toolu_1", name="f", input={"a": 1})

    def test_unknown_stop_reason_is_kept(self):
        """Stop reasons outside the enum are kept as plain strings."""
        response = decode_message_response({"id": "msg_1", "stop_reason": "refusal"})
        assert response.stop_reason == "refusal"
        assert not isinstance(response.stop_reason, StopReason)

    def test_unknown_content_block_is_kept(self):
        """New block types decode to UnknownBlock next to the known ones."""
        response = decode_message_response(
            {
                "id": "msg_1",
                "content": [
                    {"type": "thinking", "thinking": "let me see"},
                    {"type": "text", "text": "Answer"},
                ],
            }
        )
        assert isinstance(response.content[0], UnknownBlock)
        assert response.content[0].type == "thinking"
        assert response.text == "Answer"
