"""Tests for stream event decoding."""

import pydantic
import pytest

from claudemsg.errors import MalformedPayloadError
from claudemsg.types.content import TextBlock, ToolUseBlock, UnknownBlock
from claudemsg.types.messages import StopReason
from claudemsg.types.stream import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    ErrorEvent,
    MessageDeltaEvent,
    MessageStartEvent,
    MessageStopEvent,
    PingEvent,
    StreamEventType,
    UnknownStreamEvent,
    decode_stream_event,
)


class TestDecodeStreamEvent:
    """Tests for decode_stream_event."""

    def test_message_start(self):
        """message_start carries a full message object."""
        event = decode_stream_event(
            b'{"type":"message_start","message":{"id":"msg_1","type":"message",'
            b'"role":"assistant","content":[],"model":"claude-3-haiku-20240307",'
            b'"stop_reason":null,"stop_sequence":null,'
            b'"usage":{"input_tokens":25,"output_tokens":1}}}'
        )
        assert isinstance(event, MessageStartEvent)
        assert event.message.id == "msg_1"
        assert event.message.usage.input_tokens == 25

    def test_content_block_start_text(self):
        """content_block_start carries the initial content block."""
        event = decode_stream_event(
            '{"type":"content_block_start","index":0,"content_block":{"type":"text","text":""}}'
        )
        assert isinstance(event, ContentBlockStartEvent)
        assert event.index == 0
        assert event.content_block == TextBlock()

    def test_content_block_start_tool_use(self):
        """Tool use blocks can open a content block."""
        event = decode_stream_event(
            {
                "type": "content_block_start",
                "index": 1,
                "content_block": {"type": "tool_use", "id": "toolu_1", "name": "f", "input": {}},
            }
        )
        assert event.content_block == ToolUseBlock(id="toolu_1", name="f")

    def test_text_delta(self):
        """content_block_delta carries a text fragment."""
        event = decode_stream_event(
            '{"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"Hi"}}'
        )
        assert isinstance(event, ContentBlockDeltaEvent)
        assert event.delta.type == "text_delta"
        assert event.delta.text == "Hi"

    def test_input_json_delta(self):
        """content_block_delta can carry partial JSON."""
        event = decode_stream_event(
            '{"type":"content_block_delta","index":1,'
            '"delta":{"type":"input_json_delta","partial_json":"{\\"city\\": "}}'
        )
        assert event.delta.partial_json == '{"city": '
        assert event.delta.text == ""

    def test_message_delta(self):
        """message_delta carries the stop reason and usage."""
        event = decode_stream_event(
            '{"type":"message_delta","delta":{"stop_reason":"end_turn","stop_sequence":null},'
            '"usage":{"output_tokens":15}}'
        )
        assert isinstance(event, MessageDeltaEvent)
        assert event.delta.stop_reason is StopReason.END_TURN
        assert event.usage.output_tokens == 15

    @pytest.mark.parametrize(
        ("payload", "cls"),
        [
            ('{"type":"content_block_stop","index":0}', ContentBlockStopEvent),
            ('{"type":"message_stop"}', MessageStopEvent),
            ('{"type":"ping"}', PingEvent),
        ],
    )
    def test_simple_events(self, payload, cls):
        """Events without payload decode to their own class."""
        assert isinstance(decode_stream_event(payload), cls)

    def test_error_event(self):
        """error events carry the provider error type and message."""
        event = decode_stream_event(
            '{"type":"error","error":{"type":"overloaded_error","message":"Overloaded"}}'
        )
        assert isinstance(event, ErrorEvent)
        assert event.error.type == "overloaded_error"
        assert event.error.message == "Overloaded"

    def test_unknown_event_type(self):
        """Unrecognized types decode to UnknownStreamEvent."""
        event = decode_stream_event('{"type":"future_event","value":1}')
        assert isinstance(event, UnknownStreamEvent)
        assert event.type == "future_event"
        assert event.data == {"type": "future_event", "value": 1}

    def test_content_block_start_unknown_block(self):
        """New block types open a content block as UnknownBlock."""
        event = decode_stream_event(
            '{"type":"content_block_start","index":0,'
            '"content_block":{"type":"thinking","thinking":""}}'
        )
        assert isinstance(event, ContentBlockStartEvent)
        assert isinstance(event.content_block, UnknownBlock)
        assert event.content_block.type == "thinking"

    def test_message_delta_unknown_stop_reason(self):
        """Unlisted stop reasons are kept as strings."""
        event = decode_stream_event(
            '{"type":"message_delta","delta":{"stop_reason":"refusal"},"usage":{"output_tokens":3}}'
        )
        assert isinstance(event, MessageDeltaEvent)
        assert event.delta.stop_reason == "refusal"

    def test_missing_type_is_empty_tag(self):
        """An object without a type tag is an UnknownStreamEvent with an empty type."""
        event = decode_stream_event(b"{}")
        assert isinstance(event, UnknownStreamEvent)
        assert event.type == ""
        assert event.data == {}

    def test_non_string_type_is_unknown(self):
        """Non-string type tags do not break the lookup."""
        event = decode_stream_event('{"type":["ping"]}')
        assert isinstance(event, UnknownStreamEvent)
        assert event.type == "['ping']"

    def test_events_are_frozen(self):
        """Decoded events cannot be mutated."""
        event = decode_stream_event('{"type":"content_block_stop","index":0}')
        with pytest.raises(pydantic.ValidationError):
            event.index = 3

    def test_structural_equality(self):
        """Events compare equal by value."""
        payload = '{"type":"content_block_stop","index":2}'
        assert decode_stream_event(payload) == decode_stream_event(payload)

    def test_event_type_enum_matches_tags(self):
        """StreamEventType values equal the wire tags."""
        assert StreamEventType.CONTENT_BLOCK_DELTA == "content_block_delta"
        assert StreamEventType("message_stop") is StreamEventType.MESSAGE_STOP

    def test_invalid_json(self):
        """Broken JSON raises MalformedPayloadError."""
        with pytest.raises(MalformedPayloadError):
            decode_stream_event(b'{"type":')

    def test_non_object(self):
        """A JSON value that is not an object is rejected."""
        with pytest.raises(MalformedPayloadError):
            decode_stream_event(b"[1, 2]")

    def test_known_type_with_bad_shape(self):
        """A known type with missing fields is rejected."""
        with pytest.raises(MalformedPayloadError):
            decode_stream_event('{"type":"error"}')
