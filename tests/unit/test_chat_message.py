"""Tests for chat message parsing and the error hierarchy."""

from datetime import datetime, timezone

import pytest

from chat_engagement.domain.exceptions import (
    EngagementAnalysisError,
    ErrorContext,
    InvalidMessageError,
)
from chat_engagement.domain.models import (
    ChatMessage,
    HostQuestion,
    MessageType,
    parse_timestamp,
)


@pytest.fixture
def payload():
    return {
        "id": "abc",
        "author": "Ann",
        "message": "hello chat",
        "timestamp": "2024-05-04T18:00:30Z",
        "badges": ["member", "moderator"],
        "type": "paid",
        "amount": "$5.00",
        "profileImageUrl": "https://img.example/ann.png",
        "authorChannelId": "UC123",
        "source": "youtube",
    }


class TestChatMessageFromDict:
    def test_parses_payload(self, payload):
        msg = ChatMessage.from_dict(payload)

        assert msg.id == "abc"
        assert msg.author == "Ann"
        assert msg.text == "hello chat"
        assert msg.timestamp == datetime(2024, 5, 4, 18, 0, 30, tzinfo=timezone.utc)
        assert msg.badges == ("member", "moderator")
        assert msg.message_type == MessageType.PAID
        assert msg.amount == "$5.00"
        assert msg.profile_image_url == "https://img.example/ann.png"
        assert msg.author_channel_id == "UC123"
        assert msg.is_host is False
        assert msg.has_badge("moderator")
        assert not msg.has_badge("owner")

    def test_minimal_payload(self):
        msg = ChatMessage.from_dict(
            {"id": 7, "author": "Ben", "timestamp": "2024-05-04T18:00:00+00:00"}
        )

        assert msg.id == "7"
        assert msg.text == ""
        assert msg.badges == ()
        assert msg.message_type == MessageType.TEXT
        assert msg.profile_image_url == ""

    @pytest.mark.parametrize("missing", ["id", "author", "timestamp"])
    def test_missing_required_field(self, payload, missing):
        del payload[missing]

        with pytest.raises(InvalidMessageError) as exc_info:
            ChatMessage.from_dict(payload)

        assert exc_info.value.context.field_name == missing
        assert isinstance(exc_info.value, EngagementAnalysisError)

    def test_unknown_message_type(self, payload):
        payload["type"] = "poll"

        with pytest.raises(InvalidMessageError) as exc_info:
            ChatMessage.from_dict(payload)

        assert exc_info.value.context.field_name == "type"
        assert exc_info.value.context.invalid_value == "poll"
        assert str(exc_info.value).startswith("Chat message has invalid 'type': 'poll'")

    def test_messages_are_immutable(self, payload):
        msg = ChatMessage.from_dict(payload)

        with pytest.raises(AttributeError):
            msg.text = "edited"


def test_parse_timestamp_passes_datetimes_through():
    now = datetime.now(timezone.utc)
    assert parse_timestamp(now) is now


def test_was_answered():
    question = HostQuestion(
        message_id="q", author="Host", question="Ready?", timestamp=datetime.now(timezone.utc)
    )
    assert question.was_answered is False


class TestErrors:
    def test_invalid_message_str(self):
        error = InvalidMessageError("author", "abc")

        assert str(error) == (
            "Chat message is missing 'author' - [ChatMessage:abc] - Field: author"
        )

    def test_context_to_dict(self):
        context = ErrorContext(entity_type="ChatMessage", field_name="type", invalid_value="poll")

        assert context.to_dict() == {
            "entity_type": "ChatMessage",
            "field_name": "type",
            "invalid_value": "poll",
        }
