"""Value types for chat engagement analysis.

Every type here is a frozen dataclass and every collection field is a tuple,
so an ``EngagementAnalysis`` cannot change after the analyzer assembles it.

Authors are identified by display name, not by account. Two accounts sharing
a display name are merged by every component; ``author_channel_id`` is kept on
the message for callers that need to tell them apart.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .exceptions import InvalidMessageError


UNKNOWN_HOST = "Unknown Host"


class MessageType(str, Enum):
    """Kinds of chat messages."""

    TEXT = "text"
    PAID = "paid"
    MEMBERSHIP = "membership"
    STICKER = "sticker"


class TrendDirection(str, Enum):
    """Direction of a keyword's frequency across the stream."""

    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class ChatMessage:
    """Represents a single live chat message."""

    id: str
    author: str
    text: str
    timestamp: datetime
    badges: Tuple[str, ...] = ()
    message_type: MessageType = MessageType.TEXT
    amount: Optional[str] = None
    profile_image_url: str = ""
    author_channel_id: Optional[str] = None
    source: Optional[str] = None
    is_host: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        """Build a message from an ingestion payload.

        Args:
            data: Payload using the collector's camelCase keys

        Returns:
            The parsed message

        Raises:
            InvalidMessageError: If id, author or timestamp is missing, or the
                message type is not recognised
        """
        message_id = data.get("id")
        for required in ("id", "author", "timestamp"):
            if not data.get(required):
                raise InvalidMessageError(required, message_id)

        raw_type = data.get("type") or MessageType.TEXT.value
        try:
            message_type = MessageType(raw_type)
        except ValueError as e:
            raise InvalidMessageError("type", message_id, invalid_value=raw_type) from e

        return cls(
            id=str(message_id),
            author=data["author"],
            text=data.get("message") or data.get("text") or "",
            timestamp=parse_timestamp(data["timestamp"]),
            badges=tuple(data.get("badges") or ()),
            message_type=message_type,
            amount=data.get("amount"),
            profile_image_url=data.get("profileImageUrl") or "",
            author_channel_id=data.get("authorChannelId"),
            source=data.get("source"),
            is_host=bool(data.get("isHost", False)),
        )

    def has_badge(self, badge: str) -> bool:
        """Check whether the author carried a role badge on this message."""
        return badge in self.badges


@dataclass(frozen=True)
class Answer:
    """A reply to a host question."""

    message_id: str
    author: str
    text: str
    timestamp: datetime
    response_time_seconds: float


@dataclass(frozen=True)
class HostQuestion:
    """A host message classified as a question, with its replies."""

    message_id: str
    author: str
    question: str
    timestamp: datetime
    answers: Tuple[Answer, ...] = ()

    @property
    def was_answered(self) -> bool:
        return len(self.answers) > 0


@dataclass(frozen=True)
class QuestionAnswerer:
    """Aggregate answering stats for one author."""

    author: str
    profile_image_url: str
    questions_answered: int
    average_response_time: float
    helpfulness_score: int


@dataclass(frozen=True)
class KeywordFrequency:
    keyword: str
    frequency: int


@dataclass(frozen=True)
class TopicCluster:
    """Messages grouped around a shared keyword or theme."""

    topic: str
    keywords: Tuple[str, ...]
    message_count: int
    top_contributors: Tuple[str, ...]
    start_time: datetime
    end_time: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class KeywordTrend:
    keyword: str
    frequency: int
    trend: TrendDirection


@dataclass(frozen=True)
class ConversationThread:
    """A burst of temporally adjacent messages."""

    thread_id: str
    participants: Tuple[str, ...]
    start_time: datetime
    end_time: datetime
    message_ids: Tuple[str, ...]

    @property
    def message_count(self) -> int:
        return len(self.message_ids)


@dataclass(frozen=True)
class MemberMetrics:
    """Raw activity metrics behind a community member's score."""

    total_messages: int
    messages_per_hour: float
    questions_answered: int
    avg_response_time: float
    conversation_count: int


@dataclass(frozen=True)
class CommunityMember:
    author: str
    profile_image_url: str
    engagement_score: int
    metrics: MemberMetrics
    badges: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TopicTheme:
    """A theme supplied by an external topic augmenter."""

    topic: str
    keywords: Tuple[str, ...] = ()
    description: Optional[str] = None


@dataclass(frozen=True)
class EngagementAnalysis:
    """Complete engagement report for one stream session."""

    host_name: str
    host_questions: Tuple[HostQuestion, ...] = ()
    question_answerers: Tuple[QuestionAnswerer, ...] = ()
    keywords: Tuple[KeywordFrequency, ...] = ()
    topic_clusters: Tuple[TopicCluster, ...] = ()
    trending_keywords: Tuple[KeywordTrend, ...] = ()
    active_community_members: Tuple[CommunityMember, ...] = ()
    conversation_threads: Tuple[ConversationThread, ...] = ()
    total_questions: int = 0
    answered_questions: int = 0
    average_response_time: int = 0
    top_topics: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "EngagementAnalysis":
        """Zero-valued report returned for an empty message set."""
        return cls(host_name=UNKNOWN_HOST)
