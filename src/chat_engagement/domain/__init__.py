"""Domain layer for chat engagement analysis.

Value types, pure scoring functions, the exception hierarchy and the topic
augmentation interface. Nothing here performs I/O.
"""

from .exceptions import (
    EngagementAnalysisError,
    ErrorContext,
    InvalidMessageError,
    TopicAugmentationError,
)
from .interfaces import TopicAugmenter
from .models import (
    UNKNOWN_HOST,
    Answer,
    ChatMessage,
    CommunityMember,
    ConversationThread,
    EngagementAnalysis,
    HostQuestion,
    KeywordFrequency,
    KeywordTrend,
    MemberMetrics,
    MessageType,
    QuestionAnswerer,
    TopicCluster,
    TopicTheme,
    TrendDirection,
)

__all__ = [
    "UNKNOWN_HOST",
    "Answer",
    "ChatMessage",
    "CommunityMember",
    "ConversationThread",
    "EngagementAnalysis",
    "EngagementAnalysisError",
    "ErrorContext",
    "HostQuestion",
    "InvalidMessageError",
    "KeywordFrequency",
    "KeywordTrend",
    "MemberMetrics",
    "MessageType",
    "QuestionAnswerer",
    "TopicAugmentationError",
    "TopicAugmenter",
    "TopicCluster",
    "TopicTheme",
    "TrendDirection",
]
