"""Engagement intelligence for live stream chat.

Identifies the stream host, the host's questions and who answered them,
dominant topics and their trends, conversation threads, and the most engaged
community members, from one closed batch of chat messages.
"""

from .domain import (
    ChatMessage,
    EngagementAnalysis,
    EngagementAnalysisError,
    TopicAugmentationError,
    TopicAugmenter,
)
from .infrastructure import AnalysisConfig, OpenAITopicAugmenter, Settings, get_settings
from .services import EngagementAnalyzer, analyze_engagement, calculate_insights

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "ChatMessage",
    "EngagementAnalysis",
    "EngagementAnalysisError",
    "EngagementAnalyzer",
    "OpenAITopicAugmenter",
    "Settings",
    "TopicAugmentationError",
    "TopicAugmenter",
    "analyze_engagement",
    "calculate_insights",
    "get_settings",
]
