"""Analysis services for stream chat engagement.

Each module implements one component of the pipeline; ``engagement_analyzer``
composes them into a single report.
"""

from .community import calculate_stream_duration, identify_active_community_members
from .conversation_threading import detect_threads
from .engagement_analyzer import EngagementAnalyzer, analyze_engagement
from .host_detection import flag_host_messages, identify_host
from .insights import ChatInsights, calculate_insights, parse_amount
from .question_analysis import (
    QuestionLookup,
    detect_question,
    extract_host_questions,
    find_answers,
    find_answers_to_question,
    rank_question_answerers,
)
from .topic_analysis import calculate_keyword_trends, cluster_by_topic, extract_keywords

__all__ = [
    "ChatInsights",
    "EngagementAnalyzer",
    "QuestionLookup",
    "analyze_engagement",
    "calculate_insights",
    "calculate_keyword_trends",
    "calculate_stream_duration",
    "cluster_by_topic",
    "detect_question",
    "detect_threads",
    "extract_host_questions",
    "extract_keywords",
    "find_answers",
    "find_answers_to_question",
    "flag_host_messages",
    "identify_active_community_members",
    "identify_host",
    "parse_amount",
    "rank_question_answerers",
]
