"""Infrastructure for chat engagement analysis.

Configuration, Logfire observability and the OpenAI topic augmenter.
"""

from .config import AnalysisConfig, LogfireConfig, OpenAIConfig, Settings, get_settings
from .observability import configure_logfire, traced
from .openai_topic_augmenter import OpenAITopicAugmenter

__all__ = [
    "AnalysisConfig",
    "LogfireConfig",
    "OpenAIConfig",
    "OpenAITopicAugmenter",
    "Settings",
    "configure_logfire",
    "get_settings",
    "traced",
]
