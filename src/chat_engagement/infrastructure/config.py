"""Configuration settings for chat engagement analysis.

This module provides centralized configuration management using Pydantic Settings,
with logical grouping of related settings. ``AnalysisConfig`` carries every
tunable threshold of the analysis pipeline and can also be built directly in
code or tests without touching the environment.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalysisConfig(BaseModel):
    """Thresholds, windows and truncation points of the analysis pipeline."""

    # Question/answer matching
    answer_window_seconds: float = Field(
        default=120.0, gt=0, description="Seconds after a question in which replies count"
    )
    max_answers_per_question: int = Field(
        default=10, ge=1, description="Answers kept per host question"
    )
    max_answerers: int = Field(
        default=10, ge=1, description="Answerers kept in the report and in question lookups"
    )

    # Topics
    min_keyword_frequency: int = Field(
        default=2, ge=1, description="Floor of the minimum keyword frequency"
    )
    keyword_frequency_divisor: int = Field(
        default=100,
        ge=1,
        description="Minimum keyword frequency grows by one per this many messages",
    )
    max_keywords: int = Field(default=50, ge=1, description="Keywords kept")
    max_cluster_keywords: int = Field(
        default=15, ge=1, description="Top keywords considered as cluster anchors"
    )
    min_cluster_messages: int = Field(
        default=2, ge=1, description="Messages a keyword needs to anchor a cluster"
    )
    max_trend_keywords: int = Field(
        default=20, ge=1, description="Top keywords classified for trend"
    )
    trend_threshold: float = Field(
        default=0.3, ge=0, description="Relative change needed to call a trend"
    )
    top_topics: int = Field(default=5, ge=1, description="Topics in the report summary")

    # Conversation threads
    thread_window_seconds: float = Field(
        default=120.0, gt=0, description="Seconds after a seed that join its thread"
    )
    thread_lookahead: int = Field(
        default=20, ge=1, description="Candidates examined after each thread seed"
    )
    min_thread_messages: int = Field(
        default=3, ge=2, description="Messages needed to emit a thread"
    )
    relevance_gated_threads: bool = Field(
        default=False,
        description="Require same author or @mention to join a thread",
    )

    # Community members
    max_members: int = Field(default=20, ge=1, description="Community members kept")
    member_gap_ceiling_seconds: float = Field(
        default=300.0, gt=0, description="Longest gap counted between an author's messages"
    )
    default_member_gap_seconds: float = Field(
        default=120.0, ge=0, description="Gap used when an author has no qualifying gaps"
    )

    # Topic augmentation
    augmentation_timeout_seconds: float = Field(
        default=15.0, gt=0, description="Upper bound on waiting for an augmenter"
    )
    augmentation_sample_size: int = Field(
        default=500, ge=1, description="Most recent messages matched against themes"
    )
    max_augmented_clusters: int = Field(
        default=10, ge=0, description="External clusters kept when augmenting"
    )
    max_local_clusters_when_augmented: int = Field(
        default=5, ge=0, description="Local clusters kept after external ones"
    )

    def min_keyword_count(self, message_count: int) -> int:
        """Minimum frequency a keyword needs for a corpus of this size."""
        return max(
            self.min_keyword_frequency,
            -(-message_count // self.keyword_frequency_divisor),
        )


class OpenAIConfig(BaseModel):
    """OpenAI topic augmentation configuration."""

    api_key: SecretStr = Field(default=SecretStr(""), description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Chat completion model")
    base_url: str = Field(
        default="https://api.openai.com/v1", description="OpenAI API base URL"
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_tokens: int = Field(default=1000, description="Response token limit")
    request_timeout: float = Field(
        default=30.0, description="HTTP request timeout in seconds"
    )
    max_retries: int = Field(
        default=3, description="Maximum tries for transient network errors"
    )

    @property
    def is_configured(self) -> bool:
        """Check whether an API key was provided."""
        return bool(self.api_key.get_secret_value())


class LogfireConfig(BaseModel):
    """Logfire observability configuration."""

    enabled: bool = Field(default=False, description="Enable Logfire observability")
    service_name: str = Field(
        default="chat-engagement", description="Service name for Logfire"
    )
    environment: str = Field(default="development", description="Logfire environment")
    token: Optional[SecretStr] = Field(
        default=None, description="Logfire write token (optional for local development)"
    )
    console_enabled: bool = Field(
        default=True, description="Enable Logfire console output"
    )
    log_level: str = Field(default="INFO", description="Logfire log level")


class Settings(BaseSettings):
    """Application settings with logical grouping."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHAT_ENGAGEMENT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    logfire: LogfireConfig = Field(default_factory=LogfireConfig)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.logfire.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
