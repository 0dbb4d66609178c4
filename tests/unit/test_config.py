"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from chat_engagement.infrastructure.config import (
    AnalysisConfig,
    OpenAIConfig,
    Settings,
)


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()

        assert config.answer_window_seconds == 120
        assert config.max_answers_per_question == 10
        assert config.max_keywords == 50
        assert config.thread_lookahead == 20
        assert config.min_thread_messages == 3
        assert config.relevance_gated_threads is False
        assert config.max_members == 20
        assert config.top_topics == 5

    @pytest.mark.parametrize(
        "message_count,expected", [(0, 2), (150, 2), (200, 2), (201, 3), (1000, 10)]
    )
    def test_min_keyword_count(self, message_count, expected):
        assert AnalysisConfig().min_keyword_count(message_count) == expected

    @pytest.mark.parametrize(
        "field,value",
        [("answer_window_seconds", 0), ("max_keywords", 0), ("min_thread_messages", 1)],
    )
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            AnalysisConfig(**{field: value})


class TestOpenAIConfig:
    def test_not_configured_without_key(self):
        config = OpenAIConfig()

        assert config.is_configured is False
        assert config.api_key.get_secret_value() == ""

    def test_configured_with_key(self):
        config = OpenAIConfig(api_key="sk-test")

        assert config.is_configured is True
        assert "sk-test" not in repr(config)


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CHAT_ENGAGEMENT_LOGFIRE__ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.analysis == AnalysisConfig()
        assert settings.logfire.enabled is False
        assert settings.is_development is True

    def test_nested_environment_variables(self, monkeypatch):
        monkeypatch.setenv("CHAT_ENGAGEMENT_ANALYSIS__ANSWER_WINDOW_SECONDS", "60")
        monkeypatch.setenv("CHAT_ENGAGEMENT_ANALYSIS__RELEVANCE_GATED_THREADS", "true")
        monkeypatch.setenv("CHAT_ENGAGEMENT_OPENAI__API_KEY", "sk-env")
        monkeypatch.setenv("CHAT_ENGAGEMENT_LOGFIRE__ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.analysis.answer_window_seconds == 60
        assert settings.analysis.relevance_gated_threads is True
        assert settings.openai.api_key.get_secret_value() == "sk-env"
        assert settings.is_development is False
