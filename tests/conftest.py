"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

# Make both the project root (for tests.factories) and src/ importable
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / "src"))

import logfire
import pytest

from chat_engagement.infrastructure.config import AnalysisConfig
from tests.factories import chat

# Spans are recorded locally only
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def analysis_config() -> AnalysisConfig:
    """Default analysis configuration."""
    return AnalysisConfig()


@pytest.fixture
def qa_session():
    """A short session with one answered and one unanswered host question.

    The host owns the channel. Bob answers quickly, Cara answers later and
    also replies to the host after the window.
    """
    return [
        chat("Host", "Welcome everyone to the stream", 0, badges=("owner",)),
        chat("Host", "What time does the stream end?", 10),
        chat("Bob", "9pm!", 40),
        chat("Cara", "around nine I think", 70),
        chat("Bob", "great stream today", 100),
        chat("Host", "Thanks all", 200),
        chat("Host", "Should we play another round?", 400),
        chat("Cara", "late reply", 600),
    ]
