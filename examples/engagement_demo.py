"""
Demonstration of chat engagement analysis.

Builds a small synthetic stream chat, runs the analyzer and logs the report.
Set CHAT_ENGAGEMENT_OPENAI__API_KEY to also try OpenAI topic augmentation.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from chat_engagement import (
    ChatMessage,
    EngagementAnalyzer,
    OpenAITopicAugmenter,
    calculate_insights,
    get_settings,
)
from chat_engagement.infrastructure import configure_logfire

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

START = datetime(2024, 5, 4, 18, 0, 0, tzinfo=timezone.utc)

SCRIPT = [
    (0, "StreamerSam", "Welcome back everyone!", ("owner",)),
    (12, "StreamerSam", "What should we name the new character?", ()),
    (20, "pixelpete", "Sir Reginald", ()),
    (31, "luna_live", "call him Biscuit", ()),
    (45, "pixelpete", "biscuit is perfect", ()),
    (90, "modmax", "reminder: be nice in chat", ("moderator",)),
    (140, "luna_live", "the boss fight music is great", ()),
    (150, "gg_gary", "boss fight incoming", ()),
    (158, "pixelpete", "boss fight hype", ()),
    (400, "StreamerSam", "Is the audio too loud?", ()),
    (415, "gg_gary", "audio is fine", ()),
    (620, "luna_live", "great stream today", ()),
    (640, "gg_gary", "great stream, see you tomorrow", ()),
]


def build_session():
    """Create the demo chat."""
    return [
        ChatMessage(
            id=f"msg_{i}",
            author=author,
            text=text,
            timestamp=START + timedelta(seconds=offset),
            badges=badges,
        )
        for i, (offset, author, text, badges) in enumerate(SCRIPT)
    ]


async def main():
    settings = get_settings()
    configure_logfire(settings)

    augmenter = None
    if settings.openai.is_configured:
        augmenter = OpenAITopicAugmenter(
            settings.openai, sample_size=settings.analysis.augmentation_sample_size
        )
        logger.info("🤖 OpenAI topic augmentation enabled")

    analyzer = EngagementAnalyzer(config=settings.analysis, augmenter=augmenter)
    messages = build_session()

    report = await analyzer.analyze(messages)

    logger.info(f"🎙️ Host: {report.host_name}")
    logger.info(
        f"❓ Questions: {report.answered_questions}/{report.total_questions} answered, "
        f"average response {report.average_response_time}s"
    )
    for question in report.host_questions:
        logger.info(f"   {question.question} ({len(question.answers)} answers)")
    for answerer in report.question_answerers:
        logger.info(f"🙋 {answerer.author}: helpfulness {answerer.helpfulness_score}")
    logger.info(f"🏷️ Top topics: {', '.join(report.top_topics) or 'none'}")
    for trend in report.trending_keywords:
        logger.info(f"   {trend.keyword}: {trend.trend.value} ({trend.frequency})")
    logger.info(f"🧵 Threads: {len(report.conversation_threads)}")
    for member in report.active_community_members[:5]:
        logger.info(f"⭐ {member.author}: engagement {member.engagement_score}")

    insights = calculate_insights(messages)
    logger.info(
        f"📊 {insights.total_messages} messages from {insights.unique_users} users "
        f"over {insights.duration_minutes} minutes"
    )


if __name__ == "__main__":
    asyncio.run(main())
