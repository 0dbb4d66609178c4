"""
Keyword extraction, topic clustering and keyword trends.

Keywords are unigrams, bigrams and trigrams left after lowercasing, stripping
punctuation and removing stopwords. Clusters and trends then match keywords
against raw message text by substring, so a message can sit in several
clusters at once.
"""

import logging
import re
from collections import Counter
from typing import List, Optional, Sequence

from ..domain.models import (
    ChatMessage,
    KeywordFrequency,
    KeywordTrend,
    TopicCluster,
    TopicTheme,
    TrendDirection,
)

logger = logging.getLogger(__name__)

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
        "been", "being", "have", "has", "had", "do", "does", "did", "will",
        "would", "could", "should", "may", "might", "must", "can", "this",
        "that", "these", "those", "i", "you", "he", "she", "it", "we", "they",
        "me", "him", "her", "us", "them", "my", "your", "his", "its", "our",
        "their", "what", "which", "who", "whom", "why", "how", "when", "where",
        "if", "so", "no", "not", "just", "up", "down", "out", "ok", "lol",
        "haha", "hehe", "yeah", "yes",
    }
)

MIN_UNIGRAM_LENGTH = 3
MAX_CLUSTER_CONTRIBUTORS = 5

_PUNCTUATION = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    """Lowercase, strip punctuation and drop stopwords."""
    cleaned = _PUNCTUATION.sub("", text.lower())
    return [word for word in cleaned.split() if word not in STOPWORDS]


def _ngrams(words: Sequence[str], size: int) -> List[str]:
    return [" ".join(words[i:i + size]) for i in range(len(words) - size + 1)]


def extract_keywords(
    messages: Sequence[ChatMessage],
    min_frequency: int = 2,
    max_keywords: int = 50,
) -> List[KeywordFrequency]:
    """Extract frequent keywords and short phrases from chat.

    Args:
        messages: Messages to analyze
        min_frequency: Occurrences a keyword needs to be kept
        max_keywords: Maximum keywords returned

    Returns:
        Keywords sorted by frequency, highest first
    """
    counts: Counter = Counter()

    for msg in messages:
        words = tokenize(msg.text)
        counts.update(word for word in words if len(word) >= MIN_UNIGRAM_LENGTH)
        counts.update(_ngrams(words, 2))
        counts.update(_ngrams(words, 3))

    # sorted() is stable, so equal frequencies keep first-seen order
    keywords = sorted(
        (
            KeywordFrequency(keyword=keyword, frequency=frequency)
            for keyword, frequency in counts.items()
            if frequency >= min_frequency
        ),
        key=lambda k: k.frequency,
        reverse=True,
    )
    return keywords[:max_keywords]


def _matching(messages: Sequence[ChatMessage], keyword: str) -> List[ChatMessage]:
    needle = keyword.lower()
    return [msg for msg in messages if needle in msg.text.lower()]


def build_cluster(
    topic: str,
    keywords: Sequence[str],
    related: Sequence[ChatMessage],
    description: Optional[str] = None,
) -> TopicCluster:
    """Build a cluster from the messages that matched a topic.

    ``related`` must not be empty.
    """
    contributors = list(dict.fromkeys(msg.author for msg in related))
    timestamps = [msg.timestamp for msg in related]

    return TopicCluster(
        topic=topic,
        keywords=tuple(keywords),
        message_count=len(related),
        top_contributors=tuple(contributors[:MAX_CLUSTER_CONTRIBUTORS]),
        start_time=min(timestamps),
        end_time=max(timestamps),
        description=description,
    )


def cluster_by_topic(
    messages: Sequence[ChatMessage],
    keywords: Sequence[KeywordFrequency],
    max_anchor_keywords: int = 15,
    min_messages: int = 2,
) -> List[TopicCluster]:
    """Group messages into clusters anchored on the most frequent keywords.

    Args:
        messages: Messages to cluster
        keywords: Keywords sorted by frequency
        max_anchor_keywords: How many top keywords may anchor a cluster
        min_messages: Matches a keyword needs to form a cluster

    Returns:
        Clusters sorted by message count, largest first
    """
    clusters = []
    for kw in keywords[:max_anchor_keywords]:
        related = _matching(messages, kw.keyword)
        if len(related) >= min_messages:
            clusters.append(build_cluster(kw.keyword, [kw.keyword], related))

    clusters.sort(key=lambda c: c.message_count, reverse=True)
    return clusters


def classify_trend(
    first: int, second: int, third: int, threshold: float = 0.3
) -> TrendDirection:
    """Classify a keyword's counts over three consecutive periods."""
    rise = third - first
    baseline = max(first, second) * threshold

    if rise > baseline:
        return TrendDirection.RISING
    if rise < -baseline:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def calculate_keyword_trends(
    messages: Sequence[ChatMessage],
    keywords: Sequence[KeywordFrequency],
    max_keywords: int = 20,
    threshold: float = 0.3,
) -> List[KeywordTrend]:
    """Classify how the top keywords trended over the stream.

    The stream is split into three chronological periods; the first two hold
    ``ceil(n / 3)`` messages each and the third holds the rest.

    Args:
        messages: Messages to analyze
        keywords: Keywords sorted by frequency
        max_keywords: How many top keywords to classify
        threshold: Relative change needed to call a trend

    Returns:
        Trends sorted by total frequency, highest first
    """
    if len(messages) < 2:
        return []

    ordered = sorted(messages, key=lambda m: m.timestamp)
    third = -(-len(ordered) // 3)
    periods = (ordered[:third], ordered[third:third * 2], ordered[third * 2:])

    trends = []
    for kw in keywords[:max_keywords]:
        first, second, last = (len(_matching(period, kw.keyword)) for period in periods)
        trends.append(
            KeywordTrend(
                keyword=kw.keyword,
                frequency=first + second + last,
                trend=classify_trend(first, second, last, threshold),
            )
        )

    trends.sort(key=lambda t: t.frequency, reverse=True)
    return trends


def clusters_from_themes(
    themes: Sequence[TopicTheme], messages: Sequence[ChatMessage]
) -> List[TopicCluster]:
    """Turn externally supplied themes into clusters.

    A message belongs to a theme when its text contains any of the theme's
    keywords. Themes that match no message are dropped.
    """
    clusters = []
    for theme in themes:
        needles = [kw.lower() for kw in theme.keywords if kw] or [theme.topic.lower()]
        related = [
            msg for msg in messages if any(n in msg.text.lower() for n in needles)
        ]
        if not related:
            logger.debug(f"Dropping theme with no matching messages: {theme.topic}")
            continue
        clusters.append(
            build_cluster(theme.topic, theme.keywords, related, theme.description)
        )
    return clusters
