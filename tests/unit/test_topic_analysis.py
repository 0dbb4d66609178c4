"""Tests for keyword extraction, topic clustering and trends."""

from chat_engagement.domain.models import KeywordFrequency, TopicTheme, TrendDirection
from chat_engagement.services.topic_analysis import (
    calculate_keyword_trends,
    classify_trend,
    cluster_by_topic,
    clusters_from_themes,
    extract_keywords,
    tokenize,
)
from tests.factories import chat


def _keywords(*pairs):
    return [KeywordFrequency(keyword=k, frequency=f) for k, f in pairs]


class TestTokenize:
    def test_strips_punctuation_and_stopwords(self):
        assert tokenize("The BOSS fight is SO hard!!!") == ["boss", "fight", "hard"]

    def test_keeps_unicode_words(self):
        assert tokenize("café olé") == ["café", "olé"]


class TestExtractKeywords:
    """Test keyword and phrase extraction."""

    def test_repeated_bigram_is_a_keyword(self):
        """A bigram repeated across a large chat makes the top keywords."""
        messages = [chat(f"v{i}", f"great stream tonight {i}", i) for i in range(150)]

        keywords = extract_keywords(messages)
        by_name = {k.keyword: k.frequency for k in keywords}

        assert by_name["great stream"] == 150
        assert len(keywords) <= 50

    def test_short_unigrams_dropped_but_kept_in_phrases(self):
        messages = [chat("a", "go team go", 0), chat("b", "go team go", 1)]

        names = [k.keyword for k in extract_keywords(messages)]

        assert "go" not in names
        assert "team" in names
        assert "go team" in names
        assert "go team go" in names

    def test_min_frequency(self):
        messages = [chat("a", "dragon", 0), chat("b", "dragon", 1), chat("c", "castle", 2)]

        names = [k.keyword for k in extract_keywords(messages, min_frequency=2)]

        assert names == ["dragon"]

    def test_sorted_by_frequency_then_first_seen(self):
        messages = [
            chat("a", "sword shield", 0),
            chat("b", "shield", 1),
            chat("c", "sword shield", 2),
            chat("d", "shield", 3),
        ]

        keywords = extract_keywords(messages)

        assert [k.keyword for k in keywords] == ["shield", "sword", "sword shield"]
        assert [k.frequency for k in keywords] == [4, 2, 2]

    def test_max_keywords(self):
        messages = [chat("a", "alpha bravo charlie delta", i) for i in range(3)]
        assert len(extract_keywords(messages, max_keywords=2)) == 2

    def test_empty(self):
        assert extract_keywords([]) == []


class TestClusterByTopic:
    """Test keyword-anchored clustering."""

    def test_cluster_for_repeated_bigram(self):
        messages = [chat(f"v{i}", f"great stream tonight {i}", i) for i in range(150)]
        keywords = extract_keywords(messages)

        clusters = cluster_by_topic(messages, keywords)
        great = next(c for c in clusters if c.topic == "great stream")

        assert great.message_count >= 3
        assert great.keywords == ("great stream",)

    def test_cluster_fields(self):
        messages = [
            chat("Ann", "boss fight soon", 10),
            chat("Ben", "the BOSS is back", 40),
            chat("Ann", "boss down", 90),
            chat("Cid", "nice", 100),
        ]

        clusters = cluster_by_topic(messages, _keywords(("boss", 3)))

        assert len(clusters) == 1
        cluster = clusters[0]
        assert cluster.message_count == 3
        assert cluster.top_contributors == ("Ann", "Ben")
        assert cluster.start_time == messages[0].timestamp
        assert cluster.end_time == messages[2].timestamp

    def test_requires_min_messages(self):
        messages = [chat("Ann", "boss", 0), chat("Ben", "loot", 1), chat("Cid", "loot", 2)]

        clusters = cluster_by_topic(messages, _keywords(("loot", 2), ("boss", 1)))

        assert [c.topic for c in clusters] == ["loot"]

    def test_message_can_join_several_clusters(self):
        messages = [chat("a", "boss loot", 0), chat("b", "boss loot", 1)]

        clusters = cluster_by_topic(messages, _keywords(("boss", 2), ("loot", 2)))

        assert sum(c.message_count for c in clusters) == 4

    def test_sorted_by_size(self):
        messages = [chat("a", "loot", 0), chat("b", "loot", 1), chat("c", "loot boss", 2), chat("d", "boss", 3)]

        clusters = cluster_by_topic(messages, _keywords(("boss", 2), ("loot", 3)))

        assert [c.topic for c in clusters] == ["loot", "boss"]

    def test_anchor_limit(self):
        messages = [chat("a", "alpha beta", 0), chat("b", "alpha beta", 1)]

        clusters = cluster_by_topic(
            messages, _keywords(("alpha", 2), ("beta", 2)), max_anchor_keywords=1
        )

        assert [c.topic for c in clusters] == ["alpha"]


class TestKeywordTrends:
    """Test trend classification across three periods."""

    def test_classify(self):
        assert classify_trend(0, 1, 5) == TrendDirection.RISING
        assert classify_trend(5, 1, 0) == TrendDirection.DECLINING
        assert classify_trend(3, 3, 3) == TrendDirection.STABLE

    def test_classify_uses_larger_of_first_two_periods(self):
        # rise of 2 against baseline 0.3 * 10
        assert classify_trend(1, 10, 3) == TrendDirection.STABLE
        assert classify_trend(1, 1, 3) == TrendDirection.RISING

    def test_rising_keyword(self):
        texts = ["hello"] * 3 + ["hype"] + ["hello"] * 2 + ["hype"] * 3
        messages = [chat(f"v{i}", text, i * 10) for i, text in enumerate(texts)]

        trends = calculate_keyword_trends(messages, _keywords(("hype", 4), ("hello", 5)))
        by_name = {t.keyword: t for t in trends}

        assert by_name["hype"].trend == TrendDirection.RISING
        assert by_name["hype"].frequency == 4
        assert by_name["hello"].trend == TrendDirection.DECLINING
        assert [t.keyword for t in trends] == ["hello", "hype"]

    def test_periods_follow_timestamps_not_input_order(self):
        messages = [chat("a", "hype", 50), chat("b", "calm", 0), chat("c", "calm", 10)]

        trends = calculate_keyword_trends(messages, _keywords(("hype", 1)))

        assert trends[0].trend == TrendDirection.RISING

    def test_too_few_messages(self):
        assert calculate_keyword_trends([chat("a", "hype", 0)], _keywords(("hype", 1))) == []

    def test_limit(self):
        messages = [chat("a", "one two three", i) for i in range(3)]
        trends = calculate_keyword_trends(
            messages, _keywords(("one", 3), ("two", 3), ("three", 3)), max_keywords=2
        )
        assert len(trends) == 2


class TestClustersFromThemes:
    """Test conversion of external themes into clusters."""

    def test_matches_any_keyword(self):
        messages = [
            chat("Ann", "that boss was brutal", 0),
            chat("Ben", "raid tonight?", 10),
            chat("Cid", "unrelated", 20),
        ]
        themes = [TopicTheme(topic="Combat", keywords=("boss", "raid"), description="Fights")]

        clusters = clusters_from_themes(themes, messages)

        assert len(clusters) == 1
        assert clusters[0].topic == "Combat"
        assert clusters[0].message_count == 2
        assert clusters[0].description == "Fights"
        assert clusters[0].keywords == ("boss", "raid")

    def test_falls_back_to_topic_name(self):
        messages = [chat("Ann", "Music is great", 0)]

        clusters = clusters_from_themes([TopicTheme(topic="music")], messages)

        assert clusters[0].message_count == 1

    def test_unmatched_theme_dropped(self):
        messages = [chat("Ann", "hello", 0)]
        assert clusters_from_themes([TopicTheme(topic="Economy", keywords=("gdp",))], messages) == []
