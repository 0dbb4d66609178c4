"""Engagement analysis orchestration.

Runs the analysis components in order over one closed batch of chat messages
and assembles a single immutable EngagementAnalysis:

    host -> questions/answers -> answerers -> topics -> [augmentation]
         -> threads -> community members -> summary

Every deterministic stage always runs. The optional topic augmentation step
is bounded by a timeout and any failure falls back to the keyword clusters.
"""

import asyncio
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from ..domain.interfaces import TopicAugmenter
from ..domain.models import (
    UNKNOWN_HOST,
    ChatMessage,
    EngagementAnalysis,
    HostQuestion,
    KeywordFrequency,
    KeywordTrend,
    QuestionAnswerer,
    TopicCluster,
)
from ..domain.scoring import round_half_up
from ..infrastructure.config import AnalysisConfig
from ..infrastructure.observability import traced
from .community import identify_active_community_members
from .conversation_threading import detect_threads
from .host_detection import flag_host_messages, identify_host
from .question_analysis import (
    answer_counts_by_author,
    QuestionLookup,
    extract_host_questions,
    find_answers_to_question,
    rank_question_answerers,
)
from .topic_analysis import (
    calculate_keyword_trends,
    cluster_by_topic,
    clusters_from_themes,
    extract_keywords,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _QuestionStage:
    host_name: str
    messages: Tuple[ChatMessage, ...]
    host_questions: Tuple[HostQuestion, ...]
    answerers: Tuple[QuestionAnswerer, ...]
    answers_by_author: Mapping[str, int]


@dataclass(frozen=True)
class _TopicStage:
    keywords: Tuple[KeywordFrequency, ...]
    clusters: Tuple[TopicCluster, ...]
    trends: Tuple[KeywordTrend, ...]


def calculate_average_response_time(host_questions: Sequence[HostQuestion]) -> int:
    """Mean response time over every answer to every question, in whole seconds."""
    times = [a.response_time_seconds for q in host_questions for a in q.answers]
    if not times:
        return 0
    return round_half_up(sum(times) / len(times))


class EngagementAnalyzer:
    """Builds engagement reports for stream chat sessions.

    The analyzer holds no per-run state, so one instance can analyze any
    number of independent sessions, including concurrently.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        augmenter: Optional[TopicAugmenter] = None,
    ):
        """Initialize the analyzer.

        Args:
            config: Analysis thresholds; defaults to AnalysisConfig()
            augmenter: Optional external topic theme provider
        """
        self.config = config or AnalysisConfig()
        self.augmenter = augmenter

    @traced("engagement.analyze")
    async def analyze(
        self, messages: Sequence[ChatMessage], host_name: Optional[str] = None
    ) -> EngagementAnalysis:
        """Analyze a session, including optional topic augmentation.

        Args:
            messages: All messages of the session
            host_name: Manually supplied host name, if known

        Returns:
            The engagement report
        """
        if not messages:
            return EngagementAnalysis.empty()

        questions = self._analyze_questions(messages, host_name)
        topics = self._analyze_topics(questions.messages)

        clusters = topics.clusters
        if self.augmenter is not None:
            clusters = await self._augment_clusters(questions.messages, clusters)

        return self._assemble(questions, topics, clusters)

    @traced("engagement.analyze_sync")
    def analyze_sync(
        self, messages: Sequence[ChatMessage], host_name: Optional[str] = None
    ) -> EngagementAnalysis:
        """Analyze a session using the deterministic components only."""
        if not messages:
            return EngagementAnalysis.empty()

        questions = self._analyze_questions(messages, host_name)
        topics = self._analyze_topics(questions.messages)
        return self._assemble(questions, topics, topics.clusters)

    @traced("engagement.question_lookup")
    def lookup_question(
        self,
        question_text: str,
        messages: Sequence[ChatMessage],
        host_name: Optional[str] = None,
    ) -> QuestionLookup:
        """Find the answers and top answerers for one host question.

        Args:
            question_text: Text contained in the host's question
            messages: All messages of the session
            host_name: Manually supplied host name, if known

        Returns:
            The lookup result; an unanswered placeholder if no host message
            contains ``question_text``
        """
        host = identify_host(messages, host_name) or UNKNOWN_HOST
        return find_answers_to_question(
            question_text,
            messages,
            host,
            window_seconds=self.config.answer_window_seconds,
            max_answers=self.config.max_answers_per_question,
            max_answerers=self.config.max_answerers,
        )

    @traced("engagement.questions")
    def _analyze_questions(
        self, messages: Sequence[ChatMessage], host_name: Optional[str]
    ) -> _QuestionStage:
        host = identify_host(messages, host_name) or UNKNOWN_HOST
        logger.info(f"Analyzing {len(messages)} messages for host {host}")

        flagged = tuple(flag_host_messages(messages, host))
        host_questions = extract_host_questions(
            flagged,
            host,
            window_seconds=self.config.answer_window_seconds,
            max_answers=self.config.max_answers_per_question,
        )
        answerers = rank_question_answerers(host_questions, flagged)

        return _QuestionStage(
            host_name=host,
            messages=flagged,
            host_questions=tuple(host_questions),
            answerers=tuple(answerers[: self.config.max_answerers]),
            # community scoring sees every answerer, not just the reported ones
            answers_by_author=MappingProxyType(answer_counts_by_author(answerers)),
        )

    @traced("engagement.topics")
    def _analyze_topics(self, messages: Sequence[ChatMessage]) -> _TopicStage:
        keywords = extract_keywords(
            messages,
            min_frequency=self.config.min_keyword_count(len(messages)),
            max_keywords=self.config.max_keywords,
        )
        clusters = cluster_by_topic(
            messages,
            keywords,
            max_anchor_keywords=self.config.max_cluster_keywords,
            min_messages=self.config.min_cluster_messages,
        )
        trends = calculate_keyword_trends(
            messages,
            keywords,
            max_keywords=self.config.max_trend_keywords,
            threshold=self.config.trend_threshold,
        )
        logger.debug(
            f"Topic analysis: {len(keywords)} keywords, {len(clusters)} clusters"
        )
        return _TopicStage(
            keywords=tuple(keywords), clusters=tuple(clusters), trends=tuple(trends)
        )

    @traced("engagement.augmentation")
    async def _augment_clusters(
        self, messages: Sequence[ChatMessage], clusters: Tuple[TopicCluster, ...]
    ) -> Tuple[TopicCluster, ...]:
        """Prepend externally proposed clusters ahead of the keyword clusters.

        Returns ``clusters`` unchanged if the augmenter fails, times out,
        returns malformed data or proposes nothing usable.
        """
        sample = messages[-self.config.augmentation_sample_size:]
        try:
            themes = await asyncio.wait_for(
                self.augmenter.themes_for(messages),
                timeout=self.config.augmentation_timeout_seconds,
            )
            external = clusters_from_themes(themes, sample)
        except Exception as e:
            logger.warning(
                f"Topic augmentation failed, using keyword clusters: "
                f"{type(e).__name__}: {e}"
            )
            return clusters

        if not external:
            return clusters

        logger.info(f"Merged {len(external)} augmented topic clusters")
        return tuple(
            external[: self.config.max_augmented_clusters]
            + list(clusters[: self.config.max_local_clusters_when_augmented])
        )

    @traced("engagement.assemble")
    def _assemble(
        self,
        questions: _QuestionStage,
        topics: _TopicStage,
        clusters: Tuple[TopicCluster, ...],
    ) -> EngagementAnalysis:
        threads = detect_threads(
            questions.messages,
            window_seconds=self.config.thread_window_seconds,
            lookahead=self.config.thread_lookahead,
            min_messages=self.config.min_thread_messages,
            relevance_gated=self.config.relevance_gated_threads,
        )
        members = identify_active_community_members(
            questions.messages,
            threads,
            questions.answers_by_author,
            max_members=self.config.max_members,
            gap_ceiling_seconds=self.config.member_gap_ceiling_seconds,
            default_gap_seconds=self.config.default_member_gap_seconds,
        )

        host_questions = questions.host_questions
        return EngagementAnalysis(
            host_name=questions.host_name,
            host_questions=host_questions,
            question_answerers=questions.answerers,
            keywords=topics.keywords,
            topic_clusters=clusters,
            trending_keywords=topics.trends,
            active_community_members=tuple(members),
            conversation_threads=tuple(threads),
            total_questions=len(host_questions),
            answered_questions=sum(1 for q in host_questions if q.was_answered),
            average_response_time=calculate_average_response_time(host_questions),
            top_topics=tuple(c.topic for c in clusters[: self.config.top_topics]),
        )


async def analyze_engagement(
    messages: Sequence[ChatMessage],
    host_name: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
    augmenter: Optional[TopicAugmenter] = None,
) -> EngagementAnalysis:
    """Analyze one session's chat with a throwaway analyzer."""
    analyzer = EngagementAnalyzer(config=config, augmenter=augmenter)
    return await analyzer.analyze(messages, host_name)
