"""
Scoring functions for engagement analysis.

The helpfulness and engagement scores are weighted linear combinations of a
few component scores, each on a 0-100 scale. Components are exposed as small
pure functions so the weights and thresholds can be tested without building a
message corpus.
"""

import math
from typing import Dict

HELPFULNESS_WEIGHTS: Dict[str, float] = {
    "frequency": 0.4,
    "speed": 0.4,
    "engagement": 0.2,
}

ENGAGEMENT_WEIGHTS: Dict[str, float] = {
    "frequency": 0.3,
    "answering": 0.25,
    "speed": 0.25,
    "conversation": 0.2,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up."""
    return int(math.floor(value + 0.5))


def clamp_score(score: float, min_val: float = 0.0, max_val: float = 100.0) -> float:
    """Clamp a score into ``[min_val, max_val]``."""
    return max(min_val, min(max_val, score))


def calculate_weighted_score(
    scores: Dict[str, float], weights: Dict[str, float]
) -> float:
    """
    Calculate the weighted sum of component scores.

    Args:
        scores: Component score values keyed by name
        weights: Weight per component name

    Returns:
        Weighted sum; components without a weight contribute nothing
    """
    if not scores or not weights:
        return 0.0

    weighted_sum = 0.0
    for key, score in scores.items():
        weighted_sum += score * weights.get(key, 0.0)

    return weighted_sum


# Helpfulness components


def answer_frequency_score(answer_count: int, author_total_messages: int) -> float:
    """Share of the author's own messages that were answers."""
    return min(100.0, answer_count / max(1, author_total_messages) * 100)


def answer_speed_score(mean_response_seconds: float) -> float:
    """10 points off per minute of average delay, floored at 0."""
    return max(0.0, 100 - (mean_response_seconds / 60) * 10)


def answer_engagement_score(answer_count: int, total_host_questions: int) -> float:
    """Answers given relative to the number of host questions asked."""
    if total_host_questions <= 0:
        return 0.0
    return answer_count / total_host_questions * 100


def helpfulness_score(
    answer_count: int,
    author_total_messages: int,
    mean_response_seconds: float,
    total_host_questions: int,
) -> int:
    """
    Score how helpful an answerer was, in ``[0, 100]``.

    Args:
        answer_count: Answers the author gave across all host questions
        author_total_messages: All messages the author sent in the stream
        mean_response_seconds: Average delay between question and answer
        total_host_questions: Number of host questions in the stream

    Returns:
        Rounded, clamped helpfulness score
    """
    components = {
        "frequency": answer_frequency_score(answer_count, author_total_messages),
        "speed": answer_speed_score(mean_response_seconds),
        "engagement": answer_engagement_score(answer_count, total_host_questions),
    }
    score = calculate_weighted_score(components, HELPFULNESS_WEIGHTS)
    return round_half_up(clamp_score(score))


# Engagement components


def message_rate_score(messages_per_hour: float) -> float:
    """Ten messages per hour earns the full score."""
    return min(100.0, (messages_per_hour / 10) * 100)


def answering_score(questions_answered: int) -> float:
    return min(100.0, questions_answered * 10.0)


def reply_speed_score(mean_gap_seconds: float) -> float:
    """Full score for instant follow-ups, zero at a two minute gap."""
    return max(0.0, 100 - (mean_gap_seconds / 120) * 100)


def conversation_score(thread_count: int) -> float:
    return min(100.0, (thread_count / 5) * 100)


def engagement_score(
    messages_per_hour: float,
    questions_answered: int,
    mean_gap_seconds: float,
    thread_count: int,
) -> int:
    """
    Score a community member's engagement, in ``[0, 100]``.

    Args:
        messages_per_hour: Author's message rate over the stream
        questions_answered: Answers the author gave to host questions
        mean_gap_seconds: Average gap between the author's consecutive messages
        thread_count: Conversation threads the author took part in

    Returns:
        Rounded, clamped engagement score
    """
    components = {
        "frequency": message_rate_score(messages_per_hour),
        "answering": answering_score(questions_answered),
        "speed": reply_speed_score(mean_gap_seconds),
        "conversation": conversation_score(thread_count),
    }
    score = calculate_weighted_score(components, ENGAGEMENT_WEIGHTS)
    return round_half_up(clamp_score(score))
