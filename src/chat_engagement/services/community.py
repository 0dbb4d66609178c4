"""Community member scoring.

Each author gets an engagement score built from their message rate, answers
to host questions, how quickly they follow up on their own messages, and how
many conversation threads they took part in.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..domain.models import (
    ChatMessage,
    CommunityMember,
    ConversationThread,
    MemberMetrics,
)
from ..domain.scoring import engagement_score

logger = logging.getLogger(__name__)


def calculate_stream_duration(messages: Sequence[ChatMessage]) -> float:
    """Span between the first and last message, in minutes."""
    if len(messages) < 2:
        return 0.0

    timestamps = [msg.timestamp for msg in messages]
    return (max(timestamps) - min(timestamps)).total_seconds() / 60


def average_reply_gap(
    author_messages: Sequence[ChatMessage],
    gap_ceiling_seconds: float = 300.0,
    default_gap_seconds: float = 120.0,
) -> float:
    """Average gap between an author's consecutive messages.

    Gaps longer than ``gap_ceiling_seconds`` are ignored. Returns
    ``default_gap_seconds`` when no gap qualifies.
    """
    ordered = sorted(author_messages, key=lambda m: m.timestamp)
    gaps = [
        gap
        for gap in (
            (later.timestamp - earlier.timestamp).total_seconds()
            for earlier, later in zip(ordered, ordered[1:])
        )
        if gap <= gap_ceiling_seconds
    ]
    if not gaps:
        return default_gap_seconds
    return sum(gaps) / len(gaps)


def identify_active_community_members(
    messages: Sequence[ChatMessage],
    threads: Sequence[ConversationThread],
    answers_by_author: Optional[Mapping[str, int]] = None,
    max_members: int = 20,
    gap_ceiling_seconds: float = 300.0,
    default_gap_seconds: float = 120.0,
) -> List[CommunityMember]:
    """Score every author and return the most engaged ones.

    Args:
        messages: All messages of the session
        threads: Detected conversation threads
        answers_by_author: Answers each author gave to host questions
        max_members: Maximum members returned
        gap_ceiling_seconds: Longest gap counted between an author's messages
        default_gap_seconds: Gap used when an author has no qualifying gaps

    Returns:
        Members sorted by engagement score, highest first
    """
    answers_by_author = answers_by_author or {}
    duration_minutes = calculate_stream_duration(messages)

    by_author: Dict[str, List[ChatMessage]] = defaultdict(list)
    profile_images: Dict[str, str] = {}
    badges: Dict[str, Tuple[str, ...]] = {}
    for msg in messages:
        by_author[msg.author].append(msg)
        profile_images.setdefault(msg.author, msg.profile_image_url)
        if msg.badges:
            badges[msg.author] = msg.badges

    thread_counts: Dict[str, int] = defaultdict(int)
    for thread in threads:
        for participant in set(thread.participants):
            thread_counts[participant] += 1

    members = []
    for author, author_messages in by_author.items():
        total = len(author_messages)
        per_hour = total / duration_minutes * 60 if duration_minutes > 0 else 0.0
        answered = answers_by_author.get(author, 0)
        gap = average_reply_gap(author_messages, gap_ceiling_seconds, default_gap_seconds)
        conversations = thread_counts[author]

        members.append(
            CommunityMember(
                author=author,
                profile_image_url=profile_images.get(author) or "",
                engagement_score=engagement_score(per_hour, answered, gap, conversations),
                metrics=MemberMetrics(
                    total_messages=total,
                    messages_per_hour=per_hour,
                    questions_answered=answered,
                    avg_response_time=gap,
                    conversation_count=conversations,
                ),
                badges=badges.get(author, ()),
            )
        )

    members.sort(key=lambda m: m.engagement_score, reverse=True)
    logger.debug(f"Scored {len(members)} community members")
    return members[:max_members]
