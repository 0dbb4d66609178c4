"""Conversation thread detection.

Threads are grown greedily in chronological order. Each unclaimed message
seeds a candidate thread and pulls in the unclaimed messages that follow it
within the time window. Only candidates reaching the minimum size become
threads; their members are then claimed and cannot appear in another thread.

By default membership is decided by the time window alone. With
``relevance_gated=True`` a candidate also has to share the seed's author or
be linked to it by an @mention.
"""

import logging
from typing import List, Sequence

from ..domain.models import ChatMessage, ConversationThread

logger = logging.getLogger(__name__)


def is_reply_signal(seed: ChatMessage, candidate: ChatMessage) -> bool:
    """Check whether a candidate looks like part of the seed's exchange."""
    if candidate.author == seed.author:
        return True
    return f"@{candidate.author}" in seed.text or f"@{seed.author}" in candidate.text


def detect_threads(
    messages: Sequence[ChatMessage],
    window_seconds: float = 120.0,
    lookahead: int = 20,
    min_messages: int = 3,
    relevance_gated: bool = False,
) -> List[ConversationThread]:
    """Group temporally adjacent messages into conversation threads.

    Args:
        messages: All messages of the session, in any order
        window_seconds: Maximum offset from the seed for a message to join
        lookahead: Unclaimed messages examined after each seed
        min_messages: Messages a thread needs to be emitted
        relevance_gated: Also require same author or @mention to join

    Returns:
        Threads in chronological order of their seeds
    """
    if len(messages) < min_messages:
        return []

    ordered = sorted(messages, key=lambda m: m.timestamp)
    claimed = [False] * len(ordered)
    threads: List[ConversationThread] = []

    for i, seed in enumerate(ordered):
        if claimed[i]:
            continue

        members = [i]
        examined = 0
        for j in range(i + 1, len(ordered)):
            if examined >= lookahead:
                break
            if claimed[j]:
                continue
            examined += 1

            candidate = ordered[j]
            offset = (candidate.timestamp - seed.timestamp).total_seconds()
            if offset > window_seconds:
                break
            if relevance_gated and not is_reply_signal(seed, candidate):
                continue
            members.append(j)

        if len(members) < min_messages:
            continue

        for index in members:
            claimed[index] = True

        thread_messages = [ordered[index] for index in members]
        threads.append(
            ConversationThread(
                thread_id=f"thread-{len(threads)}",
                participants=tuple(dict.fromkeys(m.author for m in thread_messages)),
                start_time=thread_messages[0].timestamp,
                end_time=thread_messages[-1].timestamp,
                message_ids=tuple(m.id for m in thread_messages),
            )
        )

    logger.debug(f"Detected {len(threads)} conversation threads")
    return threads
