"""Stream host identification.

The host is chosen by the first rule that matches, in priority order:

1. A manually supplied name.
2. The author of the first message carrying an ``owner`` badge.
3. The author of the first message carrying a ``moderator`` badge, if that
   author is active enough to be more than a one-off moderator account.
4. The single most active author, if they wrote more than 5% of the chat.
"""

import dataclasses
import logging
from collections import Counter
from typing import List, Optional, Sequence

from ..domain.models import ChatMessage

logger = logging.getLogger(__name__)

OWNER_BADGE = "owner"
MODERATOR_BADGE = "moderator"

MIN_MODERATOR_MESSAGES = 5
MODERATOR_SHARE_DIVISOR = 100
MIN_ACTIVE_SHARE = 0.05


def identify_host(
    messages: Sequence[ChatMessage], manual_host_name: Optional[str] = None
) -> Optional[str]:
    """Identify the host of the stream.

    Args:
        messages: All messages of the session
        manual_host_name: Host name supplied by the user, if any

    Returns:
        The host's author name, or None when no rule matched
    """
    if manual_host_name:
        return manual_host_name

    for msg in messages:
        if msg.has_badge(OWNER_BADGE):
            logger.debug(f"Host identified by owner badge: {msg.author}")
            return msg.author

    author_counts = Counter(msg.author for msg in messages)
    if not author_counts:
        return None

    moderator_threshold = max(
        MIN_MODERATOR_MESSAGES, len(messages) / MODERATOR_SHARE_DIVISOR
    )
    for msg in messages:
        if msg.has_badge(MODERATOR_BADGE) and author_counts[msg.author] > moderator_threshold:
            logger.debug(f"Host identified by moderator badge: {msg.author}")
            return msg.author

    # Strictly highest count wins; on a tie the first author seen keeps it.
    top_author, max_count = None, 0
    for author, count in author_counts.items():
        if count > max_count:
            top_author, max_count = author, count

    if max_count > len(messages) * MIN_ACTIVE_SHARE:
        logger.debug(f"Host identified by activity: {top_author} ({max_count} messages)")
        return top_author

    return None


def flag_host_messages(
    messages: Sequence[ChatMessage], host_name: str
) -> List[ChatMessage]:
    """Return copies of the messages with ``is_host`` set for the host's messages."""
    return [
        dataclasses.replace(msg, is_host=msg.author == host_name) for msg in messages
    ]
