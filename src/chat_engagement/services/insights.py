"""
Basic chat insights.

Volume, contributor and revenue statistics for a stream's chat, computed
independently of the engagement pipeline.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..domain.models import ChatMessage, MessageType
from ..domain.scoring import round_half_up

CURRENCY_SYMBOLS: Dict[str, str] = {
    "$": "USD",
    "€": "EUR",
    "¥": "JPY",
    "£": "GBP",
    "₹": "INR",
    "R$": "BRL",
    "₽": "RUB",
}
DEFAULT_CURRENCY = "USD"
MAX_TOP_CONTRIBUTORS = 10

_AMOUNT = re.compile(r"([^\d.]*)(\d+(?:\.\d+)?|\.\d+)")


@dataclass(frozen=True)
class MessageRatePoint:
    timestamp: datetime
    count: int


@dataclass(frozen=True)
class ContributorCount:
    author: str
    count: int
    profile_image_url: str


@dataclass(frozen=True)
class RevenueSummary:
    total: float = 0.0
    currency: str = DEFAULT_CURRENCY
    count: int = 0


@dataclass(frozen=True)
class ChatInsights:
    """Summary statistics for a stream's chat."""

    total_messages: int = 0
    unique_users: int = 0
    message_rate: Tuple[MessageRatePoint, ...] = ()
    top_contributors: Tuple[ContributorCount, ...] = ()
    revenue: RevenueSummary = field(default_factory=RevenueSummary)
    message_type_breakdown: Dict[str, int] = field(
        default_factory=lambda: {t.value: 0 for t in MessageType}
    )
    average_message_length: int = 0
    first_message: Optional[datetime] = None
    last_message: Optional[datetime] = None
    duration_minutes: int = 0
    peak_timestamp: Optional[datetime] = None
    peak_messages_per_minute: int = 0


def parse_amount(amount: str) -> Tuple[float, str]:
    """
    Parse a display amount such as "$5.00" or "¥500".

    Args:
        amount: Amount string as shown in chat

    Returns:
        Tuple of (value, ISO currency code); unknown symbols map to USD and
        unparseable strings to a zero value
    """
    match = _AMOUNT.search(amount.replace(",", ""))
    if not match:
        return 0.0, DEFAULT_CURRENCY

    symbol, value = match.groups()
    currency = CURRENCY_SYMBOLS.get(symbol.strip(), DEFAULT_CURRENCY)
    return float(value), currency


def calculate_message_rate(messages: Sequence[ChatMessage]) -> List[MessageRatePoint]:
    """Count messages per wall-clock minute, in chronological order."""
    per_minute = Counter(
        msg.timestamp.replace(second=0, microsecond=0) for msg in messages
    )
    return [
        MessageRatePoint(timestamp=minute, count=count)
        for minute, count in sorted(per_minute.items())
    ]


def calculate_insights(messages: Sequence[ChatMessage]) -> ChatInsights:
    """
    Calculate volume, contributor and revenue insights for a chat.

    Messages without an id, author or timestamp are skipped.

    Args:
        messages: Messages of one stream session

    Returns:
        ChatInsights; all fields zero-valued for an empty chat
    """
    valid = [msg for msg in messages if msg.id and msg.author and msg.timestamp]
    if not valid:
        return ChatInsights()

    rate = calculate_message_rate(valid)

    contributor_counts = Counter(msg.author for msg in valid)
    profile_images: Dict[str, str] = {}
    for msg in valid:
        profile_images.setdefault(msg.author, msg.profile_image_url)
    top_contributors = tuple(
        ContributorCount(author=author, count=count, profile_image_url=profile_images[author])
        for author, count in contributor_counts.most_common(MAX_TOP_CONTRIBUTORS)
    )

    revenue_total, revenue_count, currency = 0.0, 0, DEFAULT_CURRENCY
    for msg in valid:
        if msg.message_type in (MessageType.PAID, MessageType.STICKER) and msg.amount:
            value, msg_currency = parse_amount(msg.amount)
            if revenue_count == 0:
                currency = msg_currency
            revenue_total += value
            revenue_count += 1

    breakdown = {t.value: 0 for t in MessageType}
    for msg in valid:
        breakdown[MessageType(msg.message_type).value] += 1

    lengths = np.array([len(msg.text) for msg in valid])
    timestamps = [msg.timestamp for msg in valid]
    first, last = min(timestamps), max(timestamps)

    counts = np.array([point.count for point in rate])
    peak = rate[int(np.argmax(counts))]

    return ChatInsights(
        total_messages=len(valid),
        unique_users=len(contributor_counts),
        message_rate=tuple(rate),
        top_contributors=top_contributors,
        revenue=RevenueSummary(
            total=round(revenue_total, 2), currency=currency, count=revenue_count
        ),
        message_type_breakdown=breakdown,
        average_message_length=round_half_up(float(lengths.mean())),
        first_message=first,
        last_message=last,
        duration_minutes=round_half_up((last - first).total_seconds() / 60),
        peak_timestamp=peak.timestamp,
        peak_messages_per_minute=peak.count,
    )
