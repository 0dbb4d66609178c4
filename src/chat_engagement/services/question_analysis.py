"""Host question extraction and answerer ranking.

Host questions are found with lexical heuristics; answers are matched purely
by temporal proximity. Any message from someone other than the host that
arrives shortly after a question counts as a candidate answer.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from ..domain.models import Answer, ChatMessage, HostQuestion, QuestionAnswerer
from ..domain.scoring import helpfulness_score

logger = logging.getLogger(__name__)

QUESTION_LEAD_WORDS = (
    "what",
    "how",
    "why",
    "when",
    "where",
    "who",
    "can",
    "could",
    "would",
    "should",
    "is",
    "are",
    "do",
    "does",
)

MIN_QUESTION_LENGTH = 5


@dataclass(frozen=True)
class QuestionLookup:
    """Answers and top answerers for one specific host question."""

    question: HostQuestion
    answer_count: int
    top_answerers: Tuple[QuestionAnswerer, ...]


def detect_question(text: str) -> bool:
    """Check whether a message reads as a question.

    A message is a question if it contains a question mark or starts with an
    interrogative or auxiliary word. Messages under five characters never are.
    """
    if not text or len(text) < MIN_QUESTION_LENGTH:
        return False

    if "?" in text:
        return True

    lowered = text.lower().strip()
    return any(lowered.startswith(f"{word} ") for word in QUESTION_LEAD_WORDS)


def find_answers(
    question: ChatMessage,
    messages: Sequence[ChatMessage],
    window_seconds: float = 120.0,
    max_answers: int = 10,
) -> List[Answer]:
    """Find candidate answers to a question within a time window.

    Args:
        question: The host message asking the question
        messages: All messages of the session
        window_seconds: How long after the question replies are accepted
        max_answers: Maximum answers kept, earliest first

    Returns:
        Answers in chronological order
    """
    candidates = []
    for msg in messages:
        if msg.author == question.author:
            continue
        delay = (msg.timestamp - question.timestamp).total_seconds()
        if 0 < delay <= window_seconds:
            candidates.append((delay, msg))

    candidates.sort(key=lambda pair: pair[0])

    return [
        Answer(
            message_id=msg.id,
            author=msg.author,
            text=msg.text,
            timestamp=msg.timestamp,
            response_time_seconds=delay,
        )
        for delay, msg in candidates[:max_answers]
    ]


def _to_host_question(
    msg: ChatMessage, answers: Sequence[Answer] = ()
) -> HostQuestion:
    return HostQuestion(
        message_id=msg.id,
        author=msg.author,
        question=msg.text,
        timestamp=msg.timestamp,
        answers=tuple(answers),
    )


def extract_host_questions(
    messages: Sequence[ChatMessage],
    host_name: str,
    window_seconds: float = 120.0,
    max_answers: int = 10,
) -> List[HostQuestion]:
    """Extract the host's questions together with their answers.

    Args:
        messages: All messages of the session
        host_name: Author name of the host
        window_seconds: Answer matching window in seconds
        max_answers: Answers kept per question

    Returns:
        One HostQuestion per qualifying host message, in input order
    """
    questions = []
    for msg in messages:
        if msg.author != host_name or not detect_question(msg.text):
            continue
        answers = find_answers(msg, messages, window_seconds, max_answers)
        questions.append(_to_host_question(msg, answers))

    logger.debug(f"Extracted {len(questions)} host questions for {host_name}")
    return questions


def rank_question_answerers(
    host_questions: Sequence[HostQuestion], messages: Sequence[ChatMessage]
) -> List[QuestionAnswerer]:
    """Rank everyone who answered host questions by helpfulness.

    Args:
        host_questions: Extracted host questions with answers
        messages: All messages of the session, for per-author totals

    Returns:
        Answerers sorted by helpfulness, highest first; ties keep the order
        in which authors first answered
    """
    if not host_questions:
        return []

    message_counts = Counter(msg.author for msg in messages)
    profile_images: Dict[str, str] = {}
    for msg in messages:
        profile_images.setdefault(msg.author, msg.profile_image_url)

    answer_counts: Dict[str, int] = {}
    response_totals: Dict[str, float] = {}
    for question in host_questions:
        for answer in question.answers:
            answer_counts[answer.author] = answer_counts.get(answer.author, 0) + 1
            response_totals[answer.author] = (
                response_totals.get(answer.author, 0.0) + answer.response_time_seconds
            )

    answerers = []
    for author, count in answer_counts.items():
        average_response = response_totals[author] / count
        answerers.append(
            QuestionAnswerer(
                author=author,
                profile_image_url=profile_images.get(author) or "",
                questions_answered=count,
                average_response_time=average_response,
                helpfulness_score=helpfulness_score(
                    answer_count=count,
                    author_total_messages=message_counts[author],
                    mean_response_seconds=average_response,
                    total_host_questions=len(host_questions),
                ),
            )
        )

    answerers.sort(key=lambda a: a.helpfulness_score, reverse=True)
    return answerers


def answer_counts_by_author(answerers: Sequence[QuestionAnswerer]) -> Dict[str, int]:
    """Build the author -> answers given lookup used for community scoring."""
    return {answerer.author: answerer.questions_answered for answerer in answerers}


def find_answers_to_question(
    question_text: str,
    messages: Sequence[ChatMessage],
    host_name: str,
    window_seconds: float = 120.0,
    max_answers: int = 10,
    max_answerers: int = 10,
) -> QuestionLookup:
    """Look up the answers to one specific host question.

    The question is the first host message whose text contains
    ``question_text`` (case-insensitive). When none matches, an unanswered
    placeholder question is returned.
    """
    needle = question_text.lower()
    question_msg: Optional[ChatMessage] = next(
        (
            msg
            for msg in messages
            if msg.author == host_name and needle in msg.text.lower()
        ),
        None,
    )

    if question_msg is None:
        placeholder = HostQuestion(
            message_id="",
            author=host_name,
            question=question_text,
            timestamp=datetime.now(timezone.utc),
        )
        return QuestionLookup(question=placeholder, answer_count=0, top_answerers=())

    answers = find_answers(question_msg, messages, window_seconds, max_answers)
    question = _to_host_question(question_msg, answers)
    answerers = rank_question_answerers([question], messages)

    return QuestionLookup(
        question=question,
        answer_count=len(answers),
        top_answerers=tuple(answerers[:max_answerers]),
    )
