"""
site_analytics/sentiment.py

Keyword sentiment labels for site-visit remarks.

Rules are evaluated in order and the first match wins, so a remark that is
both positive and asks for a follow-up is labelled Positive.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class SentimentLabel(str, Enum):
    POSITIVE = "Positive"
    FOLLOW_UP = "Follow-up Required"
    NEUTRAL = "Neutral"


POSITIVE_KEYWORDS: tuple[str, ...] = ("booked", "positive", "interested", "good")
FOLLOW_UP_KEYWORDS: tuple[str, ...] = ("follow", "call", "pending", "waiting")

_RULES: tuple[tuple[SentimentLabel, tuple[str, ...]], ...] = (
    (SentimentLabel.POSITIVE, POSITIVE_KEYWORDS),
    (SentimentLabel.FOLLOW_UP, FOLLOW_UP_KEYWORDS),
)


def classify(text: str | None) -> SentimentLabel:
    if not text or not text.strip():
        return SentimentLabel.NEUTRAL
    folded = text.casefold()
    for label, keywords in _RULES:
        if any(keyword in folded for keyword in keywords):
            return label
    return SentimentLabel.NEUTRAL


def empty_summary() -> dict[str, int]:
    """Zero counts for every label, in display order."""
    return {label.value: 0 for label in SentimentLabel}


def summarize(labels: Iterable[SentimentLabel]) -> dict[str, int]:
    summary = empty_summary()
    for label in labels:
        summary[label.value] += 1
    return summary
