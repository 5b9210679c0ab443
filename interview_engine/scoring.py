"""
Heuristic answer scoring.

Offline and deterministic: longer, keyword-rich answers score higher. The
engine only talks to the ScoringStrategy protocol, so a real evaluator can
replace HeuristicScorer without touching the state machine.
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence

from .models import MAX_SCORE, AnswerRecord, Difficulty


BASE_SCORES: dict[Difficulty, int] = {
    Difficulty.EASY: 8,
    Difficulty.MEDIUM: 12,
    Difficulty.HARD: 14,
}

KEYWORDS: tuple[str, ...] = (
    "react",
    "hook",
    "closure",
    "event",
    "loop",
    "express",
    "rate",
    "limit",
    "virtual",
    "dom",
    "memo",
    "optimiz",  # optimize, optimization, optimizing
    "cache",
    "queue",
    "throttle",
    "debounce",
)

KEYWORD_BONUS_CAP = 6
LENGTH_BONUS_CAP = 6
EXCERPT_LENGTH = 60


class ScoringStrategy(Protocol):
    """Grades single answers and writes the end-of-interview summary."""

    def grade(self, question: str, answer: str, difficulty: Difficulty) -> int:
        ...

    def summarize(self, name: str, records: Sequence[AnswerRecord], rounded_avg: int) -> str:
        ...


def count_keywords(answer: str) -> int:
    """Number of distinct vocabulary terms found in ``answer`` (case-insensitive)."""
    text = (answer or "").lower()
    return sum(1 for keyword in KEYWORDS if keyword in text)


def grade_answer(question: str, answer: str, difficulty: Difficulty) -> int:
    """
    Score an answer from 0 to 20.

    base (8/12/14 by difficulty) + min(6, keyword matches)
    + min(6, floor(sqrt(word count))), clamped to [0, 20].
    ``question`` is accepted for strategy compatibility and not used.
    """
    words = (answer or "").split()
    base = BASE_SCORES[Difficulty(difficulty)]
    keyword_bonus = min(KEYWORD_BONUS_CAP, count_keywords(answer))
    length_bonus = min(LENGTH_BONUS_CAP, math.isqrt(len(words)))
    return max(0, min(MAX_SCORE, base + keyword_bonus + length_bonus))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative averages (round() would go to even)."""
    return math.floor(value + 0.5)


def summarize(name: str, records: Sequence[AnswerRecord], rounded_avg: int) -> str:
    """
    One-sentence summary naming the strongest and weakest questions.

    Ties go to the earliest record.
    """
    strong = weak = records[0] if records else None
    for record in records:
        if record.score > strong.score:
            strong = record
        if record.score < weak.score:
            weak = record

    strong_text = strong.question[:EXCERPT_LENGTH] if strong else ""
    weak_text = weak.question[:EXCERPT_LENGTH] if weak else ""
    return (
        f"{name} scored an average {rounded_avg}/20. "
        f"Strongest on “{strong_text}”, "
        f"needs improvement on “{weak_text}”."
    )


class HeuristicScorer:
    """Default ScoringStrategy built on grade_answer and summarize."""

    def grade(self, question: str, answer: str, difficulty: Difficulty) -> int:
        return grade_answer(question, answer, difficulty)

    def summarize(self, name: str, records: Sequence[AnswerRecord], rounded_avg: int) -> str:
        return summarize(name, records, rounded_avg)
