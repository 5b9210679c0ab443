"""
Default question lineup and per-difficulty time budgets.
"""

from __future__ import annotations

from .models import Difficulty, Question


DEFAULT_TIME_BUDGETS: dict[Difficulty, int] = {
    Difficulty.EASY: 20,
    Difficulty.MEDIUM: 60,
    Difficulty.HARD: 120,
}

DEFAULT_QUESTIONS: tuple[Question, ...] = (
    Question(
        difficulty=Difficulty.EASY,
        prompt="What is React reconciliation and why is it useful?",
    ),
    Question(
        difficulty=Difficulty.EASY,
        prompt="How do you lift state up in React? Give a tiny example.",
    ),
    Question(
        difficulty=Difficulty.MEDIUM,
        prompt="Explain closures and one useful case in React hooks.",
    ),
    Question(
        difficulty=Difficulty.MEDIUM,
        prompt="Node.js event loop phases: how does it affect API design?",
    ),
    Question(
        difficulty=Difficulty.HARD,
        prompt="Design a rate limiter for an Express API.",
    ),
    Question(
        difficulty=Difficulty.HARD,
        prompt="Optimize a React list of 50k items: approaches & tradeoffs.",
    ),
)
