"""
Pydantic models for the Timed Interview Engine.

Defines the profile, question, answer, session and candidate records.
Field aliases match the persisted JSON shape (``left``, ``qa``,
``timeUsed``, ``createdAt``...), so records round-trip through the
key-value store unchanged.

Last Grunted: 10/17/2026
"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"(\+?\d[\d -]{8,}\d)")

MAX_SCORE = 20
DRAFT_LIMIT = 4000


class Difficulty(str, Enum):
    """Difficulty tier of a question. Each tier has its own time budget."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Profile(BaseModel):
    """
    Candidate contact details attached to a session.

    Fields are trimmed on input. Immutable once created.

    Example:
        >>> Profile(name=" Ada ", email="a@b.com", phone="+1 5551234567").name
        'Ada'
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Candidate display name")
    email: str = Field(..., description="Contact email")
    phone: str = Field(..., description="Contact phone number")

    @field_validator("name", "email", "phone", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_RE.match(value):
            raise ValueError(f"invalid email address: {value!r}")
        return value

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        if not PHONE_RE.search(value):
            raise ValueError(f"invalid phone number: {value!r}")
        return value


class Question(BaseModel):
    """One interview question in the fixed lineup."""
    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    prompt: str = Field(..., min_length=1)


class AnswerRecord(BaseModel):
    """
    One scored question/answer pair.

    Created once per question when it is submitted (by the candidate or
    by timeout) and never changed afterwards.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = Field(..., alias="q", description="Question prompt")
    answer: str = Field(default="", alias="a", description="Submitted answer text")
    difficulty: Difficulty
    score: int = Field(..., ge=0, le=MAX_SCORE)
    time_used: int = Field(default=0, ge=0, alias="timeUsed", description="Seconds spent")


class InterviewSession(BaseModel):
    """
    The single in-progress interview, persisted between restarts.

    The engine loads it, mutates it and saves it back on every operation.
    Structural invariants are checked on load. A record that fails them is
    treated as corrupt by the session store.

    Example:
        >>> session = InterviewSession(
        ...     id="int_20261017_101500_1a2b3c4d",
        ...     profile=profile,
        ...     order=list(DEFAULT_QUESTIONS),
        ...     remaining=20,
        ...     current_started_at=1792231200000,
        ... )
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    profile: Profile
    index: int = Field(default=0, ge=0)
    order: list[Question] = Field(..., min_length=1)
    remaining: int = Field(..., ge=0, alias="left")
    current_started_at: int = Field(..., alias="currentStartedAt", description="Epoch ms")
    paused: bool = False
    draft: str = Field(default="", max_length=DRAFT_LIMIT)
    answers: list[AnswerRecord] = Field(default_factory=list, alias="qa")
    finished: bool = False

    @model_validator(mode="after")
    def _check_progress(self) -> "InterviewSession":
        if self.index > len(self.order):
            raise ValueError("index is past the end of the question order")
        if len(self.answers) != self.index:
            raise ValueError("answer count must equal the question index")
        if self.finished != (self.index == len(self.order)):
            raise ValueError("finished flag disagrees with the question index")
        return self

    @property
    def current_question(self) -> Optional[Question]:
        """The question being answered, or None once finished."""
        if self.index >= len(self.order):
            return None
        return self.order[self.index]

    @property
    def total_score(self) -> int:
        return sum(record.score for record in self.answers)


class Candidate(BaseModel):
    """
    Completed interview record used for ranking and review.

    Created exactly once, when a session finishes. The id is the id of the
    session that produced it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    email: str
    phone: str
    answers: tuple[AnswerRecord, ...] = Field(default_factory=tuple, alias="qa")
    total: int = Field(..., ge=0)
    avg: float = Field(..., ge=0.0, le=float(MAX_SCORE))
    summary: str = ""
    created_at: int = Field(..., alias="createdAt", description="Epoch ms")
