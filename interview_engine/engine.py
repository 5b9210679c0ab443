"""
Interview Engine.

State machine for one timed interview: NOT_STARTED -> RUNNING
<-> PAUSED -> FINISHED. The persisted session is the source of truth; every
operation loads it, mutates it and saves it back under one lock, so a
reload (or a second engine on the same store) picks up exactly where the
last one stopped.

A scheduler calls tick() once per tick interval. User actions call
set_draft(), submit() and toggle_pause(). When the last question is
submitted the engine records a Candidate, cancels its countdown and emits
the finish notification.

Thread Safety:
    All public operations hold a re-entrant lock for their whole
    load-mutate-save cycle. Callbacks run while the lock is held.

Last Grunted: 10/17/2026
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .candidates import CandidateRepository
from .config import InterviewConfig, load_interview_config, load_runtime_settings
from .models import AnswerRecord, Candidate, InterviewSession, MAX_SCORE, Profile, Question
from .scheduler import ScheduledTask, Scheduler
from .scoring import HeuristicScorer, ScoringStrategy, round_half_up
from .session_store import ProfileStore, SessionStore
from .storage import JsonFileKeyValueStore


__all__ = [
    "EngineState",
    "InterviewEngine",
    "InterviewResult",
    "SessionSnapshot",
    "StartOutcome",
    "create_interview_engine",
]


logger = logging.getLogger(__name__)


Clock = Callable[[], int]


def _now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _new_session_id() -> str:
    timestamp = datetime.now(timezone.utc)
    return f"int_{timestamp.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


class EngineState(str, Enum):
    """Lifecycle state derived from the persisted session."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class StartOutcome(str, Enum):
    """Result of InterviewEngine.start()."""

    STARTED = "started"
    RESUMED = "resumed"
    MISSING_PROFILE = "missing_profile"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for rendering."""

    id: str
    index: int
    total_questions: int
    current: Optional[Question]
    remaining: int
    paused: bool
    draft: str

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "index": self.index,
            "total_questions": self.total_questions,
            "current": self.current.model_dump(mode="json") if self.current else None,
            "remaining": self.remaining,
            "paused": self.paused,
            "draft": self.draft,
        }


@dataclass(frozen=True)
class InterviewResult:
    """Finish notification payload."""

    candidate_id: str
    total: int
    avg: float
    summary: str


class InterviewEngine:
    """
    Runs one interview at a time against an injected session store.

    Example:
        >>> scheduler = ManualScheduler()
        >>> engine = InterviewEngine(
        ...     session_store=SessionStore(backend),
        ...     candidates=CandidateRepository(backend),
        ...     scheduler=scheduler,
        ...     clock=scheduler.now_ms,
        ...     on_tick=render,
        ...     on_finish=show_result,
        ... )
        >>> engine.start(Profile(name="Ada", email="a@b.com", phone="+1 5551234567"))
        <StartOutcome.STARTED: 'started'>
        >>> scheduler.advance(20)  # first question times out and is auto-submitted
    """

    def __init__(
        self,
        session_store: SessionStore,
        candidates: CandidateRepository,
        scheduler: Scheduler,
        scorer: Optional[ScoringStrategy] = None,
        config: Optional[InterviewConfig] = None,
        profile_store: Optional[ProfileStore] = None,
        clock: Optional[Clock] = None,
        on_tick: Optional[Callable[[SessionSnapshot], None]] = None,
        on_finish: Optional[Callable[[InterviewResult], None]] = None,
    ) -> None:
        self._sessions = session_store
        self._candidates = candidates
        self._scheduler = scheduler
        self._scorer = scorer or HeuristicScorer()
        self._config = config or InterviewConfig()
        self._profiles = profile_store
        self._clock = clock or _now_ms
        self._on_tick = on_tick
        self._on_finish = on_finish

        self._lock = threading.RLock()
        self._countdown: Optional[ScheduledTask] = None
        self._finish_notified: Optional[str] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> InterviewConfig:
        return self._config

    @property
    def state(self) -> EngineState:
        with self._lock:
            session = self._sessions.load()
        if session is None:
            return EngineState.NOT_STARTED
        if session.finished:
            return EngineState.FINISHED
        return EngineState.PAUSED if session.paused else EngineState.RUNNING

    @property
    def countdown_active(self) -> bool:
        """Whether this engine currently owns a live countdown."""
        return self._countdown is not None and not self._countdown.cancelled

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, profile: Optional[Profile] = None, resume: bool = False) -> StartOutcome:
        """
        Start a fresh interview or reattach to the persisted one.

        Args:
            profile: Candidate profile for a fresh start. Falls back to the
                profile store when omitted.
            resume: Reattach to a persisted unfinished session if one exists.

        Returns:
            STARTED or RESUMED; MISSING_PROFILE when a fresh start has no
            profile (no session is created and no countdown installed).
        """
        with self._lock:
            session = self._sessions.load() if resume else None

            if session is not None and not session.finished:
                outcome = StartOutcome.RESUMED
                budget = self._config.time_budgets.get(session.current_question.difficulty)
                if budget is not None and session.remaining > budget:
                    logger.warning(
                        "Session %s: %ds left exceeds the %ds budget, clamping",
                        session.id,
                        session.remaining,
                        budget,
                    )
                    session.remaining = budget
                    self._sessions.save(session)
                logger.info(
                    "Resumed session %s at question %d/%d (%ds left)",
                    session.id,
                    session.index + 1,
                    len(session.order),
                    session.remaining,
                )
            else:
                if profile is None and self._profiles is not None:
                    profile = self._profiles.load()
                if profile is None:
                    logger.warning("Cannot start interview: no candidate profile available")
                    return StartOutcome.MISSING_PROFILE

                session = self._new_session(profile)
                self._sessions.save(session)
                outcome = StartOutcome.STARTED
                logger.info(
                    "Started session %s for candidate '%s' (%d questions)",
                    session.id,
                    profile.name,
                    len(session.order),
                )

            self._install_countdown()
            self._emit_tick(session)
            return outcome

    def discard(self) -> None:
        """Abandon the persisted session without recording a candidate."""
        with self._lock:
            self._cancel_countdown()
            self._sessions.clear()
            self._finish_notified = None
        logger.info("Discarded current session")

    def stop(self) -> None:
        """Cancel the countdown, leaving the persisted session untouched."""
        with self._lock:
            self._cancel_countdown()

    def has_unfinished(self) -> bool:
        with self._lock:
            session = self._sessions.load()
        return session is not None and not session.finished

    def snapshot(self) -> Optional[SessionSnapshot]:
        with self._lock:
            session = self._sessions.load()
        return self._snapshot_of(session) if session is not None else None

    # -------------------------------------------------------------------------
    # Countdown
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """
        Advance the countdown by one step.

        Paused sessions only re-emit their snapshot. When the clock reaches
        zero the current draft (or an empty answer) is submitted within the
        same tick.
        """
        with self._lock:
            session = self._sessions.load()
            if session is None:
                self._cancel_countdown()
                return

            if session.finished:
                self._cancel_countdown()
                self._notify_finish(session)
                return

            if session.paused:
                self._emit_tick(session)
                return

            session.remaining = max(0, session.remaining - 1)
            self._sessions.save(session)
            logger.debug("Session %s: %ds left on question %d", session.id, session.remaining, session.index + 1)
            self._emit_tick(session)

            if session.remaining == 0:
                self._auto_submit(session.id, session.index)

    def _auto_submit(self, session_id: str, index: int) -> None:
        # on_tick may have submitted already; only time out the same question once
        session = self._sessions.load()
        if (
            session is None
            or session.finished
            or session.id != session_id
            or session.index != index
            or session.remaining != 0
        ):
            return
        logger.info("Question %d timed out for session %s", index + 1, session_id)
        self._submit(session, "")

    def _tick_from(self, task: Optional[ScheduledTask]) -> None:
        # a fire already queued on the lock when its countdown was replaced
        with self._lock:
            if task is None or task is not self._countdown:
                logger.debug("Ignoring tick from a cancelled countdown")
                return
            self.tick()

    def _install_countdown(self) -> None:
        self._cancel_countdown()
        task: Optional[ScheduledTask] = None

        def fire() -> None:
            self._tick_from(task)

        task = self._scheduler.repeat(self._config.tick_interval_seconds, fire)
        self._countdown = task

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def toggle_pause(self) -> Optional[bool]:
        """
        Flip the paused flag.

        Returns:
            The new paused value, or None if there is no running session.
        """
        with self._lock:
            session = self._sessions.load()
            if session is None or session.finished:
                return None
            session.paused = not session.paused
            self._sessions.save(session)
            logger.info("Session %s %s", session.id, "paused" if session.paused else "resumed")
            return session.paused

    def set_draft(self, text: str) -> None:
        """Buffer the in-progress answer. Does not touch the countdown."""
        with self._lock:
            session = self._sessions.load()
            if session is None or session.finished:
                return
            session.draft = (text or "")[: self._config.draft_limit]
            self._sessions.save(session)

    def submit(self, text: str = "") -> None:
        """
        Submit an answer for the current question.

        An empty ``text`` falls back to the buffered draft. No-op when there
        is no session or it has already finished.
        """
        with self._lock:
            session = self._sessions.load()
            if session is None or session.finished:
                return
            self._submit(session, text)

    # -------------------------------------------------------------------------
    # Internal Methods
    # -------------------------------------------------------------------------

    def _new_session(self, profile: Profile) -> InterviewSession:
        order = list(self._config.questions)
        return InterviewSession(
            id=_new_session_id(),
            profile=profile,
            index=0,
            order=order,
            remaining=self._config.budget_for(order[0].difficulty),
            current_started_at=self._clock(),
        )

    def _submit(self, session: InterviewSession, text: str) -> None:
        question = session.order[session.index]
        used = max(0, self._config.budget_for(question.difficulty) - session.remaining)
        answer = (text or session.draft or "").strip()
        score = self._scorer.grade(question.prompt, answer, question.difficulty)

        session.answers.append(
            AnswerRecord(
                question=question.prompt,
                answer=answer,
                difficulty=question.difficulty,
                score=max(0, min(MAX_SCORE, int(score))),
                time_used=used,
            )
        )
        session.index += 1
        session.draft = ""

        if session.index >= len(session.order):
            self._finish(session)
            return

        upcoming = session.order[session.index]
        session.remaining = self._config.budget_for(upcoming.difficulty)
        session.current_started_at = self._clock()
        self._sessions.save(session)
        logger.info(
            "Session %s: answered question %d/%d",
            session.id,
            session.index,
            len(session.order),
        )

    def _finish(self, session: InterviewSession) -> None:
        session.finished = True
        session.remaining = 0
        result = self._result_of(session)

        self._candidates.append(
            Candidate(
                id=session.id,
                name=session.profile.name,
                email=session.profile.email,
                phone=session.profile.phone,
                answers=tuple(session.answers),
                total=result.total,
                avg=result.avg,
                summary=result.summary,
                created_at=self._clock(),
            )
        )
        self._sessions.save(session)
        self._cancel_countdown()
        logger.info(
            "Finished session %s: total=%d avg=%.2f",
            session.id,
            result.total,
            result.avg,
        )
        self._notify_finish(session, result)

    def _result_of(self, session: InterviewSession) -> InterviewResult:
        total = session.total_score
        avg = total / len(session.answers) if session.answers else 0.0
        summary = self._scorer.summarize(
            session.profile.name, session.answers, round_half_up(avg)
        )
        return InterviewResult(candidate_id=session.id, total=total, avg=avg, summary=summary)

    def _notify_finish(
        self, session: InterviewSession, result: Optional[InterviewResult] = None
    ) -> None:
        if self._finish_notified == session.id:
            return
        self._finish_notified = session.id
        if self._on_finish is not None:
            self._on_finish(result or self._result_of(session))

    def _snapshot_of(self, session: InterviewSession) -> SessionSnapshot:
        return SessionSnapshot(
            id=session.id,
            index=session.index,
            total_questions=len(session.order),
            current=session.current_question,
            remaining=session.remaining,
            paused=session.paused,
            draft=session.draft,
        )

    def _emit_tick(self, session: InterviewSession) -> None:
        if self._on_tick is not None:
            self._on_tick(self._snapshot_of(session))


def create_interview_engine(
    scheduler: Scheduler,
    data_dir: Optional[Path] = None,
    config: Optional[InterviewConfig] = None,
    **kwargs,
) -> InterviewEngine:
    """
    Build an engine backed by JSON files.

    Args:
        scheduler: Countdown source (AsyncioScheduler, ThreadingScheduler...).
        data_dir: Directory for the JSON files. Defaults to INTERVIEW_DATA_DIR.
        config: Question lineup and timing. Defaults to INTERVIEW_CONFIG_PATH
            or the built-in lineup.
        **kwargs: Passed through to InterviewEngine (scorer, clock, callbacks).
    """
    if data_dir is None:
        data_dir = load_runtime_settings().data_dir
    backend = JsonFileKeyValueStore(data_dir)
    return InterviewEngine(
        session_store=SessionStore(backend),
        candidates=CandidateRepository(backend),
        scheduler=scheduler,
        config=config or load_interview_config(),
        profile_store=ProfileStore(backend),
        **kwargs,
    )
