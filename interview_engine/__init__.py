"""
Timed Interview Engine Package.

Runs a timed, multi-question interview in-process, persists progress so it
survives restarts, and records a ranked candidate at completion.

Components:
    - InterviewEngine: Session state machine (countdown, pause, drafts, submit)
    - SessionStore / ProfileStore: Single-slot persistence, tolerant of corrupt data
    - CandidateRepository: Append-only store of completed candidates with ranking query
    - HeuristicScorer: Offline keyword/length answer grading and summaries
    - Schedulers: asyncio, threading and manual (virtual clock) countdown sources
    - Models: Pydantic models for profiles, questions, answers, sessions, candidates

Example:
    >>> from interview_engine import (
    ...     CandidateRepository, InMemoryKeyValueStore, InterviewEngine,
    ...     ManualScheduler, Profile, SessionStore,
    ... )
    >>>
    >>> backend = InMemoryKeyValueStore()
    >>> scheduler = ManualScheduler()
    >>> engine = InterviewEngine(
    ...     session_store=SessionStore(backend),
    ...     candidates=CandidateRepository(backend),
    ...     scheduler=scheduler,
    ...     clock=scheduler.now_ms,
    ... )
    >>> engine.start(Profile(name="Ada", email="a@b.com", phone="+1 5551234567"))
    <StartOutcome.STARTED: 'started'>
    >>> engine.snapshot().remaining
    20

Last Grunted: 10/17/2026
"""

from .models import (
    AnswerRecord,
    Candidate,
    Difficulty,
    InterviewSession,
    Profile,
    Question,
)

from .questions import DEFAULT_QUESTIONS, DEFAULT_TIME_BUDGETS

from .config import (
    InterviewConfig,
    RuntimeSettings,
    configure_logging,
    load_interview_config,
    load_runtime_settings,
)

from .storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StoreWriteError,
)

from .session_store import ProfileStore, SessionStore

from .candidates import CandidateRepository, CandidateSort

from .scoring import (
    HeuristicScorer,
    ScoringStrategy,
    grade_answer,
    summarize,
)

from .scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    ScheduledTask,
    Scheduler,
    ThreadingScheduler,
)

from .engine import (
    EngineState,
    InterviewEngine,
    InterviewResult,
    SessionSnapshot,
    StartOutcome,
    create_interview_engine,
)


__all__ = [
    # Models
    "AnswerRecord",
    "Candidate",
    "Difficulty",
    "InterviewSession",
    "Profile",
    "Question",
    "DEFAULT_QUESTIONS",
    "DEFAULT_TIME_BUDGETS",
    # Config
    "InterviewConfig",
    "RuntimeSettings",
    "configure_logging",
    "load_interview_config",
    "load_runtime_settings",
    # Storage
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StoreWriteError",
    "ProfileStore",
    "SessionStore",
    "CandidateRepository",
    "CandidateSort",
    # Scoring
    "HeuristicScorer",
    "ScoringStrategy",
    "grade_answer",
    "summarize",
    # Scheduling
    "AsyncioScheduler",
    "ManualScheduler",
    "ScheduledTask",
    "Scheduler",
    "ThreadingScheduler",
    # Engine
    "EngineState",
    "InterviewEngine",
    "InterviewResult",
    "SessionSnapshot",
    "StartOutcome",
    "create_interview_engine",
]

__version__ = "0.1.0"
