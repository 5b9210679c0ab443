"""Shared fixtures for interview engine tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from interview_engine.candidates import CandidateRepository
from interview_engine.engine import InterviewEngine, InterviewResult, SessionSnapshot
from interview_engine.models import Profile
from interview_engine.scheduler import ManualScheduler
from interview_engine.session_store import ProfileStore, SessionStore
from interview_engine.storage import InMemoryKeyValueStore
from tests.mock_data import BASE_TIME_MS, generate_profile


@dataclass
class EventRecorder:
    """Collects engine callbacks."""

    ticks: list[SessionSnapshot] = field(default_factory=list)
    finishes: list[InterviewResult] = field(default_factory=list)

    def on_tick(self, snapshot: SessionSnapshot) -> None:
        self.ticks.append(snapshot)

    def on_finish(self, result: InterviewResult) -> None:
        self.finishes.append(result)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INTERVIEW_CONFIG_PATH", raising=False)
    monkeypatch.delenv("INTERVIEW_DATA_DIR", raising=False)
    monkeypatch.delenv("INTERVIEW_LOG_LEVEL", raising=False)


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler(start_ms=BASE_TIME_MS)


@pytest.fixture
def session_store(backend: InMemoryKeyValueStore) -> SessionStore:
    return SessionStore(backend)


@pytest.fixture
def candidates(backend: InMemoryKeyValueStore) -> CandidateRepository:
    return CandidateRepository(backend)


@pytest.fixture
def profile_store(backend: InMemoryKeyValueStore) -> ProfileStore:
    return ProfileStore(backend)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def profile() -> Profile:
    return generate_profile(name="Ada", email="a@b.com", phone="+1 5551234567")


@pytest.fixture
def engine(
    session_store: SessionStore,
    candidates: CandidateRepository,
    profile_store: ProfileStore,
    scheduler: ManualScheduler,
    recorder: EventRecorder,
) -> InterviewEngine:
    return InterviewEngine(
        session_store=session_store,
        candidates=candidates,
        scheduler=scheduler,
        profile_store=profile_store,
        clock=scheduler.now_ms,
        on_tick=recorder.on_tick,
        on_finish=recorder.on_finish,
    )
